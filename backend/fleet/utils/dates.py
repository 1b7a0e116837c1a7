from datetime import date, datetime, timezone


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def db_value(value):
    """Dates are stored as ``YYYY-MM-DD`` text and timestamps as naive UTC ISO text."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.strftime("%Y-%m-%dT%H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    return value


def db_values(data: dict) -> dict:
    return {key: db_value(value) for key, value in data.items()}
