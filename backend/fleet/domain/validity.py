"""
Document validity buckets.

A document without an expiration date is ``not_applicable``. Otherwise its
expiration day is compared against today (both as calendar days): anything
before today is ``expired``, anything up to and including ``today + window``
is ``approaching`` and the rest is ``valid``. An expiration equal to today is
still ``approaching``.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

DEFAULT_WINDOW_DAYS = 30


class DocumentStatus(str, Enum):
    VALID = "valid"
    APPROACHING = "approaching"
    EXPIRED = "expired"
    NOT_APPLICABLE = "not_applicable"


def as_date(value: date | datetime | str | None) -> date | None:
    """Normalise a date-ish value to a calendar day, dropping any time part."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def classify(
    expiration_date: date | datetime | str | None,
    today: date | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> DocumentStatus:
    expiry = as_date(expiration_date)
    if expiry is None:
        return DocumentStatus.NOT_APPLICABLE

    today = today or date.today()
    if expiry < today:
        return DocumentStatus.EXPIRED
    if expiry <= today + timedelta(days=window_days):
        return DocumentStatus.APPROACHING
    return DocumentStatus.VALID


@dataclass(frozen=True)
class ExpiryBounds:
    """Expiration-date predicate selecting one status bucket.

    ``is_null`` selects rows with no expiration date; otherwise rows match
    when ``after < expiration_date`` (exclusive), ``expiration_date >= on_or_after``
    and ``expiration_date <= on_or_before`` for every bound that is set.
    """
    is_null: bool = False
    after: date | None = None
    on_or_after: date | None = None
    before: date | None = None
    on_or_before: date | None = None


def status_bounds(
    status: DocumentStatus,
    today: date | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> ExpiryBounds:
    today = today or date.today()
    horizon = today + timedelta(days=window_days)
    if status == DocumentStatus.NOT_APPLICABLE:
        return ExpiryBounds(is_null=True)
    if status == DocumentStatus.EXPIRED:
        return ExpiryBounds(before=today)
    if status == DocumentStatus.APPROACHING:
        return ExpiryBounds(on_or_after=today, on_or_before=horizon)
    return ExpiryBounds(after=horizon)
