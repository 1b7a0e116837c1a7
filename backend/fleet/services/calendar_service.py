from dataclasses import dataclass
from datetime import date, timedelta

from icalendar import Alarm, Calendar, Event

from fleet.domain.validity import as_date

REMINDERS = (timedelta(days=30), timedelta(days=7), timedelta(0))


@dataclass(frozen=True)
class Expiration:
    uid: str
    summary: str
    expires_on: date
    description: str | None = None


def new_calendar() -> Calendar:
    cal = Calendar()
    cal.add("prodid", "-//FleetBackOffice//EN")
    cal.add("version", "2.0")
    return cal


def expiration_event(item: Expiration) -> Event:
    event = Event()
    event.add("uid", item.uid)
    event.add("summary", item.summary)
    event.add("dtstart", item.expires_on)
    event.add("dtend", item.expires_on + timedelta(days=1))
    if item.description:
        event.add("description", item.description)

    # Reminders: 30 days, 7 days, day of
    for delta in REMINDERS:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("trigger", -delta)
        alarm.add("description", f"Expiration reminder: {item.summary}")
        event.add_component(alarm)
    return event


def generate_expirations_ics(items: list[Expiration]) -> bytes:
    cal = new_calendar()
    for item in items:
        cal.add_component(expiration_event(item))
    return cal.to_ical()


def expiration(uid: str, summary: str, value, description: str | None = None) -> Expiration | None:
    expires_on = as_date(value)
    if expires_on is None:
        return None
    return Expiration(uid=uid, summary=summary, expires_on=expires_on, description=description)
