"""Visit date eligibility.

A date is bookable when it is not in the past and falls on a weekend or a
federal holiday. Holidays extend the bookable set: a Friday July 4th is
bookable, a Saturday July 4th stays bookable.

All comparisons happen on plain ``date`` values (local calendar, no
timezone conversion) so that a ``YYYY-MM-DD`` string never shifts by a day.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Optional

from .errors import ValidationError, VisitDateInPastError, VisitDateNotServedError

MONDAY, THURSDAY, SATURDAY, SUNDAY = 0, 3, 5, 6

# (month, day, name)
FIXED_HOLIDAYS = [
    (1, 1, "New Year's Day"),
    (7, 4, "Independence Day"),
    (11, 11, "Veterans Day"),
    (12, 25, "Christmas Day"),
]

# (month, weekday, nth, name)
NTH_WEEKDAY_HOLIDAYS = [
    (1, MONDAY, 3, "Martin Luther King Jr. Day"),
    (2, MONDAY, 3, "Presidents Day"),
    (9, MONDAY, 1, "Labor Day"),
    (10, MONDAY, 2, "Columbus Day"),
    (11, THURSDAY, 4, "Thanksgiving Day"),
]

# (month, weekday, name)
LAST_WEEKDAY_HOLIDAYS = [
    (5, MONDAY, "Memorial Day"),
]


def nth_weekday_of_month(year: int, month: int, weekday: int, nth: int) -> date:
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + (nth - 1) * 7)


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    last = date(year, month, calendar.monthrange(year, month)[1])
    return last - timedelta(days=(last.weekday() - weekday) % 7)


def federal_holidays(year: int) -> dict:
    """Return ``{date: name}`` for every federal holiday in ``year``."""
    holidays = {}
    for month, day, name in FIXED_HOLIDAYS:
        holidays[date(year, month, day)] = name
    for month, weekday, nth, name in NTH_WEEKDAY_HOLIDAYS:
        holidays[nth_weekday_of_month(year, month, weekday, nth)] = name
    for month, weekday, name in LAST_WEEKDAY_HOLIDAYS:
        holidays[last_weekday_of_month(year, month, weekday)] = name
    return holidays


def holiday_name(day: date) -> Optional[str]:
    return federal_holidays(day.year).get(_as_date(day))


def is_federal_holiday(day: date) -> bool:
    return holiday_name(day) is not None


def is_weekend(day: date) -> bool:
    return _as_date(day).weekday() in (SATURDAY, SUNDAY)


def parse_visit_date(value) -> date:
    """Coerce a request value into a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        # full ISO timestamps are accepted, their time part ignored
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise ValidationError("Visit date must be a valid date (YYYY-MM-DD)", field="visit_date")


def check_visit_date(day, today: Optional[date] = None) -> None:
    """Raise a ValidationError subclass describing why ``day`` is not bookable."""
    day = parse_visit_date(day)
    today = _as_date(today) if today is not None else date.today()

    if day < today:
        raise VisitDateInPastError()
    if not (is_weekend(day) or is_federal_holiday(day)):
        raise VisitDateNotServedError()


def is_eligible_visit_date(day, today: Optional[date] = None) -> bool:
    try:
        check_visit_date(day, today)
    except ValidationError:
        return False
    return True


def upcoming_visit_dates(start: date, days: int) -> list:
    """Eligible dates in ``[start, start + days)``."""
    start = _as_date(start)
    candidates = (start + timedelta(days=i) for i in range(max(days, 0)))
    return [d for d in candidates if is_eligible_visit_date(d, today=start)]


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
