from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo

from bday.errors import InvalidArgumentError
from bday.models import DEFAULT_LEAP_DAY_RULE, Age, BirthdayEntry, Occurrence
from bday.timezones import local_timezone, zone_for

LEAP_DAY_RULES = ("feb28", "mar1")


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def validate_leap_day_rule(leap_day_rule: str) -> str:
    rule = leap_day_rule.strip().lower()
    if rule not in LEAP_DAY_RULES:
        raise InvalidArgumentError(f"leap_day_rule must be one of {list(LEAP_DAY_RULES)}")
    return rule


def birthday_date_for_year(entry: BirthdayEntry, year: int, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> date:
    if entry.is_leap_day and not is_leap_year(year):
        if leap_day_rule == "feb28":
            return date(year, 2, 28)
        if leap_day_rule == "mar1":
            return date(year, 3, 1)
        raise InvalidArgumentError(f"Unsupported leap day rule: {leap_day_rule}")
    return date(year, entry.month, entry.day)


def next_birthday(entry: BirthdayEntry, today: date, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> date:
    this_year = birthday_date_for_year(entry, today.year, leap_day_rule)
    if this_year >= today:
        return this_year
    return birthday_date_for_year(entry, today.year + 1, leap_day_rule)


def turning_age(entry: BirthdayEntry, birthday_occurrence: date) -> int | None:
    if entry.year is None:
        return None
    return birthday_occurrence.year - entry.year


def age_on(entry: BirthdayEntry, today: date, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> int | None:
    """Completed years on ``today``, or None without a birth year or before birth."""
    birth_date = entry.birth_date
    if birth_date is None or today < birth_date:
        return None

    years = today.year - birth_date.year
    if today < birthday_date_for_year(entry, today.year, leap_day_rule):
        years -= 1
    return years


def localize_reference(reference: datetime, default: tzinfo) -> datetime:
    if reference.tzinfo is None or reference.utcoffset() is None:
        return reference.replace(tzinfo=default)
    return reference


def start_of_day(day: date, zone: tzinfo) -> datetime:
    # Round-trip through UTC so a midnight inside a DST gap lands on a real instant.
    naive_midnight = datetime.combine(day, time.min, tzinfo=zone)
    return naive_midnight.astimezone(timezone.utc).astimezone(zone)


def next_occurrence(
    entry: BirthdayEntry,
    reference: datetime,
    *,
    default_timezone: tzinfo | None = None,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> Occurrence:
    default = default_timezone if default_timezone is not None else local_timezone()
    reference = localize_reference(reference, default)
    zone = zone_for(entry.timezone, default)

    today = reference.astimezone(zone).date()
    observed = next_birthday(entry, today, leap_day_rule)

    return Occurrence(
        date=observed,
        start=start_of_day(observed, zone),
        today=today,
        reference=reference,
        substituted=(observed.month, observed.day) != (entry.month, entry.day),
    )


def compute_age(entry: BirthdayEntry, occurrence: Occurrence, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> Age | None:
    current = age_on(entry, occurrence.today, leap_day_rule)
    if current is None:
        return None
    return Age(current=current, turning=turning_age(entry, occurrence.date))
