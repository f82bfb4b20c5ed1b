from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from bday.errors import EmptyNameError, InvalidDateError
from bday.timezones import canonical_timezone_name

DEFAULT_LEAP_DAY_RULE = "feb28"


def validate_month_day(month: int, day: int) -> None:
    if month < 1 or month > 12:
        raise InvalidDateError(f"Invalid month: {month}")

    if day < 1 or day > 31:
        raise InvalidDateError(f"Invalid day: {day}")

    # 2000 is a leap year, so Feb 29 passes here.
    try:
        date(2000, month, day)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid month/day combination: {month:02d}-{day:02d}") from exc


@dataclass(frozen=True)
class BirthdayEntry:
    name: str
    month: int
    day: int
    year: int | None = None
    timezone: str | None = None

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise EmptyNameError("Birthday name must not be empty")
        object.__setattr__(self, "name", name)

        validate_month_day(self.month, self.day)

        if self.year is not None:
            try:
                date(self.year, self.month, self.day)
            except ValueError as exc:
                raise InvalidDateError(
                    f"Invalid birth date: {self.year:04d}-{self.month:02d}-{self.day:02d}"
                ) from exc

        if self.timezone is not None:
            object.__setattr__(self, "timezone", canonical_timezone_name(self.timezone))

    @property
    def birth_date(self) -> date | None:
        if self.year is None:
            return None
        return date(self.year, self.month, self.day)

    @property
    def is_leap_day(self) -> bool:
        return self.month == 2 and self.day == 29


@dataclass(frozen=True)
class Occurrence:
    """Next birthday of an entry, seen from a reference instant.

    ``today`` and ``date`` are civil dates in the entry's own zone; ``start`` is
    midnight of ``date`` in that zone.
    """

    date: date
    start: datetime
    today: date
    reference: datetime
    substituted: bool = False

    @property
    def is_today(self) -> bool:
        return self.date == self.today

    @property
    def days_until(self) -> int:
        return (self.date - self.today).days

    @property
    def remaining(self) -> timedelta:
        if self.is_today:
            return timedelta(0)
        return self.start - self.reference

    @property
    def until(self) -> relativedelta:
        return relativedelta(self.date, self.today)


@dataclass(frozen=True)
class Age:
    current: int
    turning: int


@dataclass(frozen=True)
class BirthdayListRow:
    index: int
    entry: BirthdayEntry
    occurrence: Occurrence
    age: Age | None


@dataclass(frozen=True)
class AppConfig:
    timezone: str | None = None
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE
    birthdays: list[BirthdayEntry] = field(default_factory=list)
