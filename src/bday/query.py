from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, tzinfo

from bday.date_logic import compute_age, localize_reference, next_occurrence, validate_leap_day_rule
from bday.errors import InvalidArgumentError, InvalidRangeError
from bday.models import DEFAULT_LEAP_DAY_RULE, BirthdayEntry, BirthdayListRow
from bday.timezones import local_timezone


def _validate_limit(limit: int | None) -> int | None:
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgumentError(f"limit must be an integer, got {limit!r}")
    if limit < 0:
        raise InvalidArgumentError(f"limit must not be negative, got {limit}")
    return limit


def _sort_key(row: BirthdayListRow) -> tuple:
    return (row.occurrence.start, row.entry.name.casefold(), row.entry.name, row.index)


def list_birthdays(
    entries: Iterable[BirthdayEntry],
    reference: datetime,
    *,
    before: datetime | None = None,
    limit: int | None = None,
    default_timezone: tzinfo | None = None,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> list[BirthdayListRow]:
    """Upcoming birthdays, soonest first.

    ``before`` keeps entries whose occurrence starts at or before the cutoff and
    must not be earlier than ``reference``. ``limit`` truncates after sorting, so
    it always returns the closest entries. Naive datetimes are read in
    ``default_timezone`` (the local zone when omitted).
    """
    rule = validate_leap_day_rule(leap_day_rule)
    limit = _validate_limit(limit)
    default = default_timezone if default_timezone is not None else local_timezone()
    reference = localize_reference(reference, default)

    cutoff = None
    if before is not None:
        cutoff = localize_reference(before, default)
        if cutoff < reference:
            raise InvalidRangeError(
                f"Cutoff {cutoff.isoformat()} is earlier than the reference time {reference.isoformat()}"
            )

    rows: list[BirthdayListRow] = []
    for index, entry in enumerate(entries):
        occurrence = next_occurrence(entry, reference, default_timezone=default, leap_day_rule=rule)
        if cutoff is not None and occurrence.start > cutoff:
            continue
        rows.append(
            BirthdayListRow(
                index=index,
                entry=entry,
                occurrence=occurrence,
                age=compute_age(entry, occurrence, rule),
            )
        )

    rows.sort(key=_sort_key)
    if limit is not None:
        rows = rows[:limit]
    return rows
