from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from bday.errors import InvalidArgumentError, InvalidRangeError
from bday.models import Age, BirthdayEntry
from bday.query import list_birthdays

UTC = ZoneInfo("UTC")

HIYAJO = BirthdayEntry(name="Hiyajo Maho", month=2, day=11, year=1989)
AKIHA = BirthdayEntry(name="Akiha Rumiho", month=3, day=4)
REFERENCE = datetime(2024, 3, 4, 9, 0, tzinfo=UTC)


def _end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=UTC)


def test_list_orders_soonest_first() -> None:
    rows = list_birthdays([HIYAJO, AKIHA], REFERENCE, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["Akiha Rumiho", "Hiyajo Maho"]

    akiha, hiyajo = rows
    assert akiha.occurrence.is_today is True
    assert akiha.occurrence.days_until == 0
    assert akiha.age is None
    assert akiha.index == 1

    assert hiyajo.occurrence.date == date(2025, 2, 11)
    assert hiyajo.occurrence.days_until == 344
    assert hiyajo.age == Age(current=35, turning=36)
    assert hiyajo.index == 0


def test_before_keeps_only_entries_up_to_cutoff() -> None:
    rows = list_birthdays([HIYAJO, AKIHA], REFERENCE, before=_end_of_day(date(2024, 5, 15)), default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["Akiha Rumiho"]


def test_before_is_inclusive_of_occurrence_start() -> None:
    on_cutoff = BirthdayEntry(name="On", month=5, day=15)
    after_cutoff = BirthdayEntry(name="After", month=5, day=16)
    cutoff = datetime(2024, 5, 15, 0, 0, tzinfo=UTC)

    rows = list_birthdays([after_cutoff, on_cutoff], REFERENCE, before=cutoff, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["On"]


def test_before_with_nothing_in_range_is_empty() -> None:
    rows = list_birthdays([HIYAJO], REFERENCE, before=_end_of_day(date(2024, 3, 10)), default_timezone=UTC)

    assert rows == []


def test_before_earlier_than_reference_rejected() -> None:
    with pytest.raises(InvalidRangeError):
        list_birthdays([HIYAJO, AKIHA], REFERENCE, before=_end_of_day(date(2024, 3, 1)), default_timezone=UTC)


def test_limit_returns_closest_entries() -> None:
    rows = list_birthdays([HIYAJO, AKIHA], REFERENCE, limit=1, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["Akiha Rumiho"]


def test_limit_larger_than_list_returns_everything() -> None:
    rows = list_birthdays([HIYAJO, AKIHA], REFERENCE, limit=10, default_timezone=UTC)

    assert len(rows) == 2


def test_limit_applies_after_before() -> None:
    entries = [
        BirthdayEntry(name="April", month=4, day=1),
        BirthdayEntry(name="March", month=3, day=20),
        BirthdayEntry(name="December", month=12, day=1),
    ]

    rows = list_birthdays(entries, REFERENCE, before=_end_of_day(date(2024, 6, 1)), limit=5, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["March", "April"]


def test_limit_zero_is_empty() -> None:
    assert list_birthdays([HIYAJO, AKIHA], REFERENCE, limit=0, default_timezone=UTC) == []


@pytest.mark.parametrize("limit", [-1, True, 1.5])
def test_invalid_limit_rejected(limit: object) -> None:
    with pytest.raises(InvalidArgumentError):
        list_birthdays([HIYAJO], REFERENCE, limit=limit, default_timezone=UTC)  # type: ignore[arg-type]


def test_equal_occurrences_sorted_by_name() -> None:
    entries = [
        BirthdayEntry(name="bob", month=7, day=1),
        BirthdayEntry(name="Alice", month=7, day=1),
        BirthdayEntry(name="Carol", month=7, day=1, year=1990),
    ]

    rows = list_birthdays(entries, REFERENCE, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["Alice", "bob", "Carol"]


def test_entry_zone_affects_order() -> None:
    entries = [
        BirthdayEntry(name="Home", month=7, day=1),
        BirthdayEntry(name="Zed in Tokyo", month=7, day=1, timezone="Asia/Tokyo"),
    ]

    rows = list_birthdays(entries, REFERENCE, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["Zed in Tokyo", "Home"]


def test_naive_reference_and_cutoff_use_default_zone() -> None:
    rows = list_birthdays(
        [HIYAJO, AKIHA],
        datetime(2024, 3, 4, 9, 0),
        before=datetime(2024, 5, 15, 23, 59),
        default_timezone=UTC,
    )

    assert [row.entry.name for row in rows] == ["Akiha Rumiho"]


def test_list_is_repeatable_and_does_not_touch_input() -> None:
    entries = [HIYAJO, AKIHA]

    first = list_birthdays(entries, REFERENCE, default_timezone=UTC)
    second = list_birthdays(entries, REFERENCE, default_timezone=UTC)

    assert first == second
    assert entries == [HIYAJO, AKIHA]


def test_list_relative_to_another_reference() -> None:
    week_later = datetime(2024, 3, 11, 9, 0, tzinfo=UTC)

    rows = list_birthdays([HIYAJO, AKIHA], week_later, default_timezone=UTC)

    assert [row.entry.name for row in rows] == ["Hiyajo Maho", "Akiha Rumiho"]
    assert rows[1].occurrence.date == date(2025, 3, 4)


def test_unknown_leap_rule_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        list_birthdays([HIYAJO], REFERENCE, default_timezone=UTC, leap_day_rule="sometimes")
