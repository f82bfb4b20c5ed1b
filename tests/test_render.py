from datetime import datetime
from zoneinfo import ZoneInfo

from bday.models import BirthdayEntry
from bday.query import list_birthdays
from bday.render import format_age, format_date_cell, format_distance, render_plain, render_table

UTC = ZoneInfo("UTC")

HIYAJO = BirthdayEntry(name="Hiyajo Maho", month=2, day=11, year=1989)
AKIHA = BirthdayEntry(name="Akiha Rumiho", month=3, day=4)


def _single_row(entry: BirthdayEntry, reference: datetime):
    (row,) = list_birthdays([entry], reference, default_timezone=UTC)
    return row


def test_age_shows_transition_on_the_day() -> None:
    row = _single_row(HIYAJO, datetime(2024, 2, 11, 10, 0, tzinfo=UTC))

    assert format_age(row) == "34 → 35"
    assert format_distance(row.occurrence) == "today"


def test_age_shows_current_value_other_days() -> None:
    row = _single_row(HIYAJO, datetime(2024, 3, 4, 9, 0, tzinfo=UTC))

    assert format_age(row) == "35"
    assert format_distance(row.occurrence) == "in 11 months, 7 days"


def test_unknown_age() -> None:
    row = _single_row(AKIHA, datetime(2024, 3, 4, 9, 0, tzinfo=UTC))

    assert format_age(row) == "?"


def test_distance_under_a_day_uses_hours() -> None:
    entry = BirthdayEntry(name="Soon", month=3, day=5)

    row = _single_row(entry, datetime(2024, 3, 4, 18, 0, tzinfo=UTC))

    assert format_distance(row.occurrence) == "in 6 hours"


def test_distance_in_days() -> None:
    entry = BirthdayEntry(name="Soon", month=3, day=6)

    assert format_distance(_single_row(entry, datetime(2024, 3, 4, 0, 0, tzinfo=UTC)).occurrence) == "in 2 days"
    assert format_distance(_single_row(entry, datetime(2024, 3, 5, 0, 0, tzinfo=UTC)).occurrence) == "in 1 day"


def test_substituted_leap_day_shows_observed_date() -> None:
    entry = BirthdayEntry(name="Leap", month=2, day=29)

    row = _single_row(entry, datetime(2025, 1, 1, tzinfo=UTC))

    assert format_date_cell(row) == "29 February (observed 28 February)"


def test_render_table_layout() -> None:
    rows = list_birthdays([HIYAJO, AKIHA], datetime(2024, 3, 4, 9, 0, tzinfo=UTC), default_timezone=UTC)

    table = render_table(rows)
    lines = table.splitlines()

    assert lines[0].startswith("┌")
    assert lines[1].split("│")[1:5] == [" Name         ", " Date        ", " Age ", " In                   "]
    assert "Akiha Rumiho" in lines[3]
    assert "Hiyajo Maho" in lines[4]
    assert lines[-1].startswith("└")
    assert len({len(line) for line in lines}) == 1


def test_render_plain_with_index_and_timezone() -> None:
    tokyo = BirthdayEntry(name="Friend", month=3, day=10, timezone="Asia/Tokyo")
    rows = list_birthdays([tokyo, AKIHA], datetime(2024, 3, 4, 9, 0, tzinfo=UTC), default_timezone=UTC)

    output = render_plain(rows, show_index=True, show_timezone=True)

    assert output.splitlines() == [
        "1\tAkiha Rumiho\t04 March\t?\ttoday\tlocal",
        "0\tFriend\t10 March\t?\tin 6 days\tAsia/Tokyo",
    ]
