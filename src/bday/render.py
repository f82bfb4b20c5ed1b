from __future__ import annotations

from datetime import date, timedelta

from bday.models import BirthdayEntry, BirthdayListRow, Occurrence

UNKNOWN_AGE = "?"
TRANSITION_ARROW = "→"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_birthday(entry: BirthdayEntry) -> str:
    # 2000 is a leap year, so Feb 29 formats too.
    return date(2000, entry.month, entry.day).strftime("%d %B")


def format_date_cell(row: BirthdayListRow) -> str:
    text = format_birthday(row.entry)
    if row.occurrence.substituted:
        text += f" (observed {row.occurrence.date.strftime('%d %B')})"
    return text


def format_age(row: BirthdayListRow) -> str:
    age = row.age
    if age is None:
        return UNKNOWN_AGE
    if row.occurrence.is_today and age.turning > 0:
        return f"{age.turning - 1} {TRANSITION_ARROW} {age.turning}"
    return str(age.current)


def format_distance(occurrence: Occurrence) -> str:
    if occurrence.is_today:
        return "today"

    remaining = occurrence.remaining
    if remaining < timedelta(days=1):
        hours = int(remaining.total_seconds() // 3600)
        if hours >= 1:
            return f"in {_plural(hours, 'hour')}"
        minutes = max(int(remaining.total_seconds() // 60), 1)
        return f"in {_plural(minutes, 'minute')}"

    delta = occurrence.until
    parts: list[str] = []
    if delta.years:
        parts.append(_plural(delta.years, "year"))
    if delta.months:
        parts.append(_plural(delta.months, "month"))
    if delta.days:
        parts.append(_plural(delta.days, "day"))
    return "in " + ", ".join(parts)


def _table_cells(row: BirthdayListRow, *, show_index: bool, show_timezone: bool) -> list[str]:
    cells = []
    if show_index:
        cells.append(str(row.index))
    cells.extend([row.entry.name, format_date_cell(row), format_age(row), format_distance(row.occurrence)])
    if show_timezone:
        cells.append(row.entry.timezone or "local")
    return cells


def _table_header(*, show_index: bool, show_timezone: bool) -> list[str]:
    header = ["#"] if show_index else []
    header.extend(["Name", "Date", "Age", "In"])
    if show_timezone:
        header.append("Timezone")
    return header


def render_table(rows: list[BirthdayListRow], *, show_index: bool = False, show_timezone: bool = False) -> str:
    header = _table_header(show_index=show_index, show_timezone=show_timezone)
    body = [_table_cells(row, show_index=show_index, show_timezone=show_timezone) for row in rows]
    widths = [max(len(line[column]) for line in [header, *body]) for column in range(len(header))]

    def border(left: str, middle: str, right: str) -> str:
        return left + middle.join("─" * (width + 2) for width in widths) + right

    def line(cells: list[str]) -> str:
        return "│" + "│".join(f" {cell:<{width}} " for cell, width in zip(cells, widths, strict=True)) + "│"

    lines = [border("┌", "┬", "┐"), line(header), border("├", "┼", "┤")]
    lines.extend(line(cells) for cells in body)
    lines.append(border("└", "┴", "┘"))
    return "\n".join(lines)


def render_plain(rows: list[BirthdayListRow], *, show_index: bool = False, show_timezone: bool = False) -> str:
    return "\n".join(
        "\t".join(_table_cells(row, show_index=show_index, show_timezone=show_timezone)) for row in rows
    )
