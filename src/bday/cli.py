"""Command-line interface for bday.

Usage:
    bday add --name NAME --date YYYY-MM-DD|MM-DD [--timezone TZ]
    bday list [--before DATE] [--limit N] [--now DATETIME] [--index] [--timezones] [--plain]
    bday edit INDEX [--name NAME] [--date DATE] [--timezone TZ | --clear-timezone]
    bday remove INDEX

Exit codes:
    0  success, including an empty list (a notice goes to stderr)
    1  invalid entry or query arguments
    2  usage error
    3  the birthday file could not be read or parsed
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from datetime import date, datetime, time
from pathlib import Path

from bday.config_store import (
    append_birthday,
    load_config,
    load_config_or_default,
    remove_birthday,
    update_birthday,
)
from bday.errors import BirthdayError, ConfigError
from bday.models import BirthdayEntry, validate_month_day
from bday.query import list_birthdays
from bday.render import format_birthday, render_plain, render_table
from bday.settings import Settings, load_settings
from bday.timezones import default_timezone

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG = 3


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def parse_birthday_text(raw_text: str) -> tuple[int, int, int | None]:
    value = raw_text.strip()

    full_match = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})", value)
    if full_match:
        year = int(full_match.group(1))
        month = int(full_match.group(2))
        day = int(full_match.group(3))
        date(year, month, day)
        return month, day, year

    short_match = re.fullmatch(r"(\d{2})-(\d{2})", value)
    if short_match:
        month = int(short_match.group(1))
        day = int(short_match.group(2))
        validate_month_day(month, day)
        return month, day, None

    raise ValueError("Birthday must use YYYY-MM-DD or MM-DD")


def _birthday_arg(raw_text: str) -> tuple[int, int, int | None]:
    try:
        return parse_birthday_text(raw_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _date_arg(raw_text: str) -> date:
    try:
        return date.fromisoformat(raw_text.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {raw_text!r}") from exc


def _datetime_arg(raw_text: str) -> datetime:
    try:
        return datetime.fromisoformat(raw_text.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an ISO date or datetime, got {raw_text!r}") from exc


def _describe(entry: BirthdayEntry) -> str:
    text = f"{entry.name}, Date: {format_birthday(entry)}"
    if entry.year is not None:
        text += f" {entry.year}"
    if entry.timezone is not None:
        text += f", Timezone: {entry.timezone}"
    return text


# ── Commands ─────────────────────────────────────────────────────────


def cmd_add(args: argparse.Namespace, settings: Settings) -> int:
    month, day, year = args.date
    entry = BirthdayEntry(name=args.name, month=month, day=day, year=year, timezone=args.timezone)
    append_birthday(settings.config_path, entry)

    print(f"Added entry: {_describe(entry)}")
    LOGGER.info("Added birthday for %s", entry.name)
    return EXIT_OK


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    config = load_config_or_default(settings.config_path)
    if not config.birthdays:
        print("No entries found, add some with the 'add' command.", file=sys.stderr)
        return EXIT_OK

    zone = default_timezone(config.timezone)
    reference = args.now if args.now is not None else datetime.now(zone)
    cutoff = datetime.combine(args.before, time.max, tzinfo=zone) if args.before is not None else None

    rows = list_birthdays(
        config.birthdays,
        reference,
        before=cutoff,
        limit=args.limit,
        default_timezone=zone,
        leap_day_rule=config.leap_day_rule,
    )
    if not rows:
        print("No birthdays match the given filters.", file=sys.stderr)
        return EXIT_OK

    render = render_plain if args.plain else render_table
    print(render(rows, show_index=args.index, show_timezone=args.timezones))
    return EXIT_OK


def cmd_edit(args: argparse.Namespace, settings: Settings) -> int:
    config = load_config(settings.config_path)
    if args.index < 0 or args.index >= len(config.birthdays):
        raise IndexError(f"No birthday at index {args.index} (have {len(config.birthdays)})")
    current = config.birthdays[args.index]

    month, day, year = args.date if args.date is not None else (current.month, current.day, current.year)
    if args.clear_timezone:
        timezone = None
    elif args.timezone is not None:
        timezone = args.timezone
    else:
        timezone = current.timezone

    updated = BirthdayEntry(
        name=args.name if args.name is not None else current.name,
        month=month,
        day=day,
        year=year,
        timezone=timezone,
    )
    update_birthday(settings.config_path, index=args.index, updated_birthday=updated)

    print(f"Updated entry {args.index}: {_describe(updated)}")
    LOGGER.info("Updated birthday for %s", updated.name)
    return EXIT_OK


def cmd_remove(args: argparse.Namespace, settings: Settings) -> int:
    _config, removed = remove_birthday(settings.config_path, index=args.index)

    print(f"Removed entry {args.index}: {_describe(removed)}")
    LOGGER.info("Removed birthday for %s", removed.name)
    return EXIT_OK


# ── Parser ───────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bday",
        description="Keep track of birthdays and see how far away the next ones are",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to the birthday file (default: search ./bday.toml, $XDG_CONFIG_HOME, ~/.bday.toml)",
    )
    sub = parser.add_subparsers(dest="command")

    add = sub.add_parser("add", help="Add a new entry")
    add.add_argument("-n", "--name", required=True, help="The name associated with the entry")
    add.add_argument(
        "-d", "--date", required=True, type=_birthday_arg,
        help="The date associated with the entry, YYYY-MM-DD or MM-DD",
    )
    add.add_argument("-t", "--timezone", default=None, help="Optional timezone for the entry")

    ls = sub.add_parser("list", help="List entries, soonest first")
    ls.add_argument(
        "-b", "--before", type=_date_arg, default=None,
        help="Only show birthdays on or before this date",
    )
    ls.add_argument("-l", "--limit", type=int, default=None, help="Display only the closest n entries")
    ls.add_argument(
        "--now", type=_datetime_arg, default=None,
        help="Compute relative to this date/time instead of the current time",
    )
    ls.add_argument("-i", "--index", action="store_true", help="Show the stored index of each entry")
    ls.add_argument("--timezones", action="store_true", help="Show the timezone of each entry")
    ls.add_argument("--plain", action="store_true", help="Tab-separated output without borders")

    edit = sub.add_parser("edit", help="Replace fields of an existing entry")
    edit.add_argument("index", type=int, help="Index shown by 'list --index'")
    edit.add_argument("-n", "--name", default=None)
    edit.add_argument("-d", "--date", type=_birthday_arg, default=None)
    tz_group = edit.add_mutually_exclusive_group()
    tz_group.add_argument("-t", "--timezone", default=None)
    tz_group.add_argument("--clear-timezone", action="store_true", help="Use the default timezone")

    remove = sub.add_parser("remove", help="Remove an entry")
    remove.add_argument("index", type=int, help="Index shown by 'list --index'")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    try:
        settings = load_settings(Path(args.config).expanduser() if args.config else None)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    configure_logging(settings.log_level)

    dispatch = {
        "add": cmd_add,
        "list": cmd_list,
        "edit": cmd_edit,
        "remove": cmd_remove,
    }
    handler = dispatch[args.command]

    try:
        return handler(args, settings)
    except (ConfigError, FileNotFoundError) as exc:
        LOGGER.debug("Config error", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except (BirthdayError, IndexError) as exc:
        LOGGER.debug("Rejected %s command", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
