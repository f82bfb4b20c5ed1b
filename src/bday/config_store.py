from __future__ import annotations

import logging
import os
import tempfile
import tomllib
from pathlib import Path
from typing import Any

from bday.date_logic import validate_leap_day_rule
from bday.errors import BirthdayError, ConfigError
from bday.models import DEFAULT_LEAP_DAY_RULE, AppConfig, BirthdayEntry
from bday.timezones import canonical_timezone_name

LOGGER = logging.getLogger(__name__)

_TOML_SHORT_ESCAPES = {"\\": "\\\\", '"': '\\"', "\b": "\\b", "\t": "\\t", "\n": "\\n", "\f": "\\f", "\r": "\\r"}


def _toml_escape(value: str) -> str:
    pieces: list[str] = []
    for char in value:
        if char in _TOML_SHORT_ESCAPES:
            pieces.append(_TOML_SHORT_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            pieces.append(f"\\u{ord(char):04X}")
        else:
            pieces.append(char)
    return "".join(pieces)


def _optional_int(row: dict[str, Any], key: str) -> int | None:
    value = row.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _entry_from_row(row: Any, position: int) -> BirthdayEntry:
    if not isinstance(row, dict):
        raise ConfigError(f"birthdays[{position}] must be a table")

    timezone = row.get("timezone")
    try:
        return BirthdayEntry(
            name=str(row.get("name", "")),
            month=_optional_int(row, "month") or 0,
            day=_optional_int(row, "day") or 0,
            year=_optional_int(row, "year"),
            timezone=str(timezone) if timezone is not None else None,
        )
    except BirthdayError as exc:
        raise ConfigError(f"birthdays[{position}]: {exc}") from exc


def validate_config(config: AppConfig) -> AppConfig:
    timezone = config.timezone.strip() if config.timezone is not None else None
    try:
        if timezone:
            timezone = canonical_timezone_name(timezone)
        leap_day_rule = validate_leap_day_rule(config.leap_day_rule)
    except BirthdayError as exc:
        raise ConfigError(str(exc)) from exc

    return AppConfig(
        timezone=timezone or None,
        leap_day_rule=leap_day_rule,
        birthdays=list(config.birthdays),
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as file_obj:
            data = tomllib.load(file_obj)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Error parsing {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Error reading {path}: {exc}") from exc

    rows = data.get("birthdays", [])
    if not isinstance(rows, list):
        raise ConfigError(f"{path}: birthdays must be an array of tables")

    try:
        birthdays = [_entry_from_row(row, position) for position, row in enumerate(rows)]
    except ConfigError as exc:
        raise ConfigError(f"{path}: {exc}") from exc

    timezone = data.get("timezone")
    config = AppConfig(
        timezone=str(timezone) if timezone is not None else None,
        leap_day_rule=str(data.get("leap_day_rule", DEFAULT_LEAP_DAY_RULE)),
        birthdays=birthdays,
    )
    return validate_config(config)


def load_config_or_default(path: Path) -> AppConfig:
    if not path.exists():
        LOGGER.debug("No birthday file at %s, starting empty", path)
        return AppConfig()
    return load_config(path)


def render_config(config: AppConfig) -> str:
    validated = validate_config(config)

    lines: list[str] = []
    if validated.timezone is not None:
        lines.append(f'timezone = "{_toml_escape(validated.timezone)}"')
    lines.append(f'leap_day_rule = "{validated.leap_day_rule}"')
    lines.append("")

    for person in validated.birthdays:
        lines.append("[[birthdays]]")
        lines.append(f'name = "{_toml_escape(person.name)}"')
        lines.append(f"month = {person.month}")
        lines.append(f"day = {person.day}")
        if person.year is not None:
            lines.append(f"year = {person.year}")
        if person.timezone is not None:
            lines.append(f'timezone = "{_toml_escape(person.timezone)}"')
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def save_config_atomic(path: Path, config: AppConfig) -> None:
    rendered = render_config(config)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            delete=False,
        ) as temp_file:
            temp_name = temp_file.name
            temp_file.write(rendered)
        os.replace(temp_name, path)
    except BaseException:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise

    LOGGER.info("Saved %s birthdays to %s", len(config.birthdays), path)


def _with_birthdays(config: AppConfig, birthdays: list[BirthdayEntry]) -> AppConfig:
    return AppConfig(
        timezone=config.timezone,
        leap_day_rule=config.leap_day_rule,
        birthdays=birthdays,
    )


def _check_index(config: AppConfig, index: int) -> None:
    if index < 0 or index >= len(config.birthdays):
        raise IndexError(f"No birthday at index {index} (have {len(config.birthdays)})")


def append_birthday(path: Path, new_birthday: BirthdayEntry) -> AppConfig:
    config = load_config_or_default(path)
    updated = _with_birthdays(config, [*config.birthdays, new_birthday])
    save_config_atomic(path, updated)
    return updated


def update_birthday(path: Path, *, index: int, updated_birthday: BirthdayEntry) -> AppConfig:
    config = load_config(path)
    _check_index(config, index)

    birthdays = list(config.birthdays)
    birthdays[index] = updated_birthday
    updated = _with_birthdays(config, birthdays)
    save_config_atomic(path, updated)
    return updated


def remove_birthday(path: Path, *, index: int) -> tuple[AppConfig, BirthdayEntry]:
    config = load_config(path)
    _check_index(config, index)

    birthdays = list(config.birthdays)
    removed = birthdays.pop(index)
    updated = _with_birthdays(config, birthdays)
    save_config_atomic(path, updated)
    return updated, removed
