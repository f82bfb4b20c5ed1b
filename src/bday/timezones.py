from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from dateutil import tz

from bday.errors import UnknownTimezoneError


@lru_cache(maxsize=1)
def _zones_by_folded_name() -> dict[str, str]:
    return {name.casefold(): name for name in available_timezones()}


def resolve_timezone(name: str) -> ZoneInfo:
    """Look up an IANA zone, accepting any capitalisation ("europe/paris")."""
    value = name.strip()
    if not value:
        raise UnknownTimezoneError("Timezone name must not be empty")

    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        pass

    canonical = _zones_by_folded_name().get(value.casefold())
    if canonical is None:
        raise UnknownTimezoneError(f"Unknown timezone: {value}")
    return ZoneInfo(canonical)


def canonical_timezone_name(name: str) -> str:
    zone = resolve_timezone(name)
    return _zones_by_folded_name().get(zone.key.casefold(), zone.key)


def local_timezone() -> tzinfo:
    return tz.tzlocal()


def default_timezone(name: str | None) -> tzinfo:
    if name is None or not name.strip():
        return local_timezone()
    return resolve_timezone(name)


def zone_for(timezone_name: str | None, default: tzinfo) -> tzinfo:
    if timezone_name is None:
        return default
    return resolve_timezone(timezone_name)
