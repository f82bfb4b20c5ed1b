from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from bday.errors import UnknownTimezoneError
from bday.timezones import canonical_timezone_name, default_timezone, resolve_timezone, zone_for


def test_resolve_exact_name() -> None:
    assert resolve_timezone("Europe/Paris") == ZoneInfo("Europe/Paris")


def test_resolve_ignores_case_and_whitespace() -> None:
    assert canonical_timezone_name("  america/new_york ") == "America/New_York"


@pytest.mark.parametrize("name", ["", "   ", "Nowhere/Special", "../etc/passwd"])
def test_unknown_names_rejected(name: str) -> None:
    with pytest.raises(UnknownTimezoneError):
        resolve_timezone(name)


def test_default_timezone_without_name_is_local() -> None:
    zone = default_timezone(None)

    assert datetime(2024, 1, 1, tzinfo=zone).utcoffset() is not None


def test_zone_for_prefers_entry_zone() -> None:
    fallback = ZoneInfo("UTC")

    assert zone_for(None, fallback) is fallback
    assert zone_for("Asia/Tokyo", fallback) == ZoneInfo("Asia/Tokyo")
