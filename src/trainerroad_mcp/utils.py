"""
Date and timezone helpers shared across the domain modules.

Upstream timestamps arrive as date-only strings, offset-bearing ISO strings,
offsetless ISO strings that are really UTC, epoch milliseconds, or
{year, month, day} objects. Everything here converts them into canonical
YYYY-MM-DD dates and local datetime strings for a target IANA zone.

None of these functions raise on bad timestamps: unparsable input yields None.
"""

import math
import os
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from trainerroad_mcp.errors import InvalidTimeZone


DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_PREFIX_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")
ISO_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T")


def _load_zone(name: str) -> Optional[ZoneInfo]:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def _system_time_zone() -> Optional[str]:
    """Best-effort IANA name of the host zone (TZ, then /etc/localtime)."""
    candidates = []
    tz_env = os.environ.get("TZ", "").lstrip(":").strip()
    if tz_env:
        candidates.append(tz_env)

    localtime = os.path.realpath("/etc/localtime")
    if "zoneinfo/" in localtime:
        candidates.append(localtime.split("zoneinfo/", 1)[1])

    for candidate in candidates:
        if _load_zone(candidate) is not None:
            return candidate
    return None


def resolve_time_zone(explicit: str = None, default: str = None) -> str:
    """Pick the zone to render dates in.

    Preference order: explicit argument, configured default (TR_TIMEZONE),
    the host zone, then UTC.

    Raises:
        InvalidTimeZone: If the chosen string is not a known IANA zone
    """
    for value in (explicit, default):
        if isinstance(value, str) and value.strip():
            candidate = value.strip()
            break
    else:
        candidate = _system_time_zone() or "UTC"

    if _load_zone(candidate) is None:
        raise InvalidTimeZone(candidate)
    return candidate


def _naive_to_aware(value: datetime, assume_utc: bool) -> datetime:
    if assume_utc:
        return value.replace(tzinfo=timezone.utc)
    # Host-local interpretation
    return value.astimezone()


def parse_timestamp(value: Any, assume_utc_when_no_offset: bool = True) -> Optional[datetime]:
    """Parse an upstream timestamp into an aware datetime.

    Args:
        value: datetime, date, epoch milliseconds, YYYY-MM-DD string or ISO datetime string
        assume_utc_when_no_offset: Treat offsetless ISO datetimes as UTC
            (otherwise they are read as host-local time)

    Returns:
        Aware datetime, or None if the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return _naive_to_aware(value, assume_utc_when_no_offset)
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    if DATE_ONLY_PATTERN.match(raw):
        try:
            day = date.fromisoformat(raw)
        except ValueError:
            return None
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)

    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        assume_utc = assume_utc_when_no_offset and bool(ISO_DATETIME_PATTERN.match(raw))
        return _naive_to_aware(parsed, assume_utc)
    return parsed


def to_local_date_only(
    value: Any, zone: str = None, assume_utc_when_no_offset: bool = True
) -> Optional[str]:
    """Calendar date (YYYY-MM-DD) of a timestamp in the given zone.

    Date-only strings are returned unchanged; they already name a calendar day.
    """
    if isinstance(value, str) and DATE_ONLY_PATTERN.match(value.strip()):
        return value.strip()

    parsed = parse_timestamp(value, assume_utc_when_no_offset)
    if parsed is None:
        return None
    return parsed.astimezone(ZoneInfo(resolve_time_zone(zone))).strftime("%Y-%m-%d")


def format_local_datetime(
    value: Any, zone: str = None, assume_utc_when_no_offset: bool = True
) -> Optional[str]:
    """Local wall-clock time with offset, e.g. 2024-01-01T18:30:00-05:00."""
    parsed = parse_timestamp(value, assume_utc_when_no_offset)
    if parsed is None:
        return None
    local = parsed.astimezone(ZoneInfo(resolve_time_zone(zone)))
    return local.isoformat(timespec="seconds")


def _utc_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def summarize_activity_window(
    started: Any,
    duration_seconds: Any,
    zone: str = None,
    assume_utc_when_no_offset: bool = True,
) -> Optional[dict]:
    """Local start/end of an activity and whether it crosses local midnight.

    Returns None when `started` cannot be parsed. A missing or non-finite
    duration leaves the end fields as None.
    """
    start = parse_timestamp(started, assume_utc_when_no_offset)
    if start is None:
        return None

    duration = None
    if duration_seconds is not None and not isinstance(duration_seconds, bool):
        try:
            duration = float(duration_seconds)
        except (TypeError, ValueError):
            duration = None
        if duration is not None and not math.isfinite(duration):
            duration = None

    end = start + timedelta(seconds=duration) if duration is not None else None
    zone_name = resolve_time_zone(zone)

    local_date = to_local_date_only(start, zone_name)
    end_local_date = to_local_date_only(end, zone_name) if end else None

    return {
        "startedAtUtc": _utc_iso(start),
        "startedAtLocal": format_local_datetime(start, zone_name),
        "endedAtUtc": _utc_iso(end) if end else None,
        "endedAtLocal": format_local_datetime(end, zone_name) if end else None,
        "localDate": local_date,
        "endLocalDate": end_local_date,
        "crossesMidnightLocal": bool(local_date and end_local_date and local_date != end_local_date),
        "timeZone": zone_name,
    }


def to_iso_date(value: Any, zone: str = None) -> Optional[str]:
    """Date part of an upstream timestamp.

    Strings that start with YYYY-MM-DD keep their written date; anything else
    is converted in the given zone.
    """
    if isinstance(value, str) and DATE_PREFIX_PATTERN.match(value.strip()):
        return value.strip()[:10]
    return to_local_date_only(value, zone)


def calendar_date_to_iso(value: Any) -> Optional[str]:
    """Convert an upstream {year, month, day} object to YYYY-MM-DD."""
    if not isinstance(value, dict):
        return None
    parts = []
    for key in ("year", "month", "day"):
        raw = value.get(key, value.get(key.capitalize()))
        if isinstance(raw, bool):
            return None
        try:
            parts.append(int(raw))
        except (TypeError, ValueError):
            return None
    year, month, day = parts
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date_only_input(value: Any, fallback: Optional[str] = None) -> Optional[str]:
    """Validate caller-supplied YYYY-MM-DD input.

    Raises:
        ValueError: If a non-empty value is not a valid YYYY-MM-DD date
    """
    if value is None or value == "":
        return fallback
    normalized = str(value).strip()
    if not DATE_ONLY_PATTERN.match(normalized):
        raise ValueError(f'Invalid date "{value}". Expected YYYY-MM-DD.')
    try:
        date.fromisoformat(normalized)
    except ValueError:
        raise ValueError(f'Invalid date "{value}". Expected YYYY-MM-DD.')
    return normalized


def shift_date_only(date_only: str, days: int) -> Optional[str]:
    """Add (or subtract) whole days from a YYYY-MM-DD string."""
    try:
        day = date.fromisoformat(str(date_only))
    except ValueError:
        return None
    return (day + timedelta(days=int(days))).isoformat()


def today_in_time_zone(zone: str = None, now: datetime = None) -> str:
    """Today's calendar date in the given zone."""
    current = now or datetime.now(timezone.utc)
    return to_local_date_only(current, zone)


def date_only_diff_days(from_date: str, to_date: str) -> Optional[int]:
    """Whole days from `from_date` to `to_date` (negative if before)."""
    try:
        return (date.fromisoformat(str(to_date)) - date.fromisoformat(str(from_date))).days
    except ValueError:
        return None
