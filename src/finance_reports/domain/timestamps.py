import os
import re
from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from finance_reports.logger import get_logger

logger = get_logger(__name__)

STORAGE_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?\+00",
    re.ASCII,
)


@lru_cache(maxsize=8)
def _zone_from_name(name: str) -> tzinfo | None:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("[TZ] Unknown TIMEZONE='%s', using host local zone.", name)
        return None


def local_zone() -> tzinfo:
    name = (os.getenv("TIMEZONE") or "").strip()
    if name:
        zone = _zone_from_name(name)
        if zone is not None:
            return zone
    host_zone = datetime.now().astimezone().tzinfo
    return host_zone or timezone.utc


def now_local(tz: tzinfo | None = None) -> datetime:
    return datetime.now(tz or local_zone())


def ensure_aware(value: datetime, tz: tzinfo | None = None) -> datetime:
    # Naive values are local wall-clock time.
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=tz or local_zone())
    return value


def to_utc(value: datetime, tz: tzinfo | None = None) -> datetime:
    return ensure_aware(value, tz).astimezone(timezone.utc)


def to_local(value: datetime, tz: tzinfo | None = None) -> datetime:
    zone = tz or local_zone()
    return ensure_aware(value, zone).astimezone(zone)


def to_storage_format(value: datetime, tz: tzinfo | None = None) -> str:
    utc_value = to_utc(value, tz)
    return (
        f"{utc_value.year:04d}-{utc_value.month:02d}-{utc_value.day:02d} "
        f"{utc_value.hour:02d}:{utc_value.minute:02d}:{utc_value.second:02d}+00"
    )


def from_storage_format(value: str, tz: tzinfo | None = None) -> datetime | None:
    match = STORAGE_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if not match:
        return None
    year, month, day, hour, minute, second, fraction = match.groups()
    microsecond = int((fraction or "0").ljust(6, "0"))
    try:
        parsed = datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            microsecond,
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None
    return to_local(parsed, tz)


def is_valid_storage_format(value: str) -> bool:
    if not isinstance(value, str) or not STORAGE_PATTERN.fullmatch(value):
        return False
    return from_storage_format(value) is not None


def parse_timestamp(value: str | datetime | None, tz: tzinfo | None = None) -> datetime | None:
    if isinstance(value, datetime):
        return to_local(value, tz)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    parsed = from_storage_format(text, tz)
    if parsed is not None:
        return parsed
    try:
        iso_value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return to_local(iso_value, tz)


def to_local_input_string(value: str | datetime, tz: tzinfo | None = None) -> str | None:
    local_value = parse_timestamp(value, tz)
    if local_value is None:
        return None
    return local_value.strftime("%Y-%m-%dT%H:%M:%S")
