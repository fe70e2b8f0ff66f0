from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from personal_hub.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


def reference_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def day_range(now: datetime, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """Half-open [start, end) bounds of the calendar day containing ``now``."""
    tz = tz or reference_tz()
    local = now.astimezone(tz)
    start = datetime.combine(local.date(), time.min, tzinfo=tz)
    end = datetime.combine(local.date() + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_date_key(value: datetime, tz: ZoneInfo | None = None) -> str:
    tz = tz or reference_tz()
    return as_utc(value).astimezone(tz).date().isoformat()
