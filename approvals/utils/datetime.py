"""Clock helpers bound to the configured application timezone.

Domain objects carry aware datetimes; the database stores them naive, already
shifted into the application timezone.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from approvals.config import get_settings

_UTC_OFFSET: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)
_DAY: Final[timedelta] = timedelta(days=1)


def resolve_timezone(name: str | None) -> tzinfo:
    """Map an IANA name or a ``UTC+hh:mm`` offset to a tzinfo, UTC otherwise."""

    name = (name or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass

    match = _UTC_OFFSET.match(name)
    if match is None:
        return timezone.utc
    offset = timedelta(hours=int(match["hours"]), minutes=int(match["minutes"] or 0))
    return timezone(-offset if match["sign"] == "-" else offset)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    return resolve_timezone(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Column default: the current app-local wall time without tzinfo."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach (naive input) or convert to (aware input) the app timezone."""

    if value is None:
        return None
    app_tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=app_tz)
    return value.astimezone(app_tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)


def start_of_app_day(value: datetime | None = None) -> datetime:
    """Midnight, in the app timezone, of the day holding ``value`` (default now)."""

    moment = ensure_app_timezone(value) or now_in_app_timezone()
    return datetime.combine(moment.date(), datetime.min.time(), tzinfo=moment.tzinfo)


def whole_days_between(earlier: datetime, later: datetime | None = None) -> int:
    end = ensure_app_timezone(later) or now_in_app_timezone()
    return abs(end - ensure_app_timezone(earlier)) // _DAY
