"""Utilities for parsing instants, weekdays and time zone names."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

MONDAY = 0
SUNDAY = 6

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def parse_weekday(value: object) -> int:
    """Return the weekday number (0 = Monday) for ``value``.

    Integers in ``0..6`` are returned unchanged; strings may be a full weekday
    name, its three letter abbreviation or a digit.
    """

    if isinstance(value, bool):
        raise ValueError(f"invalid weekday: {value!r}")
    if isinstance(value, int):
        day = value
    else:
        text = str(value).strip().lower()
        if text.isdigit():
            day = int(text)
        else:
            matches = [i for i, name in enumerate(WEEKDAY_NAMES) if name == text or name[:3] == text]
            if not matches:
                raise ValueError(f"invalid weekday: {value!r}")
            day = matches[0]
    if not MONDAY <= day <= SUNDAY:
        raise ValueError(f"weekday must be between 0 (Monday) and 6 (Sunday), got {day}")
    return day


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the :class:`tzinfo` for an IANA zone ``name``.

    ``None`` or an empty string selects the host's local zone, ``"UTC"`` the
    fixed UTC zone.  ``ValueError`` is raised for unknown names.
    """

    if name is None or not name.strip():
        return dateutil_tz.tzlocal()
    text = name.strip()
    if text.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown time zone: {name!r}") from exc


def parse_instant(text: str) -> datetime:
    """Parse ``text`` as an absolute instant and return it in UTC.

    Accepted formats are:

    * ISO-8601 with or without offset (``Z`` is understood); naive values are
      taken as UTC
    * ``YYYY-MM-DD HH:MM:SS[.ffffff]`` (UTC)
    * floating-point seconds since the Unix epoch

    ``ValueError`` is raised on malformed input.
    """

    token = text.strip()
    if not token:
        raise ValueError("empty timestamp")
    try:
        seconds = float(token)
    except ValueError:
        pass
    else:
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"timestamp out of range: {text!r}") from exc

    try:
        parsed = datetime.fromisoformat(token.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"Unrecognised timestamp: {text!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
