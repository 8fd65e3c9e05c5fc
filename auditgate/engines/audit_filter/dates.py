"""UTC date helpers for allowlist expiry checks.

All comparisons happen on timezone-aware UTC instants so results never depend
on the host timezone.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_EXPIRY_WARNING_DAYS = 30


def to_utc(moment: datetime) -> datetime:
    """Return *moment* as an aware UTC datetime; naive values are read as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_utc_date(value: str | None) -> datetime | None:
    """Parse an ISO 8601 date or date-time string into a UTC datetime.

    ``YYYY-MM-DD`` is midnight UTC that day, an offset-bearing date-time is
    converted to its UTC instant, and a date-time without an offset is read as
    UTC. Returns ``None`` for empty, unparsable or out-of-range input.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if _DATE_ONLY_RE.match(text):
        text = f"{text}T00:00:00+00:00"

    try:
        return to_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError):
        # OverflowError: an offset pushes the instant past datetime.min/max.
        return None


def is_expired(expires: str | None, now: datetime) -> bool:
    """Return True when *expires* is missing, unparsable, or not after *now*.

    The boundary instant itself counts as expired.
    """
    expires_at = parse_utc_date(expires)
    if expires_at is None:
        return True
    return to_utc(now) >= expires_at


def will_expire_soon(
    expires: str | None,
    now: datetime,
    threshold_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> bool:
    """Return True when a still-valid *expires* falls within *threshold_days* of *now*.

    The window is inclusive. Missing, unparsable or already expired dates
    always yield False.
    """
    expires_at = parse_utc_date(expires)
    if expires_at is None:
        return False

    current = to_utc(now)
    if current >= expires_at:
        return False
    return expires_at - current <= timedelta(days=threshold_days)
