"""Access token expiry tracking."""

import re
from datetime import UTC, datetime, timedelta

# Shrink the server-reported lifetime so a token is never sent at the very
# instant it expires (network and clock latency).
EXPIRY_MARGIN_SECONDS = 5

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INTEGER_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_expires_in(value: str | None) -> int | None:
    """
    Parse a server-reported ``expires_in`` value.

    Accepts an optionally signed run of ASCII digits with surrounding
    whitespace, within the 32-bit signed range. Anything else (decimals,
    words, empty strings) yields None.
    """
    if value is None or not _INTEGER_PATTERN.fullmatch(value):
        return None

    seconds = int(value)
    if not _INT32_MIN <= seconds <= _INT32_MAX:
        return None
    return seconds


def compute_expires_at(
    expires_in: int,
    now: datetime | None = None,
    margin_seconds: int = EXPIRY_MARGIN_SECONDS,
) -> datetime:
    """
    Convert "seconds until expiry" into an absolute UTC deadline.

    Args:
        expires_in: Lifetime reported by the provider, in seconds
        now: Reference time (default: current UTC time)
        margin_seconds: Safety margin subtracted from the lifetime

    Returns:
        ``now + expires_in - margin_seconds``
    """
    now = now or utc_now()
    return now + timedelta(seconds=expires_in - margin_seconds)


def is_fresh(
    access_token: str | None,
    expires_at: datetime | None,
    now: datetime | None = None,
) -> bool:
    """
    Check whether a cached access token can be used without a refresh.

    A token with an unknown expiry is never considered fresh.
    """
    if not access_token or expires_at is None:
        return False
    return (now or utc_now()) < expires_at


def remaining_lifetime(expires_at: datetime, now: datetime | None = None) -> timedelta:
    """Get remaining time before the deadline (negative once passed)."""
    return expires_at - (now or utc_now())


__all__ = [
    "EXPIRY_MARGIN_SECONDS",
    "utc_now",
    "parse_expires_in",
    "compute_expires_at",
    "is_fresh",
    "remaining_lifetime",
]
