"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def seconds_until(moment: datetime, now: datetime | None = None) -> int:
    """Whole seconds from now until `moment`, floored at 0."""
    now = now or utc_now()
    return max(0, int((moment - now).total_seconds()))
