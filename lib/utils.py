# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone


# =============================================================================
# Timestamp Utilities
# =============================================================================

def utc_now() -> str:
    """Current time as an ISO-8601 UTC string, the persisted timestamp format."""
    return datetime.now(timezone.utc).isoformat()


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so mixed records compare safely."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# Settings Utilities
# =============================================================================

def split_csv(value: str) -> list[str]:
    """Split a comma-separated setting into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]
