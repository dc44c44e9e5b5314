from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for consistent timestamps."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the form stored in documents."""
    return get_utc_now().isoformat()
