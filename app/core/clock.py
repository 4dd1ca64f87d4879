from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time in UTC; every stored timestamp uses it."""
    return datetime.now(timezone.utc)
