from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """
    Get the current date and time in UTC.

    Returns:
        datetime: The current offset-aware date and time with tzinfo set to UTC.
    """
    return datetime.now(timezone.utc)
