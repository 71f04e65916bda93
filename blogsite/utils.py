import datetime
import email.utils
from typing import Optional


def ensure_aware(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def parse_datetime(value) -> Optional[datetime.datetime]:
    """Parse an ISO-8601 or RFC 1123 string, date or datetime into an aware datetime.

    Returns None for empty or unparsable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return ensure_aware(value)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(
            value, datetime.time.min, tzinfo=datetime.timezone.utc
        )
    if not isinstance(value, str):
        return None
    value = value.strip()
    try:
        return ensure_aware(
            datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        )
    except ValueError:
        pass
    try:
        return ensure_aware(email.utils.parsedate_to_datetime(value))
    except (TypeError, ValueError, IndexError):
        return None


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)
