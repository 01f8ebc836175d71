"""
Timestamps for graph nodes

created_at / updated_at are written as timezone-aware Python datetimes; the
driver hands them back as neo4j.time.DateTime.
"""
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Timezone-aware current time, the value stored in created_at / updated_at"""
    return datetime.now(timezone.utc)


def neo4j_datetime_to_python(value) -> Optional[datetime]:
    """
    Normalize a stored timestamp to a Python datetime.

    Accepts None, a datetime, a neo4j.time.DateTime (anything with
    to_native()), or an ISO-8601 string. Anything else logs and yields None.
    """
    if value is None or isinstance(value, datetime):
        return value

    if hasattr(value, 'to_native'):
        return value.to_native()

    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Unparseable timestamp string: {value!r}")
            return None

    logger.warning(f"Unsupported timestamp type: {type(value).__name__}")
    return None


def isoformat_or_none(value) -> Optional[str]:
    """Serialize a stored timestamp for JSON responses"""
    dt = neo4j_datetime_to_python(value)
    return dt.isoformat() if dt else None
