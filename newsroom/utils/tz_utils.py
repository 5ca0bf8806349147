from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parse


def utc_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite devolve datetimes naive; trata como UTC."""
    if not isinstance(dt, datetime):
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_published(ts: Optional[str]) -> Optional[datetime]:
    """Parse de publishedAt (ISO-8601 ou parecido) para datetime UTC. None se inválido."""
    if not ts:
        return None
    try:
        return utc_aware(date_parse.parse(ts))
    except (ValueError, OverflowError):
        return None
