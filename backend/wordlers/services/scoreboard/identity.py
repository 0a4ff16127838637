import hashlib
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from wordlers.errors import ValidationError

THREAD_KEY_DELIMITER = '-'

DateLike = Union[date, datetime, str]


def thread_key(local_id, remote_ids: Iterable = ()) -> str:
    """Derive the stable key for a conversation's participant set.

    Ids are sorted, joined with '-' and SHA-256 hashed, so every participant
    computes the same 64-char hex key without the ids appearing in plaintext.
    """
    ids = sorted(str(i) for i in [local_id, *remote_ids])
    joined = THREAD_KEY_DELIMITER.join(ids)
    return hashlib.sha256(joined.encode('utf-8')).hexdigest()


def is_thread_key(value) -> bool:
    if not isinstance(value, str) or len(value) != 64:
        return False
    return all(c in '0123456789abcdef' for c in value)


def parse_game_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO 'YYYY-MM-DD' string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid game date {value!r}; expected YYYY-MM-DD")


def date_key(value: DateLike) -> str:
    return parse_game_date(value).isoformat()


def format_display_date(value: DateLike, fmt: str = '%b %d, %Y') -> str:
    return parse_game_date(value).strftime(fmt)


def shift_date(value: DateLike, days: int) -> Optional[date]:
    """Neighbouring day, or None past the ends of the calendar."""
    try:
        return parse_game_date(value) + timedelta(days=days)
    except OverflowError:
        return None
