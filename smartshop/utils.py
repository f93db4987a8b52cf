import time
import unicodedata
import uuid
from datetime import date, datetime, time as dtime
from typing import Optional

# Letters that carry no combining mark under NFD and need an explicit fold
_EXTRA_FOLDS = str.maketrans({"đ": "d", "Đ": "D", "ı": "i", "ł": "l", "Ł": "L", "ø": "o", "Ø": "O"})


def new_id() -> str:
    return uuid.uuid4().hex


def now_millis() -> int:
    return int(time.time() * 1000)


def remove_accents(value: Optional[str]) -> str:
    """
    Diacritic- and case-insensitive form of a string.

    "Nguyễn Văn A" -> "nguyen van a"
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value.translate(_EXTRA_FOLDS))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def contains_normalized(haystack: Optional[str], query: Optional[str]) -> bool:
    """Substring test after normalizing both sides the same way."""
    needle = remove_accents(query).strip()
    if not needle:
        return True
    return needle in remove_accents(haystack)


def start_of_day_millis(day: date) -> int:
    """Local-time midnight of `day` in epoch millis."""
    return round(datetime.combine(day, dtime.min).timestamp() * 1000)


def end_of_day_millis(day: date) -> int:
    """Local-time 23:59:59.999 of `day` in epoch millis."""
    return round(datetime.combine(day, dtime(23, 59, 59, 999000)).timestamp() * 1000)


def millis_to_local_date(timestamp: int) -> date:
    return datetime.fromtimestamp(timestamp / 1000).date()
