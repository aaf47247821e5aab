import re
from datetime import datetime, date, time, timedelta
from typing import Optional

ZERO_WIDTH = dict.fromkeys(map(ord, "\u200b\u200c\u200d\u2060\ufeff"))

HHMM_RE = re.compile(r"([0-9]{2}):([0-9]{2})")


def clean_field(value: Optional[str]) -> str:
    """Strip zero-width characters and surrounding whitespace. None -> ""."""
    return (value or "").translate(ZERO_WIDTH).strip()


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """
    Parse "HH:MM" into a time of day.
    Returns None for blank; raises ValueError for anything else that isn't a valid HH:MM.
    """
    hhmm = clean_field(value)
    if not hhmm:
        return None
    m = HHMM_RE.fullmatch(hhmm)
    if not m:
        raise ValueError(f"Bad HH:MM value: {hhmm!r}")

    h = int(m.group(1))
    mi = int(m.group(2))
    if h > 23 or mi > 59:
        raise ValueError(f"HH:MM out of range: {hhmm!r}")
    return time(h, mi)


def parse_service_date(value: Optional[str]) -> Optional[date]:
    """Parse "YYYY-MM-DD". Returns None for blank; raises ValueError if malformed."""
    text = clean_field(value)
    if not text:
        return None
    return date.fromisoformat(text)


def roll_if_earlier(cursor: Optional[datetime], maybe: datetime) -> datetime:
    """
    If a time-only timestamp lands before the previous one in the same
    display-ordered list, the list has crossed midnight: move it to the next day.
    """
    if cursor is not None and maybe < cursor:
        return maybe + timedelta(days=1)
    return maybe
