"""
Reshaping (server JSON record -> ScheduleEntry).

- Takes the flat records returned by method=getSchedules
- Maps EACH record to exactly ONE ScheduleEntry
- Keeps the server order

Important rules:
- Text fields are copied verbatim (no trimming, no type coercion)
- TIME_PAIR is split by position: start = [0:5], end = [6:]
- NAME_GROUP is split on the literal ", "
"""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Any, List, Optional

from schedu.errors import DecodeError
from schedu.model import ScheduleEntry, TimeWindow

DATE_FORMAT = "%d.%m.%Y"

GROUP_SEPARATOR = ", "

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def parse_lesson_number(value: Any) -> int:
    """
    Read the lesson number from NAME_PAIR.

    The server sends "1", "2", ... but occasionally a label like "3 пара";
    only the leading integer counts. Anything without one becomes 0.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    m = _LEADING_INT_RE.match(str(value))
    if not m:
        return 0
    return int(m.group(1))


def split_time_pair(value: Optional[str]) -> TimeWindow:
    """
    "08:00-09:20" -> TimeWindow("08:00", "09:20")
    """
    text = value or ""
    return TimeWindow(start=text[0:5], end=text[6:])


def split_groups(value: Optional[str]) -> List[str]:
    """
    "IN-11, IN-12" -> ["IN-11", "IN-12"]
    """
    return (value or "").split(GROUP_SEPARATOR)


def format_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[str]:
    """
    Convert PUB_DATE (seconds since epoch) into "DD.MM.YYYY".

    Uses local time unless `tz` is given. Returns None when the server sent
    no timestamp.
    """
    if value is None or value == "":
        return None
    try:
        seconds = int(value)
        stamp = datetime.fromtimestamp(seconds, tz)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise DecodeError(f"Invalid PUB_DATE value: {value!r}") from e
    return stamp.strftime(DATE_FORMAT)


# ---------------------------------------------------------------------------
# Record mapping (CORE LOGIC)
# ---------------------------------------------------------------------------


def parse_record(item: Any, tz: Optional[tzinfo] = None) -> ScheduleEntry:
    """
    Map one raw getSchedules record to a ScheduleEntry.

    Example input (abridged):
        {"DATE_REG": "19.02.2024", "NAME_PAIR": "2", "TIME_PAIR": "09:45-11:05",
         "NAME_GROUP": "IN-11, IN-12", "PUB_DATE": 1700000000, ...}
    """
    if not isinstance(item, dict):
        raise DecodeError(f"Expected a schedule record object, got {type(item).__name__}")

    return ScheduleEntry(
        date=item.get("DATE_REG"),
        weekday=item.get("NAME_WDAY"),
        number=parse_lesson_number(item.get("NAME_PAIR")),
        time=split_time_pair(item.get("TIME_PAIR")),
        teacher=item.get("NAME_FIO"),
        auditorium=item.get("NAME_AUD"),
        groups=split_groups(item.get("NAME_GROUP")),
        shortname=item.get("ABBR_DISC"),
        discipline=item.get("NAME_DISC"),
        type=item.get("NAME_STUD"),
        reason=item.get("REASON"),
        info=item.get("INFO"),
        comment=item.get("COMMENT"),
        approved=format_timestamp(item.get("PUB_DATE"), tz),
        token=item.get("ID_TOKEN"),
    )


def parse_records(items: Any, tz: Optional[tzinfo] = None) -> List[ScheduleEntry]:
    """
    Map a decoded getSchedules response (JSON array) to entries, in order.
    """
    if not isinstance(items, list):
        raise DecodeError(f"Expected a JSON array of records, got {type(items).__name__}")
    return [parse_record(item, tz) for item in items]
