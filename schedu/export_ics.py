"""
iCalendar (.ics) export.

We convert fetched schedule entries into a calendar file that can be
imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from schedu.model import ScheduleEntry


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(date_dd_mm_yyyy: str, time_hh_mm: str) -> str:
    """
    Convert "DD.MM.YYYY" + "HH:MM" to ICS local datetime 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.strptime(f"{date_dd_mm_yyyy} {time_hh_mm}", "%d.%m.%Y %H:%M")
    return dt.strftime("%Y%m%dT%H%M00")


def _summary(entry: ScheduleEntry) -> str:
    title = (entry.shortname or entry.discipline or "").strip()
    kind = (entry.type or "").strip()
    if title and kind:
        return f"{title} ({kind})"
    return title or kind or "Lesson"


def _description(entry: ScheduleEntry) -> str:
    parts: list[str] = []
    if entry.discipline:
        parts.append(entry.discipline.strip())
    if entry.teacher:
        parts.append(f"Teacher: {entry.teacher.strip()}")
    groups = [g for g in entry.groups if g]
    if groups:
        parts.append(f"Groups: {', '.join(groups)}")
    if entry.comment:
        parts.append(entry.comment.strip())
    return "\n".join(parts)


def export_entries_to_ics(entries: Iterable[ScheduleEntry], out_path: str | Path) -> int:
    """
    Export entries to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//schedu//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for entry in entries:
        day = (entry.date or "").strip()
        start = entry.time.start.strip()
        end = entry.time.end.strip()
        if not (day and start and end):
            continue

        try:
            dtstart = _dt_local(day, start)
            dtend = _dt_local(day, end)
        except ValueError:
            continue

        token = str(entry.token or "").strip()
        uid = token if token else f"{dtstart}-{entry.number}@schedu"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(f"SUMMARY:{_ics_escape(_summary(entry))}")
        if entry.auditorium and entry.auditorium.strip():
            lines.append(f"LOCATION:{_ics_escape(entry.auditorium.strip())}")
        description = _description(entry)
        if description:
            lines.append(f"DESCRIPTION:{_ics_escape(description)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
