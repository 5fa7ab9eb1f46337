"""
calendar_export.py — Study schedule as an iCalendar file
========================================================
The scheduling collaborator answers with prose around an iCalendar body.
This module finds the ``BEGIN:VCALENDAR`` … ``END:VCALENDAR`` block
(case-insensitive), round-trips it through ``icalendar`` so only a
parseable calendar is ever written, and saves it as

  <schedules_dir>/schedule-YYYYMMDDHHMMSS.ics
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from icalendar import Calendar

logger = logging.getLogger(__name__)

_BEGIN = re.compile(r"BEGIN:VCALENDAR", re.IGNORECASE)
_END   = re.compile(r"END:VCALENDAR", re.IGNORECASE)


def find_calendar_block(text: Optional[str]) -> Optional[str]:
    """The calendar block inside *text*, delimiters included, or None."""
    if not text:
        return None
    begin = _BEGIN.search(text)
    if begin is None:
        return None
    end = _END.search(text, begin.end())
    if end is None:
        return None
    return text[begin.start():end.end()]


def normalize_calendar(ics: str) -> str:
    """
    Parse *ics* and serialise it again.

    Lines are stripped first: models like to indent the body, and a leading
    space means "continuation" in iCalendar.  Raises ValueError when the
    text is not a calendar with at least one event.
    """
    lines = [line.strip() for line in ics.splitlines() if line.strip()]
    calendar = Calendar.from_ical("\r\n".join(lines) + "\r\n")
    if calendar.name != "VCALENDAR":
        raise ValueError(f"expected VCALENDAR, got {calendar.name}")
    if not calendar.walk("VEVENT"):
        raise ValueError("calendar contains no events")
    return calendar.to_ical().decode("utf-8")


def write_schedule(ics: str, directory: str | Path, now: Optional[datetime] = None) -> Path:
    """Write *ics* to a timestamped file under *directory* and return its path."""
    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)
    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    path = folder / f"schedule-{stamp}.ics"
    path.write_bytes(ics.encode("utf-8"))
    logger.info("Schedule written to %s", path)
    return path
