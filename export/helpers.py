"""Gemeinsame Hilfsfunktionen für die Plan-Ausgabe."""

from datetime import date
from typing import Mapping

from models.course import Course
from models.section import Meeting, Section


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def format_minutes(minutes: int) -> str:
    """Minuten seit Mitternacht → "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_meeting(meeting: Meeting) -> str:
    """"M 09:00–10:15"."""
    return f"{meeting.day} {meeting.start}–{meeting.end}"


def format_meetings(section: Section) -> str:
    if not section.meetings:
        return "ohne Termin"
    return ", ".join(format_meeting(m) for m in section.meetings)


def course_code(section: Section, by_course_id: Mapping[str, Course]) -> str:
    course = by_course_id.get(section.course_id)
    return course.code if course is not None else section.course_id


def schedule_credits(
    sections: list[Section], by_course_id: Mapping[str, Course]
) -> float:
    """Credits eines Plans; jeder Kurs zählt einmal (Vorlesung + Labor)."""
    course_ids = {s.course_id for s in sections}
    return sum(by_course_id[c].credits for c in course_ids if c in by_course_id)


def course_count(sections: list[Section]) -> int:
    return len({s.course_id for s in sections})
