"""Interessen-Score pro Kurs aus den Tags des Kurses und den Interessen des Studierenden."""

import logging
import math
from typing import Iterable, Mapping

from models.course import Course

logger = logging.getLogger(__name__)


def score_by_interest(course_tags: Iterable[str], interest_tags: Mapping[str, float]) -> float:
    """Mittelwert der Interessen aller passenden Tags, begrenzt auf [0, 1].

    Ohne Tags oder ohne Treffer ist der Score 0. Nicht-numerische oder NaN-Werte
    in interest_tags werden ignoriert.
    """
    matched: list[float] = []
    for tag in course_tags:
        value = interest_tags.get(tag)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if math.isnan(value):
            continue
        matched.append(float(value))

    if not matched:
        return 0.0

    average = sum(matched) / len(matched)
    return min(max(average, 0.0), 1.0)


def build_interest_map(
    courses: Iterable[Course], interest_tags: Mapping[str, float]
) -> dict[str, float]:
    """interest_by_course für den Generator: Kurs-ID → Interessen-Score.

    Kurse ohne passenden Tag fehlen in der Map; der Generator setzt dann den
    konfigurierten Default ein.
    """
    result: dict[str, float] = {}
    for course in courses:
        if not course.tags:
            continue
        if not any(tag in interest_tags for tag in course.tags):
            continue
        result[course.id] = score_by_interest(course.tags, interest_tags)
    logger.debug(f"Interessen-Map: {len(result)} Kurse mit Treffern")
    return result
