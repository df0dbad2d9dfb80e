"""Begründungstexte für die Kurse des Primärplans."""

from typing import Callable, Iterable

from config.defaults import FRIDAY
from models.preferences import FridayPreference, Preferences
from models.requirement import RequirementGroupInput
from models.section import Section
from solver.conflicts import violates_preferred_window, violates_protected_block


def build_explanations(
    sections: Iterable[Section],
    groups: Iterable[RequirementGroupInput],
    interest_of: Callable[[str], float],
    prefs: Preferences,
) -> dict[str, str]:
    """Ein Satz pro Kurs: erfüllte Gruppe, Zeitfenster, Freitag, Interesse.

    Gehört ein Kurs zu mehreren Gruppen, zählt die erste in Eingabereihenfolge.
    Ausgewertet wird der erste Abschnitt eines Kurses im Plan.
    """
    group_by_course: dict[str, RequirementGroupInput] = {}
    for group in groups:
        for course_id in group.candidate_course_ids:
            group_by_course.setdefault(course_id, group)

    explanations: dict[str, str] = {}
    for section in sections:
        if section.course_id in explanations:
            continue

        group = group_by_course.get(section.course_id)
        title = group.display_title if group is not None else section.course_id

        within = (
            not violates_protected_block(section, prefs)
            and not violates_preferred_window(section, prefs)
        )
        window_text = "fits your protected times" if within else "needs flexibility"

        if any(m.day == FRIDAY for m in section.meetings):
            friday_text = (
                "may require Fridays"
                if prefs.fridays == FridayPreference.AVOID
                else "includes Friday sessions"
            )
        else:
            friday_text = "avoids Fridays"

        interest = interest_of(section.course_id)
        explanations[section.course_id] = (
            f"Fulfills {title}; {window_text}; {friday_text}; interest {interest:.2f}."
        )

    return explanations
