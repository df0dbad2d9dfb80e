"""Gesperrte (fixierte) Abschnitte vor der Suche auflösen und prüfen.

Ein gesperrter Abschnitt ist eine harte Vorgabe: der Generator MUSS genau
diesen Abschnitt (samt verknüpfter Partner) einplanen oder präzise melden,
warum das nicht geht. Die Gründe werden hier gesammelt; das eigentliche
Einfügen in den Startknoten übernimmt der Generator.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from models.course import Course
from models.preferences import Preferences
from models.section import Section
from models.timeslot import day_name
from solver.conflicts import (
    format_section_label,
    gather_linked_group,
    sections_overlap,
    violates_protected_block,
)

logger = logging.getLogger(__name__)

FALLBACK_REASON = "Locked section cannot be scheduled due to conflicts"


@dataclass
class LockedGroup:
    """Ein gesperrter Abschnitt mit allen verknüpften Partnern."""

    course_id: str
    sections: list[Section]
    # Gründe in Einfügereihenfolge, ohne Duplikate
    reasons: dict[str, None] = field(default_factory=dict)

    def add_reason(self, reason: str) -> None:
        self.reasons.setdefault(reason, None)

    def add_reasons(self, reasons: Iterable[str]) -> None:
        for reason in reasons:
            self.add_reason(reason)

    @property
    def message(self) -> str:
        return "; ".join(self.reasons)


# ─── Einzelne Prüfungen ───────────────────────────────────────────────────────

def collect_window_conflicts(section: Section, prefs: Preferences) -> list[str]:
    """Gründe für Termine außerhalb von earliest/latest."""
    earliest = prefs.earliest_minutes
    latest = prefs.latest_minutes
    reasons: dict[str, None] = {}
    for slot in section.slots:
        if earliest is not None and slot.range.start < earliest:
            reasons.setdefault(f"Starts before preferred time ({prefs.earliest})")
        if latest is not None and slot.range.end > latest:
            reasons.setdefault(f"Ends after preferred time ({prefs.latest})")
    return list(reasons)


def collect_day_off_conflicts(section: Section, prefs: Preferences) -> list[str]:
    """Gründe für Termine an Wunsch-freien Tagen."""
    if not prefs.days_off:
        return []
    days_off = set(prefs.days_off)
    reasons: dict[str, None] = {}
    for meeting in section.meetings:
        if meeting.day in days_off:
            reasons.setdefault(f"Falls on preferred day off ({day_name(meeting.day)})")
    return list(reasons)


def collect_seed_conflicts(
    section: Section,
    existing: Iterable[Section],
    prefs: Preferences,
    by_course_id: Mapping[str, Course],
) -> list[str]:
    """Alle Gründe, die gegen einen einzelnen gesperrten Abschnitt sprechen."""
    reasons: dict[str, None] = {}
    if violates_protected_block(section, prefs):
        reasons.setdefault("Conflicts with protected time block")
    for reason in collect_window_conflicts(section, prefs):
        reasons.setdefault(reason)
    for reason in collect_day_off_conflicts(section, prefs):
        reasons.setdefault(reason)
    for other in existing:
        if sections_overlap(other, section):
            reasons.setdefault(f"Overlaps with {format_section_label(other, by_course_id)}")
    return list(reasons)


def collect_group_conflicts(
    group: list[Section],
    existing: Iterable[Section],
    prefs: Preferences,
    by_course_id: Mapping[str, Course],
) -> list[str]:
    """Gründe für eine ganze verknüpfte Gruppe inkl. interner Überschneidungen."""
    existing = list(existing)
    reasons: dict[str, None] = {}
    for section in group:
        for reason in collect_seed_conflicts(section, existing, prefs, by_course_id):
            reasons.setdefault(reason)

    for i, a in enumerate(group):
        for b in group[i + 1:]:
            if sections_overlap(a, b):
                reasons.setdefault(
                    f"Linked sections {format_section_label(a, by_course_id)} and "
                    f"{format_section_label(b, by_course_id)} overlap"
                )
    return list(reasons)


# ─── Auflösung ────────────────────────────────────────────────────────────────

def resolve_locked_groups(
    locked_section_ids: Iterable[str],
    section_index: Mapping[str, Section],
    by_course_id: Mapping[str, Course],
) -> list[LockedGroup]:
    """Wandelt gesperrte Abschnitts-IDs in LockedGroups um.

    Pro Kurs gilt die erste Sperre; spätere Sperren desselben Kurses werden
    ignoriert. Ein Abschnitt landet höchstens in einer Gruppe. Unbekannte IDs
    werden protokolliert und übersprungen.
    """
    groups: list[LockedGroup] = []
    processed_courses: set[str] = set()
    seen_section_ids: set[str] = set()

    for section_id in locked_section_ids:
        section = section_index.get(section_id)
        if section is None:
            logger.warning(f"Sperre ignoriert (Abschnitt unbekannt): {section_id}")
            continue
        if section.course_id in processed_courses:
            logger.debug(
                f"Sperre ignoriert (Kurs {section.course_id} bereits gesperrt): {section_id}"
            )
            continue

        linked: list[Section] = []
        for partner in gather_linked_group(section, section_index):
            if partner.id in seen_section_ids:
                continue
            seen_section_ids.add(partner.id)
            linked.append(partner)

        group = LockedGroup(course_id=section.course_id, sections=linked)
        if len(linked) > 1:
            for partner in linked:
                if partner.course_id == section.course_id:
                    continue
                group.add_reason(
                    f"Requires linked section {format_section_label(partner, by_course_id)}"
                )
        groups.append(group)
        processed_courses.add(section.course_id)

    return groups


def additional_credits(
    group: LockedGroup,
    already_selected: Iterable[str],
    by_course_id: Mapping[str, Course],
) -> float:
    """Credits, die die Gruppe zusätzlich einbringt (jeder Kurs einmal)."""
    selected = set(already_selected)
    new_courses = {s.course_id for s in group.sections if s.course_id not in selected}
    return sum(
        by_course_id[cid].credits for cid in new_courses if cid in by_course_id
    )
