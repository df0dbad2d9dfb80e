"""Zeitkonflikt-Modell: Überschneidungen, Schutzzeiten, Zeitfenster, Verknüpfungen.

Alle Funktionen sind reine Funktionen über Section/Preferences und werden von
Bewertung, Sperren-Seeding und Beam-Suche gemeinsam genutzt.
"""

from typing import Iterable, Mapping, Optional

from models.course import Course
from models.preferences import Preferences
from models.section import Section


def sections_overlap(a: Section, b: Section) -> bool:
    """True wenn irgendein Termin von a mit irgendeinem Termin von b kollidiert."""
    for slot_a in a.slots:
        for slot_b in b.slots:
            if slot_a.conflicts_with(slot_b):
                return True
    return False


def has_conflict(existing: Iterable[Section], candidate: Section) -> bool:
    """True wenn candidate mit einem der bereits gewählten Abschnitte kollidiert."""
    return any(sections_overlap(other, candidate) for other in existing)


def violates_protected_block(section: Section, prefs: Preferences) -> bool:
    """True wenn ein Termin eine Schutzzeit am selben Tag überlappt."""
    blocked = prefs.protected_slots
    if not blocked:
        return False
    return any(
        slot.conflicts_with(block)
        for slot in section.slots
        for block in blocked
    )


def violates_preferred_window(section: Section, prefs: Preferences) -> bool:
    """True wenn ein Termin vor earliest beginnt oder nach latest endet.

    Nur gesetzte Grenzen werden geprüft.
    """
    earliest = prefs.earliest_minutes
    latest = prefs.latest_minutes
    if earliest is None and latest is None:
        return False
    for slot in section.slots:
        if earliest is not None and slot.range.start < earliest:
            return True
        if latest is not None and slot.range.end > latest:
            return True
    return False


def meets_on_days(section: Section, days: Iterable[str]) -> bool:
    wanted = set(days)
    return any(m.day in wanted for m in section.meetings)


# ─── Verknüpfte Abschnitte (Vorlesung + Labor) ────────────────────────────────

def gather_linked_group(
    section: Section, section_index: Mapping[str, Section]
) -> list[Section]:
    """Sammelt die komplette Zusammenhangskomponente über linked_with.

    Tiefensuche mit Stack; Zyklen und doppelte Verweise sind erlaubt, jeder
    Abschnitt erscheint genau einmal. Die Gruppengröße ist nicht auf zwei
    beschränkt. Unbekannte Partner-IDs werden übersprungen.
    """
    stack: list[Section] = [section]
    collected: dict[str, Section] = {}

    while stack:
        current = stack.pop()
        if current.id in collected:
            continue
        collected[current.id] = current
        if current.linked_with:
            partner = section_index.get(current.linked_with)
            if partner is not None and partner.id not in collected:
                stack.append(partner)

    return list(collected.values())


def group_linked_sections(sections: list[Section]) -> list[list[Section]]:
    """Teilt eine flache Abschnittsliste in verknüpfte Gruppen auf.

    Nur Verweise innerhalb der Liste zählen; Reihenfolge folgt dem ersten
    Auftreten. Verknüpfungen werden in beide Richtungen ausgewertet.
    """
    by_id = {s.id: s for s in sections}
    neighbours: dict[str, set[str]] = {s.id: set() for s in sections}
    for s in sections:
        if s.linked_with and s.linked_with in by_id and s.linked_with != s.id:
            neighbours[s.id].add(s.linked_with)
            neighbours[s.linked_with].add(s.id)

    groups: list[list[Section]] = []
    visited: set[str] = set()
    for s in sections:
        if s.id in visited:
            continue
        component: list[Section] = []
        stack = [s.id]
        while stack:
            sid = stack.pop()
            if sid in visited:
                continue
            visited.add(sid)
            component.append(by_id[sid])
            stack.extend(n for n in neighbours[sid] if n not in visited)
        groups.append(component)
    return groups


def format_section_label(
    section: Section, by_course_id: Mapping[str, Course]
) -> str:
    """Anzeige-Label "BUS 201 · 001" (Kurscode, sonst Kurs-ID)."""
    course: Optional[Course] = by_course_id.get(section.course_id)
    code = course.code if course is not None else section.course_id
    return f"{code} · {section.section}" if section.section else code
