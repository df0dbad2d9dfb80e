"""Bewertungsfunktion für Kandidaten-Stundenpläne.

Acht Teilwerte, gewichtet kombiniert:

    total = coverage*6 + interest*3 + time_window*3 + day_off*2 + density*1
            - friday_penalty*2 - break_penalty*2 - capacity_penalty*1

Die fünf positiven Terme liegen in [0, 1], die drei Strafterme sind Zählwerte.
Gewichte und Pausenschwelle kommen aus ScoringWeights.
"""

from typing import Callable, Mapping, Optional

from pydantic import BaseModel

from config.defaults import DAY_CODES, FRIDAY
from config.schema import ScoringWeights
from models.course import Course
from models.preferences import FridayPreference, Preferences
from models.section import Section
from solver.conflicts import (
    group_linked_sections,
    sections_overlap,
    violates_preferred_window,
)

InterestLookup = Callable[[str], float]


class ScoreBreakdown(BaseModel):
    """Einzelwerte der Bewertung."""

    coverage: float
    interest: float
    time_window: float
    day_off: float
    density: float
    friday_penalty: int
    break_penalty: int
    capacity_penalty: int

    def total(self, weights: Optional[ScoringWeights] = None) -> float:
        w = weights or ScoringWeights()
        return (
            self.coverage * w.coverage
            + self.interest * w.interest
            + self.time_window * w.time_window
            + self.day_off * w.day_off
            + self.density * w.density
            - self.friday_penalty * w.friday_penalty
            - self.break_penalty * w.break_penalty
            - self.capacity_penalty * w.capacity_penalty
        )


# ─── Teilwerte ────────────────────────────────────────────────────────────────

def coverage_score(sections: list[Section], required_course_ids: set[str]) -> float:
    """Anteil der Pflichtkurse, die im Plan vorkommen (1.0 ohne Pflichtkurse)."""
    if not required_course_ids:
        return 1.0
    covered = {s.course_id for s in sections if s.course_id in required_course_ids}
    return len(covered) / len(required_course_ids)


def interest_score(sections: list[Section], interest_of: InterestLookup) -> float:
    """Mittleres Interesse über alle Abschnitte (0.0 bei leerem Plan)."""
    if not sections:
        return 0.0
    return sum(interest_of(s.course_id) for s in sections) / len(sections)


def time_window_score(sections: list[Section], prefs: Preferences) -> float:
    """1 − Anteil der Abschnitte außerhalb des Wunsch-Zeitfensters."""
    if not sections:
        return 1.0
    violations = sum(1 for s in sections if violates_preferred_window(s, prefs))
    return max(0.0, 1.0 - violations / len(sections))


def day_off_score(sections: list[Section], prefs: Preferences) -> float:
    """Anteil der Wunsch-freien Tage, die tatsächlich frei bleiben."""
    days_off = set(prefs.days_off)
    if not days_off:
        return 1.0
    used_days = {m.day for s in sections for m in s.meetings}
    free = sum(1 for day in days_off if day not in used_days)
    return free / len(days_off)


def density_score(sections: list[Section]) -> float:
    """Ausgewogenheit der Termine über die Woche.

    1 − Varianz der Termine pro Wochentag, normiert auf (Gesamttermine)²
    und auf [0, 1] begrenzt. Symmetrisch: bewertet Balance, nicht
    "kompakt" vs. "verteilt".
    """
    if not sections:
        return 1.0
    counts = [0] * len(DAY_CODES)
    for s in sections:
        for slot in s.slots:
            counts[slot.day] += 1

    total = sum(counts)
    if total == 0:
        return 1.0

    mean = total / len(counts)
    variance = sum((c - mean) ** 2 for c in counts) / len(counts)
    normalized = min(variance / (total ** 2), 1.0)
    return 1.0 - normalized


def friday_penalty(sections: list[Section], prefs: Preferences) -> int:
    """1 wenn Freitage vermieden werden sollen und ein Termin freitags liegt."""
    if prefs.fridays != FridayPreference.AVOID:
        return 0
    has_friday = any(m.day == FRIDAY for s in sections for m in s.meetings)
    return 1 if has_friday else 0


def break_penalty(sections: list[Section], threshold_minutes: int) -> int:
    """Zählt Abschnittspaare desselben Terms mit zu knapper Pause.

    Bekannte Vereinfachung: verglichen wird nur der jeweils ERSTE Termin
    (Beginn/Ende), unabhängig vom Wochentag. Abschnitte ohne Termine zählen
    nicht mit.
    """
    timed = [s for s in sections if s.meetings]
    ordered = sorted(timed, key=lambda s: s.slots[0].range.start)

    penalty = 0
    for i, a in enumerate(ordered):
        for b in ordered[i + 1:]:
            if a.term_id != b.term_id:
                continue
            if sections_overlap(a, b):
                continue
            gap = abs(b.slots[0].range.start - a.slots[0].range.end)
            if gap < threshold_minutes:
                penalty += 1
    return penalty


def capacity_penalty(
    sections: list[Section], by_course_id: Mapping[str, Course]
) -> int:
    """Anzahl voller Abschnitte (enrolled ≥ capacity) bekannter Kurse."""
    return sum(
        1 for s in sections
        if s.course_id in by_course_id and s.is_full
    )


# ─── Gesamtbewertung ─────────────────────────────────────────────────────────

def score_schedule(
    sections: list[Section],
    prefs: Preferences,
    required_course_ids: set[str],
    interest_of: InterestLookup,
    by_course_id: Mapping[str, Course],
    weights: Optional[ScoringWeights] = None,
) -> tuple[float, ScoreBreakdown]:
    """Bewertet einen Kandidatenplan. Gibt (Gesamtwert, Einzelwerte) zurück."""
    w = weights or ScoringWeights()
    flattened = [s for group in group_linked_sections(sections) for s in group]

    breakdown = ScoreBreakdown(
        coverage=coverage_score(flattened, required_course_ids),
        interest=interest_score(flattened, interest_of),
        time_window=time_window_score(flattened, prefs),
        day_off=day_off_score(flattened, prefs),
        density=density_score(flattened),
        friday_penalty=friday_penalty(flattened, prefs),
        break_penalty=break_penalty(flattened, w.break_threshold_minutes),
        capacity_penalty=capacity_penalty(flattened, by_course_id),
    )
    return breakdown.total(w), breakdown
