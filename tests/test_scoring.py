"""Tests für die Bewertungsfunktion und den Creditpuffer."""

import pytest

from config.schema import ScoringWeights, SearchConfig
from models.course import Course
from models.preferences import FridayPreference, Preferences
from models.section import Meeting, Section
from solver.scoring import (
    break_penalty,
    capacity_penalty,
    coverage_score,
    day_off_score,
    density_score,
    friday_penalty,
    interest_score,
    score_schedule,
)


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def make_section(section_id, course_id, meetings, term_id="TERM-1", **kwargs):
    return Section(
        id=section_id,
        course_id=course_id,
        section=section_id,
        meetings=[Meeting(day=d, start=s, end=e) for d, s, e in meetings],
        term_id=term_id,
        **kwargs,
    )


BASE_PREFS = Preferences(
    earliest="08:00",
    latest="18:00",
    target_credits=15,
    min_break_mins=15,
    density="compact",
    fridays=FridayPreference.AVOID,
    days_off=["F"],
)

SECTION_A = make_section("A", "COURSE-A", [("M", "09:00", "10:15"), ("W", "09:00", "10:15")],
                         capacity=25, enrolled=20)
SECTION_B = make_section("B", "COURSE-B", [("T", "11:00", "12:15"), ("R", "11:00", "12:15")],
                         capacity=20, enrolled=20)
SECTION_FRIDAY = make_section("C", "COURSE-C", [("F", "15:00", "16:15")])
LECTURE = make_section("LECT", "SCI-100", [("M", "13:00", "14:15"), ("W", "13:00", "14:15")],
                       linked_with="LAB")
LAB = make_section("LAB", "SCI-100", [("F", "09:00", "11:00")], linked_with="LECT")

BY_COURSE_ID = {
    c.id: c for c in [
        Course(id="COURSE-A", code="A", title="Course A", credits=3),
        Course(id="COURSE-B", code="B", title="Course B", credits=3),
        Course(id="COURSE-C", code="C", title="Course C", credits=3),
        Course(id="SCI-100", code="SCI 100", title="Science 100", credits=4),
    ]
}


# ─── GESAMTBEWERTUNG ──────────────────────────────────────────────────────────

class TestScoreSchedule:
    def test_coverage_interest_and_capacity(self):
        """Volle Abdeckung, mittleres Interesse, ein voller Abschnitt."""
        interest_of = lambda cid: 1.0 if cid == "COURSE-A" else 0.5

        total, breakdown = score_schedule(
            [SECTION_A, SECTION_B], BASE_PREFS, {"COURSE-A", "COURSE-B"},
            interest_of, BY_COURSE_ID,
        )

        assert breakdown.coverage == pytest.approx(1.0)
        assert breakdown.interest == pytest.approx(0.75)
        assert breakdown.friday_penalty == 0
        assert breakdown.capacity_penalty == 1
        assert breakdown.break_penalty == 0
        expected = 6 * 1 + 3 * 0.75 + 3 * 1 + 2 * 1 + 1 * breakdown.density - 1
        assert total == pytest.approx(expected, abs=1e-9)

    def test_friday_penalty_when_avoided(self):
        total, breakdown = score_schedule(
            [SECTION_FRIDAY], BASE_PREFS, set(), lambda cid: 0.8, BY_COURSE_ID,
        )
        assert breakdown.friday_penalty == 1
        assert breakdown.day_off == 0
        assert breakdown.coverage == 1.0

    def test_linked_pair_window_violation(self):
        prefs = BASE_PREFS.model_copy(update={"earliest": "12:00", "latest": "17:00"})
        _, breakdown = score_schedule(
            [LECTURE, LAB], prefs, {"SCI-100"}, lambda cid: 0.9, BY_COURSE_ID,
        )
        assert breakdown.coverage == 1
        assert breakdown.time_window < 1
        assert breakdown.friday_penalty == 1

    def test_custom_weights(self):
        """Gewichte kommen aus ScoringWeights; 0 deaktiviert einen Term."""
        weights = ScoringWeights(coverage=0, interest=0, time_window=0, day_off=0,
                                 density=0, friday_penalty=10, break_penalty=0,
                                 capacity_penalty=0)
        total, _ = score_schedule(
            [SECTION_FRIDAY], BASE_PREFS, set(), lambda cid: 0.8, BY_COURSE_ID, weights,
        )
        assert total == pytest.approx(-10)


# ─── TEILWERTE ────────────────────────────────────────────────────────────────

class TestScoreTerms:
    def test_coverage_without_required(self):
        assert coverage_score([SECTION_A], set()) == 1.0

    def test_coverage_partial(self):
        assert coverage_score([SECTION_A], {"COURSE-A", "COURSE-B"}) == pytest.approx(0.5)

    def test_interest_empty(self):
        assert interest_score([], lambda cid: 1.0) == 0.0

    def test_interest_averages_over_sections(self):
        """Vorlesung + Labor zählen als zwei Abschnitte."""
        interest = {"SCI-100": 1.0, "COURSE-A": 0.0}
        assert interest_score([LECTURE, LAB, SECTION_A], interest.get) == pytest.approx(2 / 3)

    def test_day_off(self):
        prefs = Preferences(days_off=["F", "M"])
        assert day_off_score([SECTION_B], prefs) == 1.0
        assert day_off_score([SECTION_A], prefs) == pytest.approx(0.5)
        assert day_off_score([SECTION_A], Preferences()) == 1.0

    def test_density_balanced_vs_clustered(self):
        """Gleichmäßige Verteilung bewertet besser als ein einziger Tag."""
        spread = [
            make_section(f"S{d}", f"C{d}", [(d, "09:00", "10:00")]) for d in "MTWRF"
        ]
        clustered = [
            make_section(f"K{i}", f"C{i}", [("M", f"{8 + i:02d}:00", f"{8 + i:02d}:50")])
            for i in range(5)
        ]
        assert density_score(spread) == pytest.approx(1.0)
        assert density_score(clustered) < density_score(spread)
        assert 0.0 <= density_score(clustered) <= 1.0

    def test_density_empty(self):
        assert density_score([]) == 1.0

    def test_friday_penalty_only_when_avoid(self):
        neutral = Preferences(fridays=FridayPreference.NEUTRAL)
        assert friday_penalty([SECTION_FRIDAY], neutral) == 0
        assert friday_penalty([SECTION_FRIDAY], BASE_PREFS) == 1
        assert friday_penalty([SECTION_A], BASE_PREFS) == 0

    def test_break_penalty_short_gap(self):
        """5 Minuten Pause zwischen zwei Abschnitten desselben Terms."""
        first = make_section("X", "C1", [("M", "09:00", "09:55")])
        second = make_section("Y", "C2", [("M", "10:00", "10:50")])
        assert break_penalty([first, second], 15) == 1
        assert break_penalty([first, second], 5) == 0

    def test_break_penalty_ignores_other_term(self):
        first = make_section("X", "C1", [("M", "09:00", "09:55")], term_id="T1")
        second = make_section("Y", "C2", [("M", "10:00", "10:50")], term_id="T2")
        assert break_penalty([first, second], 15) == 0

    def test_break_penalty_compares_first_meetings_only(self):
        """Bekannte Vereinfachung: Wochentag wird nicht berücksichtigt."""
        monday = make_section("X", "C1", [("M", "09:00", "09:55")])
        tuesday = make_section("Y", "C2", [("T", "10:00", "10:50")])
        assert break_penalty([monday, tuesday], 15) == 1

    def test_capacity_penalty_unknown_course(self):
        full_unknown = make_section("Z", "UNKNOWN", [("M", "09:00", "10:00")],
                                    capacity=10, enrolled=10)
        assert capacity_penalty([full_unknown, SECTION_B], BY_COURSE_ID) == 1


# ─── CREDITPUFFER ─────────────────────────────────────────────────────────────

class TestCreditBuffer:
    @pytest.mark.parametrize("target,buffer", [(9, 3), (15, 3), (17.5, 4), (20, 4), (30, 6)])
    def test_buffer(self, target, buffer):
        """max(3, round(target * 0.2))."""
        assert SearchConfig().credit_buffer(target) == buffer

    def test_cap(self):
        assert SearchConfig().credit_cap(15) == 18
