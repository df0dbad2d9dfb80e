"""Tests für Interessen-Score und Plan-Validierung."""

import math

import pytest

from analysis.interest import build_interest_map, score_by_interest
from analysis.plan_validator import PlanValidator, ValidationReport
from data.fake_data import FakeCatalogGenerator
from models.course import Course
from models.plan_request import PlanRequest
from models.preferences import Preferences
from models.requirement import RequirementGroupInput
from models.section import Meeting, Section
from solver.generator import ScheduleResult, generate_schedules


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

INTEREST_TAGS = {"Strategy": 0.8, "Quant": 0.6, "Leadership": 0.7}


def make_section(section_id, course_id, meetings, linked_with=None):
    return Section(
        id=section_id,
        course_id=course_id,
        section=section_id,
        meetings=[Meeting(day=d, start=s, end=e) for d, s, e in meetings],
        term_id="T1",
        linked_with=linked_with,
    )


def make_request(**overrides) -> PlanRequest:
    """Kleine Anfrage: zwei Kurse, je zwei Abschnitte."""
    values = dict(
        remaining_by_group=[
            RequirementGroupInput(group_id="core", candidate_course_ids=["BUS-201"],
                                  type="allOf", needed=1),
            RequirementGroupInput(group_id="fin", candidate_course_ids=["FIN-310"],
                                  type="chooseN", needed=1),
        ],
        sections_by_course={
            "BUS-201": [
                make_section("BUS-201-A", "BUS-201", [("M", "09:00", "10:15")]),
                make_section("BUS-201-B", "BUS-201", [("T", "11:00", "12:15")]),
            ],
            "FIN-310": [
                make_section("FIN-310-A", "FIN-310", [("M", "09:30", "10:45")]),
                make_section("FIN-310-B", "FIN-310", [("W", "13:00", "14:15")]),
            ],
        },
        prefs=Preferences(),
        courses=[
            Course(id="BUS-201", code="BUS 201", title="Operations", credits=3),
            Course(id="FIN-310", code="FIN 310", title="Finance", credits=3),
        ],
        required_course_ids={"BUS-201"},
        target_credits=6,
    )
    values.update(overrides)
    return PlanRequest(**values)


# ─── INTERESSEN-SCORE ─────────────────────────────────────────────────────────

class TestScoreByInterest:
    def test_no_course_tags(self):
        assert score_by_interest([], INTEREST_TAGS) == 0

    def test_no_matching_tags(self):
        assert score_by_interest(["Design", "Ethics"], INTEREST_TAGS) == 0

    def test_partial_match_mean(self):
        """Nur passende Tags zählen zum Mittelwert."""
        result = score_by_interest(["Strategy", "Ethics", "Quant"], INTEREST_TAGS)
        assert result == pytest.approx((0.8 + 0.6) / 2)

    def test_capped_at_one(self):
        assert score_by_interest(["Strategy"], {"Strategy": 1.2}) == 1

    def test_floored_at_zero(self):
        assert score_by_interest(["Strategy"], {"Strategy": -0.4}) == 0

    def test_all_tags_match(self):
        result = score_by_interest(["Strategy", "Leadership", "Quant"], INTEREST_TAGS)
        assert result == pytest.approx((0.8 + 0.7 + 0.6) / 3)

    def test_nan_ignored(self):
        result = score_by_interest(["Strategy", "Quant"], {"Strategy": math.nan, "Quant": 0.4})
        assert result == pytest.approx(0.4)

    def test_build_interest_map(self):
        courses = [
            Course(id="A", code="A", title="A", credits=3, tags=["Strategy"]),
            Course(id="B", code="B", title="B", credits=3, tags=["Design"]),
            Course(id="C", code="C", title="C", credits=3),
        ]
        interest = build_interest_map(courses, INTEREST_TAGS)
        assert interest == {"A": pytest.approx(0.8)}


# ─── PLAN-VALIDIERUNG ─────────────────────────────────────────────────────────

class TestPlanValidator:
    def test_generated_plans_are_valid(self):
        request = make_request()
        result = generate_schedules(request)
        report = PlanValidator().validate(result, request)
        assert isinstance(report, ValidationReport)
        assert report.is_valid, report.violations
        assert report.errors == []

    def test_overlap_detected(self):
        request = make_request()
        sections = request.section_index
        broken = ScheduleResult(
            primary=[sections["BUS-201-A"], sections["FIN-310-A"]],
            scores=[1.0],
        )
        report = PlanValidator().validate(broken, request)
        assert not report.is_valid
        assert any(v.constraint == "section_overlap" for v in report.errors)

    def test_duplicate_course_sets_detected(self):
        request = make_request()
        sections = request.section_index
        broken = ScheduleResult(
            primary=[sections["BUS-201-A"]],
            backups=[[sections["BUS-201-B"]]],
            scores=[2.0, 1.0],
        )
        report = PlanValidator().validate(broken, request)
        assert any(v.constraint == "duplicate_course_set" for v in report.errors)

    def test_score_order_and_count(self):
        request = make_request()
        sections = request.section_index
        broken = ScheduleResult(
            primary=[sections["BUS-201-A"]],
            backups=[[sections["FIN-310-B"]]],
            scores=[1.0, 2.0, 3.0],
        )
        report = PlanValidator().validate(broken, request)
        constraints = {v.constraint for v in report.errors}
        assert "score_count" in constraints
        assert "score_order" in constraints

    def test_credit_cap(self):
        request = make_request(target_credits=1)
        sections = request.section_index
        broken = ScheduleResult(
            primary=[sections["BUS-201-B"], sections["FIN-310-B"]],
            scores=[1.0],
        )
        report = PlanValidator().validate(broken, request)
        assert any(v.constraint == "credit_cap" for v in report.errors)

    def test_lock_not_honoured(self):
        request = make_request(locked_section_ids=["BUS-201-B"])
        sections = request.section_index
        broken = ScheduleResult(primary=[sections["BUS-201-A"]], scores=[1.0])
        report = PlanValidator().validate(broken, request)
        assert any(v.constraint == "lock_not_honoured" for v in report.errors)

    def test_missing_linked_partner(self):
        lecture = make_section("LECT", "BUS-201", [("M", "13:00", "14:00")], linked_with="LAB")
        lab = make_section("LAB", "BUS-201", [("T", "13:00", "15:00")], linked_with="LECT")
        request = make_request(sections_by_course={"BUS-201": [lecture, lab], "FIN-310": []})
        broken = ScheduleResult(primary=[lecture], scores=[1.0])
        report = PlanValidator().validate(broken, request)
        assert any(v.constraint == "linked_section_missing" for v in report.errors)

    def test_empty_result_is_warning(self):
        request = make_request()
        report = PlanValidator().validate(ScheduleResult(), request)
        assert report.is_valid
        assert [v.constraint for v in report.warnings] == ["no_plan"]

    def test_lock_conflicts_reported_as_warnings(self):
        request = make_request()
        result = ScheduleResult(lock_conflicts={"FIN-310": "Overlaps with BUS 201 · BUS-201-A"})
        report = PlanValidator().validate(result, request)
        assert report.is_valid
        assert report.warnings[0].constraint == "lock_conflict"
        assert report.warnings[0].entity == "FIN-310"

    @pytest.mark.parametrize("seed", [5, 11, 123])
    def test_fake_catalog_plans_are_valid(self, seed):
        request = FakeCatalogGenerator(seed=seed).generate()
        result = generate_schedules(request)
        report = PlanValidator().validate(result, request)
        assert report.is_valid, [v.description for v in report.errors]

    def test_print_rich_runs(self, capsys):
        request = make_request()
        report = PlanValidator().validate(generate_schedules(request), request)
        report.print_rich()
        out = capsys.readouterr().out
        assert "Plan-Validierung" in out
