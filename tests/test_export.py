"""Tests für die Terminal-Ausgabe der Wochenpläne."""

from rich.console import Console

from export.helpers import format_meetings, format_minutes, schedule_credits
from export.tui_renderer import print_result, render_section_rows, render_week_rows
from models.course import Course
from models.section import Meeting, Section
from solver.generator import ScheduleResult


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def make_section(section_id, course_id, label, meetings, linked_with=None):
    return Section(
        id=section_id,
        course_id=course_id,
        section=label,
        meetings=[Meeting(day=d, start=s, end=e) for d, s, e in meetings],
        term_id="T1",
        linked_with=linked_with,
    )


BY_COURSE_ID = {
    "BUS-201": Course(id="BUS-201", code="BUS 201", title="Operations", credits=3),
    "SCI-100": Course(id="SCI-100", code="SCI 100", title="Science", credits=4),
}

BUS = make_section("BUS-201-A", "BUS-201", "001", [("M", "09:00", "10:15"), ("W", "09:00", "10:15")])
LECT = make_section("LECT", "SCI-100", "002", [("T", "13:00", "14:15")], linked_with="LAB")
LAB = make_section("LAB", "SCI-100", "02L", [("F", "09:00", "10:15")], linked_with="LECT")


def recording_console() -> Console:
    return Console(record=True, width=160, force_terminal=False)


# ─── HELPERS ──────────────────────────────────────────────────────────────────

class TestHelpers:
    def test_format_minutes(self):
        assert format_minutes(570) == "09:30"
        assert format_minutes(0) == "00:00"

    def test_format_meetings(self):
        assert format_meetings(BUS) == "M 09:00–10:15, W 09:00–10:15"
        online = make_section("ONL", "BUS-201", "900", [])
        assert format_meetings(online) == "ohne Termin"

    def test_schedule_credits_counts_course_once(self):
        """Vorlesung + Labor desselben Kurses zählen einmal."""
        assert schedule_credits([BUS, LECT, LAB], BY_COURSE_ID) == 7


# ─── WOCHENANSICHT ────────────────────────────────────────────────────────────

class TestWeekRows:
    def test_rows_by_time_window(self):
        rows = render_week_rows([BUS, LECT, LAB], BY_COURSE_ID)
        # 09:00–10:15 (Mo, Mi, Fr) und 13:00–14:15 (Di)
        assert len(rows) == 2
        first, second = rows
        assert first[0] == "09:00–10:15"
        assert first[1] == "BUS 201 001"
        assert first[2] == "—"
        assert first[3] == "BUS 201 001"
        assert first[5] == "SCI 100 02L"
        assert second[0] == "13:00–14:15"
        assert second[2] == "SCI 100 002"

    def test_rows_have_six_columns(self):
        for row in render_week_rows([BUS], BY_COURSE_ID):
            assert len(row) == 6

    def test_empty_schedule(self):
        assert render_week_rows([], BY_COURSE_ID) == []

    def test_section_rows_include_explanation(self):
        rows = render_section_rows([BUS], BY_COURSE_ID, {"BUS-201": "Fulfills Core."})
        assert rows == [["BUS 201", "001", "M 09:00–10:15, W 09:00–10:15", "3", "Fulfills Core."]]


# ─── GESAMTAUSGABE ────────────────────────────────────────────────────────────

class TestPrintResult:
    def test_primary_and_backup(self):
        result = ScheduleResult(
            primary=[BUS],
            backups=[[LECT, LAB]],
            scores=[10.5, 9.25],
            explanations={"BUS-201": "Fulfills Core."},
        )
        console = recording_console()
        print_result(result, BY_COURSE_ID, console)
        text = console.export_text()
        assert "Primärplan" in text
        assert "Alternative 1" in text
        assert "10.500" in text
        assert "Fulfills Core." in text

    def test_lock_conflicts_table(self):
        result = ScheduleResult(lock_conflicts={"FIN-310": "Overlaps with BUS 201 · 001"})
        console = recording_console()
        print_result(result, BY_COURSE_ID, console)
        text = console.export_text()
        assert "Gesperrte Abschnitte nicht planbar" in text
        assert "Overlaps with BUS 201" in text

    def test_no_plan_panel(self):
        console = recording_console()
        print_result(ScheduleResult(), BY_COURSE_ID, console)
        assert "Kein Plan gefunden" in console.export_text()

    def test_budget_hint(self):
        result = ScheduleResult(primary=[BUS], scores=[1.0], budget_exhausted=True,
                                nodes_generated=5)
        console = recording_console()
        print_result(result, BY_COURSE_ID, console)
        assert "Knoten-Budget ausgeschöpft" in console.export_text()
