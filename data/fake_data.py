"""Testdaten-Generator für den Kursplan-Generator.

Erzeugt einen reproduzierbaren Katalog (Kurse, Abschnitte, Anforderungsgruppen)
samt Präferenzen als fertige PlanRequest.

Absichtliche Engpässe:
  1. Labor-Kurse: Vorlesung + Labor sind verknüpft und nur gemeinsam belegbar
  2. Volle Abschnitte: ein Teil der Abschnitte ist ausgebucht (Kapazitäts-Strafe)
  3. Freitags-Termine: MWF-Muster und Labore am Freitag
  4. Gleiche Zeitfenster: mehrere Kurse teilen sich die Standard-Slots
"""

import logging
import random
from typing import Optional

from analysis.interest import build_interest_map
from models.course import Course
from models.plan_request import PlanRequest
from models.preferences import FridayPreference, Preferences, ProtectedBlock
from models.requirement import RequirementGroupInput
from models.section import Meeting, Section

logger = logging.getLogger(__name__)

# ─── Katalog-Bausteine ────────────────────────────────────────────────────────

_SUBJECTS: list[tuple[str, str]] = [
    ("BUS", "Business"),
    ("FIN", "Finance"),
    ("MKT", "Marketing"),
    ("LEAD", "Leadership"),
    ("ACCT", "Accounting"),
    ("ECON", "Economics"),
    ("STAT", "Statistics"),
    ("MGMT", "Management"),
]

_TOPICS = [
    "Foundations", "Analytics", "Strategy", "Operations", "Ethics",
    "Modeling", "Communication", "Negotiation", "Innovation", "Research",
]

_TAGS = ["Strategy", "Quant", "Leadership", "Analytics", "Ethics", "Design"]

# Tages-Muster und Zeitfenster wie in einem typischen Vorlesungsverzeichnis
_PATTERNS: list[tuple[str, list[tuple[str, str]]]] = [
    ("MW", [("08:00", "09:15"), ("09:30", "10:45"), ("11:00", "12:15"),
            ("12:30", "13:45"), ("14:00", "15:15"), ("15:30", "16:45")]),
    ("TR", [("08:00", "09:15"), ("09:30", "10:45"), ("11:00", "12:15"),
            ("12:30", "13:45"), ("14:00", "15:15"), ("15:30", "16:45")]),
    ("MWF", [("09:00", "09:50"), ("10:00", "10:50"), ("11:00", "11:50"),
             ("13:00", "13:50")]),
]

_LAB_SLOTS: list[tuple[str, str, str]] = [
    ("R", "14:00", "15:50"),
    ("F", "10:00", "11:50"),
    ("T", "16:00", "17:50"),
    ("F", "13:00", "14:50"),
]

_INSTRUCTORS = ["prof-ahn", "prof-berger", "prof-costa", "prof-diaz", "prof-evans",
                "prof-fuchs", "prof-gupta", "prof-huber"]


class FakeCatalogGenerator:
    """Generiert eine vollständige PlanRequest mit synthetischem Katalog."""

    def __init__(
        self,
        seed: Optional[int] = None,
        num_courses: int = 16,
        lab_ratio: float = 0.25,
        term_id: str = "2026FA",
    ) -> None:
        if num_courses < 8:
            raise ValueError(f"num_courses muss >= 8 sein, nicht {num_courses}")
        self.rng = random.Random(seed)
        self.num_courses = num_courses
        self.lab_ratio = lab_ratio
        self.term_id = term_id

    # ─── Kurse ────────────────────────────────────────────────────────────────

    def _generate_courses(self) -> list[Course]:
        courses: list[Course] = []
        used_ids: set[str] = set()
        while len(courses) < self.num_courses:
            prefix, subject = self.rng.choice(_SUBJECTS)
            level = self.rng.choice([100, 200, 300, 400])
            number = level + self.rng.randint(1, 99)
            course_id = f"{prefix}-{number}"
            if course_id in used_ids:
                continue
            used_ids.add(course_id)
            topic = self.rng.choice(_TOPICS)
            courses.append(Course(
                id=course_id,
                code=f"{prefix} {number}",
                title=f"{subject} {topic}",
                credits=self.rng.choice([3, 3, 3, 4]),
                tags=self.rng.sample(_TAGS, k=self.rng.randint(1, 2)),
                level=level,
            ))
        return courses

    # ─── Abschnitte ───────────────────────────────────────────────────────────

    def _random_meetings(self) -> list[Meeting]:
        days, windows = self.rng.choice(_PATTERNS)
        start, end = self.rng.choice(windows)
        return [Meeting(day=d, start=start, end=end) for d in days]

    def _capacity(self) -> tuple[int, int]:
        capacity = self.rng.choice([25, 30, 40, 60])
        # ca. jeder siebte Abschnitt ist ausgebucht
        if self.rng.random() < 0.15:
            return capacity, capacity
        return capacity, self.rng.randint(0, capacity - 1)

    def _generate_sections(self, courses: list[Course]) -> dict[str, list[Section]]:
        sections_by_course: dict[str, list[Section]] = {}
        for course in courses:
            with_lab = self.rng.random() < self.lab_ratio
            count = self.rng.randint(1, 3)
            sections: list[Section] = []
            for n in range(1, count + 1):
                label = f"{n:03d}"
                lecture_id = f"{course.id}-{label}"
                lab_id = f"{lecture_id}L"
                capacity, enrolled = self._capacity()
                sections.append(Section(
                    id=lecture_id,
                    course_id=course.id,
                    section=label,
                    meetings=self._random_meetings(),
                    term_id=self.term_id,
                    instructor=self.rng.choice(_INSTRUCTORS),
                    capacity=capacity,
                    enrolled=enrolled,
                    linked_with=lab_id if with_lab else None,
                ))
                if with_lab:
                    day, start, end = self.rng.choice(_LAB_SLOTS)
                    sections.append(Section(
                        id=lab_id,
                        course_id=course.id,
                        section=f"{label}L",
                        meetings=[Meeting(day=day, start=start, end=end)],
                        term_id=self.term_id,
                        capacity=capacity // 2,
                        enrolled=min(enrolled, capacity // 2),
                        linked_with=lecture_id,
                    ))
            sections_by_course[course.id] = sections
        return sections_by_course

    # ─── Anforderungsgruppen ──────────────────────────────────────────────────

    def _generate_groups(self, courses: list[Course]) -> list[RequirementGroupInput]:
        ids = [c.id for c in courses]
        self.rng.shuffle(ids)
        core, choose, credits, elective = ids[0:2], ids[2:6], ids[6:10], ids[10:13]
        groups = [
            RequirementGroupInput(
                group_id="core", group_title="Business Core",
                candidate_course_ids=core, type="allOf", needed=len(core),
            ),
            RequirementGroupInput(
                group_id="quant", group_title="Quantitative Reasoning",
                candidate_course_ids=choose, type="chooseN", needed=1,
            ),
            RequirementGroupInput(
                group_id="depth", group_title="Major Depth",
                candidate_course_ids=credits, type="minCredits", needed=3,
            ),
        ]
        if elective:
            groups.append(RequirementGroupInput(
                group_id="elective", group_title="Free Elective",
                candidate_course_ids=elective, type="anyOf", needed=1,
            ))
        return groups

    # ─── Präferenzen ──────────────────────────────────────────────────────────

    def _generate_preferences(self) -> Preferences:
        blocks = []
        if self.rng.random() < 0.5:
            blocks.append(ProtectedBlock(day="T", start="17:00", end="20:00", label="Work"))
        return Preferences(
            earliest=self.rng.choice([None, "08:00", "09:00"]),
            latest=self.rng.choice([None, "17:00", "18:00"]),
            days_off=self.rng.choice([[], ["F"]]),
            protected_blocks=blocks,
            target_credits=15,
            fridays=self.rng.choice(list(FridayPreference)),
        )

    # ─── Gesamt ───────────────────────────────────────────────────────────────

    def generate(self) -> PlanRequest:
        """Erzeugt den vollständigen Datensatz als PlanRequest."""
        courses = self._generate_courses()
        sections_by_course = self._generate_sections(courses)
        groups = self._generate_groups(courses)
        prefs = self._generate_preferences()

        interest_tags = {tag: round(self.rng.uniform(0.2, 1.0), 2) for tag in _TAGS}
        required = {
            cid for g in groups if g.type == "allOf" for cid in g.candidate_course_ids
        }

        request = PlanRequest(
            remaining_by_group=groups,
            sections_by_course=sections_by_course,
            prefs=prefs,
            courses=courses,
            required_course_ids=required,
            interest_by_course=build_interest_map(courses, interest_tags),
            target_credits=prefs.target_credits or 15,
        )
        logger.debug(
            f"Fake-Katalog: {len(courses)} Kurse, "
            f"{sum(len(s) for s in sections_by_course.values())} Abschnitte, "
            f"{len(groups)} Gruppen"
        )
        return request

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, request: PlanRequest) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        sections = [s for ss in request.sections_by_course.values() for s in ss]
        labs = sum(1 for s in sections if s.section.endswith("L"))
        full = sum(1 for s in sections if s.is_full)

        console = Console()
        table = Table(title="Erzeugter Katalog", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        table.add_row("Kurse", str(len(request.courses)),
                      f"{len(request.required_course_ids)} Pflicht")
        table.add_row("Abschnitte", str(len(sections)),
                      f"{labs} Labore, {full} ausgebucht")
        table.add_row("Anforderungsgruppen", str(len(request.remaining_by_group)),
                      ", ".join(g.group_id for g in request.remaining_by_group))
        table.add_row("Ziel-Credits", f"{request.target_credits:g}", "")
        console.print(table)
