"""Nachträgliche Validierung der erzeugten Stundenpläne.

Prüft jedes Ergebnis des Generators unabhängig von der Suche auf
Zeitkonflikte, Creditgrenze, Sperren und Rangfolge.
"""

from typing import Literal, Optional

from pydantic import BaseModel

from config.schema import PlannerConfig
from models.plan_request import PlanRequest
from models.section import Section
from solver.conflicts import format_section_label, sections_overlap, violates_protected_block
from solver.generator import ScheduleResult


class ValidationViolation(BaseModel):
    """Eine einzelne Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "section_overlap"
    description: str
    entity: str          # "Plan 1", Kurs-ID oder Abschnitts-ID


class ValidationReport(BaseModel):
    """Ergebnis der Plan-Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(self.errors)} | Warnungen: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Plan-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=24)
        table.add_column("Entität", width=14)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class PlanValidator:
    """Prüft ein ScheduleResult gegen die zugehörige PlanRequest."""

    def __init__(self, config: Optional[PlannerConfig] = None) -> None:
        self.config = config or PlannerConfig()

    def validate(self, result: ScheduleResult, request: PlanRequest) -> ValidationReport:
        """Führt alle Prüfungen durch und gibt einen ValidationReport zurück."""
        violations: list[ValidationViolation] = []

        if result.is_empty:
            violations.extend(self._check_empty_result(result))
            return ValidationReport(violations=violations, is_valid=True)

        schedules = result.schedules
        for number, schedule in enumerate(schedules, start=1):
            label = f"Plan {number}"
            violations.extend(self._check_overlaps(schedule, request, label))
            violations.extend(self._check_protected_blocks(schedule, request, label))
            violations.extend(self._check_linked_sections(schedule, request, label))
            violations.extend(self._check_credit_cap(schedule, request, label))
            violations.extend(self._check_locks(schedule, request, label))

        violations.extend(self._check_scores(result))
        violations.extend(self._check_distinct_course_sets(schedules))
        violations.extend(self._check_lock_notes(result))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_empty_result(self, result: ScheduleResult) -> list[ValidationViolation]:
        if result.lock_conflicts:
            return [
                ValidationViolation(
                    severity="warning",
                    constraint="lock_conflict",
                    entity=course_id,
                    description=message,
                )
                for course_id, message in result.lock_conflicts.items()
            ]
        return [ValidationViolation(
            severity="warning",
            constraint="no_plan",
            entity="-",
            description="Anforderungen sind mit den Präferenzen nicht gemeinsam erfüllbar.",
        )]

    def _check_overlaps(
        self, schedule: list[Section], request: PlanRequest, label: str
    ) -> list[ValidationViolation]:
        """Keine zwei Abschnitte eines Plans dürfen sich überschneiden."""
        violations: list[ValidationViolation] = []
        by_course_id = request.by_course_id
        for i, a in enumerate(schedule):
            for b in schedule[i + 1:]:
                if sections_overlap(a, b):
                    violations.append(ValidationViolation(
                        severity="error",
                        constraint="section_overlap",
                        entity=label,
                        description=(
                            f"{format_section_label(a, by_course_id)} überschneidet sich mit "
                            f"{format_section_label(b, by_course_id)}."
                        ),
                    ))
        return violations

    def _check_protected_blocks(
        self, schedule: list[Section], request: PlanRequest, label: str
    ) -> list[ValidationViolation]:
        return [
            ValidationViolation(
                severity="error",
                constraint="protected_block",
                entity=label,
                description=f"Abschnitt {s.id} liegt in einer Schutzzeit.",
            )
            for s in schedule
            if violates_protected_block(s, request.prefs)
        ]

    def _check_linked_sections(
        self, schedule: list[Section], request: PlanRequest, label: str
    ) -> list[ValidationViolation]:
        """Verknüpfte Partner müssen immer mitgeplant sein."""
        violations: list[ValidationViolation] = []
        ids = {s.id for s in schedule}
        index = request.section_index
        for s in schedule:
            if s.linked_with and s.linked_with in index and s.linked_with not in ids:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="linked_section_missing",
                    entity=label,
                    description=f"Abschnitt {s.id} ohne verknüpften Partner {s.linked_with}.",
                ))
        return violations

    def _check_credit_cap(
        self, schedule: list[Section], request: PlanRequest, label: str
    ) -> list[ValidationViolation]:
        by_course_id = request.by_course_id
        courses = {s.course_id for s in schedule}
        credits = sum(by_course_id[c].credits for c in courses if c in by_course_id)
        cap = self.config.search.credit_cap(request.target_credits)
        if credits > cap:
            return [ValidationViolation(
                severity="error",
                constraint="credit_cap",
                entity=label,
                description=f"{credits:g} Credits > Grenze {cap:g}.",
            )]
        return []

    def _check_locks(
        self, schedule: list[Section], request: PlanRequest, label: str
    ) -> list[ValidationViolation]:
        """Die erste Sperre pro Kurs muss im Plan enthalten sein."""
        violations: list[ValidationViolation] = []
        ids = {s.id for s in schedule}
        index = request.section_index
        locked_courses: set[str] = set()
        for section_id in request.locked_section_ids:
            section = index.get(section_id)
            if section is None or section.course_id in locked_courses:
                continue
            locked_courses.add(section.course_id)
            if section_id not in ids:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="lock_not_honoured",
                    entity=label,
                    description=f"Gesperrter Abschnitt {section_id} fehlt.",
                ))
        return violations

    def _check_scores(self, result: ScheduleResult) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        expected = 1 + len(result.backups)
        if len(result.scores) != expected:
            violations.append(ValidationViolation(
                severity="error",
                constraint="score_count",
                entity="-",
                description=f"{len(result.scores)} Scores für {expected} Pläne.",
            ))
        for i in range(1, len(result.scores)):
            if result.scores[i] > result.scores[i - 1]:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="score_order",
                    entity=f"Plan {i + 1}",
                    description=(
                        f"Score {result.scores[i]:.3f} höher als Vorgänger "
                        f"{result.scores[i - 1]:.3f}."
                    ),
                ))
        return violations

    def _check_distinct_course_sets(
        self, schedules: list[list[Section]]
    ) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        seen: dict[frozenset[str], int] = {}
        for number, schedule in enumerate(schedules, start=1):
            key = frozenset(s.course_id for s in schedule)
            if key in seen:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="duplicate_course_set",
                    entity=f"Plan {number}",
                    description=f"Gleiche Kursmenge wie Plan {seen[key]}.",
                ))
            else:
                seen[key] = number
        return violations

    def _check_lock_notes(self, result: ScheduleResult) -> list[ValidationViolation]:
        """Sperren mit Präferenz-Konflikten, die trotzdem eingeplant wurden."""
        return [
            ValidationViolation(
                severity="warning",
                constraint="lock_preference",
                entity=course_id,
                description=message,
            )
            for course_id, message in result.lock_conflicts.items()
        ]
