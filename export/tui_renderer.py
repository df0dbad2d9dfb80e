"""Terminal-Ausgabe der Wochenpläne (Rich).

Wird von `plan`, `validate` und `demo` verwendet.
"""

from typing import TYPE_CHECKING, Mapping, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.defaults import DAY_CODES, DAY_SHORT_NAMES
from export.helpers import (
    course_code,
    course_count,
    format_meetings,
    format_minutes,
    schedule_credits,
)

if TYPE_CHECKING:
    from models.course import Course
    from models.section import Section
    from solver.generator import ScheduleResult


def render_week_rows(
    sections: list["Section"],
    by_course_id: Mapping[str, "Course"],
) -> list[list[str]]:
    """Gibt Tabellenzeilen für die Wochenansicht eines Plans zurück.

    Jede Zeile: [Zeit, Mo, Di, Mi, Do, Fr]. Eine Zeile pro eindeutigem
    Zeitfenster (Beginn–Ende), aufsteigend nach Beginn.
    """
    cells: dict[tuple[int, int], dict[int, list[str]]] = {}
    for section in sections:
        code = course_code(section, by_course_id)
        label = f"{code} {section.section}".strip()
        for slot in section.slots:
            key = (slot.range.start, slot.range.end)
            cells.setdefault(key, {}).setdefault(slot.day, []).append(label)

    rows: list[list[str]] = []
    for start, end in sorted(cells):
        by_day = cells[(start, end)]
        row = [f"{format_minutes(start)}–{format_minutes(end)}"]
        for day_idx in range(len(DAY_CODES)):
            entries = by_day.get(day_idx)
            row.append("\n".join(entries) if entries else "—")
        rows.append(row)
    return rows


def render_section_rows(
    sections: list["Section"],
    by_course_id: Mapping[str, "Course"],
    explanations: Optional[Mapping[str, str]] = None,
) -> list[list[str]]:
    """Listenansicht: [Kurs, Abschnitt, Termine, Credits, Begründung]."""
    explanations = explanations or {}
    rows: list[list[str]] = []
    for section in sections:
        course = by_course_id.get(section.course_id)
        credits = f"{course.credits:g}" if course is not None else "?"
        rows.append([
            course_code(section, by_course_id),
            section.section or section.id,
            format_meetings(section),
            credits,
            explanations.get(section.course_id, ""),
        ])
    return rows


def print_result(
    result: "ScheduleResult",
    by_course_id: Mapping[str, "Course"],
    console: Optional[Console] = None,
) -> None:
    """Gibt Primärplan und Alternativen als Rich-Tabellen aus."""
    console = console or Console()

    if result.is_empty:
        if result.lock_conflicts:
            table = Table(title="Gesperrte Abschnitte nicht planbar", box=box.ROUNDED)
            table.add_column("Kurs", style="bold")
            table.add_column("Grund")
            for course_id, message in result.lock_conflicts.items():
                table.add_row(course_id, message)
            console.print(table)
        else:
            console.print(Panel(
                "Die offenen Anforderungen lassen sich mit den aktuellen "
                "Präferenzen nicht gemeinsam erfüllen.",
                title="Kein Plan gefunden",
                border_style="red",
            ))
        return

    for number, (schedule, score) in enumerate(zip(result.schedules, result.scores), start=1):
        title = "Primärplan" if number == 1 else f"Alternative {number - 1}"
        console.print(Panel(
            f"Score: [bold]{score:.3f}[/bold] | "
            f"Kurse: {course_count(schedule)} | "
            f"Credits: {schedule_credits(schedule, by_course_id):g}",
            title=title,
            border_style="cyan" if number == 1 else "dim",
        ))

        week = Table(box=box.SIMPLE_HEAVY)
        week.add_column("Zeit", style="bold")
        for short in DAY_SHORT_NAMES:
            week.add_column(short, justify="center")
        for row in render_week_rows(schedule, by_course_id):
            week.add_row(*row)
        console.print(week)

        if number == 1:
            details = Table(box=box.ROUNDED, show_lines=True)
            details.add_column("Kurs", style="bold")
            details.add_column("Abschn.")
            details.add_column("Termine")
            details.add_column("Cr.", justify="right")
            details.add_column("Begründung")
            for row in render_section_rows(schedule, by_course_id, result.explanations):
                details.add_row(*row)
            console.print(details)

    if result.lock_conflicts:
        console.print("[yellow]Hinweise zu gesperrten Abschnitten:[/yellow]")
        for course_id, message in result.lock_conflicts.items():
            console.print(f"  [bold]{course_id}[/bold]: {message}")

    if result.budget_exhausted:
        console.print(
            f"[yellow]Knoten-Budget ausgeschöpft ({result.nodes_generated} Knoten) – "
            f"Ergebnis ist best effort.[/yellow]"
        )
