"""Kursplan-Generator — Haupt-CLI.

Verwendung:
  python main.py config init               Default-Konfiguration anlegen
  python main.py config show               Konfiguration anzeigen
  python main.py plan <anfrage.json>       Wochenpläne berechnen
  python main.py plan <anfrage.yaml> -l ID Abschnitt sperren (mehrfach möglich)
  python main.py validate <anfrage.json>   Pläne berechnen und nachprüfen
  python main.py demo                      Synthetischen Katalog planen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_config(config_path: Optional[str]):
    """Lädt die Konfiguration (Defaults ohne Datei) oder bricht ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager(Path(config_path) if config_path else None)
    try:
        return mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


def _load_request_or_abort(path: Path, locks: tuple[str, ...]):
    """Lädt eine PlanRequest; zusätzliche Sperren werden angehängt."""
    from models.plan_request import PlanRequest
    try:
        request = PlanRequest.load(path)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Anfrage ungültig: {path}[/red]\n{escape(str(e))}")
        sys.exit(1)
    if locks:
        request = request.model_copy(
            update={"locked_section_ids": [*request.locked_section_ids, *locks]}
        )
    return request


def _run_generator(request, config):
    from solver.generator import generate_schedules
    from models.timeslot import PlannerInputError
    try:
        return generate_schedules(request, config)
    except PlannerInputError as e:
        console.print(f"[red]Ungültige Eingabe: {escape(str(e))}[/red]")
        sys.exit(1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
@click.pass_context
def config_show(ctx):
    """Zeigt die aktuelle Konfiguration an."""
    config = _load_config(ctx.obj.get("config_path"))

    sc = config.search
    table = Table(title="Suche", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert", justify="right")
    table.add_row("Beam-Breite", str(sc.beam_size))
    table.add_row("Knoten-Budget", str(sc.max_nodes))
    table.add_row("Pläne", str(sc.max_plans))
    table.add_row("Creditpuffer", f"max({sc.credit_buffer_min}, {sc.credit_buffer_ratio:.0%} vom Ziel)")
    table.add_row("Interesse-Default", f"{sc.default_interest:.2f}")
    console.print(table)

    table2 = Table(title="Bewertung", box=box.ROUNDED)
    table2.add_column("Term", style="bold")
    table2.add_column("Gewicht", justify="right")
    for name, value in config.weights.model_dump().items():
        table2.add_row(name, f"{value:g}")
    console.print(table2)


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
@click.pass_context
def config_init(ctx, force: bool):
    """Legt die Default-Konfiguration als YAML an."""
    from config.defaults import default_planner_config
    from config.manager import ConfigManager

    config_path = ctx.obj.get("config_path")
    mgr = ConfigManager(Path(config_path) if config_path else None)
    if not mgr.first_run_check() and not force:
        console.print(
            f"[yellow]Konfiguration existiert bereits: {mgr.DEFAULT_CONFIG}[/yellow]\n"
            "Mit [bold]--force[/bold] überschreiben."
        )
        return
    target = mgr.save(default_planner_config())
    console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")


# ─── PLAN ─────────────────────────────────────────────────────────────────────

@click.command("plan")
@click.argument("anfrage", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--lock", "-l", "locks", multiple=True,
              help="Abschnitts-ID sperren (mehrfach möglich).")
@click.option("--beam-size", type=click.IntRange(min=1), default=None,
              help="Beam-Breite überschreiben.")
@click.option("--max-nodes", type=click.IntRange(min=1), default=None,
              help="Knoten-Budget überschreiben.")
@click.pass_context
def cmd_plan(ctx, anfrage: Path, locks: tuple[str, ...],
             beam_size: Optional[int], max_nodes: Optional[int]):
    """Berechnet bis zu drei konfliktfreie Wochenpläne für eine Anfrage."""
    from export.tui_renderer import print_result

    config = _load_config(ctx.obj.get("config_path"))
    request = _load_request_or_abort(anfrage, locks)
    overrides = {k: v for k, v in (("beam_size", beam_size), ("max_nodes", max_nodes)) if v}
    if overrides:
        request = request.model_copy(update=overrides)

    result = _run_generator(request, config)
    print_result(result, request.by_course_id, console)
    if result.is_empty:
        sys.exit(2)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("anfrage", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--lock", "-l", "locks", multiple=True,
              help="Abschnitts-ID sperren (mehrfach möglich).")
@click.pass_context
def cmd_validate(ctx, anfrage: Path, locks: tuple[str, ...]):
    """Berechnet die Pläne und prüft sie unabhängig nach."""
    from analysis.plan_validator import PlanValidator

    config = _load_config(ctx.obj.get("config_path"))
    request = _load_request_or_abort(anfrage, locks)
    result = _run_generator(request, config)

    report = PlanValidator(config).validate(result, request)
    report.print_rich()
    if not report.is_valid:
        sys.exit(1)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--courses", "num_courses", default=16, type=click.IntRange(min=8),
              help="Anzahl Kurse im Katalog.")
@click.option("--export-json", "json_path", default=None,
              type=click.Path(dir_okay=False, path_type=Path),
              help="Erzeugte Anfrage als JSON speichern.")
@click.pass_context
def cmd_demo(ctx, seed: int, num_courses: int, json_path: Optional[Path]):
    """Erzeugt einen synthetischen Katalog und plant ihn."""
    from data.fake_data import FakeCatalogGenerator
    from analysis.plan_validator import PlanValidator
    from export.tui_renderer import print_result

    config = _load_config(ctx.obj.get("config_path"))
    gen = FakeCatalogGenerator(seed=seed, num_courses=num_courses)
    request = gen.generate()
    gen.print_summary(request)

    if json_path is not None:
        request.save_json(json_path)
        console.print(f"[green]✓[/green] Anfrage gespeichert: {json_path}")

    result = _run_generator(request, config)
    print_result(result, request.by_course_id, console)
    PlanValidator(config).validate(result, request).print_rich()


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Debug-Logging der Suche anzeigen.")
@click.option("--config", "config_path", default=None,
              type=click.Path(dir_okay=False),
              help="Pfad zur Konfigurationsdatei (Default: config/planner_config.yaml).")
@click.pass_context
def cli(ctx, verbose: bool, config_path: Optional[str]):
    """Kursplan-Generator: konfliktfreie Wochenpläne aus offenen Anforderungen.

    Starten Sie mit: python main.py demo
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    _setup_logging(verbose)


def main():
    """Einstiegspunkt."""
    if len(sys.argv) == 1:
        console.print(Panel(
            "[bold]Kursplan-Generator[/bold]\n\n"
            "python main.py plan <anfrage.json>   Pläne berechnen\n"
            "python main.py demo                  Beispiel-Katalog planen",
            border_style="cyan",
        ))
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_plan)
cli.add_command(cmd_validate)
cli.add_command(cmd_demo)


if __name__ == "__main__":
    main()
