"""Konfigurationsmanager: Laden, Speichern und Validieren der Planer-Config.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_planner_config
from config.schema import PlannerConfig

logger = logging.getLogger(__name__)

yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

def _yaml_header() -> str:
    return (
        "# ============================================\n"
        "# Kursplan-Generator — Planer-Konfiguration\n"
        f"# Erstellt: {date.today().isoformat()}\n"
        "# ============================================\n"
    )


_SECTION_COMMENTS = {
    "search": (
        "Suche",
        "Beam-Breite, Knoten-Budget und Creditpuffer (max(3, round(Ziel * 0.2))).",
    ),
    "weights": (
        "Bewertung",
        "Gewichte: höher = stärker gewichtet. 0 = deaktiviert.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "planner_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is not None:
            self.DEFAULT_CONFIG = Path(path)

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> PlannerConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return PlannerConfig.model_validate(dict(raw or {}))
        except (ValidationError, TypeError, ValueError) as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> PlannerConfig:
        """Wie load(), aber Default-Config wenn keine Datei existiert."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if not target.exists():
            logger.debug(f"Keine Konfiguration unter {target}, nutze Defaults")
            return default_planner_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: PlannerConfig, path: Optional[Path] = None) -> Path:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_yaml_header() + "\n")
            yaml.dump(data, f)

        logger.info(f"Konfiguration gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: PlannerConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        search_map = CommentedMap(cm["search"])
        search_map.yaml_add_eol_comment("Knoten pro Gruppe", "beam_size")
        search_map.yaml_add_eol_comment("Budget für die gesamte Suche", "max_nodes")
        cm["search"] = search_map

        weights_map = CommentedMap(cm["weights"])
        weights_map.yaml_add_eol_comment("Minuten", "break_threshold_minutes")
        cm["weights"] = weights_map

        return cm
