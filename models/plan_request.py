"""PlanRequest: alle Eingaben eines Generator-Laufs in einem Objekt (Pydantic v2)."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from ruamel.yaml import YAML

from models.course import Course
from models.preferences import Preferences
from models.requirement import RequirementGroupInput
from models.section import Section


class PlanRequest(BaseModel):
    """Eingabepaket für den Generator.

    Wird vom CLI aus JSON/YAML geladen; innerhalb der Bibliothek kann der
    Generator auch direkt mit den Einzelteilen aufgerufen werden.
    """

    remaining_by_group: list[RequirementGroupInput]
    sections_by_course: dict[str, list[Section]]
    prefs: Preferences = Field(default_factory=Preferences)
    courses: list[Course]
    required_course_ids: set[str] = set()
    interest_by_course: dict[str, float] = {}
    target_credits: float = Field(gt=0)
    beam_size: Optional[int] = Field(None, ge=1)
    max_nodes: Optional[int] = Field(None, ge=1)
    locked_section_ids: list[str] = []

    @model_validator(mode='after')
    def check_section_owners(self):
        """Abschnitte müssen unter ihrem eigenen Kurs einsortiert sein."""
        for course_id, sections in self.sections_by_course.items():
            for section in sections:
                if section.course_id != course_id:
                    raise ValueError(
                        f"Abschnitt {section.id} gehört zu {section.course_id}, "
                        f"ist aber unter {course_id} einsortiert"
                    )
        return self

    @property
    def by_course_id(self) -> dict[str, Course]:
        return {c.id: c for c in self.courses}

    @property
    def section_index(self) -> dict[str, Section]:
        return {
            s.id: s
            for sections in self.sections_by_course.values()
            for s in sections
        }

    # ─── Laden / Speichern ───

    def save_json(self, path: Path) -> None:
        """Speichert die Anfrage als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load(cls, path: Path) -> "PlanRequest":
        """Lädt eine Anfrage aus .json oder .yaml/.yml."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Anfrage-Datei nicht gefunden: {path}")
        if path.suffix.lower() in (".yaml", ".yml"):
            yaml = YAML(typ="safe")
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.load(f)
            return cls.model_validate(raw)
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
