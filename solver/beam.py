"""Unveränderliche Suchknoten und Suchkontext der Beam-Suche.

Ein BeamNode wird nie verändert: Erweitern erzeugt immer einen neuen Knoten.
Geschwister-Zweige teilen sich dadurch nur unveränderliche Daten.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from models.section import Section


def _frozen_mapping(values: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class BeamNode:
    """Teilplan: gewählte Abschnitte, erfüllte Kurse, Credits, Gruppenfortschritt."""

    sections: tuple[Section, ...] = ()
    selected_courses: frozenset[str] = frozenset()
    credits: float = 0.0
    group_progress: Mapping[str, float] = field(
        default_factory=lambda: _frozen_mapping({})
    )
    score: float = 0.0

    @classmethod
    def empty(cls, group_ids: Iterable[str]) -> "BeamNode":
        return cls(group_progress=_frozen_mapping({gid: 0 for gid in group_ids}))

    def progress(self, group_id: str) -> float:
        return self.group_progress.get(group_id, 0)

    def has_section(self, section_id: str) -> bool:
        return any(s.id == section_id for s in self.sections)

    def with_section(
        self,
        section: Section,
        credits: float = 0.0,
        progress_delta: Optional[Mapping[str, float]] = None,
    ) -> "BeamNode":
        """Neuer Knoten mit zusätzlichem Abschnitt.

        credits/progress_delta nur beim ersten Abschnitt eines Kurses angeben;
        weitere Abschnitte desselben Kurses (Labor) zählen nicht doppelt.
        """
        selected = self.selected_courses
        progress = self.group_progress
        total = self.credits
        if section.course_id not in selected:
            selected = selected | {section.course_id}
            total = total + credits
            if progress_delta:
                merged = dict(progress)
                for gid, delta in progress_delta.items():
                    merged[gid] = merged.get(gid, 0) + delta
                progress = _frozen_mapping(merged)
        return replace(
            self,
            sections=self.sections + (section,),
            selected_courses=selected,
            credits=total,
            group_progress=progress,
        )

    def with_score(self, score: float) -> "BeamNode":
        return replace(self, score=score)

    @property
    def section_signature(self) -> str:
        """Signatur über die exakte Abschnittsmenge."""
        return "|".join(sorted(s.id for s in self.sections))

    @property
    def course_signature(self) -> str:
        """Signatur über die Kursmenge (ignoriert Abschnittswahl)."""
        return "|".join(sorted(self.selected_courses))


@dataclass
class SearchContext:
    """Zählt erzeugte Knoten gegen das globale Budget max_nodes.

    Gehört genau einem generate()-Aufruf; kein globaler Zustand.
    """

    max_nodes: int
    nodes_generated: int = 0

    @property
    def exhausted(self) -> bool:
        return self.nodes_generated >= self.max_nodes

    def count_node(self) -> None:
        self.nodes_generated += 1
