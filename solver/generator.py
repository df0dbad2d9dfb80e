"""Beam-Suche über Kursabschnitte: erzeugt bis zu drei konfliktfreie Wochenpläne.

Ablauf:
  1. Gesperrte Abschnitte (inkl. verknüpfter Partner) in den Startknoten legen.
     Scheitert das, bricht die Suche ab und meldet nur lock_conflicts.
  2. Anforderungsgruppen in fester Reihenfolge abarbeiten (Pflicht zuerst,
     dann kleiner Kandidaten-Pool, dann Gruppen-ID). Pro Gruppe werden alle
     Knoten rekursiv erweitert, nach Abschnittsmenge dedupliziert, bewertet
     und auf beam_size gekürzt.
  3. Am Ende nach Kursmenge deduplizieren und die besten max_plans wählen.

Die Suche ist deterministisch und zustandslos: alle Zähler leben in einem
SearchContext pro Aufruf, Knoten sind unveränderlich.
"""

import logging
import time
from typing import Mapping, Optional

from pydantic import BaseModel

from config.defaults import DAY_CODES
from config.schema import PlannerConfig, SearchConfig, ScoringWeights
from models.course import Course
from models.plan_request import PlanRequest
from models.preferences import Preferences
from models.requirement import RequirementGroupInput
from models.section import Section
from models.timeslot import PlannerInputError
from solver.beam import BeamNode, SearchContext
from solver.conflicts import (
    gather_linked_group,
    has_conflict,
    violates_protected_block,
)
from solver.explanation import build_explanations
from solver.locking import (
    FALLBACK_REASON,
    LockedGroup,
    additional_credits,
    collect_group_conflicts,
    resolve_locked_groups,
)
from solver.scoring import score_schedule

logger = logging.getLogger(__name__)

_MINUTES_PER_DAY = 1440


# ─── Ergebnis-Modell ──────────────────────────────────────────────────────────

class ScheduleResult(BaseModel):
    """Ergebnis eines Generator-Laufs.

    Leerer Primärplan + nicht-leere lock_conflicts: Sperren sind unvereinbar.
    Leerer Primärplan + leere lock_conflicts: Anforderungen sind unter den
    aktuellen Präferenzen nicht gemeinsam erfüllbar.
    """

    primary: list[Section] = []
    backups: list[list[Section]] = []
    scores: list[float] = []
    explanations: dict[str, str] = {}
    lock_conflicts: dict[str, str] = {}
    nodes_generated: int = 0
    budget_exhausted: bool = False

    @property
    def schedules(self) -> list[list[Section]]:
        """Primärplan und Alternativen (leer, wenn kein Plan existiert)."""
        if not self.primary:
            return []
        return [self.primary, *self.backups]

    @property
    def is_empty(self) -> bool:
        return not self.primary

    @property
    def locks_unsatisfiable(self) -> bool:
        return not self.primary and bool(self.lock_conflicts)


def sort_groups(groups: list[RequirementGroupInput]) -> list[RequirementGroupInput]:
    """Pflichtgruppen zuerst, dann kleinerer Pool, dann Gruppen-ID."""
    return sorted(
        groups,
        key=lambda g: (not g.is_required, len(g.candidate_course_ids), g.group_id),
    )


def presentation_key(section: Section) -> int:
    """Sortierschlüssel (Wochentag, Beginn) des ersten Termins."""
    if not section.meetings:
        return len(DAY_CODES) * _MINUTES_PER_DAY
    first = section.slots[0]
    return first.day * _MINUTES_PER_DAY + first.range.start


# ─── Haupt-Generator ──────────────────────────────────────────────────────────

class ScheduleGenerator:
    """Beam-Suche über Anforderungsgruppen.

    Verwendung:
        generator = ScheduleGenerator(remaining_by_group=..., ...)
        result = generator.generate()
    """

    def __init__(
        self,
        remaining_by_group: list[RequirementGroupInput],
        sections_by_course: Mapping[str, list[Section]],
        prefs: Preferences,
        required_course_ids: set[str],
        interest_by_course: Mapping[str, float],
        by_course_id: Mapping[str, Course],
        target_credits: float,
        beam_size: Optional[int] = None,
        max_nodes: Optional[int] = None,
        locked_section_ids: Optional[list[str]] = None,
        config: Optional[PlannerConfig] = None,
    ) -> None:
        config = config or PlannerConfig()
        self.search: SearchConfig = config.search
        self.weights: ScoringWeights = config.weights

        self.beam_size = beam_size if beam_size is not None else self.search.beam_size
        self.max_nodes = max_nodes if max_nodes is not None else self.search.max_nodes
        if self.beam_size < 1:
            raise PlannerInputError(f"beam_size muss >= 1 sein, nicht {self.beam_size}")
        if self.max_nodes < 1:
            raise PlannerInputError(f"max_nodes muss >= 1 sein, nicht {self.max_nodes}")
        if target_credits < 0:
            raise PlannerInputError(f"target_credits darf nicht negativ sein: {target_credits}")

        self.groups = list(remaining_by_group)
        self.sections_by_course = sections_by_course
        self.prefs = prefs
        self.required_course_ids = set(required_course_ids)
        self.interest_by_course = interest_by_course
        self.by_course_id = by_course_id
        self.target_credits = target_credits
        self.credit_cap = self.search.credit_cap(target_credits)
        self.locked_section_ids = list(locked_section_ids or [])

        # Lookup-Strukturen
        self.section_index: dict[str, Section] = {
            s.id: s for sections in sections_by_course.values() for s in sections
        }
        self.course_to_groups: dict[str, list[RequirementGroupInput]] = {}
        for group in self.groups:
            for course_id in group.candidate_course_ids:
                self.course_to_groups.setdefault(course_id, []).append(group)

        self._ctx = SearchContext(max_nodes=self.max_nodes)

    @classmethod
    def from_request(
        cls, request: PlanRequest, config: Optional[PlannerConfig] = None
    ) -> "ScheduleGenerator":
        return cls(
            remaining_by_group=request.remaining_by_group,
            sections_by_course=request.sections_by_course,
            prefs=request.prefs,
            required_course_ids=request.required_course_ids,
            interest_by_course=request.interest_by_course,
            by_course_id=request.by_course_id,
            target_credits=request.target_credits,
            beam_size=request.beam_size,
            max_nodes=request.max_nodes,
            locked_section_ids=request.locked_section_ids,
            config=config,
        )

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def interest_of(self, course_id: str) -> float:
        return self.interest_by_course.get(course_id, self.search.default_interest)

    def generate(self) -> ScheduleResult:
        """Führt die komplette Suche aus. Wirft nur bei fehlerhaften Eingaben."""
        t0 = time.time()
        self._ctx = SearchContext(max_nodes=self.max_nodes)

        seed, locked = self._seed_locked()
        lock_conflicts = self._lock_conflicts(locked)
        if seed is None:
            logger.warning(
                f"Sperren nicht erfüllbar, Suche abgebrochen: {sorted(lock_conflicts)}"
            )
            return self._empty(lock_conflicts)

        for group in self.groups:
            if group.is_required and not group.candidate_course_ids and group.needed > 0:
                logger.warning(
                    f"Pflichtgruppe '{group.group_id}' ohne Kandidaten – kein Plan möglich"
                )
                return self._empty(lock_conflicts)

        beam: list[BeamNode] = [seed]
        for group in sort_groups(self.groups):
            beam = self._expand_group(group, beam)
            logger.debug(
                f"Gruppe '{group.group_id}': {len(beam)} Knoten im Beam | "
                f"erzeugt: {self._ctx.nodes_generated}/{self.max_nodes}"
            )
            if not beam:
                logger.info(f"Gruppe '{group.group_id}' nicht erfüllbar – kein Plan")
                return self._empty(lock_conflicts)

        final_nodes = self._dedupe_by_courses(beam)
        top = final_nodes[: self.search.max_plans]

        primary_node = top[0]
        if not primary_node.sections:
            logger.info("Keine offenen Gruppen und keine Sperren – leerer Plan")
            return self._empty(lock_conflicts)

        explanations = build_explanations(
            primary_node.sections, self.groups, self.interest_of, self.prefs
        )
        schedules = [
            sorted(node.sections, key=presentation_key) for node in top
        ]

        elapsed = time.time() - t0
        logger.info(
            f"Generator beendet: {len(top)} Pläne | "
            f"Knoten: {self._ctx.nodes_generated}/{self.max_nodes} | "
            f"Zeit: {elapsed:.3f}s"
        )
        if self._ctx.exhausted:
            logger.warning("Knoten-Budget ausgeschöpft – Ergebnis ist best effort")

        return ScheduleResult(
            primary=schedules[0],
            backups=schedules[1:],
            scores=[node.score for node in top],
            explanations=explanations,
            lock_conflicts=lock_conflicts,
            nodes_generated=self._ctx.nodes_generated,
            budget_exhausted=self._ctx.exhausted,
        )

    # ─── Knoten erweitern ─────────────────────────────────────────────────────

    def _add_sections(
        self, node: BeamNode, sections: list[Section]
    ) -> Optional[BeamNode]:
        """Fügt eine verknüpfte Gruppe atomar hinzu oder gibt None zurück.

        Abgelehnt wird bei Überschneidung, Schutzzeit-Verletzung oder wenn
        die Credits über target + Puffer steigen.
        """
        nxt = node
        for section in sections:
            if nxt.has_section(section.id):
                continue
            if violates_protected_block(section, self.prefs):
                return None
            if has_conflict(nxt.sections, section):
                return None

            credits = 0.0
            delta: dict[str, float] = {}
            if section.course_id not in nxt.selected_courses:
                course = self.by_course_id.get(section.course_id)
                credits = course.credits if course is not None else 0.0
                for group in self.course_to_groups.get(section.course_id, []):
                    step = credits if group.counts_credits else 1
                    delta[group.group_id] = delta.get(group.group_id, 0) + step
            nxt = nxt.with_section(section, credits=credits, progress_delta=delta)

        if nxt.credits > self.credit_cap:
            return None
        return nxt

    def _expand_with_course(self, node: BeamNode, course_id: str) -> list[BeamNode]:
        """Alle zulässigen Erweiterungen eines Knotens um einen Kurs."""
        if course_id in node.selected_courses:
            return [node]

        results: list[BeamNode] = []
        for section in self.sections_by_course.get(course_id, []):
            linked = gather_linked_group(section, self.section_index)
            added = self._add_sections(node, linked)
            if added is not None:
                results.append(added)
        return results

    def _score(self, node: BeamNode) -> BeamNode:
        total, _ = score_schedule(
            list(node.sections),
            self.prefs,
            self.required_course_ids,
            self.interest_of,
            self.by_course_id,
            self.weights,
        )
        return node.with_score(total)

    def _remaining_need(self, node: BeamNode, group: RequirementGroupInput) -> float:
        return max(0, group.needed - node.progress(group.group_id))

    def _expand_group(
        self, group: RequirementGroupInput, beam: list[BeamNode]
    ) -> list[BeamNode]:
        """Erweitert jeden Knoten des Beams um die Kurse einer Gruppe."""
        next_beam: list[BeamNode] = []
        visited: set[str] = set()
        candidates = group.candidate_course_ids

        def record(node: BeamNode) -> None:
            signature = node.section_signature
            if signature in visited:
                return
            visited.add(signature)
            next_beam.append(self._score(node))
            self._ctx.count_node()

        def process(base: BeamNode, need: float, start: int) -> None:
            if self._ctx.exhausted:
                return
            if need <= 0 or start >= len(candidates):
                record(base)
                return
            for i in range(start, len(candidates)):
                if self._ctx.exhausted:
                    break
                for addition in self._expand_with_course(base, candidates[i]):
                    process(addition, self._remaining_need(addition, group), i + 1)

        for node in beam:
            need = self._remaining_need(node, group)
            if need <= 0 or self._ctx.exhausted:
                # Gruppe schon erfüllt bzw. Budget verbraucht: unverändert weiter
                next_beam.append(self._score(node))
                continue
            process(node, need, 0)

        # sorted() ist stabil: Gleichstände behalten die Fundreihenfolge
        next_beam = sorted(next_beam, key=lambda n: n.score, reverse=True)
        return next_beam[: self.beam_size]

    def _dedupe_by_courses(self, beam: list[BeamNode]) -> list[BeamNode]:
        """Bester Knoten pro Kursmenge, absteigend nach Score."""
        best: dict[str, BeamNode] = {}
        for node in beam:
            node = self._score(node)
            signature = node.course_signature
            if signature not in best or best[signature].score < node.score:
                best[signature] = node
        return sorted(best.values(), key=lambda n: n.score, reverse=True)

    # ─── Sperren ──────────────────────────────────────────────────────────────

    def _seed_locked(self) -> tuple[Optional[BeamNode], list[LockedGroup]]:
        """Legt alle gesperrten Gruppen in den Startknoten.

        Gibt (None, Gruppen) zurück, sobald eine Gruppe nicht passt. Die Gründe
        werden vor jedem Versuch vollständig gesammelt.
        """
        locked = resolve_locked_groups(
            self.locked_section_ids, self.section_index, self.by_course_id
        )
        base = BeamNode.empty(g.group_id for g in self.groups)

        for group in locked:
            group.add_reasons(collect_group_conflicts(
                group.sections, base.sections, self.prefs, self.by_course_id
            ))
            extra = additional_credits(group, base.selected_courses, self.by_course_id)
            if base.credits + extra > self.credit_cap:
                group.add_reason("Exceeds target credit preference")

            seeded = self._add_sections(base, group.sections)
            if seeded is None:
                if not group.reasons:
                    group.add_reason(FALLBACK_REASON)
                return None, locked
            base = seeded

        return base, locked

    @staticmethod
    def _lock_conflicts(locked: list[LockedGroup]) -> dict[str, str]:
        return {g.course_id: g.message for g in locked if g.reasons}

    def _empty(self, lock_conflicts: dict[str, str]) -> ScheduleResult:
        return ScheduleResult(
            lock_conflicts=lock_conflicts,
            nodes_generated=self._ctx.nodes_generated,
            budget_exhausted=self._ctx.exhausted,
        )


def generate_schedules(
    request: PlanRequest, config: Optional[PlannerConfig] = None
) -> ScheduleResult:
    """Funktionaler Einstiegspunkt: PlanRequest → ScheduleResult."""
    return ScheduleGenerator.from_request(request, config).generate()
