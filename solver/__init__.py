"""Solver-Modul: Beam-Suche, Zeitkonflikte, Bewertung, Sperren."""

from .generator import ScheduleGenerator, ScheduleResult, generate_schedules
from .scoring import ScoreBreakdown, score_schedule
from .beam import BeamNode, SearchContext
from .worker import BackgroundGenerator, PlanTicket, StaleRequestError

__all__ = [
    "ScheduleGenerator",
    "ScheduleResult",
    "generate_schedules",
    "ScoreBreakdown",
    "score_schedule",
    "BeamNode",
    "SearchContext",
    "BackgroundGenerator",
    "PlanTicket",
    "StaleRequestError",
]
