"""Standardwerte für den Kursplan-Generator.

Enthält Wochentags-Codes, Bezeichnungen sowie Fabrikfunktionen für die
Default-Konfiguration von Suche und Bewertung.
"""

# ─── WOCHENTAGE ───
# Einbuchstaben-Codes wie im Vorlesungsverzeichnis (R = Thursday)
DAY_CODES: tuple[str, ...] = ("M", "T", "W", "R", "F")

DAY_NAMES: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
)

DAY_SHORT_NAMES: tuple[str, ...] = ("Mo", "Di", "Mi", "Do", "Fr")

FRIDAY = "F"

# ─── GRUPPENTYPEN ───
# Nur anyOf gilt als optional, alle anderen Gruppen sind Pflicht.
GROUP_TYPES: tuple[str, ...] = ("allOf", "anyOf", "chooseN", "minCredits", "minCount")
OPTIONAL_GROUP_TYPES: frozenset[str] = frozenset({"anyOf"})
CREDIT_METRIC_GROUP_TYPES: frozenset[str] = frozenset({"minCredits"})

# ─── SUCHE ───
DEFAULT_BEAM_SIZE = 6
DEFAULT_MAX_NODES = 2000
DEFAULT_MAX_PLANS = 3
DEFAULT_INTEREST = 0.5
CREDIT_BUFFER_MIN = 3
CREDIT_BUFFER_RATIO = 0.2

# ─── BEWERTUNG ───
BREAK_THRESHOLD_MINUTES = 15

SCORE_WEIGHTS: dict[str, float] = {
    "coverage": 6.0,
    "interest": 3.0,
    "time_window": 3.0,
    "day_off": 2.0,
    "density": 1.0,
    "friday_penalty": 2.0,
    "break_penalty": 2.0,
    "capacity_penalty": 1.0,
}


def default_search_config():
    from config.schema import SearchConfig
    return SearchConfig()


def default_scoring_weights():
    from config.schema import ScoringWeights
    return ScoringWeights(**SCORE_WEIGHTS)


def default_planner_config():
    """Vollständige Default-Konfiguration (Suche + Gewichte)."""
    from config.schema import PlannerConfig
    return PlannerConfig(
        search=default_search_config(),
        weights=default_scoring_weights(),
    )
