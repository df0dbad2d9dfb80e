from pydantic import BaseModel, Field

from config.defaults import (
    BREAK_THRESHOLD_MINUTES,
    CREDIT_BUFFER_MIN,
    CREDIT_BUFFER_RATIO,
    DEFAULT_BEAM_SIZE,
    DEFAULT_INTEREST,
    DEFAULT_MAX_NODES,
    DEFAULT_MAX_PLANS,
    SCORE_WEIGHTS,
)


# ─── SUCHE ───

class SearchConfig(BaseModel):
    """Parameter der Beam-Suche."""
    # Maximale Anzahl Teilpläne, die nach jeder Gruppe überleben
    beam_size: int = Field(DEFAULT_BEAM_SIZE, ge=1,
        description="Beam-Breite pro Anforderungsgruppe")
    # Globales Budget für erzeugte Suchknoten
    max_nodes: int = Field(DEFAULT_MAX_NODES, ge=1,
        description="Max. erzeugte Suchknoten (gesamte Suche)")
    # Anzahl ausgegebener Pläne (Primär + Alternativen)
    max_plans: int = Field(DEFAULT_MAX_PLANS, ge=1, le=3,
        description="Primärplan + bis zu zwei Alternativen")
    # Mindest-Puffer über der Ziel-Creditzahl
    credit_buffer_min: int = Field(CREDIT_BUFFER_MIN, ge=0,
        description="Mindest-Creditpuffer über dem Ziel")
    # Relativer Puffer (Anteil der Ziel-Credits, gerundet)
    credit_buffer_ratio: float = Field(CREDIT_BUFFER_RATIO, ge=0.0, le=1.0,
        description="Relativer Creditpuffer")
    # Interesse für Kurse ohne Eintrag in interest_by_course
    default_interest: float = Field(DEFAULT_INTEREST, ge=0.0, le=1.0,
        description="Interesse-Default für unbekannte Kurse")

    def credit_buffer(self, target_credits: float) -> int:
        """max(3, round(target * 0.2)) mit den konfigurierten Werten.

        Rundung wie im Katalog üblich: .5 wird aufgerundet.
        """
        scaled = target_credits * self.credit_buffer_ratio
        return max(self.credit_buffer_min, int(scaled + 0.5))

    def credit_cap(self, target_credits: float) -> float:
        return target_credits + self.credit_buffer(target_credits)


# ─── BEWERTUNG ───

class ScoringWeights(BaseModel):
    """Gewichte der Bewertungsfunktion. Strafterme werden abgezogen."""
    coverage: float = Field(SCORE_WEIGHTS["coverage"], ge=0)
    interest: float = Field(SCORE_WEIGHTS["interest"], ge=0)
    time_window: float = Field(SCORE_WEIGHTS["time_window"], ge=0)
    day_off: float = Field(SCORE_WEIGHTS["day_off"], ge=0)
    density: float = Field(SCORE_WEIGHTS["density"], ge=0)
    friday_penalty: float = Field(SCORE_WEIGHTS["friday_penalty"], ge=0)
    break_penalty: float = Field(SCORE_WEIGHTS["break_penalty"], ge=0)
    capacity_penalty: float = Field(SCORE_WEIGHTS["capacity_penalty"], ge=0)
    # Pausen unter dieser Länge (Minuten) gelten als zu knapp
    break_threshold_minutes: int = Field(BREAK_THRESHOLD_MINUTES, ge=0,
        description="Schwelle für zu kurze Pausen (Minuten)")


# ─── GESAMT-CONFIG ───

class PlannerConfig(BaseModel):
    """Gesamtkonfiguration des Generators."""
    search: SearchConfig = Field(default_factory=SearchConfig)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
