"""Stundenplan-Präferenzen eines Studierenden (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from models.timeslot import TimeRange, TimeSlot, day_index, to_minutes


class FridayPreference(str, Enum):
    AVOID = "avoid"
    NEUTRAL = "neutral"
    PREFER = "prefer"


class DensityPreference(str, Enum):
    COMPACT = "compact"
    SPREAD = "spread"


class ProtectedBlock(BaseModel):
    """Zeitfenster, das frei von Lehrveranstaltungen bleiben soll (Job, Verein, …)."""

    model_config = ConfigDict(frozen=True)

    day: str
    start: str
    end: str
    label: Optional[str] = None

    @field_validator("day")
    @classmethod
    def check_day(cls, v: str) -> str:
        day_index(v)
        return v

    @field_validator("start", "end")
    @classmethod
    def check_time(cls, v: str) -> str:
        to_minutes(v)
        return v

    @model_validator(mode='after')
    def check_order(self):
        if to_minutes(self.end) <= to_minutes(self.start):
            raise ValueError(
                f"Schutzzeit endet vor Beginn: {self.day} {self.start}-{self.end}"
            )
        return self

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(
            day=day_index(self.day),
            range=TimeRange(to_minutes(self.start), to_minutes(self.end)),
        )


class Preferences(BaseModel):
    """Präferenzen aus Onboarding bzw. Studienberatung.

    min_break_mins ist nur informativ: die Bewertung nutzt eine feste
    Pausenschwelle (ScoringWeights.break_threshold_minutes).
    avoid_prof_ids / prefer_prof_ids / density werden mitgeführt, fließen aber
    nicht in die Bewertung ein.
    """

    model_config = ConfigDict(frozen=True)

    earliest: Optional[str] = None                 # "HH:MM"
    latest: Optional[str] = None                   # "HH:MM"
    days_off: list[str] = []                       # z.B. ["F"]
    protected_blocks: list[ProtectedBlock] = []
    target_credits: Optional[float] = None
    min_break_mins: Optional[int] = None
    avoid_prof_ids: list[str] = []
    prefer_prof_ids: list[str] = []
    density: Optional[DensityPreference] = None
    fridays: FridayPreference = FridayPreference.NEUTRAL

    @field_validator("earliest", "latest")
    @classmethod
    def check_bound(cls, v: Optional[str]) -> Optional[str]:
        if v:
            to_minutes(v)
        return v

    @field_validator("days_off")
    @classmethod
    def check_days_off(cls, v: list[str]) -> list[str]:
        for day in v:
            day_index(day)
        return v

    @model_validator(mode='after')
    def check_window(self):
        if self.earliest and self.latest:
            if to_minutes(self.latest) <= to_minutes(self.earliest):
                raise ValueError(
                    f"latest ({self.latest}) muss nach earliest ({self.earliest}) liegen"
                )
        return self

    @property
    def earliest_minutes(self) -> Optional[int]:
        return to_minutes(self.earliest) if self.earliest else None

    @property
    def latest_minutes(self) -> Optional[int]:
        return to_minutes(self.latest) if self.latest else None

    @property
    def protected_slots(self) -> list[TimeSlot]:
        return [b.slot for b in self.protected_blocks]
