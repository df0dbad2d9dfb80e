"""Datenmodell für Kursabschnitte und ihre Wochentermine (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator, model_validator

from models.timeslot import TimeRange, TimeSlot, day_index, to_minutes


class Meeting(BaseModel):
    """Ein wöchentlicher Termin eines Abschnitts."""

    model_config = ConfigDict(frozen=True)

    day: str      # M, T, W, R, F
    start: str    # "HH:MM"
    end: str      # "HH:MM"

    _slot: TimeSlot = PrivateAttr()

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
                f"Termin endet vor Beginn: {self.day} {self.start}-{self.end}"
            )
        return self

    def model_post_init(self, __context) -> None:
        # Einmal parsen, die Suche fragt die Termine sehr oft ab
        self._slot = TimeSlot(
            day=day_index(self.day),
            range=TimeRange(to_minutes(self.start), to_minutes(self.end)),
        )

    @property
    def slot(self) -> TimeSlot:
        return self._slot


class Section(BaseModel):
    """Ein belegbarer Abschnitt eines Kurses (z.B. Vorlesung 001 oder Labor 01L).

    Abschnitte mit linked_with bilden eine Gruppe (Vorlesung + Labor), die
    nur gemeinsam belegt werden kann.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    course_id: str
    section: str = ""                  # Anzeige-Label, z.B. "001"
    meetings: list[Meeting]
    term_id: str
    instructor: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    enrolled: Optional[int] = None
    linked_with: Optional[str] = None  # Partner-Abschnitt (Vorlesung/Labor)

    @property
    def slots(self) -> list[TimeSlot]:
        """Alle Termine als geparste TimeSlots."""
        return [m.slot for m in self.meetings]

    @property
    def meeting_days(self) -> set[str]:
        return {m.day for m in self.meetings}

    @property
    def is_full(self) -> bool:
        """True wenn Kapazität und Belegung bekannt sind und der Kurs voll ist."""
        if self.capacity is None or self.enrolled is None:
            return False
        return self.enrolled >= self.capacity
