"""Zeitmodell: Uhrzeiten, Wochentags-Codes und Zeitintervalle.

Uhrzeiten kommen als "HH:MM"-Strings, Wochentage als Einbuchstaben-Codes
(M, T, W, R, F). Beides wird hier einmal geparst und als Minuten bzw.
Tages-Index weitergereicht.
"""

import re
from dataclasses import dataclass

from config.defaults import DAY_CODES, DAY_NAMES

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class PlannerInputError(ValueError):
    """Basisklasse für fehlerhafte Eingabedaten (Programmier-/Datenfehler)."""


class InvalidDayCodeError(PlannerInputError):
    """Unbekannter Wochentags-Code."""

    def __init__(self, day: object) -> None:
        super().__init__(f"Unsupported day code: {day!r}")
        self.day = day


class InvalidTimeError(PlannerInputError):
    """Uhrzeit nicht im Format HH:MM oder außerhalb des Tages."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid time of day: {value!r} (expected HH:MM)")
        self.value = value


def to_minutes(time: str) -> int:
    """Wandelt "HH:MM" in Minuten seit Mitternacht um ("09:30" → 570)."""
    if not isinstance(time, str):
        raise InvalidTimeError(time)
    match = _TIME_RE.match(time.strip())
    if match is None:
        raise InvalidTimeError(time)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59 or (hours == 24 and minutes > 0):
        raise InvalidTimeError(time)
    return hours * 60 + minutes


def day_index(day: str) -> int:
    """Wochentags-Code → Index (M=0 … F=4)."""
    try:
        return DAY_CODES.index(day)
    except ValueError:
        raise InvalidDayCodeError(day) from None


def day_name(day: str) -> str:
    """Ausgeschriebener (englischer) Tagesname für Meldungen."""
    return DAY_NAMES[day_index(day)]


@dataclass(frozen=True)
class TimeRange:
    """Halb-offenes Intervall [start, end) in Minuten seit Mitternacht."""

    start: int
    end: int

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end

    @property
    def duration(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return (
            f"{self.start // 60:02d}:{self.start % 60:02d}–"
            f"{self.end // 60:02d}:{self.end % 60:02d}"
        )


@dataclass(frozen=True)
class TimeSlot:
    """Ein Termin im Wochenraster: Tages-Index plus Zeitintervall.

    Immutable (frozen=True) damit es als Dict-Key / Set-Element nutzbar ist.
    """

    # Wochentag (0=Montag, …, 4=Freitag)
    day: int
    range: TimeRange

    @property
    def day_code(self) -> str:
        return DAY_CODES[self.day]

    def conflicts_with(self, other: "TimeSlot") -> bool:
        return self.day == other.day and self.range.overlaps(other.range)

    def __str__(self) -> str:
        return f"{self.day_code} {self.range}"


def ranges_overlap(a: TimeRange, b: TimeRange) -> bool:
    """Strikte Überlappung halb-offener Intervalle (a.start < b.end und b.start < a.end)."""
    return a.overlaps(b)
