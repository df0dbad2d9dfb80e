"""Datenmodell für einen Kurs aus dem Vorlesungsverzeichnis (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class Course(BaseModel):
    """Repräsentiert einen Kurs (Referenzdaten, unveränderlich)."""

    model_config = ConfigDict(frozen=True)

    id: str                                 # "BUS-201"
    code: str                               # "BUS 201"
    title: str                              # "Operations"
    credits: float
    gen_ed_tags: list[str] = []
    tags: list[str] = []                    # Interessen-Tags, z.B. "Strategy"
    level: Optional[int] = None             # 100, 200, …
    prereqs: list[str] = []
    equivalents: list[str] = []             # Äquivalente Kurs-IDs
