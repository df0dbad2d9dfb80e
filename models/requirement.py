"""Eingabemodell für offene Anforderungsgruppen (Pydantic v2).

Die Gruppen stammen aus der Anforderungsauflösung (Studienordnung minus
bereits erbrachte Leistungen); needed ist dort bereits reduziert.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from config.defaults import CREDIT_METRIC_GROUP_TYPES, OPTIONAL_GROUP_TYPES

GroupType = Literal["allOf", "anyOf", "chooseN", "minCredits", "minCount"]


class RequirementGroupInput(BaseModel):
    """Eine noch offene Anforderungsgruppe mit Kandidaten-Pool."""

    model_config = ConfigDict(frozen=True)

    group_id: str                       # "core-ops"
    group_title: Optional[str] = None   # "Operations Core"
    candidate_course_ids: list[str]
    type: GroupType
    needed: float = Field(ge=0)         # Anzahl Kurse oder Credits (minCredits)

    @property
    def is_required(self) -> bool:
        """Alle Gruppen außer anyOf sind Pflicht."""
        return self.type not in OPTIONAL_GROUP_TYPES

    @property
    def counts_credits(self) -> bool:
        """minCredits zählt Credits, alle anderen zählen Kurse."""
        return self.type in CREDIT_METRIC_GROUP_TYPES

    @property
    def display_title(self) -> str:
        return self.group_title or self.group_id
