"""Datenmodell für einen erkannten Doppelbelegungs-Konflikt."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from models.assignment import Assignment


ConflictKind = Literal["teacher", "class"]


class Conflict(BaseModel):
    """Zwei oder mehr Zuweisungen teilen (Tag, Stunde) und dieselbe
    Lehrkraft bzw. dieselbe Klasse. Wird nur abgeleitet, nie gespeichert."""

    model_config = ConfigDict(frozen=True)

    kind: ConflictKind
    day: int
    period: int
    entity_name: str                      # Name der Lehrkraft bzw. der Klasse
    colliding_assignments: list[Assignment] = Field(min_length=2)

    @property
    def assignment_ids(self) -> list[str]:
        return [a.id for a in self.colliding_assignments]

    def sort_key(self) -> tuple[int, int, str, str]:
        """Anzeige-Reihenfolge: Tag, Stunde, Name, Typ."""
        return (self.day, self.period, self.entity_name, self.kind)
