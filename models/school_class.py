"""Datenmodell für eine Schulklasse (Pydantic v2)."""

import re

from pydantic import BaseModel, ConfigDict

_GRADE_PREFIX = re.compile(r"^\d+")


class SchoolClass(BaseModel):
    """Repräsentiert eine Klasse (Kelas), z.B. "7A" oder "10 TKJ"."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str

    @property
    def grade(self) -> int:
        """Jahrgang aus dem Zahlenpräfix des Namens, 0 wenn keiner vorhanden."""
        return class_grade(self.name)


def class_grade(name: str) -> int:
    """Liest den Jahrgang aus einem Klassennamen ("8B" → 8, "Tahfidz" → 0)."""
    m = _GRADE_PREFIX.match(name)
    return int(m.group()) if m else 0


def class_sort_key(name: str) -> tuple[int, str]:
    """Sortierung: erst nach Jahrgang numerisch, dann nach Name."""
    return (class_grade(name), name)
