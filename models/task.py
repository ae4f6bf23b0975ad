"""Datenmodell für eine Zusatzaufgabe mit fester JP-Anrechnung (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict, Field


class Task(BaseModel):
    """Nicht-unterrichtliche Aufgabe (z.B. Wali Kelas, Koordinator).

    Wird einer oder mehreren Lehrkräften zugeordnet und zählt mit
    festen JP zur Gesamtbelastung.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    jp: int = Field(0, ge=0)
