"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict


class Subject(BaseModel):
    """Repräsentiert ein Unterrichtsfach (Mapel)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
