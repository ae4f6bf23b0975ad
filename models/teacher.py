"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft (Guru)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str                                     # Join-Schlüssel zu Assignment.teacher_name
    task_ids: list[str] = Field(                  # Zugeordnete Zusatzaufgaben
        default_factory=list,
        validation_alias=AliasChoices("task_ids", "tasks"),
    )

    @field_validator("task_ids", mode="before")
    @classmethod
    def _dedupe_task_ids(cls, v):
        # Mengen-Semantik, Reihenfolge der ersten Nennung bleibt erhalten
        if v is None:
            return []
        return list(dict.fromkeys(v))
