"""Datenmodell für eine Unterrichtszuweisung im Wochenplan (Pydantic v2)."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Assignment(BaseModel):
    """Eine Lehrkraft unterrichtet ein Fach für eine oder mehrere Klassen
    gleichzeitig, an einem Tag in einer Stunde (JP).

    Die Zuordnung zur Lehrkraft erfolgt über den Namen (kein Fremdschlüssel).
    Die alten Feldnamen aus dem Firestore-Export (mapel, guru, classes, jp)
    werden beim Einlesen ebenfalls akzeptiert.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    # Wochentag: 1=Senin (Mo) .. 6=Sabtu (Sa); Sonntag wird nie geplant
    day: int = Field(ge=1, le=6)
    # Nummer der Unterrichtsstunde (JP), 1-basiert
    period: int = Field(ge=1, validation_alias=AliasChoices("period", "jp"))
    subject_name: str = Field("", validation_alias=AliasChoices("subject_name", "mapel"))
    teacher_name: str = Field("", validation_alias=AliasChoices("teacher_name", "guru"))
    class_names: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("class_names", "classes"),
    )

    @field_validator("subject_name", "teacher_name", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("class_names", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v

    @property
    def slot_key(self) -> tuple[int, int]:
        """(Tag, Stunde) — Schlüssel für die Gruppierung nach Zeitslot."""
        return (self.day, self.period)
