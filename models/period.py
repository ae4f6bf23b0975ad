"""Datenmodell für einen Eintrag im Tagesraster (Stunde oder Pause)."""

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


PeriodKind = Literal["lesson", "break"]


class Period(BaseModel):
    """Ein Zeitabschnitt im Tagesraster.

    Unterrichtsstunden (kind="lesson") tragen eine JP-Nummer, Pausen
    (kind="break") einen Namen. Die Uhrzeiten werden hier bewusst nur als
    Strings gehalten; geprüft wird beim Auflösen und an der Config-Grenze.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    kind: PeriodKind = Field(validation_alias=AliasChoices("kind", "type"))
    # Nummer der Unterrichtsstunde, nur bei kind="lesson"
    period_number: Optional[int] = Field(
        None, ge=1, validation_alias=AliasChoices("period_number", "jp"))
    # Beginn im Format "HH:MM"
    start_time: str = Field(validation_alias=AliasChoices("start_time", "startTime"))
    # Ende im Format "HH:MM"
    end_time: str = Field(validation_alias=AliasChoices("end_time", "endTime"))
    # Bezeichnung der Pause, nur bei kind="break"
    break_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("break_name", "name"))
    # Sortierschlüssel für die Anzeige (nicht zwingend eindeutig)
    order: int = 0

    @model_validator(mode="after")
    def _check_kind_fields(self):
        if self.kind == "lesson" and self.period_number is None:
            raise ValueError(f"Stunde {self.id!r} ohne JP-Nummer")
        if self.kind == "lesson" and self.break_name is not None:
            raise ValueError(f"Stunde {self.id!r} darf keinen Pausennamen haben")
        if self.kind == "break" and self.period_number is not None:
            raise ValueError(f"Pause {self.id!r} darf keine JP-Nummer haben")
        if self.kind == "break" and not (self.break_name or "").strip():
            raise ValueError(f"Pause {self.id!r} ohne Bezeichnung")
        return self

    @property
    def is_lesson(self) -> bool:
        return self.kind == "lesson"

    @property
    def is_break(self) -> bool:
        return self.kind == "break"
