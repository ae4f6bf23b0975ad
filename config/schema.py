from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Annotated, Literal, Optional, Union
from enum import Enum

from models.period import Period


class LoadPolicy(str, Enum):
    """Zählweise für die Unterrichtsbelastung (JP)."""
    # Pro Klasse: eine Stunde mit 3 Klassen gleichzeitig zählt 3 JP
    PER_CLASS = "per_class"
    # Pro Sitzung: jede Stunde zählt 1 JP, egal wie viele Klassen
    PER_SESSION = "per_session"


# ─── ZEITRASTER (Standard oder vollständig eigenes Raster) ───

class DefaultPeriods(BaseModel):
    """Das fest eingebaute Standard-Raster (9 Einträge, 07:30–14:30).

    Wird beim Lesen erzeugt und ist nicht editierbar. Wer ändern will,
    übernimmt es zuerst als eigenes Raster (seed).
    """
    kind: Literal["default"] = "default"


class CustomPeriods(BaseModel):
    """Vom Admin gepflegtes Tagesraster. Ersetzt das Standard-Raster vollständig."""
    kind: Literal["custom"] = "custom"
    # Alle Stunden und Pausen des Tages
    periods: list[Period] = Field(min_length=1,
        description="Alle Stunden und Pausen des Tages")

    @model_validator(mode='after')
    def validate_periods(self):
        """Prüfe Uhrzeiten (HH:MM) und eindeutige IDs / JP-Nummern."""
        from analysis.time_slots import parse_hhmm

        seen_ids: set[str] = set()
        seen_numbers: set[int] = set()
        for p in self.periods:
            # MalformedInputError ist ein ValueError → Pydantic-Fehler
            parse_hhmm(p.start_time)
            parse_hhmm(p.end_time)
            if p.id in seen_ids:
                raise ValueError(f"Doppelte Zeitraster-ID: {p.id}")
            seen_ids.add(p.id)
            if p.period_number is not None:
                if p.period_number in seen_numbers:
                    raise ValueError(f"JP {p.period_number} ist doppelt vergeben")
                seen_numbers.add(p.period_number)
        return self


PeriodSource = Annotated[
    Union[DefaultPeriods, CustomPeriods],
    Field(discriminator="kind"),
]


# ─── DRUCK / UNTERSCHRIFTEN ───

class SignatureSettings(BaseModel):
    """Unterschriftenblock für Ausdrucke (Kepala Sekolah / Wakil)."""
    # Name der Schulleitung
    head_name: str = ""
    # URL/Pfad zum Unterschriftsbild der Schulleitung
    head_url: str = ""
    # Name der Stellvertretung (Wakasek Kurikulum)
    vice_name: str = ""
    vice_url: str = ""


class InfoLink(BaseModel):
    """Ein Link, der auf Ausdrucken als Hinweis erscheint."""
    id: str
    title: str
    url: str
    description: str = ""


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Anwendung."""
    # Name der Schule (Kopfzeile der Ausdrucke)
    school_name: str = Field("Sekolah Contoh",
        description="Name der Schule")
    # Zählweise für JP
    jp_calculation_method: LoadPolicy = Field(LoadPolicy.PER_CLASS,
        description="Zählweise der Unterrichts-JP")
    # Unterrichtstage pro Woche (Senin–Sabtu)
    days_per_week: int = Field(6, ge=1, le=6,
        description="Unterrichtstage pro Woche")
    # Namen der Wochentage, Index 0 = Minggu
    day_names: list[str] = Field(
        default=["Minggu", "Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu"],
        min_length=7, max_length=7,
        description="Namen der Wochentage (Index 0 = Sonntag)")
    # Tagesraster: Standard oder eigenes
    period_source: PeriodSource = Field(default_factory=DefaultPeriods)
    # Unterschriften für Ausdrucke
    signatures: SignatureSettings = Field(default_factory=SignatureSettings)
    # Hinweis-Links für Ausdrucke
    info_links: list[InfoLink] = Field(default_factory=list)
    # Externe Piket-API (nur gespeichert, nicht abgefragt)
    piket_api_url: Optional[str] = None

    @field_validator("jp_calculation_method", mode="before")
    @classmethod
    def normalize_policy(cls, v):
        """Akzeptiert auch byClass / bySession aus alten Exporten."""
        from analysis.load_calculator import parse_policy
        return parse_policy(v)

    @property
    def school_days(self) -> list[int]:
        """Unterrichtstage als 1-basierte Nummern (1=Senin)."""
        return list(range(1, self.days_per_week + 1))
