"""Konfigurationsmanager: Laden, Speichern und Pflege des Tagesrasters.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from analysis.errors import InvalidArgumentError
from config.defaults import DEFAULT_PERIOD_ID_PREFIX, default_periods
from config.schema import AppConfig, CustomPeriods, DefaultPeriods
from models.period import Period

console = Console()
logger = logging.getLogger(__name__)
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Jadwal Pelajaran — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "jp_calculation_method": (
        "JP-Zählweise",
        "per_class = pro Klasse zählen, per_session = pro Sitzung zählen.",
    ),
    "period_source": (
        "Zeitraster",
        "kind: default = eingebautes Raster (07:30–14:30), "
        "kind: custom = eigene Liste unter 'periods'.",
    ),
    "signatures": (
        "Unterschriften",
        None,
    ),
    "info_links": (
        "Hinweis-Links",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "app_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py setup' aus, um die Anwendung einzurichten."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            config = AppConfig.model_validate(dict(raw or {}))
            return config
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Wie load(), aber ohne Datei → Standard-Konfiguration."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            logger.info(f"Keine Konfiguration unter {target}, nutze Standardwerte")
            return AppConfig()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json(exclude_none=True))
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm

    # ─── Zeitraster ───

    @staticmethod
    def resolve_periods(config: AppConfig) -> list[Period]:
        """Aktives Tagesraster, nach order sortiert.

        Standard-Raster wird bei jedem Aufruf neu erzeugt; eigenes Raster
        wird stabil nach order sortiert (gleiche order → Eingabereihenfolge).
        """
        source = config.period_source
        if isinstance(source, DefaultPeriods):
            return default_periods()
        return sorted(source.periods, key=lambda p: p.order)

    @staticmethod
    def is_using_defaults(config: AppConfig) -> bool:
        return isinstance(config.period_source, DefaultPeriods)

    def seed_default_periods(self, config: AppConfig) -> AppConfig:
        """Übernimmt das Standard-Raster als editierbares eigenes Raster."""
        if not self.is_using_defaults(config):
            return config
        periods = [
            p.model_copy(update={"id": _new_period_id()})
            for p in default_periods()
        ]
        logger.info(f"Standard-Raster übernommen ({len(periods)} Einträge)")
        return config.model_copy(
            update={"period_source": CustomPeriods(periods=periods)}
        )

    def add_period(self, config: AppConfig, period: Period) -> AppConfig:
        """Fügt einen Eintrag hinzu; beim Standard-Raster wird zuerst übernommen."""
        config = self.seed_default_periods(config)
        periods = list(config.period_source.periods)
        if period.id.startswith(DEFAULT_PERIOD_ID_PREFIX) or not period.id:
            period = period.model_copy(update={"id": _new_period_id()})
        periods.append(period)
        return config.model_copy(
            update={"period_source": CustomPeriods(periods=periods)}
        )

    def update_period(self, config: AppConfig, period_id: str, **changes) -> AppConfig:
        """Ändert Felder eines Eintrags. Standard-Einträge sind schreibgeschützt."""
        self._reject_default(config, period_id, "ändern")
        periods = list(config.period_source.periods)
        for i, p in enumerate(periods):
            if p.id == period_id:
                # Neu validieren, damit kind/JP-Nummer/Name zusammenpassen
                periods[i] = Period.model_validate({**p.model_dump(), **changes})
                break
        else:
            raise InvalidArgumentError(f"Zeitraster-Eintrag {period_id!r} nicht gefunden")
        return config.model_copy(
            update={"period_source": CustomPeriods(periods=periods)}
        )

    def delete_period(self, config: AppConfig, period_id: str) -> AppConfig:
        """Entfernt einen Eintrag. Leeres Raster → wieder Standard-Raster."""
        self._reject_default(config, period_id, "löschen")
        periods = [p for p in config.period_source.periods if p.id != period_id]
        if len(periods) == len(config.period_source.periods):
            raise InvalidArgumentError(f"Zeitraster-Eintrag {period_id!r} nicht gefunden")
        source = CustomPeriods(periods=periods) if periods else DefaultPeriods()
        return config.model_copy(update={"period_source": source})

    def reorder_periods(self, config: AppConfig, period_ids: list[str]) -> AppConfig:
        """Setzt order = Position + 1 in der angegebenen Reihenfolge.

        Beim Standard-Raster passiert nichts (Standard-Einträge werden
        nicht umsortiert).
        """
        if self.is_using_defaults(config):
            return config
        by_id = {p.id: p for p in config.period_source.periods}
        unknown = [pid for pid in period_ids if pid not in by_id]
        if unknown:
            raise InvalidArgumentError(f"Unbekannte Zeitraster-IDs: {unknown}")
        new_order = {pid: i + 1 for i, pid in enumerate(period_ids)}
        periods = [
            p.model_copy(update={"order": new_order[p.id]}) if p.id in new_order else p
            for p in config.period_source.periods
        ]
        return config.model_copy(
            update={"period_source": CustomPeriods(periods=periods)}
        )

    def _reject_default(self, config: AppConfig, period_id: str, action: str) -> None:
        if self.is_using_defaults(config):
            raise InvalidArgumentError(
                f"Standard-Zeitraster kann nicht {action} werden. "
                f"Bitte zuerst übernehmen ('python main.py periods seed')."
            )


def _new_period_id() -> str:
    return uuid.uuid4().hex[:12]
