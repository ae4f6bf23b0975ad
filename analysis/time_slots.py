"""Zeitraster-Auflösung: aktuelle Stunde, aktueller Schultag, Beschriftungen.

Reine Funktionen ohne Zustand; die Uhrzeit wird immer explizit übergeben.
"""

import logging
import re
from datetime import date, datetime, time
from typing import Iterable, Optional, Union

from analysis.errors import InvalidArgumentError, MalformedInputError
from config.defaults import DAY_NAMES
from models.period import Period

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


# ─── Uhrzeiten ────────────────────────────────────────────────────────────────

def parse_hhmm(value: str) -> int:
    """Wandelt "HH:MM" in Minuten seit Mitternacht um ("07:30" → 450).

    Alles andere (auch "7:30" oder "24:00") → MalformedInputError.
    """
    if not isinstance(value, str):
        raise MalformedInputError(f"Uhrzeit muss ein String sein, nicht {value!r}")
    m = _HHMM.fullmatch(value)
    if m is None:
        raise MalformedInputError(f"Ungültige Uhrzeit {value!r} (erwartet HH:MM)")
    return int(m.group(1)) * 60 + int(m.group(2))


def minutes_of_day(now: Union[datetime, time]) -> int:
    """Minuten seit Mitternacht für datetime oder time."""
    return now.hour * 60 + now.minute


def period_bounds(period: Period) -> tuple[int, int]:
    """(start, ende) eines Eintrags in Minuten seit Mitternacht."""
    try:
        return parse_hhmm(period.start_time), parse_hhmm(period.end_time)
    except MalformedInputError as e:
        raise MalformedInputError(f"Zeitraster-Eintrag {period.id!r}: {e}") from e


# ─── Auflösung ────────────────────────────────────────────────────────────────

def resolve_current_slot(
    periods: Iterable[Period], now: Union[datetime, time]
) -> Optional[Period]:
    """Gibt den Eintrag zurück, in dessen [start, ende) die Uhrzeit fällt.

    Halboffenes Intervall: bei direkt aufeinanderfolgenden Stunden gehört
    der Grenzzeitpunkt zur späteren Stunde. Ohne Treffer → None.
    Alle Einträge werden vorab geprüft, damit ein kaputter Eintrag nicht
    als "kein Treffer" durchrutscht.
    """
    bounds = [(p, *period_bounds(p)) for p in periods]
    current = minutes_of_day(now)
    for period, start, end in bounds:
        if start <= current < end:
            return period
    logger.debug(f"Keine Stunde für {current // 60:02d}:{current % 60:02d}")
    return None


def lesson_periods_only(periods: Iterable[Period]) -> list[Period]:
    """Nur Unterrichtsstunden (keine Pausen), Reihenfolge bleibt erhalten."""
    return [p for p in periods if p.kind == "lesson"]


def resolve_current_day(now: date) -> int:
    """Schultag 1..6 (Senin..Sabtu) für ein Datum.

    Sonntag wird auf 1 (Senin) abgebildet, damit immer ein gültiger Tag
    angezeigt werden kann.
    """
    day = now.isoweekday()   # 1=Mo .. 7=So
    return 1 if day == 7 else day


def resolve_slot_label(period: Period) -> str:
    """Anzeige-Text: "JP 3 (09:00 - 09:45)" bzw. "Istirahat (09:45 - 10:00)"."""
    if period.kind == "break":
        return f"{period.break_name} ({period.start_time} - {period.end_time})"
    return f"JP {period.period_number} ({period.start_time} - {period.end_time})"


# ─── Ergänzende Helfer ────────────────────────────────────────────────────────

def sort_periods(periods: Iterable[Period]) -> list[Period]:
    """Stabil nach order sortiert (gleiche order → Eingabereihenfolge)."""
    return sorted(periods, key=lambda p: p.order)


def is_school_hours(periods: list[Period], now: Union[datetime, time]) -> bool:
    """True wenn die Uhrzeit zwischen Beginn des ersten und Ende des
    letzten Eintrags liegt (beide Grenzen inklusive)."""
    if not periods:
        return False
    start, _ = period_bounds(periods[0])
    _, end = period_bounds(periods[-1])
    return start <= minutes_of_day(now) <= end


def day_name(day: int, names: Optional[list[str]] = None) -> str:
    """Tagesname für Plattform-Index 0..6 (0=Minggu); sonst ""."""
    names = names or DAY_NAMES
    if 0 <= day < len(names):
        return names[day]
    return ""


def require_school_day(day: int) -> int:
    """Prüft, dass ein Tag im Bereich 1..6 liegt."""
    if not 1 <= day <= 6:
        raise InvalidArgumentError(f"Tag {day} liegt nicht im Bereich 1..6")
    return day


def find_lesson_period(periods: Iterable[Period], number: int) -> Optional[Period]:
    """Sucht die Unterrichtsstunde mit der gegebenen JP-Nummer."""
    return next(
        (p for p in periods if p.kind == "lesson" and p.period_number == number),
        None,
    )


def period_label_for_number(periods: Iterable[Period], number: int) -> str:
    """Beschriftung für eine JP-Nummer; "JP n" wenn nicht im Raster."""
    period = find_lesson_period(periods, number)
    return resolve_slot_label(period) if period else f"JP {number}"
