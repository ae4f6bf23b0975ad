"""Gemeinsame Hilfsfunktionen für Excel-, PDF- und Terminal-Ausgabe."""

import colorsys
from collections import defaultdict
from datetime import date
from typing import Iterable, Literal

from models.assignment import Assignment
from models.conflict import Conflict

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "it":       "B3D4FF",
    "english":  "FFF2B3",
    "diniyah":  "B3FFB3",
    "bk":       "FFB3E6",
    "conflict": "FF9999",
    "free":     "F5F5F5",
    "pause":    "DDDDDD",
    "header":   "2E6DA4",
}

EntityKind = Literal["teacher", "subject", "class"]

# Sättigung je Entitätstyp (Prozent); Helligkeit immer 85 %
_SATURATION = {"teacher": 70, "subject": 60, "class": 50}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


# ─── Fach-Kategorie ───────────────────────────────────────────────────────────

_PREFIXES = [
    ("IT", "it"),
    ("ENGLISH", "english"),
    ("INGGRIS", "english"),
    ("DINIYAH", "diniyah"),
    ("PAI", "diniyah"),
    ("ADAB", "diniyah"),
    ("BK", "bk"),
]

_KEYWORDS = [
    (("BAHASA INGGRIS", "SPEAKING", "GRAMMAR"), "english"),
    (("FIQIH", "HADITS", "AQIDAH", "ARAB", "QURAN", "TAHFIDZ"), "diniyah"),
    (("KONSELING", "BIMBINGAN"), "bk"),
]


def subject_category(subject_name: str) -> str:
    """Kategorie eines Fachs für Farben und Legenden.

    Zuerst zählt das Präfix vor " - " ("IT - Jaringan" → it), dann
    Schlüsselwörter im Namen. Alles andere fällt auf "it" zurück.
    """
    upper = subject_name.strip().upper()
    prefix = upper.split("-", 1)[0].strip()
    for token, category in _PREFIXES:
        if prefix == token or prefix.startswith(token + " "):
            return category
    for words, category in _KEYWORDS:
        if any(w in upper for w in words):
            return category
    return "it"


def get_subject_color(subject_name: str) -> str:
    return COLORS.get(subject_category(subject_name), COLORS["free"])


def entity_color(name: str, kind: EntityKind = "subject") -> str:
    """Stabile Pastellfarbe aus dem Namen (Summe der Zeichencodes → Farbton)."""
    hue = sum(ord(ch) for ch in name) % 360
    saturation = _SATURATION.get(kind, 60) / 100
    r, g, b = colorsys.hls_to_rgb(hue / 360, 0.85, saturation)
    return f"{round(r * 255):02X}{round(g * 255):02X}{round(b * 255):02X}"


# ─── Raster ───────────────────────────────────────────────────────────────────

def build_grid(
    assignments: Iterable[Assignment],
) -> dict[tuple[int, int], list[Assignment]]:
    """Baut {(day, period): [assignments]} auf."""
    grid: dict[tuple[int, int], list[Assignment]] = defaultdict(list)
    for a in assignments:
        grid[a.slot_key].append(a)
    return grid


def class_grid(
    assignments: Iterable[Assignment], day: int
) -> dict[tuple[str, int], list[Assignment]]:
    """Baut {(class_name, period): [assignments]} für einen Tag auf."""
    grid: dict[tuple[str, int], list[Assignment]] = defaultdict(list)
    for a in assignments:
        if a.day != day:
            continue
        for name in dict.fromkeys(a.class_names):
            if name:
                grid[(name, a.period)].append(a)
    return grid


def conflict_cells(conflicts: Iterable[Conflict]) -> set[tuple[str, int, int, str]]:
    """(kind, day, period, entity_name) aller Konflikte zum Hervorheben."""
    return {(c.kind, c.day, c.period, c.entity_name) for c in conflicts}


# ─── Zelleninhalt-Formatierung ────────────────────────────────────────────────

def format_assignment(assignment: Assignment, mode: str = "class") -> str:
    """Formatiert eine Zuweisung als Zelleninhalt.

    mode='class':   "Mapel\nGuru"
    mode='teacher': "Mapel\nKelas, Kelas"
    """
    subject = assignment.subject_name or "?"
    if mode == "teacher":
        return f"{subject}\n{', '.join(assignment.class_names) or '—'}"
    return f"{subject}\n{assignment.teacher_name or '—'}"


def format_assignments(assignments: list[Assignment], mode: str = "class") -> str:
    """Formatiert mehrere Zuweisungen für eine Zelle (getrennt durch ──).

    Mehr als eine Zuweisung pro Zelle bedeutet eine Doppelbelegung.
    """
    if not assignments:
        return ""
    return "\n──\n".join(format_assignment(a, mode) for a in assignments)
