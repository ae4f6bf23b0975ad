"""Konflikt-Erkennung: Doppelbelegungen von Lehrkräften und Klassen.

Gruppiert alle Zuweisungen nach (Tag, Stunde) und meldet jede Lehrkraft
bzw. Klasse, die in einem Slot mehr als einmal vorkommt. Eine Zuweisung
kann dabei in mehreren Konflikten gleichzeitig auftauchen.
"""

import logging
from collections import defaultdict
from typing import Iterable, Literal, Optional

from pydantic import BaseModel

from analysis.errors import InvalidArgumentError
from models.assignment import Assignment
from models.conflict import Conflict
from models.period import Period

logger = logging.getLogger(__name__)


class ConflictSummary(BaseModel):
    """Zählwerte für die Kopfzeile des Konflikt-Berichts."""

    total: int
    teacher_conflicts: int
    class_conflicts: int


class TeacherComparison(BaseModel):
    """Gegenüberstellung zweier Lehrkräfte."""

    teacher_a: str
    teacher_b: str
    assignments_a: list[Assignment]
    assignments_b: list[Assignment]
    overlaps: list[Assignment]   # Zuweisungen von A, deren Slot B ebenfalls belegt


# ─── Erkennung ────────────────────────────────────────────────────────────────

def find_conflicts(assignments: Iterable[Assignment]) -> list[Conflict]:
    """Findet alle Lehrer- und Klassen-Konflikte.

    Leere Lehrer- oder Klassennamen bilden keinen Konflikt-Schlüssel.
    Die Reihenfolge des Ergebnisses ist nicht festgelegt; für die Anzeige
    sort_conflicts() verwenden.
    """
    by_slot: dict[tuple[int, int], list[Assignment]] = defaultdict(list)
    for a in assignments:
        by_slot[(a.day, a.period)].append(a)

    conflicts: list[Conflict] = []
    for (day, period), slot_assignments in by_slot.items():
        conflicts.extend(_teacher_conflicts(day, period, slot_assignments))
        conflicts.extend(_class_conflicts(day, period, slot_assignments))

    logger.debug(
        f"Konfliktprüfung: {len(by_slot)} Slots, {len(conflicts)} Konflikte"
    )
    return conflicts


def _teacher_conflicts(
    day: int, period: int, slot_assignments: list[Assignment]
) -> list[Conflict]:
    """Eine Lehrkraft darf pro Slot nur einmal eingeplant sein."""
    by_teacher: dict[str, list[Assignment]] = defaultdict(list)
    for a in slot_assignments:
        if a.teacher_name:
            by_teacher[a.teacher_name].append(a)

    return [
        Conflict(kind="teacher", day=day, period=period,
                 entity_name=name, colliding_assignments=items)
        for name, items in by_teacher.items()
        if len(items) > 1
    ]


def _class_conflicts(
    day: int, period: int, slot_assignments: list[Assignment]
) -> list[Conflict]:
    """Eine Klasse darf pro Slot nur in einer Zuweisung vorkommen."""
    by_class: dict[str, list[Assignment]] = defaultdict(list)
    for a in slot_assignments:
        # Mehrfachnennung derselben Klasse in einer Zuweisung zählt einmal
        for name in dict.fromkeys(a.class_names):
            if name:
                by_class[name].append(a)

    return [
        Conflict(kind="class", day=day, period=period,
                 entity_name=name, colliding_assignments=items)
        for name, items in by_class.items()
        if len(items) > 1
    ]


# ─── Darstellung ──────────────────────────────────────────────────────────────

def sort_conflicts(conflicts: Iterable[Conflict]) -> list[Conflict]:
    """Sortiert nach Tag, Stunde, Name (Anzeige-Reihenfolge)."""
    return sorted(conflicts, key=lambda c: c.sort_key())


def filter_conflicts(
    conflicts: Iterable[Conflict],
    kind: Literal["all", "teacher", "class"] = "all",
    query: str = "",
) -> list[Conflict]:
    """Filtert nach Typ und Suchtext.

    Der Suchtext wird case-insensitiv im Namen des Konflikts sowie in
    Fach und Lehrkraft der beteiligten Zuweisungen gesucht.
    """
    if kind not in ("all", "teacher", "class"):
        raise InvalidArgumentError(f"Unbekannter Konflikttyp {kind!r}")
    result = [c for c in conflicts if kind == "all" or c.kind == kind]
    if query:
        q = query.lower()
        result = [
            c for c in result
            if q in c.entity_name.lower()
            or any(
                q in a.subject_name.lower() or q in a.teacher_name.lower()
                for a in c.colliding_assignments
            )
        ]
    return result


def summarize_conflicts(conflicts: Iterable[Conflict]) -> ConflictSummary:
    conflicts = list(conflicts)
    teacher = sum(1 for c in conflicts if c.kind == "teacher")
    return ConflictSummary(
        total=len(conflicts),
        teacher_conflicts=teacher,
        class_conflicts=len(conflicts) - teacher,
    )


def compare_teachers(
    teacher_a: str, teacher_b: str, assignments: Iterable[Assignment]
) -> TeacherComparison:
    """Vergleicht zwei Lehrkräfte und listet gemeinsame Slots auf."""
    assignments = list(assignments)
    own_a = [a for a in assignments if a.teacher_name == teacher_a]
    own_b = [a for a in assignments if a.teacher_name == teacher_b]
    slots_b = {a.slot_key for a in own_b}
    return TeacherComparison(
        teacher_a=teacher_a,
        teacher_b=teacher_b,
        assignments_a=own_a,
        assignments_b=own_b,
        overlaps=[a for a in own_a if a.slot_key in slots_b],
    )


def print_conflicts_rich(
    conflicts: list[Conflict],
    periods: Optional[list[Period]] = None,
    day_names: Optional[list[str]] = None,
) -> None:
    """Gibt den Konflikt-Bericht formatiert über Rich aus."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.table import Table
    from rich import box

    from analysis.time_slots import day_name, period_label_for_number

    console = Console()
    summary = summarize_conflicts(conflicts)
    status = (
        "[bold green]✓ KEINE KONFLIKTE[/bold green]"
        if summary.total == 0
        else "[bold red]✗ KONFLIKTE GEFUNDEN[/bold red]"
    )
    lines = [
        status,
        f"Gesamt: {summary.total} | Lehrkräfte: {summary.teacher_conflicts} | "
        f"Klassen: {summary.class_conflicts}",
    ]
    console.print(Panel("\n".join(lines), title="Konflikt-Prüfung", border_style="cyan"))

    if not conflicts:
        return

    table = Table(box=box.ROUNDED, show_lines=True)
    table.add_column("Typ", width=8)
    table.add_column("Zeit", width=26)
    table.add_column("Betroffen", width=16)
    table.add_column("Zuweisungen")

    for c in sort_conflicts(conflicts):
        color = "yellow" if c.kind == "teacher" else "magenta"
        label = "GURU" if c.kind == "teacher" else "KELAS"
        when = f"{day_name(c.day, day_names)}, " + (
            period_label_for_number(periods, c.period) if periods
            else f"JP {c.period}"
        )
        details = "\n".join(
            f"{a.subject_name} – {a.teacher_name or '?'} "
            f"({', '.join(a.class_names) or '—'})"
            for a in c.colliding_assignments
        )
        table.add_row(f"[{color}]{label}[/{color}]", when, c.entity_name, details)
    console.print(table)
