"""Gemeinsamer Renderer für Terminal-Stundenplan-Anzeige.

Wird von cmd_show (Rich) verwendet; liefert reine String-Zeilen, damit
die Darstellung unabhängig von der Tabellen-Bibliothek bleibt.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.assignment import Assignment
    from models.period import Period
    from models.snapshot import ScheduleSnapshot


def _time_label(period: "Period") -> str:
    return f"{period.start_time}–{period.end_time}"


def _cell(here: list["Assignment"], mode: str) -> str:
    from export.helpers import format_assignments

    if not here:
        return "—"
    text = format_assignments(here, mode)
    return f"⚠ {text}" if len(here) > 1 else text


def render_day_rows(
    day: int,
    snapshot: "ScheduleSnapshot",
    periods: list["Period"],
) -> tuple[list[str], list[list[str]]]:
    """Gibt (Kopfzeile, Zeilen) für das Tagesraster Klasse × Stunde zurück.

    Jede Zeile: [JP, Zeit, Klasse 1, Klasse 2, …]
    Pausen werden als eigene Zeilen mit dem Pausennamen eingefügt;
    doppelt belegte Zellen werden mit ⚠ markiert.
    """
    from export.helpers import class_grid

    class_names = snapshot.class_names()
    grid = class_grid(snapshot.assignments, day)
    header = ["JP", "Zeit"] + class_names
    rows: list[list[str]] = []

    for p in periods:
        if p.is_break:
            rows.append(["—", p.break_name or ""] + ["─" * 6] * len(class_names))
            continue
        cells = [str(p.period_number), _time_label(p)]
        for name in class_names:
            cells.append(_cell(grid.get((name, p.period_number), []), "class"))
        rows.append(cells)

    return header, rows


def _week_rows(
    assignments: list["Assignment"],
    periods: list["Period"],
    days: list[int],
    mode: str,
) -> list[list[str]]:
    from export.helpers import build_grid

    grid = build_grid(assignments)
    rows: list[list[str]] = []
    for p in periods:
        if p.is_break:
            rows.append(["—", p.break_name or ""] + ["─" * 6] * len(days))
            continue
        cells = [str(p.period_number), _time_label(p)]
        for day in days:
            cells.append(_cell(grid.get((day, p.period_number), []), mode))
        rows.append(cells)
    return rows


def render_teacher_rows(
    teacher_name: str,
    snapshot: "ScheduleSnapshot",
    periods: list["Period"],
    days: list[int],
) -> list[list[str]]:
    """Gibt Tabellenzeilen für den Wochenplan einer Lehrkraft zurück.

    Jede Zeile: [JP, Zeit, Senin, Selasa, …]; Zelle = "Mapel\\nKelas".
    """
    own = [a for a in snapshot.assignments if a.teacher_name == teacher_name]
    return _week_rows(own, periods, days, mode="teacher")


def render_class_rows(
    class_name: str,
    snapshot: "ScheduleSnapshot",
    periods: list["Period"],
    days: list[int],
) -> list[list[str]]:
    """Gibt Tabellenzeilen für den Wochenplan einer Klasse zurück."""
    own = [a for a in snapshot.assignments if class_name in a.class_names]
    return _week_rows(own, periods, days, mode="class")
