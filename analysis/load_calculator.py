"""JP-Rechner: Unterrichtsbelastung, Zusatzaufgaben und Tagesverteilung.

Zählweisen:
  per_class    – jede Zuweisung zählt max(1, Anzahl Klassen) JP
  per_session  – jede Zuweisung zählt 1 JP

Die Zuordnung zur Lehrkraft erfolgt über exakten Namensvergleich.
"""

import logging
from typing import Iterable, Literal, Union

from pydantic import BaseModel

from analysis.errors import InvalidArgumentError
from config.defaults import SCHOOL_DAYS
from config.schema import LoadPolicy
from models.assignment import Assignment
from models.task import Task
from models.teacher import Teacher

logger = logging.getLogger(__name__)

# Schreibweisen der alten Web-App und der API werden mit akzeptiert
_POLICY_ALIASES: dict[str, LoadPolicy] = {
    "per_class": LoadPolicy.PER_CLASS,
    "perClass": LoadPolicy.PER_CLASS,
    "byClass": LoadPolicy.PER_CLASS,
    "per_session": LoadPolicy.PER_SESSION,
    "perSession": LoadPolicy.PER_SESSION,
    "bySession": LoadPolicy.PER_SESSION,
}


class TeacherLoad(BaseModel):
    """Gesamtbelastung einer Lehrkraft."""

    teacher_id: str
    teacher_name: str
    teaching_load: int               # Unterrichts-JP nach Zählweise
    task_load: int                   # Summe der Zusatzaufgaben-JP
    grand_total: int                 # teaching_load + task_load
    resolved_tasks: list[Task]       # Zugeordnete, existierende Aufgaben
    daily_load: dict[int, int]       # Tag (1..6) → Unterrichts-JP
    assignments: list[Assignment]    # Zuweisungen dieser Lehrkraft


# ─── Zählweise ────────────────────────────────────────────────────────────────

def parse_policy(policy: Union[LoadPolicy, str]) -> LoadPolicy:
    """Normalisiert die Zählweise; Unbekanntes → InvalidArgumentError."""
    if isinstance(policy, LoadPolicy):
        return policy
    if isinstance(policy, str) and policy in _POLICY_ALIASES:
        return _POLICY_ALIASES[policy]
    raise InvalidArgumentError(
        f"Unbekannte JP-Zählweise {policy!r} "
        f"(erlaubt: {', '.join(p.value for p in LoadPolicy)})"
    )


def assignment_units(assignment: Assignment, policy: LoadPolicy) -> int:
    """JP einer einzelnen Zuweisung.

    Ohne Klassen zählt eine Zuweisung unter per_class trotzdem 1 JP.
    """
    if policy is LoadPolicy.PER_CLASS:
        return max(1, len(assignment.class_names))
    return 1


def _teacher_assignments(
    teacher_name: str, assignments: Iterable[Assignment]
) -> list[Assignment]:
    return [a for a in assignments if a.teacher_name == teacher_name]


# ─── Öffentliche API ──────────────────────────────────────────────────────────

def calculate_teaching_load(
    teacher_name: str,
    assignments: Iterable[Assignment],
    policy: Union[LoadPolicy, Literal["per_class", "per_session"], str],
) -> int:
    """Unterrichts-JP einer Lehrkraft; 0 ohne Zuweisungen."""
    policy = parse_policy(policy)
    return sum(
        assignment_units(a, policy)
        for a in _teacher_assignments(teacher_name, assignments)
    )


def calculate_daily_load(
    teacher_name: str,
    assignments: Iterable[Assignment],
    policy: Union[LoadPolicy, str],
) -> dict[int, int]:
    """Unterrichts-JP pro Schultag 1..6 (gleiche Zählweise wie die Summe)."""
    policy = parse_policy(policy)
    by_day = {day: 0 for day in SCHOOL_DAYS}
    for a in _teacher_assignments(teacher_name, assignments):
        if a.day in by_day:
            by_day[a.day] += assignment_units(a, policy)
    return by_day


def resolve_tasks(teacher: Teacher, tasks: Iterable[Task]) -> list[Task]:
    """Aufgaben der Lehrkraft in der Reihenfolge von tasks.

    Unbekannte Aufgaben-IDs werden stillschweigend übergangen.
    """
    wanted = set(teacher.task_ids)
    return [t for t in tasks if t.id in wanted]


def calculate_total_load(
    teacher: Teacher,
    assignments: Iterable[Assignment],
    tasks: Iterable[Task],
    policy: Union[LoadPolicy, str],
) -> TeacherLoad:
    """Unterricht + Zusatzaufgaben einer Lehrkraft."""
    policy = parse_policy(policy)
    own = _teacher_assignments(teacher.name, assignments)

    teaching = sum(assignment_units(a, policy) for a in own)
    resolved = resolve_tasks(teacher, tasks)
    task_load = sum(t.jp for t in resolved)

    return TeacherLoad(
        teacher_id=teacher.id,
        teacher_name=teacher.name,
        teaching_load=teaching,
        task_load=task_load,
        grand_total=teaching + task_load,
        resolved_tasks=resolved,
        daily_load=calculate_daily_load(teacher.name, own, policy),
        assignments=own,
    )


def build_load_report(
    teachers: Iterable[Teacher],
    assignments: Iterable[Assignment],
    tasks: Iterable[Task],
    policy: Union[LoadPolicy, str],
    query: str = "",
    sort_by: Literal["name", "jp"] = "name",
    descending: bool = False,
) -> list[TeacherLoad]:
    """Rekap JP für alle Lehrkräfte.

    query filtert case-insensitiv auf den Namen; sort_by="jp" sortiert
    nach grand_total, "name" alphabetisch.
    """
    if sort_by not in ("name", "jp"):
        raise InvalidArgumentError(f"Unbekannte Sortierung {sort_by!r}")
    policy = parse_policy(policy)
    assignments = list(assignments)
    tasks = list(tasks)

    loads = [
        calculate_total_load(t, assignments, tasks, policy)
        for t in teachers
        if not query or query.lower() in t.name.lower()
    ]
    if sort_by == "name":
        loads.sort(key=lambda l: l.teacher_name, reverse=descending)
    else:
        loads.sort(key=lambda l: l.grand_total, reverse=descending)

    logger.debug(
        f"Rekap JP: {len(loads)} Lehrkräfte, Zählweise {policy.value}, "
        f"Summe {sum(l.grand_total for l in loads)} JP"
    )
    return loads
