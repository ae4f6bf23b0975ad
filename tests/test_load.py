"""Tests für den JP-Rechner (Unterrichtsbelastung, Zusatzaufgaben, Rekap JP)."""

import pytest

from analysis.errors import InvalidArgumentError
from analysis.load_calculator import (
    assignment_units,
    build_load_report,
    calculate_daily_load,
    calculate_teaching_load,
    calculate_total_load,
    parse_policy,
    resolve_tasks,
)
from config.schema import LoadPolicy
from models.assignment import Assignment
from models.task import Task
from models.teacher import Teacher


def _a(id: str, day: int, period: int, teacher: str, classes: list[str]) -> Assignment:
    return Assignment(
        id=id, day=day, period=period, subject_name="IPA",
        teacher_name=teacher, class_names=classes,
    )


@pytest.fixture
def budi_assignments() -> list[Assignment]:
    """Budi: 1 Klasse, 2 Klassen, 3 Klassen → per_class 6, per_session 3."""
    return [
        _a("b1", 1, 1, "Budi", ["7A"]),
        _a("b2", 2, 3, "Budi", ["7A", "7B"]),
        _a("b3", 2, 4, "Budi", ["8A", "8B", "8C"]),
        _a("x1", 1, 1, "Ani", ["9"]),
    ]


@pytest.fixture
def tasks() -> list[Task]:
    return [
        Task(id="t1", name="Wali Kelas", jp=2),
        Task(id="t2", name="Wakasek", jp=12),
        Task(id="t3", name="Bendahara", jp=3),
    ]


# ─── Unterrichts-JP ───────────────────────────────────────────────────────────

class TestTeachingLoad:
    def test_per_class(self, budi_assignments):
        """per_class: 1 + 2 + 3 = 6 JP."""
        assert calculate_teaching_load("Budi", budi_assignments, "per_class") == 6

    def test_per_session(self, budi_assignments):
        """per_session: 3 Zuweisungen = 3 JP."""
        assert calculate_teaching_load("Budi", budi_assignments, "per_session") == 3

    def test_enum_policy(self, budi_assignments):
        assert calculate_teaching_load("Budi", budi_assignments, LoadPolicy.PER_CLASS) == 6

    def test_no_assignments_is_zero(self, budi_assignments):
        """Lehrkraft ohne Zuweisungen → 0, kein Fehler."""
        assert calculate_teaching_load("Nobody", budi_assignments, "per_class") == 0
        assert calculate_teaching_load("Budi", [], "per_session") == 0

    def test_exact_name_match(self, budi_assignments):
        """Name wird exakt verglichen (Groß/Klein zählt)."""
        assert calculate_teaching_load("budi", budi_assignments, "per_class") == 0

    def test_zero_classes_counts_one(self):
        """Zuweisung ohne Klassen zählt unter per_class trotzdem 1 JP."""
        a = _a("z", 3, 7, "Eko", [])
        assert assignment_units(a, LoadPolicy.PER_CLASS) == 1
        assert assignment_units(a, LoadPolicy.PER_SESSION) == 1

    def test_per_class_at_least_per_session(self, budi_assignments):
        """per_class ist nie kleiner als per_session."""
        for name in ("Budi", "Ani"):
            assert (
                calculate_teaching_load(name, budi_assignments, "per_class")
                >= calculate_teaching_load(name, budi_assignments, "per_session")
            )

    def test_unknown_policy_raises(self, budi_assignments):
        with pytest.raises(InvalidArgumentError):
            calculate_teaching_load("Budi", budi_assignments, "per_room")

    def test_unknown_policy_is_value_error(self):
        """InvalidArgumentError ist auch ein ValueError."""
        with pytest.raises(ValueError):
            parse_policy("weekly")

    @pytest.mark.parametrize("raw, expected", [
        ("byClass", LoadPolicy.PER_CLASS),
        ("perClass", LoadPolicy.PER_CLASS),
        ("bySession", LoadPolicy.PER_SESSION),
        ("per_session", LoadPolicy.PER_SESSION),
    ])
    def test_policy_aliases(self, raw, expected):
        """Schreibweisen der alten Web-App werden akzeptiert."""
        assert parse_policy(raw) is expected


# ─── Tagesverteilung ──────────────────────────────────────────────────────────

class TestDailyLoad:
    def test_daily_breakdown(self, budi_assignments):
        daily = calculate_daily_load("Budi", budi_assignments, "per_class")
        assert daily == {1: 1, 2: 5, 3: 0, 4: 0, 5: 0, 6: 0}

    def test_daily_sums_to_total(self, budi_assignments):
        """Summe der Tage = Gesamt-Unterrichts-JP."""
        for policy in ("per_class", "per_session"):
            daily = calculate_daily_load("Budi", budi_assignments, policy)
            assert sum(daily.values()) == calculate_teaching_load(
                "Budi", budi_assignments, policy
            )


# ─── Gesamtbelastung ──────────────────────────────────────────────────────────

class TestTotalLoad:
    def test_grand_total_with_tasks(self, budi_assignments, tasks):
        """6 JP Unterricht + Wali Kelas (2) + Bendahara (3) = 11 JP."""
        teacher = Teacher(id="g1", name="Budi", task_ids=["t1", "t3"])
        load = calculate_total_load(teacher, budi_assignments, tasks, "per_class")
        assert load.teaching_load == 6
        assert load.task_load == 5
        assert load.grand_total == 11
        assert [t.name for t in load.resolved_tasks] == ["Wali Kelas", "Bendahara"]
        assert [a.id for a in load.assignments] == ["b1", "b2", "b3"]

    def test_task_only_teacher(self, tasks):
        """Nur Zusatzaufgaben: 0 Unterricht + 12 + 3 = 15 JP."""
        teacher = Teacher(id="g2", name="Sari", task_ids=["t2", "t3"])
        load = calculate_total_load(teacher, [], tasks, "per_session")
        assert load.teaching_load == 0
        assert load.grand_total == 15

    def test_unknown_task_ids_ignored(self, tasks):
        """Verwaiste Aufgaben-IDs werden stillschweigend übergangen."""
        teacher = Teacher(id="g3", name="Eko", task_ids=["t1", "geloescht"])
        assert [t.id for t in resolve_tasks(teacher, tasks)] == ["t1"]

    def test_tasks_follow_task_list_order(self, tasks):
        teacher = Teacher(id="g4", name="Eko", task_ids=["t3", "t1"])
        assert [t.id for t in resolve_tasks(teacher, tasks)] == ["t1", "t3"]

    def test_duplicate_task_ids_count_once(self, tasks):
        """Doppelte Aufgaben-IDs zählen nur einmal."""
        teacher = Teacher(id="g5", name="Eko", task_ids=["t1", "t1"])
        assert teacher.task_ids == ["t1"]
        assert calculate_total_load(teacher, [], tasks, "per_class").task_load == 2

    def test_additivity(self, budi_assignments, tasks):
        """Gesamt = Unterricht + Summe der Aufgaben-JP."""
        teacher = Teacher(id="g1", name="Budi", task_ids=["t1", "t2", "t3"])
        for policy in ("per_class", "per_session"):
            load = calculate_total_load(teacher, budi_assignments, tasks, policy)
            assert load.grand_total == (
                calculate_teaching_load("Budi", budi_assignments, policy) + 17
            )


# ─── Rekap JP ─────────────────────────────────────────────────────────────────

class TestLoadReport:
    @pytest.fixture
    def teachers(self) -> list[Teacher]:
        return [
            Teacher(id="g1", name="Budi", task_ids=["t1"]),
            Teacher(id="g2", name="Ani", task_ids=["t2"]),
            Teacher(id="g3", name="Citra"),
        ]

    def test_sorted_by_name(self, teachers, budi_assignments, tasks):
        report = build_load_report(teachers, budi_assignments, tasks, "per_class")
        assert [l.teacher_name for l in report] == ["Ani", "Budi", "Citra"]

    def test_sorted_by_jp_descending(self, teachers, budi_assignments, tasks):
        """Ani 1 + 12 = 13, Budi 6 + 2 = 8, Citra 0."""
        report = build_load_report(
            teachers, budi_assignments, tasks, "per_class",
            sort_by="jp", descending=True,
        )
        assert [(l.teacher_name, l.grand_total) for l in report] == [
            ("Ani", 13), ("Budi", 8), ("Citra", 0),
        ]

    def test_query_filters_names(self, teachers, budi_assignments, tasks):
        report = build_load_report(teachers, budi_assignments, tasks, "per_class", query="CIT")
        assert [l.teacher_name for l in report] == ["Citra"]

    def test_invalid_sort_raises(self, teachers, budi_assignments, tasks):
        with pytest.raises(InvalidArgumentError):
            build_load_report(teachers, budi_assignments, tasks, "per_class", sort_by="age")
