"""Tests für die Konflikt-Erkennung (Lehrer- und Klassen-Doppelbelegungen)."""

import pytest

from analysis.conflict_detector import (
    compare_teachers,
    filter_conflicts,
    find_conflicts,
    print_conflicts_rich,
    sort_conflicts,
    summarize_conflicts,
)
from analysis.errors import InvalidArgumentError
from config.defaults import default_periods
from data.fake_data import FakeDataGenerator
from models.assignment import Assignment
from models.conflict import Conflict


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _a(id: str, day: int, period: int, teacher: str = "", classes=None,
       subject: str = "Matematika") -> Assignment:
    return Assignment(
        id=id, day=day, period=period, subject_name=subject,
        teacher_name=teacher, class_names=classes or [],
    )


def _keys(conflicts: list[Conflict]) -> set[tuple]:
    return {
        (c.kind, c.day, c.period, c.entity_name, tuple(sorted(c.assignment_ids)))
        for c in conflicts
    }


@pytest.fixture(scope="module")
def demo_snapshot():
    return FakeDataGenerator(seed=42).generate()


# ─── Grundverhalten ───────────────────────────────────────────────────────────

class TestFindConflicts:
    def test_teacher_double_booking(self):
        """Ani unterrichtet Senin JP 1 in 7A und 8B → genau ein Lehrer-Konflikt."""
        a1 = _a("a1", 1, 1, "Ani", ["7A"])
        a2 = _a("a2", 1, 1, "Ani", ["8B"])
        conflicts = find_conflicts([a1, a2])
        assert len(conflicts) == 1
        c = conflicts[0]
        assert c.kind == "teacher"
        assert (c.day, c.period) == (1, 1)
        assert c.entity_name == "Ani"
        assert c.assignment_ids == ["a1", "a2"]

    def test_class_double_booking(self):
        """Klasse 7A hat Selasa JP 3 zwei Fächer → genau ein Klassen-Konflikt."""
        b1 = _a("b1", 2, 3, "Budi", ["7A"])
        b2 = _a("b2", 2, 3, "Citra", ["7A", "7B"])
        conflicts = find_conflicts([b1, b2])
        assert len(conflicts) == 1
        c = conflicts[0]
        assert c.kind == "class"
        assert c.entity_name == "7A"
        assert set(c.assignment_ids) == {"b1", "b2"}

    def test_no_conflict_across_slots(self):
        """Gleiche Lehrkraft an verschiedenen Slots → kein Konflikt."""
        assignments = [
            _a("x1", 1, 1, "Ani", ["7A"]),
            _a("x2", 1, 2, "Ani", ["7A"]),
            _a("x3", 2, 1, "Ani", ["7A"]),
        ]
        assert find_conflicts(assignments) == []

    def test_empty_input(self):
        """Leere Eingabe → leere Liste."""
        assert find_conflicts([]) == []

    def test_empty_teacher_names_never_conflict(self):
        """Zuweisungen ohne Lehrkraft bilden keinen Lehrer-Konflikt."""
        assignments = [
            _a("e1", 3, 4, "", ["7A"]),
            _a("e2", 3, 4, "", ["8A"]),
        ]
        assert find_conflicts(assignments) == []

    def test_empty_class_names_never_conflict(self):
        """Leere Klassennamen werden nicht als Klasse gezählt."""
        assignments = [
            _a("e1", 3, 4, "Ani", [""]),
            _a("e2", 3, 4, "Budi", [""]),
        ]
        assert find_conflicts(assignments) == []

    def test_same_class_twice_in_one_assignment(self):
        """Eine Klasse zweimal in derselben Zuweisung ist keine Doppelbelegung."""
        assert find_conflicts([_a("d1", 1, 1, "Ani", ["7A", "7A"])]) == []

    def test_assignment_in_teacher_and_class_conflict(self):
        """Eine Zuweisung kann in mehreren Konflikten vorkommen."""
        assignments = [
            _a("m1", 4, 2, "Ani", ["7A"]),
            _a("m2", 4, 2, "Ani", ["7A"]),
        ]
        conflicts = find_conflicts(assignments)
        assert {c.kind for c in conflicts} == {"teacher", "class"}
        for c in conflicts:
            assert set(c.assignment_ids) == {"m1", "m2"}

    def test_three_way_collision_single_conflict(self):
        """Drei Zuweisungen derselben Lehrkraft → ein Konflikt mit drei Einträgen."""
        assignments = [_a(f"t{i}", 5, 5, "Dewi", [f"{7 + i}A"]) for i in range(3)]
        conflicts = find_conflicts(assignments)
        assert len(conflicts) == 1
        assert conflicts[0].assignment_ids == ["t0", "t1", "t2"]

    def test_legacy_field_names(self):
        """Alte Exportfelder (mapel, guru, classes, jp) werden akzeptiert."""
        raw = [
            {"id": "r1", "day": 1, "jp": 2, "mapel": "IPA", "guru": "Eko", "classes": ["9"]},
            {"id": "r2", "day": 1, "jp": 2, "mapel": "IPS", "guru": "Eko", "classes": ["8A"]},
        ]
        assignments = [Assignment.model_validate(r) for r in raw]
        conflicts = find_conflicts(assignments)
        assert len(conflicts) == 1
        assert conflicts[0].entity_name == "Eko"


# ─── Eigenschaften ────────────────────────────────────────────────────────────

class TestConflictProperties:
    def test_symmetry(self):
        """Reihenfolge der Eingabe ändert die Konfliktmenge nicht."""
        assignments = [
            _a("s1", 1, 1, "Ani", ["7A"]),
            _a("s2", 1, 1, "Ani", ["8A"]),
            _a("s3", 1, 1, "Budi", ["8A"]),
            _a("s4", 2, 2, "Citra", ["9"]),
        ]
        forward = _keys(find_conflicts(assignments))
        backward = _keys(find_conflicts(list(reversed(assignments))))
        assert forward == backward

    def test_idempotent(self):
        """Zweimal aufrufen → gleiches Ergebnis, Eingabe unverändert."""
        assignments = [_a("i1", 1, 1, "Ani", ["7A"]), _a("i2", 1, 1, "Ani", ["7B"])]
        snapshot = list(assignments)
        assert find_conflicts(assignments) == find_conflicts(assignments)
        assert assignments == snapshot

    def test_clean_shared_slot_has_no_conflicts(self):
        """Verschiedene Lehrkräfte, disjunkte Klassen im selben Slot → kein Konflikt."""
        assignments = [
            _a("n1", 1, 1, "Ani", ["7A"]),
            _a("n2", 1, 1, "Budi", ["7B"]),
            _a("n3", 1, 1, "Citra", ["8A", "8B"]),
        ]
        assert find_conflicts(assignments) == []

    def test_no_false_positives_on_demo_data(self, demo_snapshot):
        """Jeder gemeldete Konflikt betrifft wirklich dieselbe Entität im selben Slot."""
        for c in find_conflicts(demo_snapshot.assignments):
            assert len(c.colliding_assignments) >= 2
            for a in c.colliding_assignments:
                assert (a.day, a.period) == (c.day, c.period)
                if c.kind == "teacher":
                    assert a.teacher_name == c.entity_name
                else:
                    assert c.entity_name in a.class_names

    def test_demo_data_has_injected_conflicts(self, demo_snapshot):
        """Demo-Daten enthalten genau die absichtlichen Fehler."""
        conflicts = find_conflicts(demo_snapshot.assignments)
        summary = summarize_conflicts(conflicts)
        assert summary.teacher_conflicts == 1
        assert summary.class_conflicts == 1
        teacher = next(c for c in conflicts if c.kind == "teacher")
        klass = next(c for c in conflicts if c.kind == "class")
        assert (teacher.day, teacher.period) == (1, 1)
        assert (klass.day, klass.period) == (2, 2)


# ─── Darstellung, Filter, Vergleich ───────────────────────────────────────────

class TestConflictHelpers:
    @pytest.fixture
    def conflicts(self) -> list[Conflict]:
        return find_conflicts([
            _a("c1", 2, 1, "Budi", ["7A"], subject="IPA"),
            _a("c2", 2, 1, "Budi", ["8A"], subject="Fisika"),
            _a("c3", 1, 3, "Ani", ["9"], subject="Diniyah - Fiqih"),
            _a("c4", 1, 3, "Citra", ["9"], subject="BK - Bimbingan Konseling"),
        ])

    def test_sort_order(self, conflicts):
        """Sortierung nach Tag, dann Stunde."""
        ordered = sort_conflicts(conflicts)
        assert [(c.day, c.period) for c in ordered] == [(1, 3), (2, 1)]

    def test_filter_by_kind(self, conflicts):
        assert [c.kind for c in filter_conflicts(conflicts, "teacher")] == ["teacher"]
        assert [c.kind for c in filter_conflicts(conflicts, "class")] == ["class"]
        assert len(filter_conflicts(conflicts, "all")) == 2

    def test_filter_by_query_case_insensitive(self, conflicts):
        """Suchtext trifft Name, Fach und Lehrkraft (Groß/Klein egal)."""
        assert [c.entity_name for c in filter_conflicts(conflicts, query="budi")] == ["Budi"]
        assert [c.entity_name for c in filter_conflicts(conflicts, query="FIQIH")] == ["9"]
        assert [c.entity_name for c in filter_conflicts(conflicts, query="citra")] == ["9"]
        assert filter_conflicts(conflicts, query="nicht vorhanden") == []

    def test_filter_invalid_kind_raises(self, conflicts):
        with pytest.raises(InvalidArgumentError):
            filter_conflicts(conflicts, kind="room")

    def test_summary(self, conflicts):
        summary = summarize_conflicts(conflicts)
        assert (summary.total, summary.teacher_conflicts, summary.class_conflicts) == (2, 1, 1)

    def test_compare_teachers_overlap(self):
        """Gemeinsam belegte Slots zweier Lehrkräfte werden gemeldet."""
        assignments = [
            _a("v1", 1, 1, "Ani", ["7A"]),
            _a("v2", 1, 2, "Ani", ["7A"]),
            _a("v3", 1, 1, "Budi", ["8A"]),
            _a("v4", 3, 1, "Budi", ["8A"]),
        ]
        result = compare_teachers("Ani", "Budi", assignments)
        assert [a.id for a in result.assignments_a] == ["v1", "v2"]
        assert [a.id for a in result.assignments_b] == ["v3", "v4"]
        assert [a.id for a in result.overlaps] == ["v1"]

    def test_print_rich_runs(self, conflicts, capsys):
        """Rich-Ausgabe läuft ohne Fehler und nennt die Betroffenen."""
        print_conflicts_rich(conflicts, default_periods())
        out = capsys.readouterr().out
        assert "Budi" in out
        assert "KONFLIKTE" in out

    def test_print_rich_empty(self, capsys):
        print_conflicts_rich([])
        assert "KEINE KONFLIKTE" in capsys.readouterr().out
