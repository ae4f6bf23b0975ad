"""Testdaten-Generator für Jadwal Pelajaran.

Erzeugt einen realistischen Wochenplan (Senin–Sabtu, JP 1–7) für eine
kleine SMP/SMK mit absichtlichen Fehlern für die Konflikt-Prüfung.

Absichtliche Fehler:
  1. Lehrer-Doppelbelegung: eine Lehrkraft steht Senin JP 1 in zwei Klassen
  2. Klassen-Doppelbelegung: eine Klasse hat Selasa JP 2 zwei Fächer
  3. Zuweisung ohne Klassen (zählt unter per_class trotzdem 1 JP)

Gemeinsamer Unterricht: einige Fächer (Diniyah, BK) laufen für zwei
Parallelklassen gleichzeitig → zählen unter per_class doppelt.
"""

import random
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box

from config.defaults import SCHOOL_DAYS
from models.assignment import Assignment
from models.school_class import SchoolClass
from models.snapshot import ScheduleSnapshot
from models.subject import Subject
from models.task import Task
from models.teacher import Teacher

console = Console()

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Ahmad", "Budi", "Dewi", "Eko", "Fitri", "Hendra", "Indah", "Joko",
    "Kartika", "Lestari", "Muhammad", "Nur", "Putri", "Rahmat", "Sari",
    "Taufik", "Umar", "Wahyu", "Yusuf", "Zahra", "Ani", "Rina", "Agus",
]

_LAST_NAMES = [
    "Santoso", "Wijaya", "Hidayat", "Saputra", "Pratama", "Kurniawan",
    "Nugroho", "Setiawan", "Rahman", "Hakim", "Siregar", "Lubis",
    "Hasibuan", "Nasution", "Putra", "Susanto", "Firmansyah", "Maulana",
]

# Fächer mit Präfix-Kategorie (wie auf den gedruckten Plänen)
_SUBJECTS = [
    "IT - Pemrograman Dasar",
    "IT - Jaringan Komputer",
    "IT - Desain Grafis",
    "English - Speaking",
    "English - Grammar",
    "Diniyah - Fiqih",
    "Diniyah - Hadits",
    "Diniyah - Bahasa Arab",
    "BK - Bimbingan Konseling",
    "Matematika",
    "Bahasa Indonesia",
    "IPA",
]

# Fächer, die für zwei Parallelklassen gemeinsam laufen
_SHARED_PREFIXES = ("Diniyah", "BK")

_CLASSES = ["7", "8A", "8B", "9", "10", "11", "12"]

_TASKS = [
    ("Wali Kelas", 2),
    ("Koordinator IT", 4),
    ("Pembina Pramuka", 2),
    ("Wakasek Kurikulum", 12),
    ("Bendahara", 3),
]


class FakeDataGenerator:
    """Erzeugt einen Demo-Datenstand (reproduzierbar über seed)."""

    def __init__(self, seed: int = 42, num_teachers: int = 14,
                 lessons_per_day: int = 7):
        self.rng = random.Random(seed)
        self.num_teachers = num_teachers
        self.lessons_per_day = lessons_per_day

    def generate(self) -> ScheduleSnapshot:
        """Erzeugt Stammdaten, Aufgaben und Wochenplan."""
        classes = [SchoolClass(id=f"kelas-{i}", name=n) for i, n in enumerate(_CLASSES)]
        subjects = [Subject(id=f"mapel-{i}", name=n) for i, n in enumerate(_SUBJECTS)]
        tasks = [Task(id=f"tugas-{i}", name=n, jp=jp) for i, (n, jp) in enumerate(_TASKS)]
        teachers = self._make_teachers(tasks)
        assignments = self._make_assignments(teachers, classes, subjects)
        assignments.extend(self._inject_conflicts(assignments, teachers))

        return ScheduleSnapshot(
            assignments=assignments,
            teachers=teachers,
            tasks=tasks,
            classes=classes,
            subjects=subjects,
        )

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _make_teachers(self, tasks: list[Task]) -> list[Teacher]:
        names: set[str] = set()
        while len(names) < self.num_teachers:
            names.add(f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}")

        teachers = []
        for i, name in enumerate(sorted(names)):
            k = self.rng.choice([0, 0, 1, 1, 2])
            task_ids = [t.id for t in self.rng.sample(tasks, k)]
            # Ab und zu eine verwaiste Aufgaben-ID (gelöschte Aufgabe)
            if i == 0:
                task_ids.append("tugas-geloescht")
            teachers.append(Teacher(id=f"guru-{i:02d}", name=name, task_ids=task_ids))
        return teachers

    # ─── Wochenplan ───────────────────────────────────────────────────────────

    def _make_assignments(
        self,
        teachers: list[Teacher],
        classes: list[SchoolClass],
        subjects: list[Subject],
    ) -> list[Assignment]:
        """Konfliktfreier Grundplan: pro Slot jede Lehrkraft höchstens einmal,
        jede Klasse höchstens einmal."""
        assignments: list[Assignment] = []
        class_names = [c.name for c in classes]
        subject_names = [s.name for s in subjects]

        for day in SCHOOL_DAYS:
            # Sabtu nur halber Tag
            last_jp = 4 if day == 6 else self.lessons_per_day
            for jp in range(1, last_jp + 1):
                free_teachers = [t.name for t in teachers]
                self.rng.shuffle(free_teachers)
                free_classes = list(class_names)
                self.rng.shuffle(free_classes)

                while free_classes and free_teachers:
                    subject = self.rng.choice(subject_names)
                    group = [free_classes.pop()]
                    if subject.startswith(_SHARED_PREFIXES) and free_classes:
                        group.append(free_classes.pop())
                    assignments.append(Assignment(
                        id=f"jadwal-{len(assignments):04d}",
                        day=day,
                        period=jp,
                        subject_name=subject,
                        teacher_name=free_teachers.pop(),
                        class_names=group,
                    ))
        return assignments

    def _inject_conflicts(
        self, assignments: list[Assignment], teachers: list[Teacher]
    ) -> list[Assignment]:
        """Fügt die absichtlichen Fehler hinzu (siehe Modul-Docstring)."""
        extra: list[Assignment] = []
        n = len(assignments)

        # 1. Lehrer-Doppelbelegung Senin JP 1
        first = next(a for a in assignments if a.day == 1 and a.period == 1)
        extra.append(Assignment(
            id=f"jadwal-{n:04d}", day=1, period=1,
            subject_name=first.subject_name, teacher_name=first.teacher_name,
            class_names=["Tahfidz"],
        ))

        # 2. Klassen-Doppelbelegung Selasa JP 2
        second = next(a for a in assignments if a.day == 2 and a.period == 2)
        busy = {a.teacher_name for a in assignments if a.day == 2 and a.period == 2}
        idle = next((t.name for t in teachers if t.name not in busy), teachers[-1].name)
        extra.append(Assignment(
            id=f"jadwal-{n + 1:04d}", day=2, period=2,
            subject_name="Bahasa Indonesia", teacher_name=idle,
            class_names=[second.class_names[0]],
        ))

        # 3. Zuweisung ohne Klassen (Rabu JP 7)
        busy = {a.teacher_name for a in assignments if a.day == 3 and a.period == 7}
        idle = next((t.name for t in teachers if t.name not in busy), None)
        if idle is not None:
            extra.append(Assignment(
                id=f"jadwal-{n + 2:04d}", day=3, period=7,
                subject_name="BK - Bimbingan Konseling", teacher_name=idle,
                class_names=[],
            ))
        return extra

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: ScheduleSnapshot, title: Optional[str] = None) -> None:
        """Zeigt eine kurze Tabelle der erzeugten Lehrkräfte."""
        table = Table(title=title or "Demo-Lehrkräfte", box=box.ROUNDED)
        table.add_column("ID")
        table.add_column("Name", style="bold")
        table.add_column("Zuweisungen", justify="right")
        table.add_column("Aufgaben")
        task_names = {t.id: t.name for t in data.tasks}
        for t in data.sorted_teachers():
            count = sum(1 for a in data.assignments if a.teacher_name == t.name)
            table.add_row(
                t.id, t.name, str(count),
                ", ".join(task_names.get(tid, f"[dim]{tid}[/dim]") for tid in t.task_ids),
            )
        console.print(table)
