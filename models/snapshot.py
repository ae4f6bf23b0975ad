"""ScheduleSnapshot: vollständiger Datenstand für die Kernberechnungen (Pydantic v2).

Die Anwendung liest einmal einen konsistenten Stand (JSON-Datei, Import
oder Demo-Generator) und übergibt ihn unverändert an Konflikt-Erkennung,
JP-Rechner und Zeitraster.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.assignment import Assignment
from models.school_class import SchoolClass, class_sort_key
from models.subject import Subject
from models.task import Task
from models.teacher import Teacher


class ScheduleSnapshot(BaseModel):
    """Datenstand: Zuweisungen plus Stammdaten (Guru, Kelas, Mapel, Tugas)."""

    assignments: list[Assignment] = []
    teachers: list[Teacher] = []
    tasks: list[Task] = []
    classes: list[SchoolClass] = []
    subjects: list[Subject] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenstand."""
        days = sorted({a.day for a in self.assignments})
        lines = [
            f"Zuweisungen: {len(self.assignments)}"
            + (f" (Tage {', '.join(str(d) for d in days)})" if days else ""),
            f"Lehrkräfte: {len(self.teachers)}",
            f"Klassen: {len(self.classes)}",
            f"Fächer: {len(self.subjects)}",
            f"Zusatzaufgaben: {len(self.tasks)} "
            f"({sum(t.jp for t in self.tasks)} JP gesamt)" if self.tasks else "",
        ]
        return "\n".join(l for l in lines if l)

    def sorted_teachers(self) -> list[Teacher]:
        """Lehrkräfte alphabetisch nach Name."""
        return sorted(self.teachers, key=lambda t: t.name)

    def sorted_classes(self) -> list[SchoolClass]:
        """Klassen nach Jahrgang (numerisch), dann nach Name."""
        return sorted(self.classes, key=lambda c: class_sort_key(c.name))

    def class_names(self) -> list[str]:
        """Alle Klassennamen: Stammdaten plus in Zuweisungen genannte Klassen."""
        names = {c.name for c in self.classes}
        for a in self.assignments:
            names.update(n for n in a.class_names if n)
        return sorted(names, key=class_sort_key)

    def find_teacher(self, name: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.name == name), None)

    def assignments_for_day(self, day: int) -> list[Assignment]:
        return [a for a in self.assignments if a.day == day]

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datenstand als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "ScheduleSnapshot":
        """Lädt einen Datenstand aus einer JSON-Datei.

        Akzeptiert auch den Rohexport der alten Web-App mit den Collections
        schedules/guru/tugas/kelas/mapel.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if isinstance(raw, dict) and "schedules" in raw:
            raw = {
                "assignments": raw.get("schedules", []),
                "teachers": raw.get("guru", []),
                "tasks": raw.get("tugas", []),
                "classes": raw.get("kelas", []),
                "subjects": raw.get("mapel", []),
            }
        try:
            return cls.model_validate(raw)
        except Exception as e:
            raise ValueError(
                f"Datenstand ungültig: {path}\n"
                f"Pydantic-Fehler: {e}"
            ) from e
