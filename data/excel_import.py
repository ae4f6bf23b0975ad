"""Excel-Import und Template-Generator für Stammdaten und Wochenplan.

Template-Generator: Excel-Vorlage mit Kopfzeilen, Beispielzeilen und Zeitraster.
Import-Funktion:    Excel → ScheduleSnapshot mit Validierung und ImportReport.
"""

import difflib
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from config.defaults import DAY_NAMES
from config.schema import AppConfig
from config.manager import ConfigManager
from models.assignment import Assignment
from models.school_class import SchoolClass
from models.snapshot import ScheduleSnapshot
from models.subject import Subject
from models.task import Task
from models.teacher import Teacher

logger = logging.getLogger(__name__)


class ExcelImportError(Exception):
    """Fehler beim Excel-Import."""


class ImportReport(BaseModel):
    """Hinweise und Warnungen eines erfolgreichen Imports."""

    warnings: list[str]
    imported: dict[str, int]      # Blatt → Anzahl Zeilen

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        lines = [
            "  ".join(f"{k}: [bold]{v}[/bold]" for k, v in self.imported.items())
        ]
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        else:
            lines.append("[dim]Keine Warnungen.[/dim]")
        console.print(Panel("\n".join(lines), title="Import", border_style="cyan"))


# ─── Tages-Mapping ────────────────────────────────────────────────────────────

_DAY_MAP = {name.lower(): i for i, name in enumerate(DAY_NAMES) if i > 0}
_DAY_MAP.update({"sen": 1, "sel": 2, "rab": 3, "kam": 4, "jum": 5, "sab": 6})


def _parse_day(raw: str) -> Optional[int]:
    """'Senin' / 'sen' / '1' → 1; unbekannt → None."""
    token = raw.strip().lower()
    if token.isdigit():
        day = int(token)
        return day if 1 <= day <= 6 else None
    return _DAY_MAP.get(token)


def _parse_period(raw: str) -> Optional[int]:
    """'3' / 'JP 3' / '3.0' → 3; unbekannt → None."""
    token = raw.strip().upper().removeprefix("JP").strip()
    try:
        value = int(float(token))
    except (ValueError, OverflowError):
        return None
    return value if value >= 1 else None


def _split_list(raw: str) -> list[str]:
    """'7, 8A; 8B' → ['7', '8A', '8B']"""
    return [t.strip() for t in raw.replace(";", ",").split(",") if t.strip()]


def _fuzzy_name(name: str, known: list[str]) -> Optional[str]:
    """Bester Treffer für Tippfehler (difflib)."""
    matches = difflib.get_close_matches(name, known, n=1, cutoff=0.85)
    return matches[0] if matches else None


# Beispielzeilen der Vorlage (Zeile 2, kursiv); beim Import übersprungen
_EXAMPLES: dict[str, list] = {
    "Guru":   ["Ani Wijaya", "Wali Kelas"],
    "Kelas":  ["7"],
    "Mapel":  ["IT - Pemrograman Dasar"],
    "Tugas":  ["Wali Kelas", 2],
    "Jadwal": ["Senin", 1, "IT - Pemrograman Dasar", "Ani Wijaya", "8A, 8B"],
}


# ─── TEMPLATE ──────────────────────────────────────────────────────────────────

def generate_template(config: AppConfig, path: Path) -> None:
    """Erzeugt eine Excel-Vorlage.

    Blätter:
      - Guru:     Nama, Tugas (kommagetrennt)
      - Kelas:    Nama
      - Mapel:    Nama
      - Tugas:    Nama, JP
      - Jadwal:   Hari, JP, Mapel, Guru, Kelas (kommagetrennt)
      - Zeitraster: aktives Raster zur Orientierung (wird nicht importiert)
    """
    import openpyxl
    from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
    from openpyxl.utils import get_column_letter
    from openpyxl.worksheet.datavalidation import DataValidation

    wb = openpyxl.Workbook()

    # ── Hilfs-Styles ─────────────────────────────────────────────────────────
    hdr_font = Font(bold=True, color="FFFFFF", size=11)
    hdr_fill = PatternFill("solid", fgColor="2E6DA4")
    alt_fill = PatternFill("solid", fgColor="D6E4F0")
    ex_font = Font(italic=True, color="888888")
    ex_fill = PatternFill("solid", fgColor="F5F5F5")
    center = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="BBBBBB")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    def style_header(cell):
        cell.font = hdr_font
        cell.fill = hdr_fill
        cell.alignment = center
        cell.border = border

    def style_data(cell, alt: bool = False):
        cell.fill = alt_fill if alt else PatternFill()
        cell.alignment = Alignment(vertical="center")
        cell.border = border

    def style_example(cell):
        cell.font = ex_font
        cell.fill = ex_fill
        cell.border = border

    def new_sheet(title: str, headers: list[str], widths: list[int], example: list):
        ws = wb.create_sheet(title)
        for col, (h, w) in enumerate(zip(headers, widths), 1):
            style_header(ws.cell(row=1, column=col, value=h))
            ws.column_dimensions[get_column_letter(col)].width = w
        for col, val in enumerate(example, 1):
            style_example(ws.cell(row=2, column=col, value=val))
        return ws

    wb.remove(wb.active)

    new_sheet("Guru", ["Nama", "Tugas"], [30, 40], _EXAMPLES["Guru"])
    new_sheet("Kelas", ["Nama"], [16], _EXAMPLES["Kelas"])
    new_sheet("Mapel", ["Nama"], [34], _EXAMPLES["Mapel"])
    new_sheet("Tugas", ["Nama", "JP"], [30, 8], _EXAMPLES["Tugas"])
    ws_jd = new_sheet(
        "Jadwal", ["Hari", "JP", "Mapel", "Guru", "Kelas"], [12, 6, 34, 30, 20],
        _EXAMPLES["Jadwal"],
    )

    days = ",".join(DAY_NAMES[1:config.days_per_week + 1])
    dv_day = DataValidation(type="list", formula1=f'"{days}"', allow_blank=False)
    dv_day.sqref = "A3:A2000"
    ws_jd.add_data_validation(dv_day)

    # Zeitraster zur Orientierung
    ws_zt = wb.create_sheet("Zeitraster")
    for col, h in enumerate(["Urutan", "Jenis", "JP / Nama", "Mulai", "Selesai"], 1):
        style_header(ws_zt.cell(row=1, column=col, value=h))
    for r, p in enumerate(ConfigManager.resolve_periods(config), 2):
        alt = (r % 2 == 0)
        row_vals = [
            p.order,
            "Pelajaran" if p.is_lesson else "Istirahat",
            p.period_number if p.is_lesson else p.break_name,
            p.start_time,
            p.end_time,
        ]
        for col, val in enumerate(row_vals, 1):
            style_data(ws_zt.cell(row=r, column=col, value=val), alt=alt)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)


# ─── IMPORTER ──────────────────────────────────────────────────────────────────

class ExcelImporter:
    """Importiert Stammdaten und Wochenplan aus einer Excel-Vorlage."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._wb = None
        self._errors: list[str] = []
        self._warnings: list[str] = []

    def _open(self):
        try:
            import openpyxl
            self._wb = openpyxl.load_workbook(
                str(self.path), read_only=True, data_only=True
            )
        except FileNotFoundError:
            raise ExcelImportError(f"Datei nicht gefunden: {self.path}")
        except Exception as e:
            raise ExcelImportError(f"Fehler beim Öffnen der Excel-Datei: {e}")

    def _get_sheet(self, name: str):
        if self._wb is None:
            self._open()
        for sn in self._wb.sheetnames:
            if sn.strip().lower() == name.strip().lower():
                return self._wb[sn]
        return None

    def _sheet_rows(self, name: str, required: bool = False) -> list[tuple[int, dict]]:
        """Tabellenblatt → Liste von (Excel-Zeilennummer, Dict), erste Zeile = Header.

        Die unveränderte Beispielzeile der Vorlage (Zeile 2) wird übersprungen.
        """
        sheet = self._get_sheet(name)
        if sheet is None:
            if required:
                raise ExcelImportError(f"Blatt '{name}' fehlt")
            return []
        rows = list(sheet.iter_rows(values_only=True))
        if not rows:
            return []
        headers = [
            str(h).strip().lower() if h is not None else f"col_{i}"
            for i, h in enumerate(rows[0])
        ]
        example = [str(v) for v in _EXAMPLES.get(name, [])]
        result = []
        for r, row in enumerate(rows[1:], 2):
            if all(v is None or v == "" for v in row):
                continue
            if r == 2 and example and [str(v).strip() for v in row[:len(example)] if v is not None] == example:
                continue  # Beispielzeile
            result.append((r, {
                headers[i]: (str(v).strip() if v is not None else "")
                for i, v in enumerate(row)
                if i < len(headers)
            }))
        return result

    # ── Stammdaten ──────────────────────────────────────────────────────────

    def import_tasks(self) -> list[Task]:
        tasks = []
        for i, row in self._sheet_rows("Tugas"):
            name = row.get("nama", "")
            if not name:
                continue
            try:
                jp = int(float(row.get("jp", "0") or 0))
            except (ValueError, OverflowError):
                self._errors.append(f"Tugas Zeile {i}: JP '{row.get('jp')}' ist keine Zahl")
                continue
            if jp < 0:
                self._errors.append(f"Tugas Zeile {i}: JP darf nicht negativ sein")
                continue
            tasks.append(Task(id=f"tugas-{len(tasks)}", name=name, jp=jp))
        return tasks

    def import_teachers(self, tasks: list[Task]) -> list[Teacher]:
        task_ids = {t.name.lower(): t.id for t in tasks}
        teachers: list[Teacher] = []
        seen: set[str] = set()
        for i, row in self._sheet_rows("Guru"):
            name = row.get("nama", "")
            if not name:
                continue
            if name in seen:
                self._warnings.append(f"Guru Zeile {i}: '{name}' doppelt, übersprungen")
                continue
            seen.add(name)
            ids = []
            for task_name in _split_list(row.get("tugas", "")):
                tid = task_ids.get(task_name.lower())
                if tid is None:
                    self._warnings.append(
                        f"Guru Zeile {i}: Tugas '{task_name}' unbekannt, ignoriert"
                    )
                    continue
                ids.append(tid)
            teachers.append(Teacher(id=f"guru-{len(teachers):02d}", name=name, task_ids=ids))
        return teachers

    def import_named(self, sheet: str, model, prefix: str) -> list:
        """Einspaltige Stammdaten (Kelas, Mapel)."""
        names = list(dict.fromkeys(
            row.get("nama", "") for _, row in self._sheet_rows(sheet) if row.get("nama")
        ))
        return [model(id=f"{prefix}-{i}", name=n) for i, n in enumerate(names)]

    # ── Wochenplan ──────────────────────────────────────────────────────────

    def import_assignments(
        self, teachers: list[Teacher], classes: list[SchoolClass]
    ) -> list[Assignment]:
        known_teachers = [t.name for t in teachers]
        known_classes = {c.name for c in classes}
        assignments: list[Assignment] = []

        for i, row in self._sheet_rows("Jadwal", required=True):
            row_id = f"Jadwal Zeile {i}"
            day = _parse_day(row.get("hari", ""))
            period = _parse_period(row.get("jp", ""))
            if day is None:
                self._errors.append(f"{row_id}: Hari '{row.get('hari')}' ungültig")
                continue
            if period is None:
                self._errors.append(f"{row_id}: JP '{row.get('jp')}' ungültig")
                continue

            teacher = row.get("guru", "")
            if teacher and known_teachers and teacher not in known_teachers:
                match = _fuzzy_name(teacher, known_teachers)
                if match:
                    self._warnings.append(
                        f"{row_id}: Guru '{teacher}' unbekannt → als '{match}' importiert"
                    )
                    teacher = match
                else:
                    self._warnings.append(f"{row_id}: Guru '{teacher}' nicht in Stammdaten")

            class_names = _split_list(row.get("kelas", ""))
            if not class_names:
                self._warnings.append(f"{row_id}: keine Kelas angegeben (zählt 1 JP)")
            unknown = [c for c in class_names if known_classes and c not in known_classes]
            if unknown:
                self._warnings.append(f"{row_id}: Kelas {', '.join(unknown)} nicht in Stammdaten")

            assignments.append(Assignment(
                id=f"jadwal-{len(assignments):04d}",
                day=day,
                period=period,
                subject_name=row.get("mapel", ""),
                teacher_name=teacher,
                class_names=class_names,
            ))
        return assignments

    def import_all(self) -> tuple[ScheduleSnapshot, ImportReport]:
        """Importiert alle Blätter → ScheduleSnapshot + ImportReport."""
        self._open()
        self._errors = []
        self._warnings = []

        tasks = self.import_tasks()
        teachers = self.import_teachers(tasks)
        classes = self.import_named("Kelas", SchoolClass, "kelas")
        subjects = self.import_named("Mapel", Subject, "mapel")
        assignments = self.import_assignments(teachers, classes)

        if self._errors:
            raise ExcelImportError(
                f"Import mit {len(self._errors)} Fehlern:\n"
                + "\n".join(f"  • {e}" for e in self._errors)
            )

        for w in self._warnings:
            logger.warning(w)

        snapshot = ScheduleSnapshot(
            assignments=assignments,
            teachers=teachers,
            tasks=tasks,
            classes=classes,
            subjects=subjects,
        )
        report = ImportReport(
            warnings=self._warnings,
            imported={
                "Guru": len(teachers),
                "Kelas": len(classes),
                "Mapel": len(subjects),
                "Tugas": len(tasks),
                "Jadwal": len(assignments),
            },
        )
        return snapshot, report


def import_from_excel(path: Path) -> tuple[ScheduleSnapshot, ImportReport]:
    """Importiert Stammdaten und Wochenplan aus einer Excel-Datei.

    Raises:
        ExcelImportError: Bei fehlendem Jadwal-Blatt oder ungültigen Zeilen.
    """
    importer = ExcelImporter(path)
    return importer.import_all()
