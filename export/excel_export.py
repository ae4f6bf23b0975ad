"""Excel-Export für Jadwal Pelajaran (openpyxl)."""

from pathlib import Path

from analysis.conflict_detector import find_conflicts, sort_conflicts
from analysis.load_calculator import TeacherLoad, build_load_report
from analysis.time_slots import day_name, period_label_for_number
from config.manager import ConfigManager
from config.schema import AppConfig
from models.conflict import Conflict
from models.period import Period
from models.snapshot import ScheduleSnapshot

from export.helpers import (
    COLORS, class_grid, conflict_cells, entity_color, format_assignments,
    get_subject_color, today_str,
)


class ExcelExporter:
    """Exportiert einen Datenstand in eine Excel-Datei.

    Blätter: "Rekap JP", "Konflik" und je Schultag ein Raster Stunde × Klasse.
    """

    # Spaltenbreiten (Excel-Einheiten)
    COL_JP_W    = 6
    COL_ZEIT_W  = 13
    COL_CLASS_W = 22

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22
    ROW_LESSON_H = 36
    ROW_PAUSE_H  = 14

    def __init__(self, snapshot: ScheduleSnapshot, config: AppConfig):
        self.data      = snapshot
        self.config    = config
        self.periods: list[Period] = ConfigManager.resolve_periods(config)
        self.days      = config.school_days
        self.day_names = config.day_names
        self.conflicts: list[Conflict] = sort_conflicts(
            find_conflicts(snapshot.assignments)
        )
        self._marked = conflict_cells(self.conflicts)
        self.loads: list[TeacherLoad] = build_load_report(
            snapshot.teachers, snapshot.assignments, snapshot.tasks,
            config.jp_calculation_method,
        )

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Excel-Datei mit allen Sheets."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_rekap(wb)
        self._sheet_konflik(wb)
        for day in self.days:
            self._sheet_day(wb, day)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = True):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_headers(self, ws, row: int, headers: list[str]) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align(wrap=False)
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _write_title(self, ws, title: str) -> int:
        """Schreibt Schulname und Titel; gibt die nächste freie Zeile zurück."""
        from openpyxl.styles import Font
        ws.cell(row=1, column=1, value=self.config.school_name).font = Font(bold=True, size=14)
        ws.cell(row=2, column=1, value=f"{title} – Erstellt: {today_str()}")
        return 4

    # ─── Sheet: Rekap JP ──────────────────────────────────────────────────────

    def _sheet_rekap(self, wb) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet(title="Rekap JP", index=0)
        policy = self.config.jp_calculation_method.value
        row = self._write_title(ws, f"Rekap JP ({policy})")

        day_headers = [self.day_names[d] for d in self.days]
        headers = ["No", "Guru"] + day_headers + ["JP Mengajar", "Tugas", "JP Tugas", "Total"]
        self._write_headers(ws, row, headers)
        row += 1

        border = self._thin_border()
        for i, load in enumerate(self.loads, 1):
            values = (
                [i, load.teacher_name]
                + [load.daily_load.get(d, 0) for d in self.days]
                + [
                    load.teaching_load,
                    ", ".join(t.name for t in load.resolved_tasks),
                    load.task_load,
                    load.grand_total,
                ]
            )
            for col, value in enumerate(values, 1):
                ws.cell(row=row, column=col, value=value).border = border
            ws.cell(row=row, column=2).fill = self._fill(
                entity_color(load.teacher_name, "teacher")
            )
            ws.cell(row=row, column=len(values)).font = Font(bold=True)
            row += 1

        # Summenzeile
        total_col = len(headers)
        ws.cell(row=row, column=2, value="Jumlah").font = Font(bold=True)
        ws.cell(
            row=row, column=total_col,
            value=sum(l.grand_total for l in self.loads),
        ).font = Font(bold=True)

        ws.column_dimensions["A"].width = 5
        ws.column_dimensions["B"].width = 30
        for col in range(3, 3 + len(self.days)):
            ws.column_dimensions[get_column_letter(col)].width = 9
        ws.column_dimensions[get_column_letter(3 + len(self.days))].width = 12
        ws.column_dimensions[get_column_letter(4 + len(self.days))].width = 36
        ws.column_dimensions[get_column_letter(5 + len(self.days))].width = 10
        ws.column_dimensions[get_column_letter(6 + len(self.days))].width = 8

    # ─── Sheet: Konflik ───────────────────────────────────────────────────────

    def _sheet_konflik(self, wb) -> None:
        from openpyxl.styles import Font

        ws = wb.create_sheet(title="Konflik")
        row = self._write_title(ws, "Konflik Jadwal")

        if not self.conflicts:
            ws.cell(row=row, column=1, value="Keine Konflikte gefunden.").font = Font(
                italic=True, color="2E7D32"
            )
            ws.column_dimensions["A"].width = 30
            return

        self._write_headers(ws, row, ["Typ", "Hari", "Jam", "Betroffen", "Mapel", "Guru", "Kelas"])
        row += 1

        border = self._thin_border()
        for c in self.conflicts:
            label = "Guru" if c.kind == "teacher" else "Kelas"
            fill = self._fill("FFEECC" if c.kind == "teacher" else "F3D6FF")
            for a in c.colliding_assignments:
                values = [
                    label,
                    day_name(c.day, self.day_names),
                    period_label_for_number(self.periods, c.period),
                    c.entity_name,
                    a.subject_name,
                    a.teacher_name,
                    ", ".join(a.class_names),
                ]
                for col, value in enumerate(values, 1):
                    cell = ws.cell(row=row, column=col, value=value)
                    cell.border = border
                    cell.fill = fill
                row += 1

        for col, width in zip("ABCDEFG", [8, 10, 24, 18, 30, 28, 18]):
            ws.column_dimensions[col].width = width

    # ─── Sheet: Tagesraster ───────────────────────────────────────────────────

    def _sheet_day(self, wb, day: int) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet(title=(self.day_names[day] or f"Hari {day}")[:31])
        class_names = self.data.class_names()
        self._write_headers(ws, 1, ["JP", "Zeit"] + class_names)

        grid = class_grid(self.data.assignments, day)
        border = self._thin_border()
        num_cols = 2 + len(class_names)

        excel_row = 2
        for p in self.periods:
            if p.is_break:
                label = f"── {p.break_name} ({p.start_time}–{p.end_time}) ──"
                ws.merge_cells(
                    start_row=excel_row, start_column=1,
                    end_row=excel_row, end_column=max(num_cols, 2),
                )
                c = ws.cell(row=excel_row, column=1, value=label)
                c.fill = self._fill(COLORS["pause"])
                c.alignment = self._center_align(wrap=False)
                c.font = Font(italic=True, size=8, color="666666")
                ws.row_dimensions[excel_row].height = self.ROW_PAUSE_H
                excel_row += 1
                continue

            c = ws.cell(row=excel_row, column=1, value=p.period_number)
            c.alignment = self._center_align(wrap=False)
            c.border = border
            c.font = Font(bold=True, size=9)

            c = ws.cell(row=excel_row, column=2, value=f"{p.start_time}–{p.end_time}")
            c.alignment = self._center_align(wrap=False)
            c.border = border
            c.font = Font(size=8)

            for col, name in enumerate(class_names, 3):
                here = grid.get((name, p.period_number), [])
                c = ws.cell(row=excel_row, column=col, value=format_assignments(here))
                c.fill = self._fill(self._cell_color(day, p.period_number, name, here))
                c.alignment = self._center_align()
                c.border = border
                c.font = Font(size=8)
            ws.row_dimensions[excel_row].height = self.ROW_LESSON_H
            excel_row += 1

        ws.column_dimensions["A"].width = self.COL_JP_W
        ws.column_dimensions["B"].width = self.COL_ZEIT_W
        for col in range(3, 3 + len(class_names)):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_CLASS_W
        ws.freeze_panes = "C2"

    def _cell_color(
        self, day: int, period: int, class_name: str, here: list
    ) -> str:
        """Konflikt → rot, leer → grau, sonst Farbe der Fach-Kategorie."""
        if not here:
            return COLORS["free"]
        if ("class", day, period, class_name) in self._marked or any(
            ("teacher", day, period, a.teacher_name) in self._marked
            for a in here
        ):
            return COLORS["conflict"]
        return get_subject_color(here[0].subject_name)


def export_excel(snapshot: ScheduleSnapshot, config: AppConfig,
                 output_path: Path) -> Path:
    """Kurzform: exportiert und gibt den Pfad zurück."""
    ExcelExporter(snapshot, config).export(output_path)
    return Path(output_path)
