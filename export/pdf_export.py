"""PDF-Export für Jadwal Pelajaran (fpdf2)."""

from pathlib import Path

from fpdf import FPDF

from analysis.load_calculator import TeacherLoad, build_load_report
from config.manager import ConfigManager
from config.schema import AppConfig
from models.period import Period
from models.snapshot import ScheduleSnapshot

from export.helpers import (
    COLORS, hex_to_rgb, build_grid, format_assignments,
    get_subject_color, today_str,
)


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    return (
        text
        .replace("—", " - ")   # em dash
        .replace("–", "-")      # en dash
        .replace("─", "-")      # BOX DRAWINGS LIGHT HORIZONTAL
        .replace("│", "|")      # BOX DRAWINGS LIGHT VERTICAL
        .encode("latin-1", "replace").decode("latin-1")
    )


# ─── A4-Querformat-Dimensionen ────────────────────────────────────────────────
# Landscape A4: 297 × 210 mm
# Nutzbare Breite (Margin 10 links+rechts): 277 mm
# Wochenplan: JP(8) + Zeit(23) + 6×Tag(41) = 8 + 23 + 246 = 277 mm
# Rekap JP:   No(8) + Guru(60) + 6×Tag(14) + Mengajar(22) + Tugas(69) + JP Tugas(18) + Total(16) = 277 mm

_COLS = {
    "jp":   8,
    "zeit": 23,
    "day":  41,
}
_REKAP_COLS = {
    "no":       8,
    "guru":     60,
    "day":      14,
    "mengajar": 22,
    "tugas":    69,
    "jp_tugas": 18,
    "total":    16,
}
_ROW_HEADER_H  = 7    # mm
_ROW_LESSON_H  = 12   # mm
_ROW_PAUSE_H   = 4    # mm
_ROW_REKAP_H   = 6    # mm
_FONT_HEADER   = 8    # pt
_FONT_CONTENT  = 7    # pt
_FONT_TINY     = 6    # pt
_LINE_H        = 3.5  # mm pro Zeile bei 7pt


class _JadwalPage(FPDF):
    """A4 quer mit Schulname/Titel im Kopf und Seitenzahl im Fuß."""

    def __init__(self, school_name: str):
        super().__init__(orientation="L", unit="mm", format="A4")
        self.school_name = school_name
        self.page_title = ""
        self.alias_nb_pages()
        self.set_auto_page_break(auto=True, margin=18)
        self.set_margins(left=10, top=22, right=10)

    def header(self):
        self.set_xy(10, 8)
        self.set_font("Helvetica", "B", 12)
        self.cell(120, 6, _pdf_safe(self.school_name), align="L")
        self.set_font("Helvetica", "", 9)
        self.cell(0, 6, _pdf_safe(self.page_title), align="R")
        self.set_draw_color(*hex_to_rgb(COLORS["header"]))
        self.set_line_width(0.4)
        self.line(10, 16, self.w - 10, 16)
        self.set_line_width(0.2)

    def footer(self):
        self.set_y(-12)
        self.set_font("Helvetica", "I", 7)
        self.set_text_color(110, 110, 110)
        self.cell(0, 6, f"Dicetak {today_str()}", align="L")
        self.set_x(10)
        self.cell(0, 6, f"Halaman {self.page_no()}/{{nb}}", align="R")
        self.set_text_color(0, 0, 0)


class _SchedulePdf:
    """Zeichenhilfen für Tabellenzellen auf einer _JadwalPage."""

    def __init__(self, school_name: str):
        self._pdf = _JadwalPage(school_name)

    @property
    def fpdf(self) -> _JadwalPage:
        return self._pdf

    def set_entity(self, title: str) -> None:
        self._pdf.page_title = title

    def add_page(self) -> None:
        self._pdf.add_page()

    def save(self, path: Path) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(target))

    # ─── Zellen-Zeichnung ─────────────────────────────────────────────────────

    def draw_cell(
        self,
        x: float, y: float,
        w: float, h: float,
        text: str = "",
        bg_hex: str | None = None,
        bold: bool = False,
        font_size: int = _FONT_CONTENT,
        text_color: tuple[int, int, int] = (0, 0, 0),
        align: str = "C",
        max_chars: int = 28,
    ) -> None:
        """Zeichnet eine Zelle mit Hintergrund, Rand und zentriertem Text."""
        pdf = self._pdf

        if bg_hex:
            r, g, b = hex_to_rgb(bg_hex)
            pdf.set_fill_color(r, g, b)
            pdf.rect(x, y, w, h, style="F")

        pdf.set_draw_color(180, 180, 180)
        pdf.rect(x, y, w, h, style="D")

        if text:
            style = "B" if bold else ""
            pdf.set_font("Helvetica", style, font_size)
            pdf.set_text_color(*text_color)

            lines = [ln for ln in _pdf_safe(text).split("\n") if ln][:3]  # max 3 Zeilen
            total_text_h = len(lines) * _LINE_H
            y_text = y + max(0.5, (h - total_text_h) / 2)

            for line in lines:
                pdf.set_xy(x + (1 if align == "L" else 0), y_text)
                pdf.cell(w, _LINE_H, line[:max_chars], border=0, align=align)
                y_text += _LINE_H

            pdf.set_text_color(0, 0, 0)

    def draw_header_cells(self, x: float, y: float, cols: list[tuple[str, float]]) -> float:
        """Zeichnet eine Kopfzeile und gibt die Y-Position danach zurück."""
        cx = x
        for label, w in cols:
            self.draw_cell(
                cx, y, w, _ROW_HEADER_H, label,
                bg_hex=COLORS["header"],
                bold=True,
                font_size=_FONT_HEADER,
                text_color=(255, 255, 255),
            )
            cx += w
        return y + _ROW_HEADER_H

    def draw_pause_row(self, x: float, y: float, label: str, total_w: float) -> float:
        self.draw_cell(
            x, y, total_w, _ROW_PAUSE_H, label,
            bg_hex=COLORS["pause"],
            font_size=_FONT_TINY,
            text_color=(100, 100, 100),
            max_chars=120,
        )
        return y + _ROW_PAUSE_H


class PdfExporter:
    """Exportiert Rekap JP und Wochenpläne der Lehrkräfte als PDF."""

    def __init__(self, snapshot: ScheduleSnapshot, config: AppConfig):
        self.data      = snapshot
        self.config    = config
        self.periods: list[Period] = ConfigManager.resolve_periods(config)
        self.days      = config.school_days
        self.day_names = config.day_names
        self._table_x  = 10.0   # linker Rand

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_load_recap(self, output_path: Path) -> None:
        """Rekap JP aller Lehrkräfte mit Unterschriftenblock."""
        loads = build_load_report(
            self.data.teachers, self.data.assignments, self.data.tasks,
            self.config.jp_calculation_method,
        )
        pdf = _SchedulePdf(self.config.school_name)
        pdf.set_entity(f"Rekap JP ({self.config.jp_calculation_method.value})")
        pdf.add_page()
        y = self._draw_recap_table(pdf, loads)
        y = self._draw_signatures(pdf, y + 8)
        self._draw_info_links(pdf, y + 6)
        pdf.save(output_path)

    def export_teacher_schedules(self, output_path: Path) -> None:
        """Erzeugt eine PDF mit je einer Seite pro Lehrkraft."""
        pdf = _SchedulePdf(self.config.school_name)
        loads = {
            l.teacher_name: l for l in build_load_report(
                self.data.teachers, self.data.assignments, self.data.tasks,
                self.config.jp_calculation_method,
            )
        }
        for teacher in self.data.sorted_teachers():
            load = loads[teacher.name]
            pdf.set_entity(
                f"{teacher.name} | Mengajar: {load.teaching_load} JP | "
                f"Total: {load.grand_total} JP"
            )
            pdf.add_page()
            self._draw_week(pdf, load)
        pdf.save(output_path)

    # ─── Rekap-Tabelle ────────────────────────────────────────────────────────

    def _draw_recap_table(self, pdf: _SchedulePdf, loads: list[TeacherLoad]) -> float:
        c = _REKAP_COLS
        cols = [("No", c["no"]), ("Guru", c["guru"])]
        cols += [(self.day_names[d][:3], c["day"]) for d in self.days]
        cols += [
            ("Mengajar", c["mengajar"]), ("Tugas", c["tugas"]),
            ("JP Tugas", c["jp_tugas"]), ("Total", c["total"]),
        ]

        x = self._table_x
        y = pdf.draw_header_cells(x, 22.0, cols)
        p = pdf.fpdf

        for i, load in enumerate(loads, 1):
            if y + _ROW_REKAP_H > p.h - 20:
                pdf.add_page()
                y = pdf.draw_header_cells(x, 22.0, cols)
            values = (
                [str(i), load.teacher_name]
                + [str(load.daily_load.get(d, 0)) for d in self.days]
                + [
                    str(load.teaching_load),
                    ", ".join(t.name for t in load.resolved_tasks),
                    str(load.task_load),
                    str(load.grand_total),
                ]
            )
            cx = x
            bg = "F5F5F5" if i % 2 == 0 else None
            for (label, w), value in zip(cols, values):
                left = label in ("Guru", "Tugas")
                self._cell(pdf, cx, y, w, value, bg, left, bold=(label == "Total"))
                cx += w
            y += _ROW_REKAP_H

        total = sum(l.grand_total for l in loads)
        if y + _ROW_REKAP_H > p.h - 20:
            pdf.add_page()
            y = 22.0
        pdf.draw_cell(
            x, y, sum(w for _, w in cols), _ROW_REKAP_H,
            f"Jumlah JP seluruh guru: {total}",
            bold=True, font_size=_FONT_CONTENT, align="R", max_chars=80,
        )
        return y + _ROW_REKAP_H

    @staticmethod
    def _cell(pdf: _SchedulePdf, x, y, w, value, bg, left, bold=False) -> None:
        pdf.draw_cell(
            x, y, w, _ROW_REKAP_H, value, bg_hex=bg, bold=bold,
            align="L" if left else "C", max_chars=int(w / 1.6),
        )

    def _draw_signatures(self, pdf: _SchedulePdf, y: float) -> float:
        """Unterschriftenblock (Kepala Sekolah links, Wakasek rechts)."""
        sig = self.config.signatures
        if not (sig.head_name or sig.vice_name):
            return y
        p = pdf.fpdf
        if y + 40 > p.h - 18:
            pdf.add_page()
            y = 24.0
        p.set_font("Helvetica", "", 9)
        blocks = [
            (10.0, "Kepala Sekolah", sig.head_name),
            (p.w - 90.0, "Wakasek Kurikulum", sig.vice_name),
        ]
        for x, role, name in blocks:
            if not name:
                continue
            p.set_xy(x, y)
            p.cell(80, 5, _pdf_safe(f"Mengetahui, {role}"), border=0, align="C")
            p.set_xy(x, y + 25)
            p.set_font("Helvetica", "BU", 9)
            p.cell(80, 5, _pdf_safe(name), border=0, align="C")
            p.set_font("Helvetica", "", 9)
        return y + 30

    def _draw_info_links(self, pdf: _SchedulePdf, y: float) -> None:
        """Hinweis-Links aus der Konfiguration unter der Tabelle."""
        links = self.config.info_links
        if not links:
            return
        p = pdf.fpdf
        if y + 6 * (len(links) + 1) > p.h - 18:
            pdf.add_page()
            y = 24.0
        p.set_xy(self._table_x, y)
        p.set_font("Helvetica", "B", 8)
        p.cell(0, 5, "Informasi")
        for link in links:
            y += 5
            p.set_xy(self._table_x, y)
            p.set_font("Helvetica", "", 8)
            text = f"{link.title}: {link.url}"
            if link.description:
                text += f" ({link.description})"
            p.cell(0, 5, _pdf_safe(text), link=link.url)

    # ─── Wochenplan ───────────────────────────────────────────────────────────

    def _draw_week(self, pdf: _SchedulePdf, load: TeacherLoad) -> None:
        grid = build_grid(load.assignments)
        total_w = _COLS["jp"] + _COLS["zeit"] + _COLS["day"] * len(self.days)

        x = self._table_x
        cols = [("JP", _COLS["jp"]), ("Zeit", _COLS["zeit"])]
        cols += [(self.day_names[d], _COLS["day"]) for d in self.days]
        y = pdf.draw_header_cells(x, 22.0, cols)

        for period in self.periods:
            if period.is_break:
                label = f"-- {period.break_name} ({period.start_time}-{period.end_time}) --"
                y = pdf.draw_pause_row(x, y, label, total_w)
                continue
            y = self._draw_lesson_row(pdf, x, y, period, grid)

        tasks = ", ".join(f"{t.name} ({t.jp})" for t in load.resolved_tasks) or "-"
        p = pdf.fpdf
        p.set_font("Helvetica", "I", 8)
        p.set_xy(x, y + 3)
        p.cell(0, 5, _pdf_safe(f"Tugas tambahan: {tasks}  |  JP Tugas: {load.task_load}"))

    def _draw_lesson_row(self, pdf: _SchedulePdf, x: float, y: float,
                         period: Period, grid: dict) -> float:
        pdf.draw_cell(x, y, _COLS["jp"], _ROW_LESSON_H, str(period.period_number),
                      bold=True, font_size=_FONT_HEADER)
        cx = x + _COLS["jp"]
        pdf.draw_cell(cx, y, _COLS["zeit"], _ROW_LESSON_H,
                      f"{period.start_time}\n{period.end_time}", font_size=_FONT_TINY)
        cx += _COLS["zeit"]

        for day in self.days:
            here = grid.get((day, period.period_number), [])
            if len(here) > 1:
                color = COLORS["conflict"]
            elif here:
                color = get_subject_color(here[0].subject_name)
            else:
                color = COLORS["free"]
            pdf.draw_cell(cx, y, _COLS["day"], _ROW_LESSON_H,
                          format_assignments(here, "teacher"), bg_hex=color)
            cx += _COLS["day"]
        return y + _ROW_LESSON_H
