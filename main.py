"""Jadwal Pelajaran — Haupt-CLI.

Verwendung:
  python main.py setup                      Ersteinrichtung (Wizard)
  python main.py config show                Konfiguration anzeigen
  python main.py periods list               Aktives Zeitraster anzeigen
  python main.py periods seed               Standard-Raster als eigenes übernehmen
  python main.py generate                   Demo-Datenstand erzeugen
  python main.py template                   Excel-Import-Vorlage erzeugen
  python main.py import <datei.xlsx>        Excel importieren
  python main.py conflicts                  Doppelbelegungen prüfen
  python main.py compare <guru A> <guru B>  Zwei Lehrkräfte vergleichen
  python main.py load                       Rekap JP anzeigen
  python main.py show --day 1               Tagesraster anzeigen
  python main.py now                        Aktuelle Stunde anzeigen
  python main.py export                     Excel + PDF exportieren
"""

import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

from analysis.errors import TimetableError

console = Console()

# Standard-Pfad für den gespeicherten Datenstand
DEFAULT_DATA_JSON = Path("output/jadwal.json")


def _abort(message: str) -> None:
    console.print(f"[red bold]Fehler:[/red bold] {message}")
    sys.exit(1)


def _load_config():
    """Lädt die Konfiguration (ohne Datei: Standardwerte)."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        _abort(str(e))


def _load_snapshot_or_abort(json_path: str):
    """Lädt den Datenstand oder bricht mit Fehlermeldung ab."""
    from models.snapshot import ScheduleSnapshot
    p = Path(json_path)
    try:
        return ScheduleSnapshot.load_json(p)
    except FileNotFoundError:
        _abort(
            f"Keine Datendatei gefunden: {p}\n"
            "Verwenden Sie [bold]python main.py generate[/bold] "
            "oder [bold]python main.py import <datei.xlsx>[/bold]."
        )
    except ValueError as e:
        _abort(str(e))


json_path_option = click.option(
    "--json-path", default=str(DEFAULT_DATA_JSON), show_default=True,
    help="Pfad zum gespeicherten Datenstand (JSON).",
)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--defaults", "use_defaults", is_flag=True, default=False,
              help="Ohne Rückfragen mit Standardwerten einrichten.")
def cmd_setup(use_defaults: bool):
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager
    from config.wizard import run_wizard

    mgr = ConfigManager()
    if not mgr.first_run_check() and not use_defaults:
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = default_app_config() if use_defaults else run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from config.manager import ConfigManager
    from config.wizard import show_periods_table

    mgr, config = _load_config()
    source = "Standard" if ConfigManager.is_using_defaults(config) else "eigenes Raster"
    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  "
        f"JP-Zählweise: {config.jp_calculation_method.value}  |  "
        f"{config.days_per_week} Tage  |  Zeitraster: {source}",
        title="Konfiguration",
        border_style="cyan",
    ))
    show_periods_table(ConfigManager.resolve_periods(config))

    sig = config.signatures
    console.print(
        f"\n[bold]Unterschriften:[/bold] {sig.head_name or '—'} (Kepala Sekolah) | "
        f"{sig.vice_name or '—'} (Wakasek)"
    )
    for link in config.info_links:
        console.print(f"[bold]Link:[/bold] {link.title} – {link.url}")
    if config.piket_api_url:
        console.print(f"[bold]Piket-API:[/bold] {config.piket_api_url}")


# ─── PERIODS ──────────────────────────────────────────────────────────────────

@click.group("periods")
def cmd_periods():
    """Tagesraster anzeigen oder übernehmen."""


@cmd_periods.command("list")
def periods_list():
    """Zeigt das aktive Tagesraster an."""
    from config.manager import ConfigManager
    from config.wizard import show_periods_table

    mgr, config = _load_config()
    title = "Standard-Zeitraster" if mgr.is_using_defaults(config) else "Zeitraster"
    show_periods_table(ConfigManager.resolve_periods(config), title=title)


@cmd_periods.command("seed")
def periods_seed():
    """Übernimmt das Standard-Raster als editierbares eigenes Raster."""
    mgr, config = _load_config()
    if not mgr.is_using_defaults(config):
        console.print("[yellow]Es ist bereits ein eigenes Zeitraster aktiv.[/yellow]")
        return
    mgr.save(mgr.seed_default_periods(config))


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@json_path_option
def cmd_generate(seed: int, json_path: str):
    """Erzeugt einen Demo-Datenstand (mit absichtlichen Konflikten)."""
    from data.fake_data import FakeDataGenerator

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = FakeDataGenerator(seed=seed)
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── TEMPLATE ─────────────────────────────────────────────────────────────────

@click.command("template")
@click.option("--output", "-o", default="output/import_vorlage.xlsx",
              help="Ausgabepfad für die Excel-Vorlage.")
def cmd_template(output: str):
    """Erzeugt eine leere Excel-Import-Vorlage."""
    from data.excel_import import generate_template

    mgr, config = _load_config()
    out_path = Path(output)
    console.print("[bold]Excel-Vorlage wird erzeugt...[/bold]")
    generate_template(config, out_path)
    console.print(f"[green]✓[/green] Vorlage gespeichert: {out_path}")
    console.print(
        "\nBlätter in der Vorlage:\n"
        "  [cyan]Guru[/cyan]        – Nama, Tugas (kommagetrennt)\n"
        "  [cyan]Kelas[/cyan]       – Nama\n"
        "  [cyan]Mapel[/cyan]       – Nama\n"
        "  [cyan]Tugas[/cyan]       – Nama, JP\n"
        "  [cyan]Jadwal[/cyan]      – Hari, JP, Mapel, Guru, Kelas\n"
        "  [cyan]Zeitraster[/cyan]  – aktives Raster (nur zur Orientierung)"
    )


# ─── IMPORT ───────────────────────────────────────────────────────────────────

@click.command("import")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@json_path_option
def cmd_import(datei: Path, json_path: str):
    """Importiert Stammdaten und Wochenplan aus einer Excel-Datei."""
    from data.excel_import import import_from_excel, ExcelImportError

    console.print(f"[bold]Importiere:[/bold] {datei}")
    try:
        snapshot, report = import_from_excel(datei)
    except ExcelImportError as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)

    console.print("[green]✓[/green] Import erfolgreich!")
    console.print(f"\n{snapshot.summary()}")
    report.print_rich()

    out_path = Path(json_path)
    snapshot.save_json(out_path)
    console.print(f"[green]✓[/green] Daten gespeichert: {out_path}")


# ─── CONFLICTS ────────────────────────────────────────────────────────────────

@click.command("conflicts")
@click.option("--kind", type=click.Choice(["all", "teacher", "class"]), default="all",
              help="Nur Lehrer- oder nur Klassen-Konflikte anzeigen.")
@click.option("--search", "-s", default="", help="Suche in Name, Mapel und Guru.")
@json_path_option
def cmd_conflicts(kind: str, search: str, json_path: str):
    """Prüft den Datenstand auf Doppelbelegungen."""
    from analysis.conflict_detector import (
        filter_conflicts, find_conflicts, print_conflicts_rich,
    )
    from config.manager import ConfigManager

    mgr, config = _load_config()
    data = _load_snapshot_or_abort(json_path)
    try:
        conflicts = filter_conflicts(find_conflicts(data.assignments), kind, search)
        print_conflicts_rich(
            conflicts, ConfigManager.resolve_periods(config), config.day_names
        )
    except TimetableError as e:
        _abort(str(e))
    sys.exit(1 if conflicts else 0)


# ─── COMPARE ──────────────────────────────────────────────────────────────────

@click.command("compare")
@click.argument("teacher_a")
@click.argument("teacher_b")
@json_path_option
def cmd_compare(teacher_a: str, teacher_b: str, json_path: str):
    """Vergleicht die Wochenpläne zweier Lehrkräfte."""
    from analysis.conflict_detector import compare_teachers
    from analysis.time_slots import day_name

    mgr, config = _load_config()
    data = _load_snapshot_or_abort(json_path)
    for name in (teacher_a, teacher_b):
        if data.find_teacher(name) is None:
            console.print(f"[yellow]⚠[/yellow]  '{name}' ist nicht in den Stammdaten.")

    result = compare_teachers(teacher_a, teacher_b, data.assignments)
    overlap_keys = {a.slot_key for a in result.overlaps}

    table = Table(title=f"{teacher_a} ↔ {teacher_b}", box=box.ROUNDED)
    table.add_column("Hari")
    table.add_column("JP", justify="right")
    table.add_column(teacher_a)
    table.add_column(teacher_b)

    slots = sorted({a.slot_key for a in result.assignments_a + result.assignments_b})
    for day, period in slots:
        here_a = [a for a in result.assignments_a if a.slot_key == (day, period)]
        here_b = [a for a in result.assignments_b if a.slot_key == (day, period)]
        style = "red" if (day, period) in overlap_keys else ""
        table.add_row(
            day_name(day, config.day_names), str(period),
            "\n".join(f"{a.subject_name} ({', '.join(a.class_names)})" for a in here_a),
            "\n".join(f"{a.subject_name} ({', '.join(a.class_names)})" for a in here_b),
            style=style,
        )
    console.print(table)
    console.print(
        f"Gemeinsame Slots: [bold]{len(overlap_keys)}[/bold] "
        f"({len(result.assignments_a)} / {len(result.assignments_b)} Zuweisungen)"
    )


# ─── LOAD ─────────────────────────────────────────────────────────────────────

@click.command("load")
@click.option("--policy", default=None,
              help="Zählweise überschreiben (per_class | per_session).")
@click.option("--search", "-s", default="", help="Nach Namen filtern.")
@click.option("--sort", "sort_by", type=click.Choice(["name", "jp"]), default="name")
@click.option("--desc", is_flag=True, default=False, help="Absteigend sortieren.")
@json_path_option
def cmd_load(policy: Optional[str], search: str, sort_by: str, desc: bool, json_path: str):
    """Zeigt die Rekap JP (Unterricht + Tugas) aller Lehrkräfte."""
    from analysis.load_calculator import build_load_report, parse_policy

    mgr, config = _load_config()
    data = _load_snapshot_or_abort(json_path)
    try:
        effective = parse_policy(policy) if policy else config.jp_calculation_method
        loads = build_load_report(
            data.teachers, data.assignments, data.tasks, effective,
            query=search, sort_by=sort_by, descending=desc,
        )
    except TimetableError as e:
        _abort(str(e))

    table = Table(title=f"Rekap JP ({effective.value})", box=box.ROUNDED)
    table.add_column("Guru", style="bold")
    for d in config.school_days:
        table.add_column(config.day_names[d][:3], justify="right")
    table.add_column("Mengajar", justify="right")
    table.add_column("Tugas")
    table.add_column("Total", justify="right", style="bold cyan")
    for l in loads:
        table.add_row(
            l.teacher_name,
            *[str(l.daily_load.get(d, 0)) for d in config.school_days],
            str(l.teaching_load),
            ", ".join(f"{t.name} ({t.jp})" for t in l.resolved_tasks) or "—",
            str(l.grand_total),
        )
    console.print(table)
    console.print(f"Summe: [bold]{sum(l.grand_total for l in loads)}[/bold] JP")


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.option("--day", "-d", type=int, default=None, help="Tagesraster (1=Senin .. 6=Sabtu).")
@click.option("--teacher", "-t", default=None, help="Wochenplan einer Lehrkraft.")
@click.option("--class", "class_name", "-k", default=None, help="Wochenplan einer Klasse.")
@json_path_option
def cmd_show(day: Optional[int], teacher: Optional[str], class_name: Optional[str],
             json_path: str):
    """Zeigt Tagesraster oder Wochenplan im Terminal an."""
    from analysis.time_slots import day_name, require_school_day, resolve_current_day
    from config.manager import ConfigManager
    from export.tui_renderer import (
        render_class_rows, render_day_rows, render_teacher_rows,
    )

    mgr, config = _load_config()
    data = _load_snapshot_or_abort(json_path)
    periods = ConfigManager.resolve_periods(config)
    days = config.school_days
    week_header = ["JP", "Zeit"] + [config.day_names[d] for d in days]

    if teacher:
        title, header = f"Jadwal {teacher}", week_header
        rows = render_teacher_rows(teacher, data, periods, days)
    elif class_name:
        title, header = f"Jadwal Kelas {class_name}", week_header
        rows = render_class_rows(class_name, data, periods, days)
    else:
        try:
            target = require_school_day(day) if day is not None else resolve_current_day(date.today())
        except TimetableError as e:
            _abort(str(e))
        title = f"Jadwal {day_name(target, config.day_names)}"
        header, rows = render_day_rows(target, data, periods)

    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    for h in header:
        table.add_column(h)
    for row in rows:
        table.add_row(*row)
    console.print(table)


# ─── NOW ──────────────────────────────────────────────────────────────────────

@click.command("now")
@click.option("--at", "at_time", default=None, help="Uhrzeit HH:MM statt jetzt.")
@click.option("--date", "at_date", type=click.DateTime(formats=["%Y-%m-%d"]),
              default=None, help="Datum YYYY-MM-DD statt heute.")
@json_path_option
def cmd_now(at_time: Optional[str], at_date: Optional[datetime], json_path: str):
    """Zeigt die aktuelle Stunde und was gerade unterrichtet wird."""
    from analysis.time_slots import (
        day_name, is_school_hours, parse_hhmm, resolve_current_day,
        resolve_current_slot, resolve_slot_label,
    )
    from config.manager import ConfigManager

    mgr, config = _load_config()
    periods = ConfigManager.resolve_periods(config)
    now = datetime.now()
    try:
        if at_time:
            minutes = parse_hhmm(at_time)
            now = now.replace(hour=minutes // 60, minute=minutes % 60)
        today = at_date.date() if at_date else now.date()
        current = resolve_current_slot(periods, now)
        day = resolve_current_day(today)
        in_school = is_school_hours(periods, now)
    except TimetableError as e:
        _abort(str(e))

    label = resolve_slot_label(current) if current else "Keine Stunde"
    console.print(Panel(
        f"[bold]{day_name(day, config.day_names)}[/bold], {now:%H:%M}\n"
        f"{label}\n"
        + ("[green]Unterrichtszeit[/green]" if in_school else "[dim]Außerhalb der Unterrichtszeit[/dim]"),
        title="Sekarang",
        border_style="cyan",
    ))

    if current is None or current.is_break or not Path(json_path).exists():
        return
    data = _load_snapshot_or_abort(json_path)
    running = [
        a for a in data.assignments_for_day(day)
        if a.period == current.period_number
    ]
    table = Table(box=box.ROUNDED)
    table.add_column("Kelas")
    table.add_column("Mapel")
    table.add_column("Guru")
    for a in running:
        table.add_row(", ".join(a.class_names) or "—", a.subject_name, a.teacher_name)
    console.print(table)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--format", "fmt", type=click.Choice(["excel", "pdf", "all"]), default="all")
@click.option("--output-dir", "-o", default="output", help="Zielverzeichnis.")
@json_path_option
def cmd_export(fmt: str, output_dir: str, json_path: str):
    """Exportiert Rekap JP, Konflikte und Raster als Excel und/oder PDF."""
    from export import ExcelExporter, PdfExporter

    mgr, config = _load_config()
    data = _load_snapshot_or_abort(json_path)
    out = Path(output_dir)

    try:
        if fmt in ("excel", "all"):
            xlsx = out / "jadwal.xlsx"
            ExcelExporter(data, config).export(xlsx)
            console.print(f"[green]✓[/green] Excel gespeichert: {xlsx}")
        if fmt in ("pdf", "all"):
            pdf = PdfExporter(data, config)
            recap = out / "rekap_jp.pdf"
            pdf.export_load_recap(recap)
            console.print(f"[green]✓[/green] PDF gespeichert: {recap}")
            teachers = out / "jadwal_guru.pdf"
            pdf.export_teacher_schedules(teachers)
            console.print(f"[green]✓[/green] PDF gespeichert: {teachers}")
    except TimetableError as e:
        _abort(str(e))


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Ausgaben anzeigen.")
def cli(verbose: bool):
    """Jadwal Pelajaran: Konflikt-Prüfung, Rekap JP und Zeitraster.

    Starten Sie mit: python main.py setup
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen bei Jadwal Pelajaran![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_periods)
cli.add_command(cmd_generate)
cli.add_command(cmd_template)
cli.add_command(cmd_import)
cli.add_command(cmd_conflicts)
cli.add_command(cmd_compare)
cli.add_command(cmd_load)
cli.add_command(cmd_show)
cli.add_command(cmd_now)
cli.add_command(cmd_export)


if __name__ == "__main__":
    main()
