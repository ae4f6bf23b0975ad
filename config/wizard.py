"""Interaktiver Setup-Wizard für die Ersteinrichtung von Jadwal Pelajaran.

Führt den Nutzer Schritt für Schritt durch Schule, JP-Zählweise,
Zeitraster und Unterschriften. Nutzt rich für die Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from analysis.errors import MalformedInputError
from analysis.time_slots import parse_hhmm, resolve_slot_label
from config.defaults import default_periods
from config.schema import (
    AppConfig,
    CustomPeriods,
    DefaultPeriods,
    LoadPolicy,
    SignatureSettings,
)
from models.period import Period

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def show_periods_table(periods: list[Period], title: str = "Zeitraster") -> None:
    """Zeigt das Tagesraster als rich-Tabelle an."""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", style="bold", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Jenis", width=10)
    table.add_column("Beschriftung")
    for p in periods:
        kind = "[yellow]Istirahat[/yellow]" if p.is_break else "Pelajaran"
        table.add_row(str(p.order), p.id, kind, resolve_slot_label(p))
    console.print(table)


def _ask_time(label: str, default: str) -> str:
    """Fragt eine Uhrzeit ab, bis sie im Format HH:MM vorliegt."""
    while True:
        value = Prompt.ask(label, default=default)
        try:
            parse_hhmm(value)
            return value
        except MalformedInputError as e:
            _warn(str(e))


# ─── SCHRITT 1: Schule ───

def _wizard_school() -> str:
    _header("Schritt 1 — Schule")
    _info("Name der Schule erscheint auf allen Ausdrucken.")
    return Prompt.ask("Name der Schule", default="Sekolah Contoh")


# ─── SCHRITT 2: JP-Zählweise ───

def _wizard_policy() -> LoadPolicy:
    _header("Schritt 2 — JP-Zählweise")
    console.print(
        "[1] per_class   – gemeinsamer Unterricht zählt pro Klasse\n"
        "[2] per_session – jede Stunde zählt 1 JP"
    )
    choice = Prompt.ask("Zählweise wählen", choices=["1", "2"], default="1")
    return LoadPolicy.PER_CLASS if choice == "1" else LoadPolicy.PER_SESSION


# ─── SCHRITT 3: Zeitraster ───

def _wizard_periods():
    _header("Schritt 3 — Zeitraster")
    show_periods_table(default_periods(), title="Standard-Zeitraster")

    if Confirm.ask("Standard-Zeitraster übernehmen?", default=True):
        _success("Standard-Zeitraster wird verwendet")
        return DefaultPeriods()

    periods: list[Period] = []
    num_lessons = IntPrompt.ask("Anzahl Unterrichtsstunden pro Tag", default=7)
    start = "07:30"
    for jp in range(1, num_lessons + 1):
        console.print(f"\n[bold]JP {jp}[/bold]")
        begin = _ask_time("  Beginn (HH:MM)", default=start)
        end = _ask_time("  Ende   (HH:MM)", default=begin)
        periods.append(Period(
            id=f"jp-{jp}", kind="lesson", period_number=jp,
            start_time=begin, end_time=end, order=len(periods) + 1,
        ))
        start = end
        if Confirm.ask("  Danach eine Pause?", default=False):
            name = Prompt.ask("  Bezeichnung", default="Istirahat").strip() or "Istirahat"
            pause_end = _ask_time("  Pause bis (HH:MM)", default=end)
            periods.append(Period(
                id=f"break-{jp}", kind="break", break_name=name,
                start_time=end, end_time=pause_end, order=len(periods) + 1,
            ))
            start = pause_end

    show_periods_table(periods)
    return CustomPeriods(periods=periods)


# ─── SCHRITT 4: Unterschriften ───

def _wizard_signatures() -> SignatureSettings:
    _header("Schritt 4 — Unterschriften")
    _info("Leer lassen, wenn kein Unterschriftenblock gedruckt werden soll.")
    return SignatureSettings(
        head_name=Prompt.ask("Kepala Sekolah", default=""),
        vice_name=Prompt.ask("Wakasek Kurikulum", default=""),
    )


def _show_summary(config: AppConfig) -> None:
    _header("Zusammenfassung")
    source = "Standard" if isinstance(config.period_source, DefaultPeriods) else "eigenes"
    console.print(
        f"Schule:      [bold]{config.school_name}[/bold]\n"
        f"Zählweise:   {config.jp_calculation_method.value}\n"
        f"Zeitraster:  {source}\n"
        f"Unterschrift: {config.signatures.head_name or '—'} / "
        f"{config.signatures.vice_name or '—'}"
    )


# ─── HAUPTFUNKTION ───

def run_wizard() -> Optional[AppConfig]:
    """Führt den vollständigen interaktiven Setup-Wizard aus.

    Returns:
        Fertige AppConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Selamat datang — Jadwal Pelajaran[/bold]\n\n"
        "Der Wizard richtet Schule, JP-Zählweise, Zeitraster und\n"
        "Unterschriften ein.\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Jadwal Pelajaran[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie jetzt die Schule einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        config = AppConfig(
            school_name=_wizard_school(),
            jp_calculation_method=_wizard_policy(),
            period_source=_wizard_periods(),
            signatures=_wizard_signatures(),
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None

    _show_summary(config)

    if not Confirm.ask("\nKonfiguration speichern?", default=True):
        console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
        return None

    _success("Konfiguration wird gespeichert...")
    return config
