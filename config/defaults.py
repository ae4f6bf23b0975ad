from config.schema import (
    AppConfig,
    DefaultPeriods,
    LoadPolicy,
    SignatureSettings,
)
from models.period import Period


# Wochentage, Index = Plattform-Wochentag (0=Minggu/Sonntag .. 6=Sabtu/Samstag)
DAY_NAMES = [
    "Minggu",
    "Senin",
    "Selasa",
    "Rabu",
    "Kamis",
    "Jumat",
    "Sabtu",
]

# Unterrichtstage 1..6 (Senin–Sabtu)
SCHOOL_DAYS = [1, 2, 3, 4, 5, 6]


# Standard-Tagesraster. Muss exakt so bleiben: gedruckte Pläne gehen von
# diesen Zeiten aus.
#   JP 1  07:30 - 08:15
#   JP 2  08:15 - 09:00
#   JP 3  09:00 - 09:45
#      ── Istirahat ──
#   JP 4  10:00 - 10:45
#   JP 5  10:45 - 11:30
#      ── ISHOMA & Islamic Public Speaking ──
#   JP 6  13:00 - 13:45
#   JP 7  13:45 - 14:30
DEFAULT_PERIODS: tuple[dict, ...] = (
    {"kind": "lesson", "period_number": 1, "start_time": "07:30", "end_time": "08:15"},
    {"kind": "lesson", "period_number": 2, "start_time": "08:15", "end_time": "09:00"},
    {"kind": "lesson", "period_number": 3, "start_time": "09:00", "end_time": "09:45"},
    {"kind": "break", "break_name": "Istirahat", "start_time": "09:45", "end_time": "10:00"},
    {"kind": "lesson", "period_number": 4, "start_time": "10:00", "end_time": "10:45"},
    {"kind": "lesson", "period_number": 5, "start_time": "10:45", "end_time": "11:30"},
    {"kind": "break", "break_name": "ISHOMA & Islamic Public Speaking",
     "start_time": "11:30", "end_time": "13:00"},
    {"kind": "lesson", "period_number": 6, "start_time": "13:00", "end_time": "13:45"},
    {"kind": "lesson", "period_number": 7, "start_time": "13:45", "end_time": "14:30"},
)

DEFAULT_PERIOD_ID_PREFIX = "default-"


def default_periods() -> list[Period]:
    """Erzeugt das Standard-Raster als Period-Liste.

    IDs lauten "default-<index>", order ist index + 1. Wird bei jedem
    Lesen neu erzeugt und nie mit eigenen Einträgen gemischt.
    """
    return [
        Period(id=f"{DEFAULT_PERIOD_ID_PREFIX}{i}", order=i + 1, **row)
        for i, row in enumerate(DEFAULT_PERIODS)
    ]


def default_app_config() -> AppConfig:
    """Vollständige Standard-Konfiguration."""
    return AppConfig(
        school_name="Sekolah Contoh",
        jp_calculation_method=LoadPolicy.PER_CLASS,
        days_per_week=6,
        day_names=list(DAY_NAMES),
        period_source=DefaultPeriods(),
        signatures=SignatureSettings(),
    )
