"""Fehlerklassen der Kernberechnungen (Konflikte, JP, Zeitraster)."""


class TimetableError(Exception):
    """Basisklasse für alle fachlichen Fehler des Stundenplan-Kerns."""


class InvalidArgumentError(TimetableError, ValueError):
    """Ungültiger Parameter, z.B. unbekannte JP-Berechnungsmethode."""


class MalformedInputError(TimetableError, ValueError):
    """Eingabedaten mit ungültigem Format, z.B. Uhrzeit nicht im Format HH:MM."""
