"""Datenmodell für eine Stunde im Tagesraster."""

from enum import Enum

from models.record import Record


class TimeSlotType(str, Enum):
    LEARNING = "LEARNING"
    BREAK = "BREAK"


class TimeSlot(Record):
    """Eine Zeile im Tagesraster.

    ``period_number`` ist eindeutig und bestimmt die Reihenfolge. In
    Pausen (BREAK) findet kein Unterricht statt, sie zählen daher weder
    für Abwesenheiten noch für Vertretungen.
    """

    # Laufende Nummer, 1-basiert
    period_number: int
    # Beginn/Ende im Format "HH:MM"
    start_time: str = ""
    end_time: str = ""
    type: TimeSlotType = TimeSlotType.LEARNING

    @property
    def is_learning(self) -> bool:
        return self.type == TimeSlotType.LEARNING

    def __str__(self) -> str:
        return f"{self.period_number}. Std. ({self.start_time}–{self.end_time})"
