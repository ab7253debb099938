"""Tagesauslastung der Lehrkräfte (reguläre Stunden + aktive Vertretungen)."""

from collections import Counter
from typing import Optional

from models.school_data import SchoolState


class WorkloadAccumulator:
    """Zählt die Verpflichtungen jeder Lehrkraft an einem Kalendertag.

    Regulär: Stundenplan-Einträge am Wochentag ``day_index``.
    Vertretung: nicht abgelehnte Vertretungen am Datum ``date``.
    Die Zählung erfolgt einmal beim Erzeugen; der State wird nur gelesen.
    """

    def __init__(self, state: SchoolState, date: str, day_index: Optional[int]) -> None:
        self.date = date
        self.day_index = day_index
        self._regular: Counter[str] = Counter(
            s.teacher_id for s in state.schedules if s.day_of_week == day_index
        )
        self._substitute: Counter[str] = Counter(
            s.sub_teacher_id for s in state.subs
            if s.date == date and s.is_active
        )

    def regular_count(self, teacher_id: str) -> int:
        return self._regular[teacher_id]

    def substitute_count(self, teacher_id: str) -> int:
        return self._substitute[teacher_id]

    def workload(self, teacher_id: str) -> int:
        """Reguläre Stunden + aktive Vertretungen am Tag."""
        return self.regular_count(teacher_id) + self.substitute_count(teacher_id)

    def breakdown(self, teacher_id: str) -> dict[str, int]:
        return {
            "regular": self.regular_count(teacher_id),
            "substitute": self.substitute_count(teacher_id),
            "total": self.workload(teacher_id),
        }
