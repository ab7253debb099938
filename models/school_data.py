"""SchoolState: Momentaufnahme aller Sammlungen des Vertretungsplaners (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.leave_request import LeaveRequest, LeaveStatus
from models.schedule_item import ScheduleItem
from models.school_class import ClassRoom
from models.subject import Subject
from models.substitute_assignment import SubStatus, SubstituteAssignment
from models.teacher import Teacher
from models.timeslot import TimeSlot


class SchoolState(BaseModel):
    """Vollständiger Datenbestand: Lehrkräfte, Fächer, Klassen, Raster,
    Stundenplan, Abwesenheiten und Vertretungen.

    Die Feldnamen der Sammlungen entsprechen den Schlüsseln der
    Bulk-Antwort des Datenspeichers (``timeSlots``, ``leaves``, ``subs``).
    Instanzen werden nicht verändert; Mutationen erzeugen Kopien
    (siehe ``state.lifecycle``).
    """

    model_config = ConfigDict(populate_by_name=True)

    teachers: list[Teacher] = []
    subjects: list[Subject] = []
    classes: list[ClassRoom] = []
    time_slots: list[TimeSlot] = Field(default=[], alias="timeSlots")
    schedules: list[ScheduleItem] = []
    leaves: list[LeaveRequest] = []
    subs: list[SubstituteAssignment] = []

    @field_validator("time_slots")
    @classmethod
    def _sort_time_slots(cls, v: list[TimeSlot]) -> list[TimeSlot]:
        return sorted(v, key=lambda ts: ts.period_number)

    # ─── Nachschlagen ───

    def teacher_by_id(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def subject_by_id(self, subject_id: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.id == subject_id), None)

    def class_by_id(self, class_id: str) -> Optional[ClassRoom]:
        return next((c for c in self.classes if c.id == class_id), None)

    def leave_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        return next((l for l in self.leaves if l.id == leave_id), None)

    def sub_by_id(self, sub_id: str) -> Optional[SubstituteAssignment]:
        return next((s for s in self.subs if s.id == sub_id), None)

    def slot_for_period(self, period_number: int) -> Optional[TimeSlot]:
        """TimeSlot mit der gegebenen Stundennummer (oder None)."""
        return next(
            (ts for ts in self.time_slots if ts.period_number == period_number), None
        )

    def learning_periods(self) -> list[int]:
        """Stundennummern aller Unterrichtsstunden (ohne Pausen), aufsteigend."""
        return [ts.period_number for ts in self.time_slots if ts.is_learning]

    def teacher_name(self, teacher_id: str) -> str:
        """Name der Lehrkraft oder "-" bei fehlender Referenz."""
        t = self.teacher_by_id(teacher_id)
        return t.name if t else "-"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenbestand."""
        pending = sum(1 for l in self.leaves if l.status == LeaveStatus.PENDING)
        open_subs = sum(1 for s in self.subs if s.status == SubStatus.REQUESTED)
        lines = [
            f"Lehrkräfte: {len(self.teachers)}",
            f"Fächer: {len(self.subjects)}",
            f"Klassen: {len(self.classes)}",
            f"Zeitraster: {len(self.time_slots)} Zeilen "
            f"({len(self.learning_periods())} Unterrichtsstunden)",
            f"Stundenplan-Einträge: {len(self.schedules)}",
            f"Abwesenheiten: {len(self.leaves)} ({pending} offen)",
            f"Vertretungen: {len(self.subs)} ({open_subs} unbeantwortet)",
        ]
        return "\n".join(lines)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def to_payload(self) -> dict:
        """Bulk-Format des Datenspeichers (camelCase)."""
        return {
            "teachers": [t.to_wire() for t in self.teachers],
            "subjects": [s.to_wire() for s in self.subjects],
            "classes": [c.to_wire() for c in self.classes],
            "timeSlots": [ts.to_wire() for ts in self.time_slots],
            "schedules": [s.to_wire() for s in self.schedules],
            "leaves": [l.to_wire() for l in self.leaves],
            "subs": [s.to_wire() for s in self.subs],
        }
