"""Datenmodell für eine Vertretungsanfrage (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import field_validator

from models.dates import normalize_date
from models.record import Record


class SubStatus(str, Enum):
    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class SubstituteAssignment(Record):
    """Vertretung genau einer Stunde eines Abwesenheitsantrags.

    Eine abgelehnte Vertretung (REJECTED) gilt als zurückgezogen: die Stunde
    ist wieder offen und darf neu vergeben werden. Pro (Antrag, Stunde) ist
    höchstens eine Vertretung im Status REQUESTED oder ACCEPTED erlaubt.
    """

    leave_request_id: str
    original_teacher_id: str = ""
    sub_teacher_id: str
    date: str
    period_number: int
    class_id: str = ""
    subject_id: str = ""
    status: SubStatus = SubStatus.REQUESTED
    reject_reason: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, v):
        return normalize_date(v)

    @property
    def is_active(self) -> bool:
        """True solange die Vertretung nicht abgelehnt wurde."""
        return self.status != SubStatus.REJECTED

    @property
    def slot_key(self) -> tuple[str, int]:
        return (self.leave_request_id, self.period_number)
