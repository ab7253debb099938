"""Datenmodell für einen Abwesenheitsantrag (Pydantic v2)."""

from enum import Enum

from pydantic import field_validator

from models.coercion import coerce_int_list
from models.dates import normalize_date
from models.record import Record


class LeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LeaveRequest(Record):
    """Abwesenheit einer Lehrkraft an einem Tag für einzelne Stunden.

    Nur genehmigte Anträge (APPROVED) lösen Vertretungsbedarf aus.
    """

    teacher_id: str
    date: str                         # "YYYY-MM-DD"
    period_numbers: list[int] = []    # TimeSlot.period_number
    reason: str = ""
    status: LeaveStatus = LeaveStatus.PENDING

    @field_validator("period_numbers", mode="before")
    @classmethod
    def _coerce_periods(cls, v):
        return coerce_int_list(v)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, v):
        return normalize_date(v)

    @property
    def is_actionable(self) -> bool:
        """True wenn für diesen Antrag Vertretungen geplant werden."""
        return self.status == LeaveStatus.APPROVED

    def covers(self, date: str, period_number: int) -> bool:
        """True wenn der Antrag genehmigt ist und die Stunde am Tag abdeckt."""
        return (
            self.is_actionable
            and self.date == date
            and period_number in self.period_numbers
        )
