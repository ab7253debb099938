"""Vertretungsübersicht eines Abwesenheitsantrags (pro Stunde)."""

from datetime import date as _date
from typing import Optional

from pydantic import BaseModel

from analysis.availability import SubstitutionFinder
from models.school_data import SchoolState
from models.substitute_assignment import SubStatus
from state.errors import UnknownRecordError

OPEN_LABEL = "offen"

_WEEKDAYS = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"]


class CoverRow(BaseModel):
    """Eine Antragsstunde mit Unterricht und (ggf.) Vertretung."""

    period_number: int
    time_range: str                       # "08:00–08:50" oder "-"
    class_name: str                       # "-" wenn kein Unterricht
    subject_label: str                    # "Deutsch (D)" oder "-"
    sub_id: Optional[str] = None
    sub_teacher_name: str = OPEN_LABEL
    status: Optional[SubStatus] = None

    @property
    def is_open(self) -> bool:
        return self.sub_id is None


class CoverPlan(BaseModel):
    leave_id: str
    teacher_name: str
    date: str
    reason: str
    rows: list[CoverRow]

    @property
    def open_count(self) -> int:
        return sum(1 for r in self.rows if r.is_open)

    def long_date(self) -> str:
        """"Montag, 23.10.2023" (unverändert, wenn kein gültiges Datum)."""
        try:
            d = _date.fromisoformat(self.date)
        except ValueError:
            return self.date
        return f"{_WEEKDAYS[d.weekday()]}, {d.strftime('%d.%m.%Y')}"

    def as_text(self) -> str:
        """Textfassung zum Weiterleiten (z.B. per Messenger)."""
        entries = [
            f"  Lehrkraft: {self.teacher_name} (Grund: {self.reason or '-'})\n"
            f"  Vertretung: {r.sub_teacher_name if not r.is_open else 'noch offen'}\n"
            f"  {r.period_number}. Stunde: {r.subject_label}, Klasse {r.class_name}"
            for r in self.rows
        ]
        separator = "\n  " + "-" * 40 + "\n"
        return f"Vertretungsplan {self.long_date()}\n" + separator.join(entries)


def build_cover_plan(state: SchoolState, leave_id: str) -> CoverPlan:
    """Stellt die Vertretungsübersicht eines Antrags zusammen.

    Raises:
        UnknownRecordError: Antrag existiert nicht.
    """
    leave = state.leave_by_id(leave_id)
    if leave is None:
        raise UnknownRecordError("Abwesenheit", leave_id)

    finder = SubstitutionFinder(state)
    rows = []
    for period in leave.period_numbers:
        slot = state.slot_for_period(period)
        lesson = finder.lesson_for_period(leave.teacher_id, leave.date, period)
        subject = state.subject_by_id(lesson.subject_id) if lesson else None
        school_class = state.class_by_id(lesson.class_id) if lesson else None
        sub = finder.active_assignment(leave.id, period)
        rows.append(CoverRow(
            period_number=period,
            time_range=f"{slot.start_time}–{slot.end_time}" if slot else "-",
            class_name=school_class.name if school_class else "-",
            subject_label=f"{subject.name} ({subject.code})" if subject else "-",
            sub_id=sub.id if sub else None,
            sub_teacher_name=state.teacher_name(sub.sub_teacher_id) if sub else OPEN_LABEL,
            status=sub.status if sub else None,
        ))

    return CoverPlan(
        leave_id=leave.id,
        teacher_name=state.teacher_name(leave.teacher_id),
        date=leave.date,
        reason=leave.reason,
        rows=rows,
    )
