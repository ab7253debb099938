"""Vertretungshelfer: findet freie Lehrkräfte für eine Stunde und ordnet sie.

Reihenfolge: Fachkompetenz vor Auslastung. Bei Gleichstand bleibt die
Reihenfolge der Lehrerliste erhalten.
"""

from typing import Optional

from pydantic import BaseModel

from models.dates import day_index, normalize_date
from analysis.workload import WorkloadAccumulator
from models.leave_request import LeaveRequest, LeaveStatus
from models.schedule_item import ScheduleItem
from models.school_data import SchoolState
from models.substitute_assignment import SubstituteAssignment
from models.teacher import Teacher

# Ab dieser Tagesauslastung gilt eine Lehrkraft als überlastet (nur Anzeige)
DEFAULT_OVERLOAD_THRESHOLD = 3


class RankedCandidate(BaseModel):
    """Ein freier Kandidat für eine Vertretungsstunde."""

    teacher: Teacher
    is_expert: bool      # Fach gefordert und in der Fachkompetenz
    workload: int        # Reguläre Stunden + aktive Vertretungen am Tag


class SubstitutionFinder:
    """Findet verfügbare Vertreter auf einer Momentaufnahme des Datenbestands.

    Rein lesend: weder der State noch die Lehrkräfte werden verändert.
    """

    def __init__(self, state: SchoolState) -> None:
        self.state = state

    def busy_teacher_ids(self, date: str, period_number: int) -> set[str]:
        """Lehrkräfte, die in der Stunde unterrichten oder genehmigt abwesend sind."""
        slot = self.state.slot_for_period(period_number)
        if slot is None:
            return set()
        dow = day_index(date)
        busy = {
            s.teacher_id for s in self.state.schedules
            if s.day_of_week == dow and s.time_slot_id == slot.id
        }
        busy |= {
            l.teacher_id for l in self.state.leaves if l.covers(date, period_number)
        }
        return busy

    def find_available_teachers(
        self,
        date: str,
        period_number: int,
        required_subject_id: Optional[str] = None,
    ) -> list[RankedCandidate]:
        """Freie Lehrkräfte für (Datum, Stunde), sortiert nach Eignung.

        Ohne passenden TimeSlot ist das Ergebnis leer. Lehrkräfte, die zur
        selben Zeit bereits anderswo vertreten, bleiben in der Liste; das
        erhöht nur ihre Auslastung.
        """
        date = normalize_date(date)
        if self.state.slot_for_period(period_number) is None:
            return []

        busy = self.busy_teacher_ids(date, period_number)
        load = WorkloadAccumulator(self.state, date, day_index(date))

        candidates = [
            RankedCandidate(
                teacher=t,
                is_expert=t.is_expert_for(required_subject_id),
                workload=load.workload(t.id),
            )
            for t in self.state.teachers
            if t.id not in busy
        ]
        # sorted() ist stabil: Gleichstände behalten die Eingabereihenfolge
        return sorted(candidates, key=lambda c: (not c.is_expert, c.workload))

    # ── Abdeckung eines Antrags ───────────────────────────────────────────────

    def lesson_for_period(
        self, teacher_id: str, date: str, period_number: int
    ) -> Optional[ScheduleItem]:
        """Stundenplan-Eintrag, den die Lehrkraft in der Stunde hätte."""
        slot = self.state.slot_for_period(period_number)
        if slot is None:
            return None
        dow = day_index(normalize_date(date))
        return next(
            (
                s for s in self.state.schedules
                if s.teacher_id == teacher_id
                and s.day_of_week == dow
                and s.time_slot_id == slot.id
            ),
            None,
        )

    def active_assignment(
        self, leave_id: str, period_number: int
    ) -> Optional[SubstituteAssignment]:
        """Die nicht abgelehnte Vertretung einer Antragsstunde (oder None)."""
        return next(
            (
                s for s in self.state.subs
                if s.leave_request_id == leave_id
                and s.period_number == period_number
                and s.is_active
            ),
            None,
        )

    def uncovered_periods(self, leave: LeaveRequest) -> list[int]:
        """Stunden des Antrags ohne aktive Vertretung."""
        return [
            p for p in leave.period_numbers
            if self.active_assignment(leave.id, p) is None
        ]

    def actionable_leaves(
        self, search: str = "", newest_first: bool = True
    ) -> list[LeaveRequest]:
        """Genehmigte Anträge, optional nach Lehrername gefiltert, nach Datum sortiert."""
        term = search.strip().lower()
        leaves = [
            l for l in self.state.leaves
            if l.status == LeaveStatus.APPROVED
            and (not term or term in self.state.teacher_name(l.teacher_id).lower())
        ]
        return sorted(leaves, key=lambda l: l.date, reverse=newest_first)


def find_available_teachers(
    state: SchoolState,
    date: str,
    period_number: int,
    required_subject_id: Optional[str] = None,
) -> list[RankedCandidate]:
    """Kurzform für ``SubstitutionFinder(state).find_available_teachers(...)``."""
    return SubstitutionFinder(state).find_available_teachers(
        date, period_number, required_subject_id
    )


def is_overloaded(candidate: RankedCandidate,
                  threshold: int = DEFAULT_OVERLOAD_THRESHOLD) -> bool:
    """Anzeige-Regel: ab ``threshold`` Stunden am Tag gilt ein Kandidat als überlastet.

    Kandidaten werden dadurch nicht ausgeschlossen; die Zuweisung verlangt
    lediglich eine ausdrückliche Bestätigung.
    """
    return candidate.workload >= threshold
