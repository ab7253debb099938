"""StateStore: hält den aktuellen Datenbestand und gleicht ihn mit dem Speicher ab.

Ablauf jeder Änderung:
1. reiner Übergang aus ``state.lifecycle`` → neuer SchoolState + Befehle
2. neuer State ersetzt sofort den alten (Quelle für alle folgenden Lesezugriffe)
3. Befehle gehen in die Outbox und werden im Hintergrund gesendet

Der Store ist für genau eine bearbeitende Sitzung gedacht; es gibt keine
Synchronisation mit anderen Nutzern.
"""

import logging
from typing import Optional, Union

from analysis.availability import RankedCandidate, SubstitutionFinder
from data.backend import PersistenceBackend
from data.normalize import LoadReport, state_from_payload
from models.school_data import SchoolState
from models.substitute_assignment import SubStatus
from state import lifecycle
from state.commands import Collection
from state.errors import DataUnavailableError, UnknownRecordError
from state.lifecycle import RecordInput, Transition
from state.outbox import Outbox, SynchronousOutbox

logger = logging.getLogger(__name__)

_UNAVAILABLE = (
    "Keine Verbindung zum Datenspeicher. Bitte Verbindung bzw. "
    "Adresse prüfen und erneut versuchen."
)


class StateStore:
    """Besitzt den aktuellen ``SchoolState`` und alle Änderungsoperationen."""

    def __init__(
        self,
        backend: PersistenceBackend,
        outbox: Optional[SynchronousOutbox] = None,
        state: Optional[SchoolState] = None,
    ) -> None:
        self.backend = backend
        self.outbox = outbox if outbox is not None else Outbox(backend)
        self._state = state or SchoolState()
        self.last_report: Optional[LoadReport] = None

    @property
    def state(self) -> SchoolState:
        """Aktuelle Momentaufnahme (lokaler Stand gilt immer)."""
        return self._state

    # ─── Laden ───

    def load(self) -> LoadReport:
        """Lädt alle Sammlungen neu und ersetzt den lokalen Stand.

        Raises:
            DataUnavailableError: Datenspeicher nicht erreichbar. Es werden
                keine Teildaten übernommen.
        """
        try:
            payload = self.backend.fetch_all()
        except Exception as e:
            logger.error(f"Laden aus dem Datenspeicher fehlgeschlagen: {e}")
            raise DataUnavailableError(_UNAVAILABLE) from e
        if payload is None:
            raise DataUnavailableError(_UNAVAILABLE)
        state, report = state_from_payload(payload)
        self._state = state
        self.last_report = report
        logger.info(
            f"Datenbestand geladen: {len(state.teachers)} Lehrkräfte, "
            f"{len(state.leaves)} Abwesenheiten, {len(state.subs)} Vertretungen"
        )
        for w in report.warnings:
            logger.debug(w)
        return report

    # ─── Anwenden ───

    def _apply(self, transition: Transition) -> Transition:
        self._state = transition.state
        for command in transition.commands:
            self.outbox.submit(command)
        return transition

    def flush(self) -> None:
        """Wartet, bis alle ausstehenden Schreibaufträge abgearbeitet sind."""
        self.outbox.join()

    def close(self) -> None:
        self.outbox.close()

    # ─── Abfragen ───

    def find_available_teachers(
        self, date: str, period_number: int, required_subject_id: Optional[str] = None
    ) -> list[RankedCandidate]:
        return SubstitutionFinder(self._state).find_available_teachers(
            date, period_number, required_subject_id
        )

    def finder(self) -> SubstitutionFinder:
        return SubstitutionFinder(self._state)

    # ─── Stammdaten ───

    def add_teacher(self, teacher: RecordInput) -> Transition:
        return self._apply(lifecycle.add_record(self._state, Collection.TEACHERS, teacher))

    def update_teacher(self, teacher: RecordInput) -> Transition:
        return self._apply(lifecycle.update_record(self._state, Collection.TEACHERS, teacher))

    def delete_teacher(self, teacher_id: str) -> Transition:
        return self._apply(lifecycle.delete_record(self._state, Collection.TEACHERS, teacher_id))

    def add_subject(self, subject: RecordInput) -> Transition:
        return self._apply(lifecycle.add_record(self._state, Collection.SUBJECTS, subject))

    def update_subject(self, subject: RecordInput) -> Transition:
        return self._apply(lifecycle.update_record(self._state, Collection.SUBJECTS, subject))

    def delete_subject(self, subject_id: str) -> Transition:
        return self._apply(lifecycle.delete_record(self._state, Collection.SUBJECTS, subject_id))

    def add_class(self, school_class: RecordInput) -> Transition:
        return self._apply(lifecycle.add_record(self._state, Collection.CLASSES, school_class))

    def update_class(self, school_class: RecordInput) -> Transition:
        return self._apply(lifecycle.update_record(self._state, Collection.CLASSES, school_class))

    def delete_class(self, class_id: str) -> Transition:
        return self._apply(lifecycle.delete_record(self._state, Collection.CLASSES, class_id))

    def add_time_slot(self, slot: RecordInput) -> Transition:
        return self._apply(lifecycle.add_record(self._state, Collection.TIME_SLOTS, slot))

    def update_time_slot(self, slot: RecordInput) -> Transition:
        return self._apply(lifecycle.update_record(self._state, Collection.TIME_SLOTS, slot))

    def delete_time_slot(self, slot_id: str) -> Transition:
        return self._apply(lifecycle.delete_record(self._state, Collection.TIME_SLOTS, slot_id))

    # ─── Stundenplan ───

    def update_schedule(self, item: RecordInput) -> Transition:
        return self._apply(lifecycle.update_schedule(self._state, item))

    def delete_schedule(self, schedule_id: str) -> Transition:
        return self._apply(lifecycle.delete_schedule(self._state, schedule_id))

    # ─── Abwesenheiten ───

    def add_leave_request(self, request: RecordInput) -> Transition:
        return self._apply(lifecycle.add_leave_request(self._state, request))

    def update_leave_request(self, request: RecordInput) -> Transition:
        return self._apply(lifecycle.update_leave_request(self._state, request))

    def approve_leave(self, leave_id: str) -> Transition:
        return self._apply(lifecycle.approve_leave(self._state, leave_id))

    def reject_leave(self, leave_id: str) -> Transition:
        return self._apply(lifecycle.reject_leave(self._state, leave_id))

    def delete_leave_request(self, leave_id: str) -> Transition:
        return self._apply(lifecycle.delete_leave_request(self._state, leave_id))

    # ─── Vertretungen ───

    def assign_substitute(self, assignment: RecordInput) -> Transition:
        return self._apply(lifecycle.assign_substitute(self._state, assignment))

    def assign_for_leave(self, leave_id: str, period_number: int,
                         sub_teacher_id: str) -> Transition:
        """Vergibt eine Antragsstunde an ``sub_teacher_id``.

        Klasse und Fach werden aus dem Stundenplan der abwesenden Lehrkraft
        übernommen (leer, wenn sie in der Stunde keinen Eintrag hat).

        Raises:
            UnknownRecordError: Antrag oder Lehrkraft existiert nicht.
            SlotAlreadyCoveredError: Stunde ist bereits aktiv vergeben.
        """
        leave = self._state.leave_by_id(leave_id)
        if leave is None:
            raise UnknownRecordError("Abwesenheit", leave_id)
        if self._state.teacher_by_id(sub_teacher_id) is None:
            raise UnknownRecordError("Lehrkraft", sub_teacher_id)
        lesson = self.finder().lesson_for_period(leave.teacher_id, leave.date, period_number)
        return self.assign_substitute({
            "leave_request_id": leave.id,
            "original_teacher_id": leave.teacher_id,
            "sub_teacher_id": sub_teacher_id,
            "date": leave.date,
            "period_number": period_number,
            "class_id": lesson.class_id if lesson else "",
            "subject_id": lesson.subject_id if lesson else "",
        })

    def update_substitute_assignment(self, assignment: RecordInput) -> Transition:
        return self._apply(lifecycle.update_substitute_assignment(self._state, assignment))

    def reassign_substitute(self, sub_id: str, sub_teacher_id: str) -> Transition:
        return self._apply(lifecycle.reassign_substitute(self._state, sub_id, sub_teacher_id))

    def respond_to_sub_request(self, sub_id: str, status: Union[SubStatus, str],
                               reason: Optional[str] = None) -> Transition:
        return self._apply(
            lifecycle.respond_to_sub_request(self._state, sub_id, status, reason)
        )

    def delete_substitute_assignment(self, sub_id: str) -> Transition:
        return self._apply(lifecycle.delete_substitute_assignment(self._state, sub_id))
