"""Zustandsübergänge als reine Funktionen: (State, Eingabe) → Transition.

Jede Funktion liefert einen neuen ``SchoolState`` und die Persistenz-Befehle,
die der ``StateStore`` anschließend an den Datenspeicher schickt. Der
übergebene State wird nie verändert.

Abwesenheit:  PENDING --approve--> APPROVED,  PENDING --reject--> REJECTED
Vertretung:   REQUESTED --respond--> ACCEPTED | REJECTED,
              jede --reassign--> REQUESTED

Nicht gefundene Datensätze bei Update/Delete sind kein Fehler: der State
bleibt gleich, es entstehen keine Befehle.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Union

from models.leave_request import LeaveRequest, LeaveStatus
from models.record import Record
from models.schedule_item import ScheduleItem
from models.school_class import ClassRoom
from models.school_data import SchoolState
from models.subject import Subject
from models.substitute_assignment import SubStatus, SubstituteAssignment
from models.teacher import Teacher
from models.timeslot import TimeSlot
from state import commands as persist
from state.commands import Collection, PersistCommand
from state.errors import SlotAlreadyCoveredError

logger = logging.getLogger(__name__)

RecordInput = Union[Record, dict]


@dataclass(frozen=True)
class Transition:
    """Ergebnis eines Übergangs: neuer State + Schreibaufträge."""

    state: SchoolState
    commands: tuple[PersistCommand, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.commands)


# Sammlung → (Feld in SchoolState, Modell, ID-Präfix)
_COLLECTIONS: dict[Collection, tuple[str, type[Record], str]] = {
    Collection.TEACHERS: ("teachers", Teacher, "t"),
    Collection.SUBJECTS: ("subjects", Subject, "s"),
    Collection.CLASSES: ("classes", ClassRoom, "c"),
    Collection.TIME_SLOTS: ("time_slots", TimeSlot, "ts"),
    Collection.SCHEDULES: ("schedules", ScheduleItem, "sch"),
    Collection.LEAVE_REQUESTS: ("leaves", LeaveRequest, "l"),
    Collection.SUBSTITUTE_ASSIGNMENTS: ("subs", SubstituteAssignment, "sub"),
}


def new_id(prefix: str) -> str:
    """Neue, eindeutige Datensatz-ID mit Typ-Präfix (z.B. "sub3f9a1c0e2b7d")."""
    return f"{prefix}{uuid.uuid4().hex[:12]}"


# ─── Interne Helfer ───────────────────────────────────────────────────────────

def _as_dict(record: RecordInput, model: type[Record]) -> dict:
    if isinstance(record, Record):
        return record.model_dump(by_alias=False)
    return model.field_data(dict(record))


def _with_items(state: SchoolState, field_name: str, items: list) -> SchoolState:
    if field_name == "time_slots":
        items = sorted(items, key=lambda ts: ts.period_number)
    return state.model_copy(update={field_name: items})


def _add(state: SchoolState, collection: Collection, record: RecordInput,
         record_id: Optional[str] = None, **forced: Any) -> Transition:
    field_name, model, prefix = _COLLECTIONS[collection]
    data = {**_as_dict(record, model), **forced, "id": record_id or new_id(prefix)}
    new = model.model_validate(data)
    items = list(getattr(state, field_name)) + [new]
    return Transition(
        _with_items(state, field_name, items),
        (persist.create(collection, new.to_wire()),),
    )


def _find(state: SchoolState, collection: Collection, record_id: str):
    field_name = _COLLECTIONS[collection][0]
    return next((r for r in getattr(state, field_name) if r.id == record_id), None)


def _replace(state: SchoolState, collection: Collection, new: Record) -> SchoolState:
    field_name = _COLLECTIONS[collection][0]
    items = [new if r.id == new.id else r for r in getattr(state, field_name)]
    return _with_items(state, field_name, items)


def _update(state: SchoolState, collection: Collection, record: RecordInput) -> Transition:
    changes = _as_dict(record, _COLLECTIONS[collection][1])
    record_id = str(changes.get("id", ""))
    current = _find(state, collection, record_id)
    if current is None:
        logger.debug(f"Update ignoriert: {collection.value}/{record_id} nicht vorhanden")
        return Transition(state)
    new = current.merged(changes)
    return Transition(
        _replace(state, collection, new),
        (persist.update(collection, new.to_wire()),),
    )


def _delete(state: SchoolState, collection: Collection, record_id: str) -> Transition:
    field_name = _COLLECTIONS[collection][0]
    items = getattr(state, field_name)
    remaining = [r for r in items if r.id != record_id]
    if len(remaining) == len(items):
        logger.debug(f"Löschen ignoriert: {collection.value}/{record_id} nicht vorhanden")
        return Transition(state)
    return Transition(
        _with_items(state, field_name, remaining),
        (persist.delete(collection, record_id),),
    )


def _chain(first: Transition, second: Transition) -> Transition:
    return Transition(second.state, first.commands + second.commands)


# ─── Stammdaten (CRUD) ────────────────────────────────────────────────────────

def add_record(state: SchoolState, collection: Collection, record: RecordInput,
               record_id: Optional[str] = None) -> Transition:
    """Legt einen Stammdatensatz (Lehrkraft, Fach, Klasse, Stunde) mit neuer ID an."""
    return _add(state, collection, record, record_id)


def update_record(state: SchoolState, collection: Collection,
                  record: RecordInput) -> Transition:
    """Übernimmt einen vollständigen oder partiellen Datensatz (mit "id")."""
    return _update(state, collection, record)


def delete_record(state: SchoolState, collection: Collection, record_id: str) -> Transition:
    """Entfernt einen Datensatz. Referenzen darauf bleiben bestehen."""
    return _delete(state, collection, record_id)


# ─── Stundenplan ──────────────────────────────────────────────────────────────

def update_schedule(state: SchoolState, item: RecordInput) -> Transition:
    """Setzt einen Stundenplan-Eintrag (Upsert, letzter Schreibzugriff gewinnt).

    Vorhandene Einträge derselben Lehrkraft am selben Tag in derselben Stunde
    werden vorher entfernt; ebenso eine ältere Fassung mit derselben ID.
    Ob Klasse und Fach existieren, wird nicht geprüft.
    """
    data = _as_dict(item, ScheduleItem)
    if not data.get("id"):
        data["id"] = new_id("sch")
    new = ScheduleItem.model_validate(data)

    existed = any(s.id == new.id for s in state.schedules)
    displaced = [
        s for s in state.schedules
        if s.id != new.id and s.teacher_slot_key == new.teacher_slot_key
    ]
    kept = [
        s for s in state.schedules
        if s.id != new.id and s.teacher_slot_key != new.teacher_slot_key
    ]
    if displaced:
        logger.info(
            f"Stundenplan: {len(displaced)} Eintrag/Einträge von {new.teacher_id} "
            f"({new.day_name}, {new.time_slot_id}) überschrieben"
        )

    cmds = [persist.delete(Collection.SCHEDULES, s.id) for s in displaced]
    if existed:
        cmds.append(persist.update(Collection.SCHEDULES, new.to_wire()))
    else:
        cmds.append(persist.create(Collection.SCHEDULES, new.to_wire()))
    return Transition(_with_items(state, "schedules", kept + [new]), tuple(cmds))


def delete_schedule(state: SchoolState, schedule_id: str) -> Transition:
    return _delete(state, Collection.SCHEDULES, schedule_id)


# ─── Abwesenheiten ────────────────────────────────────────────────────────────

def add_leave_request(state: SchoolState, request: RecordInput,
                      record_id: Optional[str] = None) -> Transition:
    """Neuer Antrag: frische ID, Status immer PENDING, Datum normalisiert."""
    return _add(state, Collection.LEAVE_REQUESTS, request, record_id,
                status=LeaveStatus.PENDING)


def update_leave_request(state: SchoolState, request: RecordInput) -> Transition:
    """Bearbeitet einen Antrag in jedem Status. Der Status wird NICHT zurückgesetzt."""
    return _update(state, Collection.LEAVE_REQUESTS, request)


def _set_leave_status(state: SchoolState, leave_id: str, status: LeaveStatus) -> Transition:
    leave = state.leave_by_id(leave_id)
    if leave is None:
        return Transition(state)
    if leave.status != LeaveStatus.PENDING:
        logger.info(f"Antrag {leave_id}: Status {leave.status.value} → {status.value}")
    new = leave.model_copy(update={"status": status})
    return Transition(
        _replace(state, Collection.LEAVE_REQUESTS, new),
        (persist.update(Collection.LEAVE_REQUESTS,
                         {"id": leave_id, "status": status.value}),),
    )


def approve_leave(state: SchoolState, leave_id: str) -> Transition:
    return _set_leave_status(state, leave_id, LeaveStatus.APPROVED)


def reject_leave(state: SchoolState, leave_id: str) -> Transition:
    return _set_leave_status(state, leave_id, LeaveStatus.REJECTED)


def delete_leave_request(state: SchoolState, leave_id: str) -> Transition:
    """Löscht einen Antrag und jede Vertretung, die auf ihn verweist.

    Jede Vertretung wird einzeln gelöscht (eigener Befehl).
    """
    result = _delete(state, Collection.LEAVE_REQUESTS, leave_id)
    for sub in [s for s in state.subs if s.leave_request_id == leave_id]:
        result = _chain(result, delete_substitute_assignment(result.state, sub.id))
    return result


# ─── Vertretungen ─────────────────────────────────────────────────────────────

def _ensure_slot_free(state: SchoolState, leave_id: str, period_number: int,
                      exclude_id: Optional[str] = None) -> None:
    for s in state.subs:
        if (s.id != exclude_id and s.is_active
                and s.slot_key == (leave_id, period_number)):
            raise SlotAlreadyCoveredError(leave_id, period_number, s.id)


def assign_substitute(state: SchoolState, assignment: RecordInput,
                      record_id: Optional[str] = None) -> Transition:
    """Neue Vertretung: frische ID, Status immer REQUESTED.

    Raises:
        SlotAlreadyCoveredError: wenn die Stunde schon aktiv vergeben ist.
    """
    data = _as_dict(assignment, SubstituteAssignment)
    probe = SubstituteAssignment.model_validate({**data, "id": "-"})
    _ensure_slot_free(state, probe.leave_request_id, probe.period_number)
    return _add(state, Collection.SUBSTITUTE_ASSIGNMENTS, data, record_id,
                status=SubStatus.REQUESTED, reject_reason=None)


def update_substitute_assignment(state: SchoolState, assignment: RecordInput) -> Transition:
    """Übernimmt Änderungen an einer Vertretung in jedem Status."""
    changes = _as_dict(assignment, SubstituteAssignment)
    current = state.sub_by_id(str(changes.get("id", "")))
    if current is None:
        return Transition(state)
    new = current.merged(changes)
    if new.is_active:
        _ensure_slot_free(state, new.leave_request_id, new.period_number, exclude_id=new.id)
    return Transition(
        _replace(state, Collection.SUBSTITUTE_ASSIGNMENTS, new),
        (persist.update(Collection.SUBSTITUTE_ASSIGNMENTS, new.to_wire()),),
    )


def reassign_substitute(state: SchoolState, sub_id: str, sub_teacher_id: str) -> Transition:
    """Andere Lehrkraft für eine Vertretung; Status zurück auf REQUESTED."""
    return update_substitute_assignment(state, {
        "id": sub_id,
        "sub_teacher_id": sub_teacher_id,
        "status": SubStatus.REQUESTED,
        "reject_reason": None,
    })


def respond_to_sub_request(state: SchoolState, sub_id: str,
                           status: Union[SubStatus, str],
                           reason: Optional[str] = None) -> Transition:
    """Antwort der angefragten Lehrkraft (ACCEPTED/REJECTED, optional mit Grund).

    Raises:
        ValueError: bei unbekanntem Status.
    """
    status = SubStatus(status)
    sub = state.sub_by_id(sub_id)
    if sub is None:
        return Transition(state)
    if status != SubStatus.REJECTED and not sub.is_active:
        _ensure_slot_free(state, sub.leave_request_id, sub.period_number, exclude_id=sub.id)
    new = sub.model_copy(update={"status": status, "reject_reason": reason})
    return Transition(
        _replace(state, Collection.SUBSTITUTE_ASSIGNMENTS, new),
        (persist.update(Collection.SUBSTITUTE_ASSIGNMENTS,
                         {"id": sub_id, "status": status.value, "rejectReason": reason}),),
    )


def delete_substitute_assignment(state: SchoolState, sub_id: str) -> Transition:
    return _delete(state, Collection.SUBSTITUTE_ASSIGNMENTS, sub_id)
