"""Persistenz-Befehle, die lokale Änderungen an den Datenspeicher weiterreichen."""

from dataclasses import dataclass, field
from enum import Enum


class Collection(str, Enum):
    """Feste Sammlungsnamen des Datenspeichers (ein Name pro Entität)."""
    TEACHERS = "Teachers"
    SUBJECTS = "Subjects"
    CLASSES = "Classes"
    TIME_SLOTS = "TimeSlots"
    SCHEDULES = "Schedules"
    LEAVE_REQUESTS = "LeaveRequests"
    SUBSTITUTE_ASSIGNMENTS = "SubstituteAssignments"


class PersistAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PersistCommand:
    """Ein einzelner Schreibauftrag an den Datenspeicher.

    ``payload`` ist bei CREATE/UPDATE der (ggf. partielle) Datensatz in
    camelCase, bei DELETE ``{"id": ...}``.
    """

    action: PersistAction
    collection: Collection
    payload: dict = field(default_factory=dict)

    @property
    def record_id(self) -> str:
        return str(self.payload.get("id", ""))

    def __str__(self) -> str:
        return f"{self.action.value} {self.collection.value}/{self.record_id}"


def create(collection: Collection, payload: dict) -> PersistCommand:
    return PersistCommand(PersistAction.CREATE, collection, payload)


def update(collection: Collection, payload: dict) -> PersistCommand:
    return PersistCommand(PersistAction.UPDATE, collection, payload)


def delete(collection: Collection, record_id: str) -> PersistCommand:
    return PersistCommand(PersistAction.DELETE, collection, {"id": record_id})
