"""Zustandsverwaltung: reine Übergänge, StateStore und Persistenz-Warteschlange."""

from .errors import (
    DataUnavailableError,
    SlotAlreadyCoveredError,
    SubstitutionError,
    UnknownRecordError,
)
from .commands import Collection, PersistAction, PersistCommand
from .outbox import Outbox, SynchronousOutbox
from .store import StateStore

__all__ = [
    "Collection",
    "DataUnavailableError",
    "Outbox",
    "PersistAction",
    "PersistCommand",
    "SlotAlreadyCoveredError",
    "StateStore",
    "SubstitutionError",
    "SynchronousOutbox",
    "UnknownRecordError",
]
