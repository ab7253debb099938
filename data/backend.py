"""Schnittstelle zum Datenspeicher (extern, z.B. Remote-Tabelle über HTTP)."""

from typing import Optional, Protocol


class PersistenceBackend(Protocol):
    """Was der StateStore vom Datenspeicher erwartet.

    ``fetch_all`` liefert die Bulk-Antwort mit den Schlüsseln ``teachers``,
    ``subjects``, ``classes``, ``timeSlots``, ``schedules``, ``leaves`` und
    ``subs`` oder ``None``, wenn der Speicher nicht erreichbar ist.
    Schreibzugriffe haben keinen Rückgabewert.
    """

    def fetch_all(self) -> Optional[dict]: ...

    def create(self, collection: str, record: dict) -> None: ...

    def update(self, collection: str, record: dict) -> None: ...

    def delete(self, collection: str, record_id: str) -> None: ...
