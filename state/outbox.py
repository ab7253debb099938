"""Ausgehende Warteschlange für Persistenz-Befehle.

Lokale Änderungen gelten sofort; die Befehle werden danach im Hintergrund an
den Datenspeicher geschickt ("fire and forget"). Fehlschläge werden
protokolliert und verworfen: kein erneuter Versuch, kein Zurückrollen.
Lokaler und entfernter Stand können dadurch bis zum nächsten vollständigen
Laden auseinanderlaufen.
"""

import logging
import queue
import threading
from collections import Counter
from typing import Optional

from data.backend import PersistenceBackend
from state.commands import PersistAction, PersistCommand

logger = logging.getLogger(__name__)


class SynchronousOutbox:
    """Führt jeden Befehl sofort im aufrufenden Thread aus.

    Für Tests und einmalige CLI-Aufrufe. Fehlerbehandlung wie ``Outbox``.
    """

    def __init__(self, backend: PersistenceBackend) -> None:
        self.backend = backend
        self._lock = threading.Lock()
        self._pending: Counter[str] = Counter()
        self._failed: dict[str, str] = {}
        self.sent = 0

    # ─── Status pro Datensatz ───

    @property
    def pending(self) -> set[str]:
        """Schlüssel "Sammlung/ID" aller noch nicht gesendeten Befehle."""
        with self._lock:
            return {k for k, n in self._pending.items() if n > 0}

    @property
    def failed(self) -> dict[str, str]:
        """Letzter Fehler je "Sammlung/ID" (nur Anzeige, kein Retry)."""
        with self._lock:
            return dict(self._failed)

    @staticmethod
    def _key(command: PersistCommand) -> str:
        return f"{command.collection.value}/{command.record_id}"

    # ─── Senden ───

    def submit(self, command: PersistCommand) -> None:
        with self._lock:
            self._pending[self._key(command)] += 1
        self._process(command)

    def _process(self, command: PersistCommand) -> None:
        key = self._key(command)
        try:
            self._dispatch(command)
        except Exception as e:
            logger.warning(f"Persistenz fehlgeschlagen ({command}): {e}")
            with self._lock:
                self._failed[key] = str(e)
        else:
            logger.debug(f"Persistiert: {command}")
            with self._lock:
                self._failed.pop(key, None)
                self.sent += 1
        finally:
            with self._lock:
                self._pending[key] -= 1
                if self._pending[key] <= 0:
                    del self._pending[key]

    def _dispatch(self, command: PersistCommand) -> None:
        collection = command.collection.value
        if command.action == PersistAction.CREATE:
            self.backend.create(collection, command.payload)
        elif command.action == PersistAction.UPDATE:
            self.backend.update(collection, command.payload)
        elif command.action == PersistAction.DELETE:
            self.backend.delete(collection, command.record_id)

    def join(self) -> None:
        """Wartet, bis alle Befehle abgearbeitet sind."""

    def close(self) -> None:
        """Beendet die Warteschlange."""


class Outbox(SynchronousOutbox):
    """FIFO-Warteschlange mit einem Hintergrund-Thread, der sie abarbeitet."""

    def __init__(self, backend: PersistenceBackend) -> None:
        super().__init__(backend)
        self._queue: queue.Queue[Optional[PersistCommand]] = queue.Queue()
        self._closed = False
        self._worker = threading.Thread(
            target=self._run, name="outbox-worker", daemon=True
        )
        self._worker.start()

    def submit(self, command: PersistCommand) -> None:
        if self._closed:
            raise RuntimeError("Outbox ist geschlossen")
        with self._lock:
            self._pending[self._key(command)] += 1
        self._queue.put(command)

    def _run(self) -> None:
        while True:
            command = self._queue.get()
            try:
                if command is None:
                    return
                self._process(command)
            finally:
                self._queue.task_done()

    def join(self) -> None:
        self._queue.join()

    def close(self, timeout: float = 10.0) -> None:
        """Arbeitet die restlichen Befehle ab und stoppt den Thread."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(None)
        self._worker.join(timeout)
        if self._worker.is_alive():
            logger.warning("Outbox: Hintergrund-Thread reagiert nicht, Befehle gehen verloren")
