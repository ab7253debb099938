"""Lokaler Datenspeicher als JSON-Datei (Offline-Betrieb).

Die Datei hat dasselbe Format wie die Bulk-Antwort des Remote-Speichers.
Jeder Schreibzugriff liest und schreibt die komplette Datei.
"""

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Sammlungsname → Schlüssel der Bulk-Antwort
COLLECTION_KEYS = {
    "Teachers": "teachers",
    "Subjects": "subjects",
    "Classes": "classes",
    "TimeSlots": "timeSlots",
    "Schedules": "schedules",
    "LeaveRequests": "leaves",
    "SubstituteAssignments": "subs",
}


class JsonFileStore:
    """Datenspeicher in einer JSON-Datei (implementiert ``PersistenceBackend``)."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def fetch_all(self) -> Optional[dict]:
        """Liest die Datei. ``None`` wenn sie fehlt, nicht lesbar ist oder kein
        gültiges JSON (UTF-8) enthält."""
        if not self.path.exists():
            logger.error(f"Datendatei nicht gefunden: {self.path}")
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            logger.error(f"Datendatei nicht lesbar: {self.path} ({e})")
            return None
        except ValueError as e:
            # JSONDecodeError und UnicodeDecodeError
            logger.error(f"Datendatei ungültig: {self.path} ({e})")
            return None
        return data if isinstance(data, dict) else None

    def write_all(self, payload: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def _records(self, payload: dict, collection: str) -> list:
        key = COLLECTION_KEYS.get(collection)
        if key is None:
            raise ValueError(f"Unbekannte Sammlung: {collection}")
        return payload.setdefault(key, [])

    def create(self, collection: str, record: dict) -> None:
        payload = self.fetch_all() or {}
        self._records(payload, collection).append(dict(record))
        self.write_all(payload)

    def update(self, collection: str, record: dict) -> None:
        payload = self.fetch_all() or {}
        records = self._records(payload, collection)
        for i, existing in enumerate(records):
            if str(existing.get("id")) == str(record.get("id")):
                records[i] = {**existing, **record}
                break
        else:
            logger.debug(f"Update ohne Treffer: {collection}/{record.get('id')}")
        self.write_all(payload)

    def delete(self, collection: str, record_id: str) -> None:
        payload = self.fetch_all() or {}
        records = self._records(payload, collection)
        records[:] = [r for r in records if str(r.get("id")) != str(record_id)]
        self.write_all(payload)
