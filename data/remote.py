"""HTTP-Client für den Remote-Datenspeicher (Tabellen-Web-App).

Protokoll:
  GET  <base_url>?action=getData&t=<ms>          → Bulk-Antwort (JSON)
  POST <base_url>  {"action", "collection", "data"} als text/plain-JSON

Der Body wird als ``text/plain`` gesendet, weil die Web-App sonst einen
CORS-Preflight verlangt. Lesefehler ergeben ``None``; Schreibfehler
(``httpx.HTTPError``) protokolliert und verwirft die Outbox.
"""

import json
import logging
import time
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

_POST_HEADERS = {"Content-Type": "text/plain;charset=utf-8"}


class RemoteStore:
    """Datenspeicher über HTTP (implementiert ``PersistenceBackend``)."""

    def __init__(self, base_url: str, timeout: float = 15.0,
                 client: Optional[httpx.Client] = None) -> None:
        self.base_url = base_url
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        self._client.close()

    # ─── Lesen ───

    def fetch_all(self) -> Optional[dict]:
        """Lädt alle Sammlungen. ``None`` bei Netzwerk-, HTTP- oder JSON-Fehler."""
        # Cache-Buster gegen zwischengespeicherte GET-Antworten
        params = {"action": "getData", "t": str(int(time.time() * 1000))}
        try:
            response = self._client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Datenspeicher nicht erreichbar: {e}")
            return None
        except ValueError as e:
            # JSONDecodeError und UnicodeDecodeError
            logger.error(f"Ungültige Antwort des Datenspeichers: {e}")
            return None
        if not isinstance(data, dict):
            logger.error(f"Unerwartete Antwort des Datenspeichers: {type(data).__name__}")
            return None
        return data

    # ─── Schreiben (Fehler: httpx.HTTPError) ───

    def _post(self, action: str, collection: str, data: Any) -> None:
        body = json.dumps(
            {"action": action, "collection": collection, "data": data},
            ensure_ascii=False,
        )
        response = self._client.post(
            self.base_url, content=body.encode("utf-8"), headers=_POST_HEADERS
        )
        response.raise_for_status()

    def create(self, collection: str, record: dict) -> None:
        self._post("create", collection, record)

    def update(self, collection: str, record: dict) -> None:
        self._post("update", collection, record)

    def delete(self, collection: str, record_id: str) -> None:
        self._post("delete", collection, {"id": record_id})
