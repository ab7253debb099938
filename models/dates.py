"""Datums-Normalisierung auf das kanonische Format "YYYY-MM-DD".

Der Datenspeicher serialisiert ein lokales Datum (Mitternacht) mitunter als
UTC-Zeitstempel des Vortags, z.B. ``2025-11-23T17:00:00.000Z`` für den
24.11.2025 in UTC+7. ``normalize_date`` liefert deshalb immer das LOKALE
Kalenderdatum des Werts, nicht das UTC-Datum.

Der Wochentag für Stundenplan-Abfragen (``day_index``) wird dagegen aus dem
kanonischen String als UTC-Mitternacht bestimmt. Die beiden Konventionen
unterscheiden sich bewusst und werden hier nicht vereinheitlicht.
"""

import logging
import math
import re
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

_CANONICAL = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# None = Zeitzone des Systems
_local_tz: Optional[tzinfo] = None


def configure_timezone(name: Optional[str]) -> None:
    """Setzt die lokale Zeitzone (IANA-Name, z.B. "Europe/Berlin").

    ``None`` oder "" stellt auf die Systemzeitzone zurück.
    """
    global _local_tz
    _local_tz = ZoneInfo(name) if name else None
    logger.debug(f"Lokale Zeitzone: {name or 'System'}")


def _convert(dt: datetime, tz: Optional[tzinfo]) -> Optional[datetime]:
    # Am Rand des datetime-Bereichs (Jahr 1 bzw. 9999) scheitert die Umrechnung
    try:
        return dt.astimezone(tz)
    except (OverflowError, OSError, ValueError):
        return None


def _local_date(dt: datetime) -> Optional[date]:
    if dt.tzinfo is None:
        return dt.date()
    local = _convert(dt, _local_tz)
    return local.date() if local is not None else None


def _parse_iso(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def normalize_date(value: Any) -> str:
    """Wandelt eine beliebige Datumsdarstellung in "YYYY-MM-DD" um.

    Akzeptiert kanonische Strings, ISO-8601 mit Uhrzeit/Zeitzone,
    Epoch-Millisekunden (int/float) sowie ``date``/``datetime``.
    Nicht interpretierbare Werte werden unverändert zurückgegeben
    (Nicht-Strings als ``str(value)``); es wird nie ein Datum erfunden und
    nie eine Ausnahme ausgelöst.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        local = _local_date(value)
        return local.isoformat() if local is not None else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return str(value)
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return str(value)
        local = _local_date(dt)
        return local.isoformat() if local is not None else str(value)
    if not isinstance(value, str):
        return str(value)

    text = value.strip()
    if _CANONICAL.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            return value
    dt = _parse_iso(text)
    if dt is None:
        return value
    local = _local_date(dt)
    return local.isoformat() if local is not None else value


def day_index(value: Any) -> Optional[int]:
    """Wochentag des Datums als UTC-Mitternacht: 0=So, 1=Mo .. 6=Sa.

    Der Stundenplan nutzt 1..5 für Mo..Fr. Gibt None zurück, wenn sich der
    Wert nicht als Datum lesen lässt.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoweekday() % 7
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text).isoweekday() % 7
        except ValueError:
            pass
        dt = _parse_iso(text)
    elif isinstance(value, datetime):
        dt = value
    else:
        return None

    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = _convert(dt, timezone.utc)
        if dt is None:
            return None
    return dt.isoweekday() % 7
