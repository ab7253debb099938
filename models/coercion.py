"""Tolerante Feld-Umwandlung für die Validatoren der Datenmodelle.

Die Remote-Tabelle liefert Listenfelder nicht immer in der erwarteten Form:
eine Stundenliste kommt z.B. als Zahl, als JSON-String ``"[1,2]"`` oder als
``"3"``.
"""

import json
from typing import Any, Optional


def _parse_int(raw: Any) -> Optional[int]:
    try:
        return int(str(raw).strip())
    except ValueError:
        try:
            return int(float(str(raw).strip()))
        except (ValueError, OverflowError):
            return None


def coerce_list(value: Any) -> list:
    """Liste bleibt Liste, JSON-Liste als String wird geparst, Skalar → [Skalar].

    Alles andere (None, Objekte, kaputtes JSON) ergibt [].
    """
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                return []
            return parsed if isinstance(parsed, list) else []
        return [text]
    if isinstance(value, bool):
        return []
    if isinstance(value, (int, float)):
        return [value]
    return []


def coerce_int_list(value: Any) -> list[int]:
    """Wie ``coerce_list``, Elemente werden zu int; nicht lesbare entfallen."""
    parsed = (_parse_int(v) for v in coerce_list(value) if not isinstance(v, bool))
    return [n for n in parsed if n is not None]


def coerce_str_list(value: Any) -> list[str]:
    """Wie ``coerce_list``, Elemente werden zu str.

    Ein String ohne Klammern darf auch kommagetrennt sein ("s1, s2").
    """
    if isinstance(value, str) and not value.strip().startswith("[") and "," in value:
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(v) for v in coerce_list(value) if v is not None and str(v) != ""]
