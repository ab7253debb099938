"""Gemeinsame Basisklasse aller Datensätze (Pydantic v2).

Im Datenspeicher (Remote-Tabelle, JSON-Datei) heißen die Felder camelCase
("teacherId", "periodNumbers"), in Python snake_case. Beide Schreibweisen
werden beim Einlesen akzeptiert.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Basis für alle Entitäten mit unveränderlicher String-ID."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    id: str

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_ids(cls, v: Any, info: ValidationInfo) -> Any:
        # Tabellen liefern IDs gelegentlich als Zahl
        if info.field_name == "id" or info.field_name.endswith("_id"):
            return "" if v is None else str(v)
        return v

    @classmethod
    def field_data(cls, data: dict) -> dict:
        """Übersetzt camelCase-Schlüssel in Python-Feldnamen."""
        aliases = {f.alias: name for name, f in cls.model_fields.items() if f.alias}
        return {aliases.get(key, key): value for key, value in data.items()}

    def to_wire(self) -> dict:
        """Serialisiert den Datensatz in camelCase für den Datenspeicher."""
        return self.model_dump(mode="json", by_alias=True)

    def merged(self, changes: dict) -> "Record":
        """Gibt eine neue, validierte Kopie mit übernommenen Teiländerungen zurück.

        ``changes`` darf camelCase oder snake_case verwenden; die ID bleibt
        unverändert.
        """
        data = self.model_dump(by_alias=False)
        data.update(type(self).field_data(changes))
        data["id"] = self.id
        return type(self).model_validate(data)
