"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from models.record import Record


class Subject(Record):
    """Repräsentiert ein Unterrichtsfach."""

    code: str = ""   # Kurzbezeichnung, z.B. "M101"
    name: str = ""

    @property
    def label(self) -> str:
        """Anzeigename mit Kürzel, z.B. "Mathematik (M101)"."""
        return f"{self.name} ({self.code})" if self.code else self.name
