"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from models.record import Record


class ClassRoom(Record):
    """Repräsentiert eine Klasse mit Klassenleitung."""

    name: str = ""              # "7b"
    student_count: int = 0
    advisor_id: str = ""        # Lehrkraft-ID der Klassenleitung
