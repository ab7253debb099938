"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import field_validator

from models.coercion import coerce_str_list
from models.record import Record


class Role(str, Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"


class Teacher(Record):
    """Repräsentiert eine einzelne Lehrkraft."""

    name: str = ""
    username: str = ""                  # Login-Kürzel
    role: Role = Role.TEACHER
    expertise: list[str] = []           # Fach-IDs, für die vertreten werden kann
    phone: str = ""
    line_id: str = ""                   # Messenger-Kennung

    @field_validator("expertise", mode="before")
    @classmethod
    def _coerce_expertise(cls, v):
        return coerce_str_list(v)

    def is_expert_for(self, subject_id: Optional[str]) -> bool:
        """True wenn ein Fach angegeben ist und zur Fachkompetenz gehört."""
        return bool(subject_id) and subject_id in self.expertise
