"""Datenmodell für einen Eintrag im wöchentlichen Stundenplan."""

from pydantic import Field

from models.record import Record

DAY_NAMES = {1: "Mo", 2: "Di", 3: "Mi", 4: "Do", 5: "Fr"}


class ScheduleItem(Record):
    """Wiederkehrende Unterrichtsstunde: Klasse × Stunde × Wochentag.

    Pro (teacher_id, day_of_week, time_slot_id) darf es nur einen Eintrag
    geben. Für Klassen wird das NICHT geprüft.
    """

    class_id: str = ""
    time_slot_id: str
    day_of_week: int = Field(ge=1, le=5)   # 1=Mo .. 5=Fr
    subject_id: str = ""
    teacher_id: str

    @property
    def teacher_slot_key(self) -> tuple[str, int, str]:
        """Schlüssel der Eindeutigkeitsregel (Lehrkraft, Tag, Stunde)."""
        return (self.teacher_id, self.day_of_week, self.time_slot_id)

    @property
    def day_name(self) -> str:
        return DAY_NAMES.get(self.day_of_week, str(self.day_of_week))
