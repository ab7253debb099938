"""Demo-Datenbestand für den Vertretungsplaner.

``demo_state()`` liefert einen kleinen, festen Datensatz zum Ausprobieren:

  - 4 Lehrkräfte, 5 Fächer, 3 Klassen
  - Tagesraster mit 5 Unterrichtsstunden und einer Pause (Nr. 4)
  - Montag 1. Stunde: Herr Schneider und Frau Weber unterrichten
    gleichzeitig (Konflikt für die Vertretungssuche)
  - genehmigte Abwesenheit von Herrn Schneider am 23.10.2023 (Montag),
    1. Stunde bereits durch Herrn Fischer vertreten, 2. Stunde offen

``DemoDataGenerator`` erzeugt reproduzierbar größere Bestände (Seed).
"""

import random
from datetime import date, timedelta
from typing import Optional

from config.defaults import default_time_slots
from models.leave_request import LeaveRequest, LeaveStatus
from models.schedule_item import ScheduleItem
from models.school_class import ClassRoom
from models.school_data import SchoolState
from models.subject import Subject
from models.substitute_assignment import SubStatus, SubstituteAssignment
from models.teacher import Role, Teacher

DEMO_LEAVE_DATE = "2023-10-23"


def demo_state() -> SchoolState:
    """Fester Demo-Datensatz (IDs t1–t4, s1–s5, c1–c3, ts1–ts6)."""
    teachers = [
        Teacher(id="t1", name="Thomas Schneider", username="schneider", role=Role.ADMIN,
                expertise=["s1", "s2"], phone="0151-1111111", line_id="t.schneider"),
        Teacher(id="t2", name="Maria Weber", username="weber",
                expertise=["s3", "s4"], phone="0151-2222222", line_id="m.weber"),
        Teacher(id="t3", name="Peter Fischer", username="fischer",
                expertise=["s1", "s5"], phone="0151-3333333", line_id="p.fischer"),
        Teacher(id="t4", name="Claudia Becker", username="becker",
                expertise=["s2", "s3"], phone="0151-4444444", line_id="c.becker"),
    ]
    subjects = [
        Subject(id="s1", code="D", name="Deutsch"),
        Subject(id="s2", code="M", name="Mathematik"),
        Subject(id="s3", code="BI", name="Biologie"),
        Subject(id="s4", code="E", name="Englisch"),
        Subject(id="s5", code="GE", name="Geschichte"),
    ]
    classes = [
        ClassRoom(id="c1", name="5a", student_count=30, advisor_id="t1"),
        ClassRoom(id="c2", name="5b", student_count=32, advisor_id="t2"),
        ClassRoom(id="c3", name="6a", student_count=28, advisor_id="t3"),
    ]
    schedules = [
        # 5a Montag
        ScheduleItem(id="sch1", class_id="c1", time_slot_id="ts1", day_of_week=1,
                     subject_id="s1", teacher_id="t1"),
        ScheduleItem(id="sch2", class_id="c1", time_slot_id="ts2", day_of_week=1,
                     subject_id="s2", teacher_id="t4"),
        # 5a Dienstag
        ScheduleItem(id="sch3", class_id="c1", time_slot_id="ts1", day_of_week=2,
                     subject_id="s3", teacher_id="t2"),
        # Konflikt: Weber ist Montag 1. Stunde in der 5b
        ScheduleItem(id="sch4", class_id="c2", time_slot_id="ts1", day_of_week=1,
                     subject_id="s3", teacher_id="t2"),
        ScheduleItem(id="sch5", class_id="c3", time_slot_id="ts2", day_of_week=1,
                     subject_id="s1", teacher_id="t1"),
    ]
    leaves = [
        LeaveRequest(id="l1", teacher_id="t1", date=DEMO_LEAVE_DATE, period_numbers=[1, 2],
                     reason="Arzttermin", status=LeaveStatus.APPROVED),
    ]
    subs = [
        SubstituteAssignment(
            id="sub1", leave_request_id="l1", original_teacher_id="t1",
            sub_teacher_id="t3", date=DEMO_LEAVE_DATE, period_number=1,
            class_id="c1", subject_id="s1", status=SubStatus.ACCEPTED,
        ),
    ]
    return SchoolState(
        teachers=teachers,
        subjects=subjects,
        classes=classes,
        time_slots=default_time_slots(),
        schedules=schedules,
        leaves=leaves,
        subs=subs,
    )


# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Anna", "Birgit", "Christian", "Eva", "Franz", "Iris",
    "Jürgen", "Kathrin", "Klaus", "Lena", "Markus", "Monika", "Norbert",
    "Sabine", "Stefan", "Tanja", "Ulrike", "Werner", "Zoe",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
]

_SUBJECTS = [
    ("D", "Deutsch"), ("M", "Mathematik"), ("E", "Englisch"),
    ("BI", "Biologie"), ("GE", "Geschichte"), ("EK", "Erdkunde"),
    ("PH", "Physik"), ("KU", "Kunst"), ("MU", "Musik"), ("SP", "Sport"),
]

_REASONS = ["Krankheit", "Fortbildung", "Klassenfahrt", "Arzttermin", "Dienstbesprechung"]


class DemoDataGenerator:
    """Erzeugt einen zufälligen, aber konsistenten Datenbestand.

    Jede Lehrkraft unterrichtet höchstens eine Klasse pro Tag und Stunde,
    jede Klasse hat höchstens eine Lehrkraft pro Tag und Stunde.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def _generate_teachers(self, count: int, subjects: list[Subject]) -> list[Teacher]:
        teachers = []
        used: set[str] = set()
        for i in range(1, count + 1):
            first = self.rng.choice(_FIRST_NAMES)
            last = self.rng.choice(_LAST_NAMES)
            username = last.lower()
            if username in used:
                username = f"{username}{i}"
            used.add(username)
            expertise = self.rng.sample([s.id for s in subjects], k=2)
            teachers.append(Teacher(
                id=f"t{i}", name=f"{first} {last}", username=username,
                role=Role.ADMIN if i == 1 else Role.TEACHER,
                expertise=expertise,
            ))
        return teachers

    def _generate_schedules(self, teachers: list[Teacher], classes: list[ClassRoom],
                            slots, fill: float) -> list[ScheduleItem]:
        items = []
        n = 0
        for day in range(1, 6):
            for slot in slots:
                if not slot.is_learning:
                    continue
                free = list(teachers)
                self.rng.shuffle(free)
                for c in classes:
                    if not free or self.rng.random() > fill:
                        continue
                    teacher = free.pop()
                    n += 1
                    items.append(ScheduleItem(
                        id=f"sch{n}", class_id=c.id, time_slot_id=slot.id,
                        day_of_week=day, subject_id=self.rng.choice(teacher.expertise),
                        teacher_id=teacher.id,
                    ))
        return items

    def _generate_leaves(self, teachers: list[Teacher], learning: list[int],
                         start: date, count: int) -> list[LeaveRequest]:
        leaves = []
        for i in range(1, count + 1):
            day = start + timedelta(days=self.rng.randrange(0, 14))
            while day.weekday() >= 5:
                day += timedelta(days=1)
            periods = sorted(self.rng.sample(learning, k=self.rng.randint(1, min(3, len(learning)))))
            leaves.append(LeaveRequest(
                id=f"l{i}", teacher_id=self.rng.choice(teachers).id,
                date=day.isoformat(), period_numbers=periods,
                reason=self.rng.choice(_REASONS),
                status=self.rng.choice(list(LeaveStatus)),
            ))
        return leaves

    def generate(self, num_teachers: int = 12, num_classes: int = 6,
                 num_leaves: int = 5, start: Optional[date] = None,
                 fill: float = 0.8) -> SchoolState:
        """Erzeugt den vollständigen Datensatz (ohne Vertretungen)."""
        subjects = [Subject(id=f"s{i}", code=code, name=name)
                    for i, (code, name) in enumerate(_SUBJECTS, start=1)]
        teachers = self._generate_teachers(num_teachers, subjects)
        classes = [
            ClassRoom(id=f"c{i}", name=f"{5 + (i - 1) // 3}{'abc'[(i - 1) % 3]}",
                      student_count=self.rng.randint(24, 32),
                      advisor_id=teachers[(i - 1) % len(teachers)].id)
            for i in range(1, num_classes + 1)
        ]
        slots = default_time_slots()
        learning = [ts.period_number for ts in slots if ts.is_learning]
        return SchoolState(
            teachers=teachers,
            subjects=subjects,
            classes=classes,
            time_slots=slots,
            schedules=self._generate_schedules(teachers, classes, slots, fill),
            leaves=self._generate_leaves(teachers, learning, start or date.today(),
                                         num_leaves),
        )

    def print_summary(self, state: SchoolState) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demodaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_row("Lehrkräfte", str(len(state.teachers)))
        table.add_row("Fächer", str(len(state.subjects)))
        table.add_row("Klassen", str(len(state.classes)))
        table.add_row("Stundenplan-Einträge", str(len(state.schedules)))
        table.add_row("Abwesenheiten", str(len(state.leaves)))
        console.print(table)
