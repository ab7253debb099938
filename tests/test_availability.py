"""Tests für die Vertretungssuche: Konflikte, Auslastung und Reihenfolge."""

from typing import Optional

import pytest

from analysis.availability import (
    RankedCandidate,
    SubstitutionFinder,
    find_available_teachers,
    is_overloaded,
)
from analysis.workload import WorkloadAccumulator
from models import (
    LeaveRequest, LeaveStatus, ScheduleItem, SchoolState, SubStatus,
    SubstituteAssignment, Teacher, TimeSlot, TimeSlotType,
)

# 2024-03-04 ist ein Montag, 2024-03-05 ein Dienstag
MONDAY = "2024-03-04"
TUESDAY = "2024-03-05"


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_slots() -> list[TimeSlot]:
    return [
        TimeSlot(id="ts1", period_number=1, start_time="08:00", end_time="08:45"),
        TimeSlot(id="ts2", period_number=2, start_time="08:50", end_time="09:35"),
        TimeSlot(id="ts3", period_number=3, start_time="09:35", end_time="09:55",
                 type=TimeSlotType.BREAK),
        TimeSlot(id="ts4", period_number=4, start_time="09:55", end_time="10:40"),
        TimeSlot(id="ts5", period_number=5, start_time="10:45", end_time="11:30"),
    ]


def _make_teacher(tid: str, expertise: Optional[list[str]] = None) -> Teacher:
    return Teacher(id=tid, name=f"Lehrkraft {tid}", expertise=expertise or [])


def _make_lesson(sid: str, teacher_id: str, day: int, slot_id: str,
                 class_id: str = "c1", subject_id: str = "s1") -> ScheduleItem:
    return ScheduleItem(id=sid, teacher_id=teacher_id, day_of_week=day,
                        time_slot_id=slot_id, class_id=class_id, subject_id=subject_id)


def _make_leave(lid: str, teacher_id: str, date: str, periods: list[int],
                status: LeaveStatus = LeaveStatus.APPROVED) -> LeaveRequest:
    return LeaveRequest(id=lid, teacher_id=teacher_id, date=date,
                        period_numbers=periods, status=status)


def _make_sub(sid: str, leave_id: str, sub_teacher_id: str, date: str, period: int,
              status: SubStatus = SubStatus.REQUESTED) -> SubstituteAssignment:
    return SubstituteAssignment(id=sid, leave_request_id=leave_id, sub_teacher_id=sub_teacher_id,
                                date=date, period_number=period, status=status)


def _make_state(**kwargs) -> SchoolState:
    kwargs.setdefault("time_slots", _make_slots())
    return SchoolState(**kwargs)


def _ids(candidates: list[RankedCandidate]) -> list[str]:
    return [c.teacher.id for c in candidates]


# ─── Ausschlüsse ──────────────────────────────────────────────────────────────

class TestBusyTeachers:

    def test_teacher_with_lesson_excluded(self):
        """Wer zur Stunde laut Stundenplan unterrichtet, ist nicht frei."""
        state = _make_state(
            teachers=[_make_teacher("t1"), _make_teacher("t2")],
            schedules=[_make_lesson("sch1", "t1", 1, "ts1")],
        )
        assert _ids(find_available_teachers(state, MONDAY, 1)) == ["t2"]

    def test_lesson_on_other_day_does_not_block(self):
        """Ein Montagseintrag blockiert den Dienstag nicht."""
        state = _make_state(
            teachers=[_make_teacher("t1")],
            schedules=[_make_lesson("sch1", "t1", 1, "ts1")],
        )
        assert _ids(find_available_teachers(state, TUESDAY, 1)) == ["t1"]

    def test_lesson_in_other_period_does_not_block(self):
        state = _make_state(
            teachers=[_make_teacher("t1")],
            schedules=[_make_lesson("sch1", "t1", 1, "ts2")],
        )
        assert _ids(find_available_teachers(state, MONDAY, 1)) == ["t1"]

    def test_approved_leave_excludes_teacher(self):
        """Genehmigte Abwesenheit in der Stunde schließt aus."""
        state = _make_state(
            teachers=[_make_teacher("t1"), _make_teacher("t2")],
            leaves=[_make_leave("l1", "t1", MONDAY, [1, 2])],
        )
        assert _ids(find_available_teachers(state, MONDAY, 2)) == ["t2"]

    @pytest.mark.parametrize("status", [LeaveStatus.PENDING, LeaveStatus.REJECTED])
    def test_unapproved_leave_does_not_exclude(self, status):
        state = _make_state(
            teachers=[_make_teacher("t1")],
            leaves=[_make_leave("l1", "t1", MONDAY, [1], status=status)],
        )
        assert _ids(find_available_teachers(state, MONDAY, 1)) == ["t1"]

    def test_leave_for_other_period_does_not_exclude(self):
        state = _make_state(
            teachers=[_make_teacher("t1")],
            leaves=[_make_leave("l1", "t1", MONDAY, [2])],
        )
        assert _ids(find_available_teachers(state, MONDAY, 1)) == ["t1"]

    def test_leave_excludes_without_schedule_conflict(self):
        """Montagsunterricht + genehmigte Abwesenheit an einem anderen Tag:
        an jenem Tag schließt die Abwesenheit allein aus."""
        state = _make_state(
            teachers=[_make_teacher("T"), _make_teacher("t2")],
            schedules=[_make_lesson("sch1", "T", 1, "ts1")],
            leaves=[_make_leave("l1", "T", TUESDAY, [1])],
        )
        assert "T" not in _ids(find_available_teachers(state, TUESDAY, 1))

    def test_substitute_elsewhere_is_not_excluded(self):
        """Eine Vertretung zur selben Zeit erhöht nur die Auslastung."""
        state = _make_state(
            teachers=[_make_teacher("t1"), _make_teacher("t2")],
            leaves=[_make_leave("l1", "t1", MONDAY, [1])],
            subs=[_make_sub("sub1", "l9", "t2", MONDAY, 1)],
        )
        result = find_available_teachers(state, MONDAY, 1)
        assert _ids(result) == ["t2"]
        assert result[0].workload == 1

    def test_never_returns_busy_teacher(self):
        """Für jede Stunde: kein Kandidat mit Unterricht oder Abwesenheit."""
        teachers = [_make_teacher(f"t{i}") for i in range(1, 7)]
        schedules = [
            _make_lesson("a", "t1", 1, "ts1"), _make_lesson("b", "t2", 1, "ts2"),
            _make_lesson("c", "t3", 1, "ts4"), _make_lesson("d", "t1", 2, "ts5"),
        ]
        leaves = [_make_leave("l1", "t4", MONDAY, [1, 5]), _make_leave("l2", "t5", TUESDAY, [2])]
        state = _make_state(teachers=teachers, schedules=schedules, leaves=leaves)
        finder = SubstitutionFinder(state)

        for date, dow in ((MONDAY, 1), (TUESDAY, 2)):
            for slot in state.time_slots:
                ids = set(_ids(finder.find_available_teachers(date, slot.period_number)))
                for s in schedules:
                    if s.day_of_week == dow and s.time_slot_id == slot.id:
                        assert s.teacher_id not in ids
                for l in leaves:
                    if l.date == date and slot.period_number in l.period_numbers:
                        assert l.teacher_id not in ids


# ─── Sonderfälle ──────────────────────────────────────────────────────────────

class TestEdgeCases:

    def test_unknown_period_gives_empty_list(self):
        state = _make_state(teachers=[_make_teacher("t1")])
        assert find_available_teachers(state, MONDAY, 99) == []

    def test_weekend_nobody_busy_by_schedule(self):
        """Samstag (Index 6) hat keine Stundenplan-Einträge."""
        state = _make_state(
            teachers=[_make_teacher("t1")],
            schedules=[_make_lesson("sch1", "t1", 1, "ts1")],
        )
        assert _ids(find_available_teachers(state, "2024-03-09", 1)) == ["t1"]

    def test_date_is_normalized_before_lookup(self):
        """Ein Zeitstempel mit Uhrzeit findet dieselbe Abwesenheit."""
        state = _make_state(
            teachers=[_make_teacher("t1"), _make_teacher("t2")],
            leaves=[_make_leave("l1", "t1", MONDAY, [1])],
        )
        assert _ids(find_available_teachers(state, f"{MONDAY}T10:00:00", 1)) == ["t2"]

    def test_no_teachers(self):
        assert find_available_teachers(_make_state(), MONDAY, 1) == []

    def test_state_not_modified(self):
        teachers = [_make_teacher("t1", ["s1"])]
        state = _make_state(teachers=teachers)
        before = state.model_dump()
        find_available_teachers(state, MONDAY, 1, "s1")
        assert state.model_dump() == before


# ─── Reihenfolge ──────────────────────────────────────────────────────────────

class TestRanking:

    def test_expert_before_non_expert_regardless_of_workload(self):
        """Fachlehrkraft mit Auslastung 2 vor Nicht-Fachlehrkraft mit 0."""
        state = _make_state(
            teachers=[_make_teacher("N", ["s2"]), _make_teacher("E", ["s1"])],
            schedules=[
                _make_lesson("x1", "E", 1, "ts2"),
                _make_lesson("x2", "E", 1, "ts4"),
            ],
        )
        result = find_available_teachers(state, MONDAY, 1, "s1")
        assert _ids(result) == ["E", "N"]
        assert [c.workload for c in result] == [2, 0]
        assert [c.is_expert for c in result] == [True, False]

    def test_lower_workload_first_within_group(self):
        state = _make_state(
            teachers=[_make_teacher("t1"), _make_teacher("t2"), _make_teacher("t3")],
            schedules=[
                _make_lesson("a", "t1", 1, "ts2"),
                _make_lesson("b", "t1", 1, "ts4"),
                _make_lesson("c", "t2", 1, "ts5"),
            ],
        )
        assert _ids(find_available_teachers(state, MONDAY, 1)) == ["t3", "t2", "t1"]

    def test_stable_order_on_ties(self):
        """Gleichstand behält die Reihenfolge der Lehrerliste."""
        teachers = [_make_teacher(tid) for tid in ("t5", "t2", "t9", "t1")]
        state = _make_state(teachers=teachers)
        assert _ids(find_available_teachers(state, MONDAY, 1)) == ["t5", "t2", "t9", "t1"]

    def test_no_subject_means_no_expert(self):
        state = _make_state(teachers=[_make_teacher("t1", ["s1"])])
        assert find_available_teachers(state, MONDAY, 1)[0].is_expert is False

    def test_workload_counts_active_subs_on_date_only(self):
        """Abgelehnte Vertretungen und andere Tage zählen nicht."""
        state = _make_state(
            teachers=[_make_teacher("t1")],
            subs=[
                _make_sub("a", "l1", "t1", MONDAY, 2, SubStatus.ACCEPTED),
                _make_sub("b", "l1", "t1", MONDAY, 4, SubStatus.REQUESTED),
                _make_sub("c", "l1", "t1", MONDAY, 5, SubStatus.REJECTED),
                _make_sub("d", "l2", "t1", TUESDAY, 1, SubStatus.ACCEPTED),
            ],
        )
        assert find_available_teachers(state, MONDAY, 1)[0].workload == 2


# ─── Auslastung ───────────────────────────────────────────────────────────────

class TestWorkload:

    def test_breakdown(self):
        state = _make_state(
            schedules=[_make_lesson("a", "t1", 1, "ts1"), _make_lesson("b", "t1", 2, "ts1")],
            subs=[_make_sub("s", "l1", "t1", MONDAY, 2)],
        )
        acc = WorkloadAccumulator(state, MONDAY, 1)
        assert acc.breakdown("t1") == {"regular": 1, "substitute": 1, "total": 2}
        assert acc.workload("unbekannt") == 0

    @pytest.mark.parametrize("workload,expected", [(0, False), (2, False), (3, True), (5, True)])
    def test_overload_threshold(self, workload, expected):
        c = RankedCandidate(teacher=_make_teacher("t1"), is_expert=False, workload=workload)
        assert is_overloaded(c) is expected

    def test_overload_custom_threshold(self):
        c = RankedCandidate(teacher=_make_teacher("t1"), is_expert=True, workload=2)
        assert is_overloaded(c, threshold=2)


# ─── Abdeckung eines Antrags ──────────────────────────────────────────────────

class TestLeaveCoverage:

    def _state(self) -> SchoolState:
        return _make_state(
            teachers=[_make_teacher("t1", ["s1"]), _make_teacher("t2")],
            schedules=[_make_lesson("sch1", "t1", 1, "ts1", class_id="c7", subject_id="s1")],
            leaves=[
                _make_leave("l1", "t1", MONDAY, [1, 2]),
                _make_leave("l2", "t1", "2024-02-01", [1]),
                _make_leave("l3", "t2", "2024-05-01", [1], status=LeaveStatus.PENDING),
            ],
            subs=[
                _make_sub("a", "l1", "t2", MONDAY, 1, SubStatus.REJECTED),
                _make_sub("b", "l1", "t2", MONDAY, 2, SubStatus.ACCEPTED),
            ],
        )

    def test_lesson_for_period(self):
        finder = SubstitutionFinder(self._state())
        lesson = finder.lesson_for_period("t1", MONDAY, 1)
        assert lesson.class_id == "c7"
        assert finder.lesson_for_period("t1", MONDAY, 2) is None
        assert finder.lesson_for_period("t1", MONDAY, 99) is None

    def test_rejected_assignment_leaves_period_open(self):
        finder = SubstitutionFinder(self._state())
        leave = finder.state.leave_by_id("l1")
        assert finder.active_assignment("l1", 1) is None
        assert finder.active_assignment("l1", 2).id == "b"
        assert finder.uncovered_periods(leave) == [1]

    def test_actionable_leaves_sorted_and_filtered(self):
        finder = SubstitutionFinder(self._state())
        assert [l.id for l in finder.actionable_leaves()] == ["l1", "l2"]
        assert [l.id for l in finder.actionable_leaves(newest_first=False)] == ["l2", "l1"]
        assert finder.actionable_leaves(search="t2") == []
        assert len(finder.actionable_leaves(search="LEHRKRAFT T1")) == 2
