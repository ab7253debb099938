"""Tests für das tolerante Einlesen der Bulk-Antwort."""

import ast
from pathlib import Path

import pytest

from data.normalize import LoadReport, state_from_payload
import models
from models import LeaveStatus, SubStatus, TimeSlotType
from models.coercion import coerce_int_list, coerce_list, coerce_str_list


class TestCoercion:

    @pytest.mark.parametrize("raw,expected", [
        ([1, 2], [1, 2]),
        ("[1, 2]", [1, 2]),
        ("3", [3]),
        (3, [3]),
        (2.0, [2]),
        (["1", "2"], [1, 2]),
        ("[kaputt", []),
        ('{"a": 1}', []),
        ("abc", []),
        ([1, "x", None], [1]),
        (None, []),
        ("", []),
        ({"a": 1}, []),
        (True, []),
    ])
    def test_period_numbers(self, raw, expected):
        assert coerce_int_list(raw) == expected

    def test_json_list_string_parsed(self):
        assert coerce_list('["a"]') == ["a"]
        assert coerce_list("[]") == []

    @pytest.mark.parametrize("raw,expected", [
        (["s1", "s2"], ["s1", "s2"]),
        ('["s1","s2"]', ["s1", "s2"]),
        ("s1, s2", ["s1", "s2"]),
        ("s1", ["s1"]),
        (5, ["5"]),
        (None, []),
    ])
    def test_expertise(self, raw, expected):
        assert coerce_str_list(raw) == expected


class TestStateFromPayload:

    def _payload(self) -> dict:
        return {
            "teachers": [
                {"id": 1, "name": "Anna Müller", "role": "ADMIN", "expertise": '["s1"]',
                 "phone": "0151", "lineId": "anna"},
            ],
            "subjects": [{"id": "s1", "code": "D", "name": "Deutsch"}],
            "classes": [{"id": "c1", "name": "5a", "studentCount": 28, "advisorId": "1"}],
            "timeSlots": [
                {"id": "ts2", "periodNumber": 2, "startTime": "08:50", "endTime": "09:35",
                 "type": "LEARNING"},
                {"id": "ts1", "periodNumber": 1, "startTime": "08:00", "endTime": "08:45",
                 "type": "LEARNING"},
                {"id": "tsp", "periodNumber": 3, "type": "BREAK"},
            ],
            "schedules": [
                {"id": "sch1", "classId": "c1", "timeSlotId": "ts1", "dayOfWeek": 1,
                 "subjectId": "s1", "teacherId": 1},
            ],
            "leaves": [
                {"id": "l1", "teacherId": "1", "date": "2024-03-04", "periodNumbers": 2,
                 "reason": "Arzt", "status": "APPROVED"},
            ],
            "subs": [
                {"id": "sub1", "leaveRequestId": "l1", "originalTeacherId": "1",
                 "subTeacherId": "2", "date": "2024-03-04", "periodNumber": 2,
                 "status": "REJECTED", "rejectReason": "krank"},
            ],
        }

    def test_full_payload(self):
        state, report = state_from_payload(self._payload())
        assert report.skipped == 0
        teacher = state.teacher_by_id("1")
        assert teacher.expertise == ["s1"]
        assert teacher.line_id == "anna"
        assert [ts.period_number for ts in state.time_slots] == [1, 2, 3]
        assert state.time_slots[-1].type == TimeSlotType.BREAK
        assert state.schedules[0].teacher_id == "1"
        assert state.leaves[0].period_numbers == [2]
        assert state.leaves[0].status == LeaveStatus.APPROVED
        assert state.subs[0].status == SubStatus.REJECTED
        assert state.subs[0].reject_reason == "krank"
        assert report.counts["Lehrkräfte"] == 1

    def test_missing_collections_are_empty(self):
        state, report = state_from_payload({"teachers": []})
        assert state.leaves == []
        assert report.counts["Vertretungen"] == 0

    def test_invalid_record_skipped(self):
        payload = self._payload()
        payload["schedules"].append({"id": "bad", "teacherId": "1", "timeSlotId": "ts1",
                                     "dayOfWeek": 9})
        payload["leaves"].append("kein Objekt")
        state, report = state_from_payload(payload)
        assert [s.id for s in state.schedules] == ["sch1"]
        assert len(state.leaves) == 1
        assert report.skipped == 2
        assert len(report.warnings) == 2

    def test_collection_not_a_list(self):
        state, report = state_from_payload({"leaves": {"id": "l1"}})
        assert state.leaves == []
        assert report.warnings

    def test_non_dict_payload(self):
        state, report = state_from_payload(["nope"])
        assert state.teachers == []
        assert isinstance(report, LoadReport)

    def test_round_trip_through_wire_format(self):
        state, _ = state_from_payload(self._payload())
        again, report = state_from_payload(state.to_payload())
        assert again.model_dump() == state.model_dump()
        assert report.skipped == 0

    def test_print_rich_runs(self):
        _, report = state_from_payload(self._payload())
        report.print_rich()

    def test_out_of_range_timestamp_keeps_record(self):
        """Zeitstempel am Rand des Datumsbereichs: Datensatz bleibt, Datum unverändert."""
        payload = self._payload()
        payload["leaves"].append({"id": "l2", "teacherId": "1",
                                  "date": "9999-12-31T23:00:00-05:00", "periodNumbers": 1})
        state, report = state_from_payload(payload)
        assert report.skipped == 0
        assert state.leave_by_id("l2").date == "9999-12-31T23:00:00-05:00"


class TestModelLayer:

    UPPER_LAYERS = {"analysis", "config", "data", "export", "state", "main"}

    def test_models_import_no_upper_layer(self):
        """Das Datenmodell hängt nur von sich selbst und Bibliotheken ab."""
        offenders = []
        for path in Path(models.__file__).parent.glob("*.py"):
            tree = ast.parse(path.read_text(encoding="utf-8"))
            for node in ast.walk(tree):
                if isinstance(node, ast.ImportFrom) and node.module:
                    names = [node.module]
                elif isinstance(node, ast.Import):
                    names = [alias.name for alias in node.names]
                else:
                    continue
                offenders += [f"{path.name}: {n}" for n in names
                              if n.split(".")[0] in self.UPPER_LAYERS]
        assert offenders == []
