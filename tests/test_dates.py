"""Tests für die Datums-Normalisierung und den Wochentag-Index."""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.dates import configure_timezone, day_index, normalize_date


@pytest.fixture
def bangkok():
    """Lokale Zeitzone UTC+7 für die Dauer eines Tests."""
    configure_timezone("Asia/Bangkok")
    yield
    configure_timezone(None)


@pytest.fixture
def new_york():
    configure_timezone("America/New_York")
    yield
    configure_timezone(None)


class TestNormalizeDate:

    def test_canonical_unchanged(self):
        assert normalize_date("2023-10-25") == "2023-10-25"

    def test_whitespace_stripped(self):
        assert normalize_date(" 2023-10-25 ") == "2023-10-25"

    def test_utc_timestamp_gives_local_date(self, bangkok):
        """Lokale Mitternacht, als UTC-Zeitstempel des Vortags gespeichert."""
        assert normalize_date("2025-11-23T17:00:00.000Z") == "2025-11-24"

    def test_utc_timestamp_behind_utc(self, new_york):
        assert normalize_date("2025-11-24T03:00:00Z") == "2025-11-23"

    def test_offset_timestamp(self, bangkok):
        assert normalize_date("2024-03-04T23:30:00-02:00") == "2024-03-05"

    def test_naive_timestamp_is_local(self, bangkok):
        assert normalize_date("2024-03-04T23:30:00") == "2024-03-04"

    def test_epoch_milliseconds(self, bangkok):
        ms = int(datetime(2024, 3, 3, 17, 0, tzinfo=timezone.utc).timestamp() * 1000)
        assert normalize_date(ms) == "2024-03-04"
        assert normalize_date(float(ms)) == "2024-03-04"

    def test_date_and_datetime_objects(self, bangkok):
        assert normalize_date(date(2024, 3, 4)) == "2024-03-04"
        aware = datetime(2024, 3, 3, 20, 0, tzinfo=timezone.utc)
        assert normalize_date(aware) == "2024-03-04"

    @pytest.mark.parametrize("raw", ["morgen", "2023-13-45", "2023-02-30", "25.10.2023"])
    def test_invalid_string_returned_unchanged(self, raw):
        assert normalize_date(raw) == raw

    @pytest.mark.parametrize("raw,expected", [
        (None, ""), ("", ""), (True, "True"), (float("nan"), "nan"), ([1], "[1]"),
    ])
    def test_other_values_never_raise(self, raw, expected):
        assert normalize_date(raw) == expected

    @pytest.mark.parametrize("raw", [
        "0001-01-01T00:00:00+01:00", "9999-12-31T23:00:00-05:00",
    ])
    def test_out_of_range_timestamp_returned_unchanged(self, raw, bangkok):
        assert normalize_date(raw) == raw

    def test_out_of_range_datetime_object(self, bangkok):
        edge = datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert normalize_date(edge) == "9999-12-31T23:00:00-05:00"

    @pytest.mark.parametrize("raw", [
        "2023-10-25", "2025-11-23T17:00:00.000Z", "2024-03-04T23:30:00-02:00",
        1709571600000, "kaputt", "2023-02-30", None, True, 1e30,
    ])
    def test_idempotent(self, raw, bangkok):
        once = normalize_date(raw)
        assert normalize_date(once) == once


class TestDayIndex:

    @pytest.mark.parametrize("raw,expected", [
        ("2024-03-03", 0),   # Sonntag
        ("2024-03-04", 1),   # Montag
        ("2024-03-08", 5),   # Freitag
        ("2024-03-09", 6),   # Samstag
    ])
    def test_canonical(self, raw, expected):
        assert day_index(raw) == expected

    def test_uses_utc_weekday_for_timestamps(self, bangkok):
        """Zeitstempel werden als UTC gelesen, nicht lokal (bewusste Asymmetrie)."""
        raw = "2024-03-03T20:00:00Z"     # lokal (UTC+7) schon Montag
        assert normalize_date(raw) == "2024-03-04"
        assert day_index(raw) == 0

    def test_date_object(self):
        assert day_index(date(2024, 3, 4) + timedelta(days=1)) == 2

    @pytest.mark.parametrize("raw", ["", "morgen", None, 12])
    def test_unparseable_is_none(self, raw):
        assert day_index(raw) is None

    @pytest.mark.parametrize("raw", [
        "0001-01-01T00:00:00+01:00", "9999-12-31T23:00:00-05:00",
        datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5))),
    ])
    def test_out_of_range_timestamp_is_none(self, raw):
        assert day_index(raw) is None
