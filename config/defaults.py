from config.schema import AppConfig, RankingConfig, RemoteConfig, StorageConfig
from models.timeslot import TimeSlot, TimeSlotType


def default_app_config() -> AppConfig:
    """Standard-Konfiguration: lokale JSON-Datei, Systemzeitzone."""
    return AppConfig(
        school_name="Muster-Gymnasium",
        timezone=None,
        remote=RemoteConfig(enabled=False, base_url="", timeout_seconds=15.0),
        storage=StorageConfig(data_file="output/vertretung.json"),
        ranking=RankingConfig(overload_threshold=3),
    )


def default_time_slots() -> list[TimeSlot]:
    """Standard-Tagesraster mit einer großen Pause nach der 3. Stunde.

    Stundenraster:
    1. Stunde  08:00 - 08:50
    2. Stunde  08:50 - 09:40
    3. Stunde  09:40 - 10:30
       ── Pause (4) ──
    5. Stunde  10:50 - 11:40
    6. Stunde  11:40 - 12:30

    Die Pause belegt eine eigene Nummer im Raster, damit die Reihenfolge
    erhalten bleibt; sie ist keine Unterrichtsstunde.
    """
    rows = [
        (1, "08:00", "08:50", TimeSlotType.LEARNING),
        (2, "08:50", "09:40", TimeSlotType.LEARNING),
        (3, "09:40", "10:30", TimeSlotType.LEARNING),
        (4, "10:30", "10:50", TimeSlotType.BREAK),
        (5, "10:50", "11:40", TimeSlotType.LEARNING),
        (6, "11:40", "12:30", TimeSlotType.LEARNING),
    ]
    return [
        TimeSlot(id=f"ts{n}", period_number=n, start_time=start,
                 end_time=end, type=kind)
        for n, start, end, kind in rows
    ]
