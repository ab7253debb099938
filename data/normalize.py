"""Einlesen der Bulk-Antwort des Datenspeichers.

Listen- und Datumsfelder wandeln die Validatoren der Datenmodelle um
(``models.coercion``, ``models.dates``). Datensätze, die trotzdem nicht
validieren, werden mit Warnung übersprungen. Keine Ausnahme verlässt
dieses Modul.
"""

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class LoadReport(BaseModel):
    """Bericht über das Einlesen eines Datenbestands."""
    warnings: list[str] = []
    counts: dict[str, int] = {}
    skipped: int = 0

    def print_rich(self) -> None:
        from rich.console import Console
        from rich.panel import Panel
        console = Console()
        parts = [f"[green]{name}: {n}[/green]" for name, n in self.counts.items()]
        lines = ["  ".join(parts)]
        if self.warnings:
            lines.append("\n[yellow]Warnungen:[/yellow]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        console.print(Panel("\n".join(lines), title="Daten geladen", border_style="cyan"))


# ─── Bulk-Antwort → SchoolState ───────────────────────────────────────────────

# Schlüssel der Bulk-Antwort → (Feld in SchoolState, Anzeigename)
_PAYLOAD_KEYS = {
    "teachers": ("teachers", "Lehrkräfte"),
    "subjects": ("subjects", "Fächer"),
    "classes": ("classes", "Klassen"),
    "timeSlots": ("time_slots", "Zeitraster"),
    "schedules": ("schedules", "Stundenplan"),
    "leaves": ("leaves", "Abwesenheiten"),
    "subs": ("subs", "Vertretungen"),
}


def state_from_payload(payload: Any):
    """Erzeugt einen SchoolState aus der Bulk-Antwort.

    Gibt ``(state, report)`` zurück. Fehlende Sammlungen gelten als leer.
    """
    from models import (
        ClassRoom, LeaveRequest, ScheduleItem, SchoolState, Subject,
        SubstituteAssignment, Teacher, TimeSlot,
    )
    record_types = {
        "teachers": Teacher, "subjects": Subject, "classes": ClassRoom,
        "time_slots": TimeSlot, "schedules": ScheduleItem,
        "leaves": LeaveRequest, "subs": SubstituteAssignment,
    }

    report = LoadReport()
    if not isinstance(payload, dict):
        report.warnings.append("Antwort ist kein Objekt – leerer Datenbestand.")
        return SchoolState(), report

    collected: dict[str, list] = {}

    for key, (field_name, label) in _PAYLOAD_KEYS.items():
        raw_items = payload.get(key) or []
        if not isinstance(raw_items, list):
            report.warnings.append(f"{label}: keine Liste ({type(raw_items).__name__}) – ignoriert.")
            raw_items = []
        model = record_types[field_name]
        records = []
        for i, raw in enumerate(raw_items):
            if not isinstance(raw, dict):
                report.skipped += 1
                report.warnings.append(f"{label} #{i}: kein Datensatz – übersprungen.")
                continue
            try:
                records.append(model.model_validate(raw))
            except ValidationError as e:
                report.skipped += 1
                msg = f"{label} #{i} (id={raw.get('id', '?')}): ungültig – übersprungen"
                report.warnings.append(msg)
                logger.warning(f"{msg}: {e.error_count()} Fehler")
        collected[field_name] = records
        report.counts[label] = len(records)

    return SchoolState(**collected), report
