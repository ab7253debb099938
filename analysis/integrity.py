"""Konsistenzprüfung des Datenbestands.

Der Planer selbst schützt nur die Regel "eine Klasse pro Lehrkraft und
Stunde" (durch Überschreiben). Verweise auf gelöschte Datensätze,
Doppelbelegungen von Klassen oder Daten, die an der Anwendung vorbei in den
Speicher gelangt sind, meldet diese Prüfung; sie verändert nichts.
"""

from collections import defaultdict
from typing import Literal

from pydantic import BaseModel

from models.school_data import SchoolState


class IntegrityIssue(BaseModel):
    """Ein einzelner Befund."""

    severity: Literal["error", "warning"]
    check: str           # z.B. "teacher_double_booking"
    description: str
    entity: str          # ID des betroffenen Datensatzes


class IntegrityReport(BaseModel):
    """Ergebnis der Konsistenzprüfung."""

    issues: list[IntegrityIssue]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [i for i in self.issues if i.severity == "error"]
        warnings = [i for i in self.issues if i.severity == "warning"]

        status = (
            "[bold green]✓ KONSISTENT[/bold green]"
            if self.is_valid
            else "[bold red]✗ FEHLER GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Datenprüfung", border_style="cyan"))

        if not self.issues:
            console.print("[dim]Keine Befunde.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=26)
        table.add_column("Datensatz", width=14)
        table.add_column("Beschreibung")

        for i in self.issues:
            color = "red" if i.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{i.severity.upper()}[/{color}]",
                i.check,
                i.entity,
                i.description,
            )
        console.print(table)


class IntegrityValidator:
    """Prüft einen SchoolState auf Regelverletzungen und tote Verweise."""

    def validate(self, state: SchoolState) -> IntegrityReport:
        issues: list[IntegrityIssue] = []
        issues.extend(self._check_period_numbers(state))
        issues.extend(self._check_teacher_double_booking(state))
        issues.extend(self._check_class_double_booking(state))
        issues.extend(self._check_break_slots(state))
        issues.extend(self._check_schedule_references(state))
        issues.extend(self._check_leave_periods(state))
        issues.extend(self._check_active_assignments(state))
        issues.extend(self._check_assignment_references(state))

        has_errors = any(i.severity == "error" for i in issues)
        return IntegrityReport(issues=issues, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_period_numbers(self, state: SchoolState) -> list[IntegrityIssue]:
        """Stundennummern müssen eindeutig sein."""
        seen: dict[int, list[str]] = defaultdict(list)
        for ts in state.time_slots:
            seen[ts.period_number].append(ts.id)
        return [
            IntegrityIssue(
                severity="error",
                check="duplicate_period_number",
                entity=", ".join(ids),
                description=f"Stunde {period} ist mehrfach im Zeitraster definiert.",
            )
            for period, ids in seen.items() if len(ids) > 1
        ]

    def _check_teacher_double_booking(self, state: SchoolState) -> list[IntegrityIssue]:
        """Keine Lehrkraft darf zur selben Zeit in zwei Klassen sein."""
        seen: dict[tuple, list[str]] = defaultdict(list)
        for s in state.schedules:
            seen[s.teacher_slot_key].append(s.id)
        issues = []
        for (teacher_id, day, slot_id), ids in seen.items():
            if len(ids) > 1:
                issues.append(IntegrityIssue(
                    severity="error",
                    check="teacher_double_booking",
                    entity=teacher_id,
                    description=f"Tag {day}, Stunde {slot_id}: {len(ids)} Einträge ({', '.join(ids)}).",
                ))
        return issues

    def _check_class_double_booking(self, state: SchoolState) -> list[IntegrityIssue]:
        """Doppelt belegte Klassen werden nur gemeldet, nicht verhindert."""
        seen: dict[tuple, list[str]] = defaultdict(list)
        for s in state.schedules:
            seen[(s.class_id, s.day_of_week, s.time_slot_id)].append(s.teacher_id)
        issues = []
        for (class_id, day, slot_id), teachers in seen.items():
            if class_id and len(teachers) > 1:
                issues.append(IntegrityIssue(
                    severity="warning",
                    check="class_double_booking",
                    entity=class_id,
                    description=(
                        f"Tag {day}, Stunde {slot_id}: gleichzeitig bei "
                        f"{', '.join(teachers)}."
                    ),
                ))
        return issues

    def _check_break_slots(self, state: SchoolState) -> list[IntegrityIssue]:
        """In Pausen findet kein Unterricht statt."""
        breaks = {ts.id for ts in state.time_slots if not ts.is_learning}
        return [
            IntegrityIssue(
                severity="warning",
                check="lesson_in_break",
                entity=s.id,
                description=f"Eintrag liegt in einer Pause ({s.time_slot_id}).",
            )
            for s in state.schedules if s.time_slot_id in breaks
        ]

    def _check_schedule_references(self, state: SchoolState) -> list[IntegrityIssue]:
        teacher_ids = {t.id for t in state.teachers}
        class_ids = {c.id for c in state.classes}
        subject_ids = {s.id for s in state.subjects}
        slot_ids = {ts.id for ts in state.time_slots}
        issues = []
        for s in state.schedules:
            missing = []
            if s.teacher_id not in teacher_ids:
                missing.append(f"Lehrkraft {s.teacher_id}")
            if s.class_id and s.class_id not in class_ids:
                missing.append(f"Klasse {s.class_id}")
            if s.subject_id and s.subject_id not in subject_ids:
                missing.append(f"Fach {s.subject_id}")
            if s.time_slot_id not in slot_ids:
                missing.append(f"Stunde {s.time_slot_id}")
            if missing:
                issues.append(IntegrityIssue(
                    severity="warning",
                    check="dangling_reference",
                    entity=s.id,
                    description=f"Stundenplan verweist auf fehlende {', '.join(missing)}.",
                ))
        return issues

    def _check_leave_periods(self, state: SchoolState) -> list[IntegrityIssue]:
        """Abwesenheiten dürfen nur Unterrichtsstunden enthalten."""
        learning = set(state.learning_periods())
        teacher_ids = {t.id for t in state.teachers}
        issues = []
        for l in state.leaves:
            invalid = [p for p in l.period_numbers if p not in learning]
            if invalid:
                issues.append(IntegrityIssue(
                    severity="warning",
                    check="leave_period_not_learning",
                    entity=l.id,
                    description=f"Keine Unterrichtsstunde: {', '.join(map(str, invalid))}.",
                ))
            if l.teacher_id not in teacher_ids:
                issues.append(IntegrityIssue(
                    severity="warning",
                    check="dangling_reference",
                    entity=l.id,
                    description=f"Antrag verweist auf fehlende Lehrkraft {l.teacher_id}.",
                ))
        return issues

    def _check_active_assignments(self, state: SchoolState) -> list[IntegrityIssue]:
        """Pro Antragsstunde höchstens eine aktive Vertretung."""
        seen: dict[tuple, list[str]] = defaultdict(list)
        for s in state.subs:
            if s.is_active:
                seen[s.slot_key].append(s.id)
        return [
            IntegrityIssue(
                severity="error",
                check="multiple_active_assignments",
                entity=leave_id,
                description=f"Stunde {period}: {len(ids)} aktive Vertretungen ({', '.join(ids)}).",
            )
            for (leave_id, period), ids in seen.items() if len(ids) > 1
        ]

    def _check_assignment_references(self, state: SchoolState) -> list[IntegrityIssue]:
        leave_ids = {l.id for l in state.leaves}
        teacher_ids = {t.id for t in state.teachers}
        issues = []
        for s in state.subs:
            if s.leave_request_id not in leave_ids:
                issues.append(IntegrityIssue(
                    severity="warning",
                    check="orphaned_assignment",
                    entity=s.id,
                    description=f"Antrag {s.leave_request_id} existiert nicht mehr.",
                ))
            if s.sub_teacher_id not in teacher_ids:
                issues.append(IntegrityIssue(
                    severity="warning",
                    check="dangling_reference",
                    entity=s.id,
                    description=f"Vertretung verweist auf fehlende Lehrkraft {s.sub_teacher_id}.",
                ))
        return issues
