"""Terminal-Darstellung (Rich) für Kandidaten, Anträge, Vertretungen und Pläne.

Die ``render_*``-Funktionen liefern reine Tabellenzeilen (testbar ohne
Terminal), die ``print_*``-Funktionen geben sie über Rich aus.
"""

from typing import TYPE_CHECKING, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from analysis.availability import DEFAULT_OVERLOAD_THRESHOLD, is_overloaded
from models.schedule_item import DAY_NAMES
from models.substitute_assignment import SubStatus

if TYPE_CHECKING:
    from analysis.availability import RankedCandidate
    from analysis.cover_plan import CoverPlan
    from models.leave_request import LeaveRequest
    from models.school_data import SchoolState
    from models.substitute_assignment import SubstituteAssignment

_STATUS_COLORS = {
    "PENDING": "yellow",
    "REQUESTED": "yellow",
    "APPROVED": "green",
    "ACCEPTED": "green",
    "REJECTED": "red",
}


def _status(value) -> str:
    text = getattr(value, "value", value) or "-"
    color = _STATUS_COLORS.get(text)
    return f"[{color}]{text}[/{color}]" if color else text


# ─── Kandidaten ───────────────────────────────────────────────────────────────

def render_candidate_rows(
    candidates: list["RankedCandidate"],
    threshold: int = DEFAULT_OVERLOAD_THRESHOLD,
) -> list[list[str]]:
    """Zeilen: [Rang, Name, ID, Fach, Belastung]. Überlastete werden markiert."""
    rows = []
    for rank, c in enumerate(candidates, start=1):
        load = f"{c.workload} Std."
        if is_overloaded(c, threshold):
            load += " ⚠ überlastet"
        rows.append([
            str(rank),
            c.teacher.name,
            c.teacher.id,
            "✓ Fachlehrkraft" if c.is_expert else "",
            load,
        ])
    return rows


def print_candidates(
    console: Console,
    candidates: list["RankedCandidate"],
    title: str,
    threshold: int = DEFAULT_OVERLOAD_THRESHOLD,
) -> None:
    if not candidates:
        console.print("[yellow]Keine freie Lehrkraft in dieser Stunde.[/yellow]")
        return
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", justify="right", width=3)
    table.add_column("Lehrkraft", style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Fach")
    table.add_column("Belastung")
    for row, c in zip(render_candidate_rows(candidates, threshold), candidates):
        style = "dim" if is_overloaded(c, threshold) else None
        table.add_row(*row, style=style)
    console.print(table)


# ─── Anträge und Vertretungen ─────────────────────────────────────────────────

def render_leave_rows(leaves: list["LeaveRequest"], state: "SchoolState") -> list[list[str]]:
    """Zeilen: [ID, Datum, Lehrkraft, Stunden, Grund, Status]."""
    return [
        [
            l.id,
            l.date,
            state.teacher_name(l.teacher_id),
            ", ".join(str(p) for p in l.period_numbers) or "-",
            l.reason or "-",
            _status(l.status),
        ]
        for l in leaves
    ]


def print_leaves(console: Console, leaves: list["LeaveRequest"], state: "SchoolState") -> None:
    if not leaves:
        console.print("[dim]Keine Abwesenheiten vorhanden.[/dim]")
        return
    table = Table(title="Abwesenheiten", box=box.ROUNDED)
    for col in ("ID", "Datum", "Lehrkraft", "Stunden", "Grund", "Status"):
        table.add_column(col)
    for row in render_leave_rows(leaves, state):
        table.add_row(*row)
    console.print(table)


def render_sub_rows(subs: list["SubstituteAssignment"], state: "SchoolState") -> list[list[str]]:
    """Zeilen: [ID, Datum, Std., Vertreten, Vertretung, Klasse, Status]."""
    rows = []
    for s in subs:
        school_class = state.class_by_id(s.class_id)
        status = _status(s.status)
        if s.status == SubStatus.REJECTED and s.reject_reason:
            status += f" ({s.reject_reason})"
        rows.append([
            s.id,
            s.date,
            str(s.period_number),
            state.teacher_name(s.original_teacher_id),
            state.teacher_name(s.sub_teacher_id),
            school_class.name if school_class else "-",
            status,
        ])
    return rows


def print_subs(console: Console, subs: list["SubstituteAssignment"], state: "SchoolState") -> None:
    if not subs:
        console.print("[dim]Keine Vertretungen vorhanden.[/dim]")
        return
    table = Table(title="Vertretungen", box=box.ROUNDED)
    for col in ("ID", "Datum", "Std.", "Vertreten", "Vertretung", "Klasse", "Status"):
        table.add_column(col)
    for row in render_sub_rows(subs, state):
        table.add_row(*row)
    console.print(table)


# ─── Vertretungsplan eines Antrags ────────────────────────────────────────────

def print_cover_plan(console: Console, plan: "CoverPlan") -> None:
    table = Table(
        title=f"{plan.teacher_name} – {plan.long_date()} ({plan.reason or '-'})",
        box=box.ROUNDED,
    )
    table.add_column("Std.", justify="right", width=5)
    table.add_column("Zeit")
    table.add_column("Klasse")
    table.add_column("Fach")
    table.add_column("Vertretung")
    table.add_column("Status")
    for r in plan.rows:
        sub = f"[bold red]{r.sub_teacher_name}[/bold red]" if r.is_open else r.sub_teacher_name
        table.add_row(
            str(r.period_number), r.time_range, r.class_name, r.subject_label,
            sub, _status(r.status) if r.status else "-",
        )
    console.print(table)
    if plan.open_count:
        console.print(f"[yellow]{plan.open_count} Stunde(n) noch offen.[/yellow]")


# ─── Wochenplan einer Lehrkraft ───────────────────────────────────────────────

def render_teacher_rows(teacher_id: str, state: "SchoolState") -> list[list[str]]:
    """Tabellenzeilen für den Wochenplan einer Lehrkraft.

    Jede Zeile: [Std., Zeit, Mo, Di, Mi, Do, Fr]. Pausen werden als
    eigene Zeile mit '─' in allen Tagen eingefügt.
    """
    slot_map: dict = {
        (s.day_of_week, s.time_slot_id): s
        for s in state.schedules if s.teacher_id == teacher_id
    }
    rows: list[list[str]] = []
    for slot in state.time_slots:
        if not slot.is_learning:
            rows.append(["—", f"Pause {slot.start_time}–{slot.end_time}"]
                        + ["─" * 8] * len(DAY_NAMES))
            continue
        cells = [str(slot.period_number), f"{slot.start_time}–{slot.end_time}"]
        for day in DAY_NAMES:
            entry = slot_map.get((day, slot.id))
            if entry is None:
                cells.append("—")
                continue
            subject = state.subject_by_id(entry.subject_id)
            school_class = state.class_by_id(entry.class_id)
            cells.append(
                f"{subject.code if subject else '-'}\n"
                f"{school_class.name if school_class else '-'}"
            )
        rows.append(cells)
    return rows


def print_teacher_week(console: Console, teacher_id: str, state: "SchoolState",
                       title: Optional[str] = None) -> None:
    table = Table(title=title or state.teacher_name(teacher_id),
                  box=box.ROUNDED, show_lines=True)
    table.add_column("Std.", justify="right", width=5)
    table.add_column("Zeit")
    for name in DAY_NAMES.values():
        table.add_column(name, justify="center")
    for row in render_teacher_rows(teacher_id, state):
        table.add_row(*row)
    console.print(table)
