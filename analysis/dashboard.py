"""Übersicht für die Startseite: offene Anträge, Vertretungsstand, offene Stunden."""

from collections import Counter

from pydantic import BaseModel

from analysis.availability import SubstitutionFinder
from models.leave_request import LeaveStatus
from models.school_data import SchoolState
from models.substitute_assignment import SubStatus


# ─── Metriken-Modelle ─────────────────────────────────────────────────────────

class OpenPeriod(BaseModel):
    """Eine Stunde eines genehmigten Antrags ohne aktive Vertretung."""

    leave_id: str
    teacher_name: str
    date: str
    period_number: int


class DashboardReport(BaseModel):
    """Kennzahlen des aktuellen Datenbestands."""

    leaves_by_status: dict[str, int]
    subs_by_status: dict[str, int]
    open_periods: list[OpenPeriod]

    @property
    def pending_leaves(self) -> int:
        return self.leaves_by_status.get(LeaveStatus.PENDING.value, 0)

    @property
    def pending_subs(self) -> int:
        return self.subs_by_status.get(SubStatus.REQUESTED.value, 0)

    @property
    def filled_subs(self) -> int:
        return self.subs_by_status.get(SubStatus.ACCEPTED.value, 0)


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class DashboardAnalyzer:
    """Berechnet die Kennzahlen aus einer Momentaufnahme."""

    def analyze(self, state: SchoolState) -> DashboardReport:
        leave_counts = Counter(l.status.value for l in state.leaves)
        sub_counts = Counter(s.status.value for s in state.subs)

        finder = SubstitutionFinder(state)
        open_periods = [
            OpenPeriod(
                leave_id=leave.id,
                teacher_name=state.teacher_name(leave.teacher_id),
                date=leave.date,
                period_number=p,
            )
            for leave in finder.actionable_leaves(newest_first=False)
            for p in finder.uncovered_periods(leave)
        ]

        return DashboardReport(
            leaves_by_status={s.value: leave_counts.get(s.value, 0) for s in LeaveStatus},
            subs_by_status={s.value: sub_counts.get(s.value, 0) for s in SubStatus},
            open_periods=open_periods,
        )

    def print_rich(self, report: DashboardReport) -> None:
        """Gibt die Übersicht formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        open_color = "green" if not report.open_periods else "yellow"
        console.print(Panel(
            f"Offene Anträge: [bold]{report.pending_leaves}[/bold] | "
            f"Unbeantwortete Anfragen: [bold]{report.pending_subs}[/bold] | "
            f"Zugesagte Vertretungen: [bold]{report.filled_subs}[/bold]\n"
            f"Offene Stunden: [{open_color}]{len(report.open_periods)}[/{open_color}]",
            title="Vertretungsplan – Übersicht",
            border_style="cyan",
        ))

        table = Table(title="Status", box=box.ROUNDED)
        table.add_column("Abwesenheiten", width=14)
        table.add_column("Anzahl", justify="right", width=7)
        table.add_column("Vertretungen", width=14)
        table.add_column("Anzahl", justify="right", width=7)
        leave_rows = list(report.leaves_by_status.items())
        sub_rows = list(report.subs_by_status.items())
        for (ls, ln), (ss, sn) in zip(leave_rows, sub_rows):
            table.add_row(ls, str(ln), ss, str(sn))
        console.print(table)

        if report.open_periods:
            o_table = Table(title="Noch zu vertreten", box=box.ROUNDED)
            o_table.add_column("Datum", width=11)
            o_table.add_column("Std.", justify="right", width=5)
            o_table.add_column("Lehrkraft")
            o_table.add_column("Antrag", style="dim")
            for op in report.open_periods:
                o_table.add_row(op.date, str(op.period_number), op.teacher_name, op.leave_id)
            console.print(o_table)
