"""Vertretungsplaner — Haupt-CLI.

Verwendung:
  python main.py setup                           Standard-Konfiguration anlegen
  python main.py config show                     Konfiguration anzeigen
  python main.py demo                            Demo-Datenbestand schreiben
  python main.py status                          Übersicht (offene Anträge/Stunden)
  python main.py validate                        Konsistenzprüfung
  python main.py available <datum> <std>         Freie Lehrkräfte suchen
  python main.py leave add|list|approve|reject|delete
  python main.py cover <antrag>                  Vertretungsplan eines Antrags
  python main.py sub assign|list|respond|reassign|delete
  python main.py schedule set|delete|show

Globale Optionen: --remote/--offline, --data-file, --config, --verbose
"""

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

console = Console()


@dataclass
class CliSettings:
    """Gemeinsame Einstellungen aller Befehle (aus Config + globalen Optionen)."""

    config_path: Path
    remote: Optional[bool]
    data_file: Optional[Path]

    def load_config(self):
        from config.manager import ConfigManager
        try:
            return ConfigManager(self.config_path).load_or_default()
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)


def _setup_logging(verbose: bool) -> None:
    from rich.logging import RichHandler
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _data_file(settings: CliSettings, config) -> Path:
    return settings.data_file or Path(config.storage.data_file)


@contextmanager
def _open_store(ctx: click.Context):
    """Lädt den Datenbestand und liefert einen StateStore.

    Am Ende werden alle Schreibaufträge abgearbeitet. Fachliche Fehler
    (``SubstitutionError``) beenden den Befehl mit Exit-Code 1, ein nicht
    erreichbarer Datenspeicher mit Exit-Code 2.
    """
    from models.dates import configure_timezone
    from data.file_store import JsonFileStore
    from data.remote import RemoteStore
    from state import DataUnavailableError, StateStore, SubstitutionError

    settings: CliSettings = ctx.obj
    config = settings.load_config()
    configure_timezone(config.timezone)

    use_remote = config.remote.enabled if settings.remote is None else settings.remote
    if use_remote:
        if not config.remote.base_url:
            console.print(Panel(
                "Keine Adresse für den Datenspeicher konfiguriert (remote.base_url).",
                title="Datenspeicher", border_style="red",
            ))
            sys.exit(2)
        backend = RemoteStore(config.remote.base_url, timeout=config.remote.timeout_seconds)
    else:
        backend = JsonFileStore(_data_file(settings, config))

    store = StateStore(backend)
    try:
        report = store.load()
    except DataUnavailableError as e:
        store.close()
        console.print(Panel(
            f"[bold]{e}[/bold]\n\n"
            + ("Offline arbeiten: --offline" if use_remote
               else "Demo-Daten anlegen: python main.py demo"),
            title="Datenspeicher nicht erreichbar",
            border_style="red",
        ))
        sys.exit(2)

    if report.skipped:
        console.print(
            f"[yellow]{report.skipped} fehlerhafte(r) Datensatz/Datensätze übersprungen "
            f"(Details mit --verbose).[/yellow]"
        )

    failed = False
    try:
        yield store
    except SubstitutionError as e:
        console.print(f"[red]{e}[/red]")
        failed = True
    finally:
        store.flush()
        store.close()
        if store.outbox.failed:
            console.print(
                f"[yellow]{len(store.outbox.failed)} Änderung(en) konnten nicht "
                f"gespeichert werden (siehe Log).[/yellow]"
            )
        if isinstance(backend, RemoteStore):
            backend.close()
    if failed:
        sys.exit(1)


def _abort(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def _overload_threshold(ctx: click.Context) -> int:
    return ctx.obj.load_config().ranking.overload_threshold


def _parse_date_or_abort(value: str) -> str:
    from models.dates import day_index, normalize_date
    date = normalize_date(value)
    if day_index(date) is None:
        _abort(f"Ungültiges Datum: {value} (erwartet: JJJJ-MM-TT)")
    return date


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
@click.pass_obj
def cmd_setup(settings: CliSettings, force: bool):
    """Legt die Standard-Konfiguration an."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager

    mgr = ConfigManager(settings.config_path)
    if not mgr.first_run_check() and not force:
        console.print(
            f"[yellow]Eine Konfiguration existiert bereits: {mgr.path}[/yellow]\n"
            "Mit [bold]--force[/bold] wird sie überschrieben."
        )
        return
    mgr.save(default_app_config())
    console.print("Führen Sie jetzt [bold]python main.py demo[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
@click.pass_obj
def config_show(settings: CliSettings):
    """Zeigt die aktuelle Konfiguration an."""
    from config.manager import ConfigManager

    mgr = ConfigManager(settings.config_path)
    config = settings.load_config()
    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  "
        f"{'entfernt' if config.remote.enabled else 'lokal'}  |  "
        f"Zeitzone: {config.timezone or 'System'}",
        title="Vertretungsplaner",
        border_style="cyan",
    ))
    if mgr.first_run_check():
        console.print("[dim]Keine Konfigurationsdatei, es gelten die Standardwerte.[/dim]")
    mgr.show(config)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--generate", "use_generator", is_flag=True, default=False,
              help="Zufälligen Datenbestand statt des festen Demo-Satzes erzeugen.")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--teachers", "num_teachers", default=12, help="Anzahl Lehrkräfte (--generate).")
@click.option("--classes", "num_classes", default=6, help="Anzahl Klassen (--generate).")
@click.pass_obj
def cmd_demo(settings: CliSettings, use_generator: bool, seed: int,
             num_teachers: int, num_classes: int):
    """Schreibt einen Demo-Datenbestand in die lokale Datendatei."""
    from data.demo_data import DemoDataGenerator, demo_state
    from data.file_store import JsonFileStore

    config = settings.load_config()
    if use_generator:
        gen = DemoDataGenerator(seed=seed)
        state = gen.generate(num_teachers=num_teachers, num_classes=num_classes)
        gen.print_summary(state)
    else:
        state = demo_state()

    path = _data_file(settings, config)
    JsonFileStore(path).write_all(state.to_payload())
    console.print(f"\n[dim]{state.summary()}[/dim]")
    console.print(f"[green]✓[/green] Datenbestand gespeichert: {path}")


# ─── STATUS / VALIDATE ────────────────────────────────────────────────────────

@click.command("status")
@click.pass_context
def cmd_status(ctx: click.Context):
    """Übersicht: offene Anträge, Anfragen und noch zu vertretende Stunden."""
    from analysis.dashboard import DashboardAnalyzer

    with _open_store(ctx) as store:
        analyzer = DashboardAnalyzer()
        analyzer.print_rich(analyzer.analyze(store.state))


@click.command("validate")
@click.pass_context
def cmd_validate(ctx: click.Context):
    """Prüft den Datenbestand auf Doppelbelegungen und tote Verweise."""
    from analysis.integrity import IntegrityValidator

    with _open_store(ctx) as store:
        console.print(f"\n{store.state.summary()}\n")
        report = IntegrityValidator().validate(store.state)
        report.print_rich()

    sys.exit(0 if report.is_valid else 1)


# ─── AVAILABLE ────────────────────────────────────────────────────────────────

@click.command("available")
@click.argument("date")
@click.argument("period", type=int)
@click.option("--subject", "subject_id", default=None, help="Fach-ID der Stunde.")
@click.pass_context
def cmd_available(ctx: click.Context, date: str, period: int, subject_id: Optional[str]):
    """Listet freie Lehrkräfte für DATUM und STUNDE, Fachlehrkräfte zuerst."""
    from models.dates import day_index
    from export.tui_renderer import print_candidates
    from models.schedule_item import DAY_NAMES

    date = _parse_date_or_abort(date)
    with _open_store(ctx) as store:
        threshold = _overload_threshold(ctx)
        slot = store.state.slot_for_period(period)
        if slot is None:
            _abort(f"Stunde {period} ist im Zeitraster nicht definiert.")
        if not slot.is_learning:
            console.print(f"[yellow]Hinweis: Stunde {period} ist eine Pause.[/yellow]")
        candidates = store.find_available_teachers(date, period, subject_id)
        day = DAY_NAMES.get(day_index(date), "Wochenende")
        print_candidates(
            console, candidates,
            title=f"Freie Lehrkräfte – {date} ({day}), {slot}",
            threshold=threshold,
        )


# ─── LEAVE ────────────────────────────────────────────────────────────────────

@click.group("leave")
def cmd_leave():
    """Abwesenheiten verwalten."""


@cmd_leave.command("add")
@click.argument("teacher_id")
@click.argument("date")
@click.argument("periods", nargs=-1, type=int, required=True)
@click.option("--reason", "-r", default="", help="Grund der Abwesenheit.")
@click.pass_context
def leave_add(ctx: click.Context, teacher_id: str, date: str, periods: tuple, reason: str):
    """Legt einen Antrag für LEHRKRAFT am DATUM für STUNDEN an (Status PENDING)."""
    from state import UnknownRecordError

    date = _parse_date_or_abort(date)
    with _open_store(ctx) as store:
        if store.state.teacher_by_id(teacher_id) is None:
            raise UnknownRecordError("Lehrkraft", teacher_id)
        learning = set(store.state.learning_periods())
        invalid = [p for p in periods if p not in learning]
        if invalid:
            _abort(f"Keine Unterrichtsstunde(n): {', '.join(map(str, invalid))}")
        result = store.add_leave_request({
            "teacher_id": teacher_id,
            "date": date,
            "period_numbers": sorted(set(periods)),
            "reason": reason,
        })
        leave = result.state.leaves[-1]
        console.print(f"[green]✓[/green] Antrag angelegt: [bold]{leave.id}[/bold] (PENDING)")


@cmd_leave.command("list")
@click.option("--status", type=click.Choice(["PENDING", "APPROVED", "REJECTED"]),
              default=None, help="Nur Anträge mit diesem Status.")
@click.option("--search", default="", help="Filter nach Lehrername.")
@click.pass_context
def leave_list(ctx: click.Context, status: Optional[str], search: str):
    """Listet Abwesenheiten, neueste zuerst."""
    from export.tui_renderer import print_leaves

    with _open_store(ctx) as store:
        state = store.state
        term = search.strip().lower()
        leaves = [
            l for l in state.leaves
            if (status is None or l.status.value == status)
            and (not term or term in state.teacher_name(l.teacher_id).lower())
        ]
        print_leaves(console, sorted(leaves, key=lambda l: l.date, reverse=True), state)


@cmd_leave.command("approve")
@click.argument("leave_id")
@click.pass_context
def leave_approve(ctx: click.Context, leave_id: str):
    """Genehmigt einen Antrag (jeder Status erlaubt)."""
    with _open_store(ctx) as store:
        if not store.approve_leave(leave_id).changed:
            _abort(f"Antrag nicht gefunden: {leave_id}")
        console.print(f"[green]✓[/green] Antrag {leave_id} genehmigt.")


@cmd_leave.command("reject")
@click.argument("leave_id")
@click.pass_context
def leave_reject(ctx: click.Context, leave_id: str):
    """Lehnt einen Antrag ab (jeder Status erlaubt)."""
    with _open_store(ctx) as store:
        if not store.reject_leave(leave_id).changed:
            _abort(f"Antrag nicht gefunden: {leave_id}")
        console.print(f"[green]✓[/green] Antrag {leave_id} abgelehnt.")


@cmd_leave.command("delete")
@click.argument("leave_id")
@click.pass_context
def leave_delete(ctx: click.Context, leave_id: str):
    """Löscht einen Antrag samt aller zugehörigen Vertretungen."""
    with _open_store(ctx) as store:
        result = store.delete_leave_request(leave_id)
        if not result.changed:
            _abort(f"Antrag nicht gefunden: {leave_id}")
        removed = sum(1 for c in result.commands
                      if c.collection.value == "SubstituteAssignments")
        console.print(
            f"[green]✓[/green] Antrag {leave_id} gelöscht"
            + (f" ({removed} Vertretung(en) entfernt)." if removed else ".")
        )


# ─── COVER ────────────────────────────────────────────────────────────────────

@click.command("cover")
@click.argument("leave_id")
@click.option("--text", "as_text", is_flag=True, default=False,
              help="Nur die Textfassung zum Weiterleiten ausgeben.")
@click.option("--suggest", is_flag=True, default=False,
              help="Für offene Stunden passende Vertretungen vorschlagen.")
@click.pass_context
def cmd_cover(ctx: click.Context, leave_id: str, as_text: bool, suggest: bool):
    """Zeigt pro Stunde eines Antrags Unterricht und Vertretung."""
    from analysis.cover_plan import build_cover_plan
    from export.tui_renderer import print_candidates, print_cover_plan

    with _open_store(ctx) as store:
        plan = build_cover_plan(store.state, leave_id)
        if as_text:
            click.echo(plan.as_text())
            return
        print_cover_plan(console, plan)

        if suggest:
            leave = store.state.leave_by_id(leave_id)
            finder = store.finder()
            threshold = _overload_threshold(ctx)
            for row in plan.rows:
                if not row.is_open:
                    continue
                lesson = finder.lesson_for_period(leave.teacher_id, leave.date, row.period_number)
                candidates = store.find_available_teachers(
                    leave.date, row.period_number, lesson.subject_id if lesson else None
                )
                print_candidates(console, candidates[:5],
                                 title=f"Vorschläge {row.period_number}. Stunde",
                                 threshold=threshold)


# ─── SUB ──────────────────────────────────────────────────────────────────────

@click.group("sub")
def cmd_sub():
    """Vertretungen vergeben und beantworten."""


@cmd_sub.command("assign")
@click.argument("leave_id")
@click.argument("period", type=int)
@click.argument("teacher_id")
@click.option("--force", is_flag=True, default=False,
              help="Auch belegte oder überlastete Lehrkräfte zuweisen.")
@click.pass_context
def sub_assign(ctx: click.Context, leave_id: str, period: int, teacher_id: str, force: bool):
    """Fragt LEHRKRAFT als Vertretung für STUNDE des Antrags an."""
    from analysis.availability import is_overloaded
    from models.leave_request import LeaveStatus
    from state import UnknownRecordError

    with _open_store(ctx) as store:
        leave = store.state.leave_by_id(leave_id)
        if leave is None:
            raise UnknownRecordError("Abwesenheit", leave_id)
        if period not in leave.period_numbers:
            _abort(f"Stunde {period} gehört nicht zum Antrag {leave_id}.")
        if leave.status != LeaveStatus.APPROVED and not force:
            _abort(f"Antrag {leave_id} ist nicht genehmigt ({leave.status.value}).")

        lesson = store.finder().lesson_for_period(leave.teacher_id, leave.date, period)
        candidates = store.find_available_teachers(
            leave.date, period, lesson.subject_id if lesson else None
        )
        candidate = next((c for c in candidates if c.teacher.id == teacher_id), None)
        if candidate is None and not force:
            _abort(f"Lehrkraft {teacher_id} ist in dieser Stunde nicht frei (--force).")
        if candidate and is_overloaded(candidate, _overload_threshold(ctx)) and not force:
            _abort(
                f"{candidate.teacher.name} hat an diesem Tag bereits "
                f"{candidate.workload} Stunden (--force zum Bestätigen)."
            )

        result = store.assign_for_leave(leave_id, period, teacher_id)
        sub = result.state.subs[-1]
        console.print(
            f"[green]✓[/green] Anfrage {sub.id}: {store.state.teacher_name(teacher_id)} "
            f"für {period}. Stunde am {leave.date} (REQUESTED)"
        )


@cmd_sub.command("list")
@click.option("--date", default=None, help="Nur Vertretungen an diesem Datum.")
@click.option("--teacher", "teacher_id", default=None, help="Nur für diese Vertretungslehrkraft.")
@click.pass_context
def sub_list(ctx: click.Context, date: Optional[str], teacher_id: Optional[str]):
    """Listet Vertretungen nach Datum und Stunde."""
    from export.tui_renderer import print_subs

    if date:
        date = _parse_date_or_abort(date)
    with _open_store(ctx) as store:
        subs = [
            s for s in store.state.subs
            if (date is None or s.date == date)
            and (teacher_id is None or s.sub_teacher_id == teacher_id)
        ]
        print_subs(console, sorted(subs, key=lambda s: (s.date, s.period_number)), store.state)


@cmd_sub.command("respond")
@click.argument("sub_id")
@click.argument("status", type=click.Choice(["ACCEPTED", "REJECTED"], case_sensitive=False))
@click.option("--reason", default=None, help="Begründung (bei Ablehnung).")
@click.pass_context
def sub_respond(ctx: click.Context, sub_id: str, status: str, reason: Optional[str]):
    """Antwort der angefragten Lehrkraft: ACCEPTED oder REJECTED."""
    with _open_store(ctx) as store:
        result = store.respond_to_sub_request(sub_id, status.upper(), reason)
        if not result.changed:
            _abort(f"Vertretung nicht gefunden: {sub_id}")
        console.print(f"[green]✓[/green] Vertretung {sub_id}: {status.upper()}")


@cmd_sub.command("reassign")
@click.argument("sub_id")
@click.argument("teacher_id")
@click.pass_context
def sub_reassign(ctx: click.Context, sub_id: str, teacher_id: str):
    """Vergibt eine Vertretung an eine andere Lehrkraft (wieder REQUESTED)."""
    from state import UnknownRecordError

    with _open_store(ctx) as store:
        if store.state.teacher_by_id(teacher_id) is None:
            raise UnknownRecordError("Lehrkraft", teacher_id)
        result = store.reassign_substitute(sub_id, teacher_id)
        if not result.changed:
            _abort(f"Vertretung nicht gefunden: {sub_id}")
        console.print(
            f"[green]✓[/green] Vertretung {sub_id} neu angefragt bei "
            f"{store.state.teacher_name(teacher_id)}."
        )


@cmd_sub.command("delete")
@click.argument("sub_id")
@click.pass_context
def sub_delete(ctx: click.Context, sub_id: str):
    """Löscht eine Vertretung; die Stunde ist danach wieder offen."""
    with _open_store(ctx) as store:
        if not store.delete_substitute_assignment(sub_id).changed:
            _abort(f"Vertretung nicht gefunden: {sub_id}")
        console.print(f"[green]✓[/green] Vertretung {sub_id} gelöscht.")


# ─── SCHEDULE ─────────────────────────────────────────────────────────────────

@click.group("schedule")
def cmd_schedule():
    """Stundenplan bearbeiten."""


@cmd_schedule.command("set")
@click.argument("teacher_id")
@click.argument("day", type=click.IntRange(1, 5))
@click.argument("period", type=int)
@click.option("--class", "class_id", default="", help="Klassen-ID.")
@click.option("--subject", "subject_id", default="", help="Fach-ID.")
@click.option("--id", "schedule_id", default=None, help="Bestehenden Eintrag ändern.")
@click.pass_context
def schedule_set(ctx: click.Context, teacher_id: str, day: int, period: int,
                 class_id: str, subject_id: str, schedule_id: Optional[str]):
    """Setzt den Unterricht einer Lehrkraft an TAG (1=Mo) in STUNDE.

    Ein bestehender Eintrag der Lehrkraft in derselben Stunde wird ersetzt.
    """
    from state import UnknownRecordError

    with _open_store(ctx) as store:
        if store.state.teacher_by_id(teacher_id) is None:
            raise UnknownRecordError("Lehrkraft", teacher_id)
        slot = store.state.slot_for_period(period)
        if slot is None:
            _abort(f"Stunde {period} ist im Zeitraster nicht definiert.")
        if not slot.is_learning:
            _abort(f"Stunde {period} ist eine Pause.")
        item = {
            "teacher_id": teacher_id,
            "day_of_week": day,
            "time_slot_id": slot.id,
            "class_id": class_id,
            "subject_id": subject_id,
        }
        if schedule_id:
            item["id"] = schedule_id
        result = store.update_schedule(item)
        replaced = sum(1 for c in result.commands if c.action.value == "delete")
        console.print(
            f"[green]✓[/green] Stundenplan gespeichert"
            + (f" ({replaced} Eintrag/Einträge ersetzt)." if replaced else ".")
        )


@cmd_schedule.command("delete")
@click.argument("schedule_id")
@click.pass_context
def schedule_delete(ctx: click.Context, schedule_id: str):
    """Löscht einen Stundenplan-Eintrag."""
    with _open_store(ctx) as store:
        if not store.delete_schedule(schedule_id).changed:
            _abort(f"Stundenplan-Eintrag nicht gefunden: {schedule_id}")
        console.print(f"[green]✓[/green] Eintrag {schedule_id} gelöscht.")


@cmd_schedule.command("show")
@click.argument("teacher_id")
@click.pass_context
def schedule_show(ctx: click.Context, teacher_id: str):
    """Zeigt den Wochenplan einer Lehrkraft."""
    from export.tui_renderer import print_teacher_week
    from state import UnknownRecordError

    with _open_store(ctx) as store:
        if store.state.teacher_by_id(teacher_id) is None:
            raise UnknownRecordError("Lehrkraft", teacher_id)
        print_teacher_week(console, teacher_id, store.state)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path),
              default=None, help="Pfad zur Konfigurationsdatei.")
@click.option("--remote/--offline", default=None,
              help="Entfernten Speicher bzw. lokale Datei verwenden (Standard: Config).")
@click.option("--data-file", type=click.Path(path_type=Path), default=None,
              help="Lokale Datendatei (überschreibt storage.data_file).")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Ausführliches Log.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], remote: Optional[bool],
        data_file: Optional[Path], verbose: bool):
    """Vertretungsplaner: Abwesenheiten erfassen und Vertretungen vergeben.

    Starten Sie mit: python main.py setup && python main.py demo
    """
    from config.manager import ConfigManager

    _setup_logging(verbose)
    ctx.obj = CliSettings(
        config_path=config_path or ConfigManager.DEFAULT_CONFIG,
        remote=remote,
        data_file=data_file,
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_demo)
cli.add_command(cmd_status)
cli.add_command(cmd_validate)
cli.add_command(cmd_available)
cli.add_command(cmd_leave)
cli.add_command(cmd_cover)
cli.add_command(cmd_sub)
cli.add_command(cmd_schedule)


if __name__ == "__main__":
    main()
