"""Konfigurationsmanager: Laden, Speichern und Validieren.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

def _yaml_header() -> str:
    return f"""\
# ============================================
# Vertretungsplaner — Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""


_SECTION_COMMENTS = {
    "remote": (
        "Entfernter Datenspeicher",
        "Web-App mit getData (GET) sowie create/update/delete (POST).\n"
        "Bei enabled: false arbeitet die CLI mit der lokalen Datei.",
    ),
    "storage": (
        "Lokale Ablage",
        None,
    ),
    "ranking": (
        "Vertretungssuche",
        "Belastung = reguläre Stunden + Vertretungen am Tag.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "vertretung_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.path.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path else self.path
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py setup' aus, um die Konfiguration anzulegen."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return AppConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self) -> AppConfig:
        """Wie ``load``, fällt aber ohne Datei auf die Standardwerte zurück."""
        if self.first_run_check():
            return default_app_config()
        return self.load()

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> Path:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = Path(path) if path else self.path
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_yaml_header() + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "ranking" in cm:
            ranking = CommentedMap(cm["ranking"])
            ranking.yaml_add_eol_comment("Markierung in der Kandidatenliste",
                                         "overload_threshold")
            cm["ranking"] = ranking

        return cm

    # ─── Anzeige ───

    def show(self, config: AppConfig) -> None:
        """Gibt die Konfiguration als Tabelle aus."""
        table = Table(title=f"Konfiguration ({self.path})", box=box.ROUNDED)
        table.add_column("Bereich", style="bold")
        table.add_column("Parameter")
        table.add_column("Wert")

        table.add_row("allgemein", "school_name", config.school_name)
        table.add_row("allgemein", "timezone", config.timezone or "System")
        for section in ("remote", "storage", "ranking"):
            for key, value in getattr(config, section).model_dump().items():
                table.add_row(section, key, str(value) if value != "" else "-")
        console.print(table)
