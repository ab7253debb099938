from pydantic import BaseModel, Field, field_validator
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# ─── DATENSPEICHER ───

class RemoteConfig(BaseModel):
    """Entfernter Datenspeicher (Web-App mit getData/create/update/delete)."""
    # Ob der entfernte Speicher standardmäßig verwendet wird
    enabled: bool = Field(False,
        description="Entfernten Speicher verwenden (sonst lokale JSON-Datei)")
    # Basis-URL der Web-App, z.B. "https://script.google.com/macros/s/.../exec"
    base_url: str = Field("",
        description="Basis-URL des Datenspeichers")
    # Zeitlimit pro HTTP-Anfrage
    timeout_seconds: float = Field(15.0, ge=1, le=120,
        description="Zeitlimit pro Anfrage (Sekunden)")

    @field_validator("base_url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()


class StorageConfig(BaseModel):
    """Lokale Ablage (Offline-Betrieb und Standard der CLI)."""
    # JSON-Datei mit allen Sammlungen im Format von getData
    data_file: str = Field("output/vertretung.json",
        description="Lokale JSON-Datei mit dem Datenbestand")


# ─── VERTRETUNGSSUCHE ───

class RankingConfig(BaseModel):
    """Darstellung der Kandidatenliste."""
    # Ab dieser Tagesbelastung (Stunden + Vertretungen) wird ein Kandidat markiert
    overload_threshold: int = Field(3, ge=1,
        description="Tagesbelastung, ab der ein Kandidat als überlastet gilt")


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration des Vertretungsplaners."""
    # Name der Schule (Kopfzeile der Ausgaben)
    school_name: str = Field("Muster-Gymnasium",
        description="Name der Schule")
    # Zeitzone für die Umrechnung von Zeitstempeln, None = Systemzeitzone
    timezone: Optional[str] = Field(None,
        description="IANA-Zeitzone, leer = Systemzeitzone")
    # Entfernter Datenspeicher
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    # Lokale Ablage
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # Kandidatenliste
    ranking: RankingConfig = Field(default_factory=RankingConfig)

    @field_validator("timezone", mode="before")
    @classmethod
    def known_timezone(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            try:
                ZoneInfo(v)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"Unbekannte Zeitzone: {v}")
        return v
