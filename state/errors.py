"""Fehlerklassen des Vertretungsplaners."""


class SubstitutionError(Exception):
    """Basis aller fachlichen Fehler."""


class DataUnavailableError(SubstitutionError):
    """Der Datenspeicher ist nicht erreichbar; es werden keine Teildaten gezeigt.

    Der einzige Fehler, der dem Nutzer angezeigt wird. Ein erneuter Versuch
    ist möglich.
    """


class SlotAlreadyCoveredError(SubstitutionError):
    """Für diese Antragsstunde existiert bereits eine aktive Vertretung."""

    def __init__(self, leave_request_id: str, period_number: int, existing_id: str) -> None:
        self.leave_request_id = leave_request_id
        self.period_number = period_number
        self.existing_id = existing_id
        super().__init__(
            f"Stunde {period_number} des Antrags {leave_request_id} ist bereits "
            f"vergeben (Vertretung {existing_id})."
        )


class UnknownRecordError(SubstitutionError):
    """Ein Vorgang benötigt einen Datensatz, der nicht existiert."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' nicht gefunden.")
