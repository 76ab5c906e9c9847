"""
Fehlerklassen des Buchungskerns.

Wie die Fehler behandelt werden, entscheidet der Aufrufer:
- ConfigurationError: fatal, sofort an den Client (400)
- BookingValidationError: Position ist keine Buchung, wird still übersprungen
- UpstreamError: Katalog-Abruf bricht komplett ab, Consent-Sync loggt nur
- PersistenceError: im Webhook-Loop nur geloggt, nächste Position läuft weiter
"""


class BookingCoreError(Exception):
    """Basisklasse für alle Fehler des Buchungskerns."""


class ConfigurationError(BookingCoreError):
    def __init__(self, message: str = "Shopify not configured"):
        super().__init__(message)


class BookingValidationError(BookingCoreError):
    pass


class UpstreamError(BookingCoreError):
    def __init__(self, status_code: int | None, message: str | None = None):
        self.status_code = status_code
        if message is None:
            message = f"Shopify API error: {status_code}"
        super().__init__(message)


class PersistenceError(BookingCoreError):
    pass
