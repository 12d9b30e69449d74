"""
StickerJournal exception hierarchy.

All application exceptions inherit from StickerJournalError, making it easy for
callers to catch library-level errors while still distinguishing specific
failure modes. Storage errors live next to the storage backends in
``stickerjournal.core.storage``.
"""


class StickerJournalError(Exception):
    """Base exception class for all stickerjournal errors."""


class ConfigurationError(StickerJournalError):
    """Raised for configuration errors (missing credentials, invalid values)."""


class ValidationError(StickerJournalError):
    """Raised when user input is rejected before any side effect happens."""


class APIError(StickerJournalError):
    """Raised for upstream API communication errors."""


class OCRError(APIError):
    """Raised when text extraction fails.

    Attributes:
        status: HTTP status the OCR endpoint answers with for this failure.
        details: Raw or parsed upstream error message, if any.
    """

    def __init__(self, message: str, status: int = 502, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details


class WeatherError(APIError):
    """Raised for weather provider errors."""


class DuplicateEntryError(StickerJournalError):
    """Raised when an entry id is already present in the entry store."""


class ScanBusyError(StickerJournalError):
    """Raised when a scan is started while another one is still running."""
