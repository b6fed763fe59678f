"""Error taxonomy for the print flow."""

from enum import Enum


class PrintBotError(Exception):
    """Base class for print bot errors."""


class ConfigurationError(PrintBotError):
    """Raised when required configuration is missing."""


class ValidationError(PrintBotError):
    """User input was understood but not acceptable for the current step."""


class UnsupportedInputError(PrintBotError):
    """The message kind is not accepted in the current step."""


class StorageError(PrintBotError):
    """An uploaded file could not be persisted or removed."""


class PrintErrorKind(Enum):
    """Reasons a print submission can fail."""

    NOT_CONFIGURED = "not_configured"
    FILE_MISSING = "file_missing"
    CONNECTOR_ERROR = "connector_error"
    PRINTER_REJECTED = "printer_rejected"


class PrintError(PrintBotError):
    """A print job could not be submitted."""

    def __init__(self, kind: PrintErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)


class InternalError(PrintBotError):
    """Unexpected state reached while processing a conversation."""
