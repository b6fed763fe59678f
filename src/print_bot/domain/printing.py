"""Domain models for print jobs."""

from dataclasses import dataclass

from print_bot.domain.sessions import ColorMode

OCTET_STREAM = "application/octet-stream"


@dataclass(frozen=True)
class PrintJob:
    """A single print request built right before submission."""

    file_path: str
    copies: int
    color_mode: ColorMode


@dataclass(frozen=True)
class PrintAttributes:
    """Job description handed to the printing connector."""

    requesting_user_name: str
    job_name: str
    copies: int
    print_color_mode: str
    document_format: str = OCTET_STREAM


@dataclass(frozen=True)
class PrinterResponse:
    """Outcome reported by the printing connector."""

    accepted: bool
    job_id: str | None = None
    error_detail: str | None = None
