"""Print job submission."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from print_bot.domain.errors import PrintError, PrintErrorKind
from print_bot.domain.printing import PrintAttributes, PrinterResponse, PrintJob

_logger = logging.getLogger(__name__)


class PrinterConnectionError(RuntimeError):
    """Raised by connectors when the printer cannot be reached or understood."""


class PrinterConnector(Protocol):
    """Interface for sending jobs to a network printer."""

    async def submit_job(
        self, endpoint: str, attributes: PrintAttributes, data: bytes
    ) -> PrinterResponse:
        """Submit a document and report whether the printer accepted it."""


def build_attributes(job: PrintJob, requesting_user_name: str) -> PrintAttributes:
    """Translate a job into printer attributes."""
    return PrintAttributes(
        requesting_user_name=requesting_user_name,
        job_name=Path(job.file_path).name,
        copies=job.copies,
        print_color_mode=job.color_mode.ipp_keyword,
    )


@dataclass
class PrintJobSubmitter:
    """Sends print jobs through a connector without retrying."""

    connector: PrinterConnector
    printer_uri: str | None
    requesting_user_name: str = "PrintBot"

    @property
    def is_configured(self) -> bool:
        return bool(self.printer_uri and self.printer_uri.strip())

    async def submit(self, job: PrintJob) -> str:
        """Submit a job and return the printer's job id.

        Raises ``PrintError`` when the printer is not configured, the file is
        gone, the connector fails or the printer refuses the job. The file is
        left in place for the caller to release.
        """
        if not self.is_configured:
            raise PrintError(PrintErrorKind.NOT_CONFIGURED, "printer_uri is not set")
        path = Path(job.file_path)
        if not path.is_file():
            raise PrintError(PrintErrorKind.FILE_MISSING, str(path))
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise PrintError(PrintErrorKind.FILE_MISSING, str(exc)) from exc

        endpoint = str(self.printer_uri).strip()
        attributes = build_attributes(job, self.requesting_user_name)
        _logger.info(
            "Submitting print job: endpoint=%s job_name=%s copies=%s color=%s",
            endpoint,
            attributes.job_name,
            attributes.copies,
            attributes.print_color_mode,
        )
        try:
            response = await self.connector.submit_job(endpoint, attributes, data)
        except PrinterConnectionError as exc:
            raise PrintError(PrintErrorKind.CONNECTOR_ERROR, str(exc)) from exc
        if not response.accepted:
            raise PrintError(PrintErrorKind.PRINTER_REJECTED, response.error_detail)
        _logger.info("Print job accepted: job_id=%s", response.job_id)
        return response.job_id or ""
