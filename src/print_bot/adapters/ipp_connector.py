"""IPP printing connector backed by pyipp."""

from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from pyipp import IPP
from pyipp.enums import IppOperation
from pyipp.exceptions import (
    IPPConnectionError,
    IPPConnectionUpgradeRequired,
    IPPError,
    IPPParseError,
)

from print_bot.domain.printing import PrintAttributes, PrinterResponse
from print_bot.services.printing import PrinterConnectionError, PrinterConnector

_DEFAULT_PORT = 631
_DEFAULT_PATH = "/ipp/print"
# IPP integers are signed 32-bit.
_MAX_IPP_INTEGER = 2**31 - 1


def build_ipp_client(printer_uri: str, timeout: float) -> IPP:
    """Create a pyipp client for an ``ipp://`` or ``ipps://`` printer URI."""
    parts = urlsplit(printer_uri)
    scheme = parts.scheme.lower()
    if scheme not in {"ipp", "ipps"} or not parts.hostname:
        raise PrinterConnectionError(f"Unsupported printer URI: {printer_uri}")
    try:
        port = parts.port or _DEFAULT_PORT
    except ValueError as exc:
        raise PrinterConnectionError(f"Invalid printer port: {printer_uri}") from exc
    return IPP(
        host=parts.hostname,
        port=port,
        base_path=parts.path or _DEFAULT_PATH,
        tls=scheme == "ipps",
        request_timeout=timeout,
    )


def print_job_message(
    printer_uri: str, attributes: PrintAttributes, data: bytes
) -> dict[str, object]:
    """Return the Print-Job message pyipp serializes for the printer."""
    return {
        "operation-attributes-tag": {
            "printer-uri": printer_uri,
            "requesting-user-name": attributes.requesting_user_name,
            "job-name": attributes.job_name,
            "document-format": attributes.document_format,
        },
        "job-attributes-tag": {
            "copies": attributes.copies,
            "print-color-mode": attributes.print_color_mode,
        },
        "data": data,
    }


def _job_id(parsed: dict[str, object]) -> str | None:
    jobs = parsed.get("jobs")
    if isinstance(jobs, list) and jobs and isinstance(jobs[0], dict):
        job_id = jobs[0].get("job-id")
        return str(job_id) if job_id is not None else None
    return None


def _status_message(parsed: dict[str, object]) -> str:
    groups = parsed.get("operation-attributes")
    if isinstance(groups, list) and groups and isinstance(groups[0], dict):
        return str(groups[0].get("status-message", ""))
    return ""


@dataclass
class PyIppConnector(PrinterConnector):
    """Submits Print-Job requests to an IPP printer."""

    timeout: float = 30
    client_factory: Callable[[str, float], IPP] = build_ipp_client
    _clients: dict[str, IPP] = field(default_factory=dict)

    def _client(self, endpoint: str) -> IPP:
        client = self._clients.get(endpoint)
        if client is None:
            client = self.client_factory(endpoint, self.timeout)
            self._clients[endpoint] = client
        return client

    async def submit_job(
        self, endpoint: str, attributes: PrintAttributes, data: bytes
    ) -> PrinterResponse:
        """Send a Print-Job request carrying ``data``."""
        if not 1 <= attributes.copies <= _MAX_IPP_INTEGER:
            raise PrinterConnectionError(
                f"copies={attributes.copies} is outside the IPP integer range"
            )
        client = self._client(endpoint)
        message = print_job_message(endpoint, attributes, data)
        try:
            parsed = await client.execute(IppOperation.PRINT_JOB, message)
        except (IPPConnectionError, IPPConnectionUpgradeRequired) as exc:
            raise PrinterConnectionError(f"IPP request failed: {exc}") from exc
        except IPPParseError as exc:
            raise PrinterConnectionError("Malformed IPP response") from exc
        except IPPError as exc:
            return PrinterResponse(accepted=False, error_detail=str(exc) or None)

        status_code = int(parsed.get("status-code", 0))
        if status_code > 0x00FF:
            detail = f"status=0x{status_code:04x} {_status_message(parsed)}"
            return PrinterResponse(accepted=False, error_detail=detail.strip())
        return PrinterResponse(accepted=True, job_id=_job_id(parsed))

    async def close(self) -> None:
        """Close the HTTP sessions opened for each printer."""
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
