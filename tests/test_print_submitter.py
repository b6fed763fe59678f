"""Tests for print job submission."""

import asyncio
from pathlib import Path

import pytest

from print_bot.domain.errors import PrintError, PrintErrorKind
from print_bot.domain.printing import OCTET_STREAM, PrinterResponse, PrintJob
from print_bot.domain.sessions import ColorMode
from print_bot.services.printing import PrinterConnectionError, PrintJobSubmitter
from tests.conftest import FakePrinterConnector

PRINTER_URI = "ipp://printer.local/ipp/print"


def _job(path: Path, copies: int = 2, color: ColorMode = ColorMode.MONO) -> PrintJob:
    return PrintJob(file_path=str(path), copies=copies, color_mode=color)


def _document(tmp_path: Path) -> Path:
    path = tmp_path / "relatorio.pdf"
    path.write_bytes(b"%PDF-1.4")
    return path


def test_submit_builds_attributes_and_returns_job_id(tmp_path: Path) -> None:
    connector = FakePrinterConnector()
    submitter = PrintJobSubmitter(connector=connector, printer_uri=PRINTER_URI)

    job_id = asyncio.run(submitter.submit(_job(_document(tmp_path), copies=3)))

    assert job_id == "101"
    endpoint, attributes, data = connector.jobs[0]
    assert endpoint == PRINTER_URI
    assert data == b"%PDF-1.4"
    assert attributes.requesting_user_name == "PrintBot"
    assert attributes.job_name == "relatorio.pdf"
    assert attributes.document_format == OCTET_STREAM
    assert attributes.copies == 3
    assert attributes.print_color_mode == "monochrome"


def test_submit_maps_color_mode(tmp_path: Path) -> None:
    connector = FakePrinterConnector()
    submitter = PrintJobSubmitter(connector=connector, printer_uri=PRINTER_URI)

    asyncio.run(submitter.submit(_job(_document(tmp_path), color=ColorMode.COLOR)))

    assert connector.jobs[0][1].print_color_mode == "color"


@pytest.mark.parametrize("printer_uri", [None, "", "   "])
def test_submit_requires_printer_uri(tmp_path: Path, printer_uri: str | None) -> None:
    connector = FakePrinterConnector()
    submitter = PrintJobSubmitter(connector=connector, printer_uri=printer_uri)

    with pytest.raises(PrintError) as excinfo:
        asyncio.run(submitter.submit(_job(_document(tmp_path))))

    assert excinfo.value.kind is PrintErrorKind.NOT_CONFIGURED
    assert connector.jobs == []


def test_submit_reports_missing_file(tmp_path: Path) -> None:
    submitter = PrintJobSubmitter(
        connector=FakePrinterConnector(), printer_uri=PRINTER_URI
    )

    with pytest.raises(PrintError) as excinfo:
        asyncio.run(submitter.submit(_job(tmp_path / "missing.pdf")))

    assert excinfo.value.kind is PrintErrorKind.FILE_MISSING


def test_submit_wraps_connector_failures(tmp_path: Path) -> None:
    connector = FakePrinterConnector(error=PrinterConnectionError("unreachable"))
    submitter = PrintJobSubmitter(connector=connector, printer_uri=PRINTER_URI)

    with pytest.raises(PrintError) as excinfo:
        asyncio.run(submitter.submit(_job(_document(tmp_path))))

    assert excinfo.value.kind is PrintErrorKind.CONNECTOR_ERROR
    assert "unreachable" in str(excinfo.value)


def test_submit_reports_rejected_jobs(tmp_path: Path) -> None:
    connector = FakePrinterConnector(
        response=PrinterResponse(accepted=False, error_detail="status=0x0507")
    )
    submitter = PrintJobSubmitter(connector=connector, printer_uri=PRINTER_URI)

    with pytest.raises(PrintError) as excinfo:
        asyncio.run(submitter.submit(_job(_document(tmp_path))))

    assert excinfo.value.kind is PrintErrorKind.PRINTER_REJECTED
    assert excinfo.value.detail == "status=0x0507"


def test_submit_does_not_delete_the_file(tmp_path: Path) -> None:
    document = _document(tmp_path)
    submitter = PrintJobSubmitter(
        connector=FakePrinterConnector(), printer_uri=PRINTER_URI
    )

    asyncio.run(submitter.submit(_job(document)))

    assert document.exists()
