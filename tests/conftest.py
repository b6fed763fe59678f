"""Shared test fixtures."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from pyipp.enums import IppOperation

from print_bot.adapters.telegram_transport import MessagingTransport, UpdateSource
from print_bot.config import Settings
from print_bot.containers import AppContainer
from print_bot.domain.messages import Attachment, InboundEvent
from print_bot.domain.printing import PrintAttributes, PrinterResponse
from print_bot.domain.sessions import ColorMode, Session, SessionStatus
from print_bot.services.files import FileStorage
from print_bot.services.printing import PrinterConnector, PrintJobSubmitter
from print_bot.services.router import MessageRouter
from print_bot.services.sessions import InMemorySessionStore


@dataclass
class FakeTransport(MessagingTransport, UpdateSource):
    """Fake messaging transport that records outgoing messages."""

    content: bytes = b"%PDF-1.4 fake document"
    messages: list[tuple[str, str]] = field(default_factory=list)
    downloads: list[str] = field(default_factory=list)
    batches: list[list[dict[str, object]]] = field(default_factory=list)
    offsets: list[int | None] = field(default_factory=list)
    download_error: Exception | None = None
    webhook_deleted: bool = False

    async def send_message(self, conversation_id: str, text: str) -> None:
        self.messages.append((conversation_id, text))

    async def download_attachment(self, attachment: Attachment) -> bytes:
        self.downloads.append(attachment.file_id)
        if self.download_error is not None:
            raise self.download_error
        return self.content

    async def get_updates(
        self, offset: int | None, timeout: int
    ) -> list[dict[str, object]]:
        self.offsets.append(offset)
        return self.batches.pop(0) if self.batches else []

    async def delete_webhook(self) -> None:
        self.webhook_deleted = True

    def texts_for(self, conversation_id: str) -> list[str]:
        return [text for chat, text in self.messages if chat == conversation_id]


@dataclass
class FakePrinterConnector(PrinterConnector):
    """Fake printer that records submitted jobs."""

    response: PrinterResponse = field(
        default_factory=lambda: PrinterResponse(accepted=True, job_id="101")
    )
    error: Exception | None = None
    jobs: list[tuple[str, PrintAttributes, bytes]] = field(default_factory=list)

    async def submit_job(
        self, endpoint: str, attributes: PrintAttributes, data: bytes
    ) -> PrinterResponse:
        self.jobs.append((endpoint, attributes, data))
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class FakeIppClient:
    """Stands in for pyipp's client and records executed operations."""

    result: dict[str, object] = field(
        default_factory=lambda: {"status-code": 0, "jobs": [{"job-id": 314}]}
    )
    error: Exception | None = None
    calls: list[tuple[IppOperation, dict[str, object]]] = field(
        default_factory=list
    )
    closed: bool = False

    async def execute(
        self, operation: IppOperation, message: dict[str, object]
    ) -> dict[str, object]:
        self.calls.append((operation, message))
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self) -> None:
        self.closed = True


def text_event(conversation_id: str, text: str, message_id: str = "1") -> InboundEvent:
    return InboundEvent(
        conversation_id=conversation_id,
        message_id=message_id,
        kind="text",
        text=text,
    )


def document_event(
    conversation_id: str,
    file_name: str | None = "relatorio.pdf",
    mime_type: str = "application/pdf",
    message_id: str = "2",
) -> InboundEvent:
    return InboundEvent(
        conversation_id=conversation_id,
        message_id=message_id,
        kind="document",
        attachment=Attachment(
            file_id=f"file-{message_id}",
            mime_type=mime_type,
            suggested_name=file_name,
        ),
    )


def image_event(conversation_id: str, message_id: str = "3") -> InboundEvent:
    return InboundEvent(
        conversation_id=conversation_id,
        message_id=message_id,
        kind="image",
        attachment=Attachment(file_id=f"photo-{message_id}", mime_type="image/jpeg"),
    )


def copies_session(
    conversation_id: str, file_path: Path, color_mode: ColorMode = ColorMode.COLOR
) -> Session:
    """Return a session waiting for the number of copies."""
    return Session(
        conversation_id=conversation_id,
        status=SessionStatus.AWAITING_COPIES,
        file_path=str(file_path),
        file_name=file_path.name,
        color_mode=color_mode,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        admin_token="admin-token",
        printer_uri="ipp://printer.local/ipp/print",
        uploads_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def connector() -> FakePrinterConnector:
    return FakePrinterConnector()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def file_storage(settings: Settings) -> FileStorage:
    return FileStorage(Path(settings.uploads_dir))


@pytest.fixture
def print_submitter(
    settings: Settings, connector: FakePrinterConnector
) -> PrintJobSubmitter:
    return PrintJobSubmitter(
        connector=connector,
        printer_uri=settings.printer_uri,
        requesting_user_name=settings.printer_user_name,
    )


@pytest.fixture
def router(
    session_store: InMemorySessionStore,
    file_storage: FileStorage,
    print_submitter: PrintJobSubmitter,
    transport: FakeTransport,
) -> MessageRouter:
    return MessageRouter(
        session_store=session_store,
        file_storage=file_storage,
        print_submitter=print_submitter,
        transport=transport,
    )


@pytest.fixture
def container(
    settings: Settings,
    transport: FakeTransport,
    session_store: InMemorySessionStore,
    file_storage: FileStorage,
    print_submitter: PrintJobSubmitter,
    router: MessageRouter,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        transport=transport,
        update_source=transport,
        session_store=session_store,
        file_storage=file_storage,
        print_submitter=print_submitter,
        router=router,
        close_resources=close_resources,
    )
