"""Routes inbound messages through the conversation state machine."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from pathlib import Path

from print_bot.adapters.telegram_transport import MessagingTransport
from print_bot.domain.errors import InternalError, PrintError, StorageError
from print_bot.domain.messages import InboundEvent, InputKind, NormalizedInput
from print_bot.services.conversation import (
    Decision,
    ReleaseFile,
    StoreFile,
    SubmitPrint,
    decide,
    print_result_reply,
    recovery_reply,
    storage_failure_reply,
)
from print_bot.services.files import FileStorage
from print_bot.services.printing import PrintJobSubmitter
from print_bot.services.sessions import ConversationLocks, SessionStore, load_session

_logger = logging.getLogger(__name__)

SUPPORTED_ATTACHMENT_KINDS = frozenset({"document", "image"})


def normalize(event: InboundEvent) -> NormalizedInput:
    """Reduce a transport event to the state machine's input alphabet."""
    if event.kind in SUPPORTED_ATTACHMENT_KINDS and event.attachment is not None:
        kind = InputKind.ATTACHMENT
    elif event.kind == "text" and event.text is not None:
        kind = InputKind.TEXT
    else:
        kind = InputKind.UNSUPPORTED
    text = (event.text or "").strip().lower() if kind is InputKind.TEXT else ""
    return NormalizedInput(
        conversation_id=event.conversation_id,
        message_id=event.message_id,
        kind=kind,
        text=text,
        attachment=event.attachment if kind is InputKind.ATTACHMENT else None,
    )


@dataclass
class MessageRouter:
    """Applies state machine decisions one event at a time per conversation."""

    session_store: SessionStore
    file_storage: FileStorage
    print_submitter: PrintJobSubmitter
    transport: MessagingTransport
    locks: ConversationLocks = field(default_factory=ConversationLocks)

    async def handle(self, event: InboundEvent) -> None:
        """Process one inbound event."""
        if event.is_from_self:
            return
        message = normalize(event)
        async with self.locks.hold(message.conversation_id):
            await self._process(message)

    async def reset(self, conversation_id: str) -> bool:
        """Drop a conversation's session and file. Return whether one existed."""
        async with self.locks.hold(conversation_id):
            session = self.session_store.get(conversation_id)
            if session is None:
                return False
            if session.file_path:
                self.file_storage.release(session.file_path)
            self.session_store.delete(conversation_id)
            return True

    async def evict_idle(self, max_idle: timedelta, now: datetime | None = None) -> int:
        """Remove sessions untouched for longer than ``max_idle``."""
        cutoff = (now or datetime.now(tz=UTC)) - max_idle
        evicted = 0
        for candidate in self.session_store.list_sessions():
            if candidate.updated_at >= cutoff:
                continue
            async with self.locks.hold(candidate.conversation_id):
                session = self.session_store.get(candidate.conversation_id)
                if session is None or session.updated_at >= cutoff:
                    continue
                if session.file_path:
                    self.file_storage.release(session.file_path)
                self.session_store.delete(session.conversation_id)
                evicted += 1
                _logger.info(
                    "Evicted idle session: conversation=%s status=%s",
                    session.conversation_id,
                    session.status.value,
                )
        return evicted

    async def _process(self, message: NormalizedInput) -> None:
        conversation_id = message.conversation_id
        stored_path: Path | None = None
        try:
            session = load_session(self.session_store, conversation_id)
            decision = decide(session, message)
            if decision.error is not None:
                _logger.info(
                    "Rejected input: conversation=%s status=%s reason=%s",
                    conversation_id,
                    session.status.value,
                    decision.error,
                )
            directive = decision.directive
            if isinstance(directive, SubmitPrint):
                await self._finish(conversation_id, decision, directive)
                return

            next_session = decision.session
            if next_session is None:
                raise InternalError("Only print submission ends a session")
            if isinstance(directive, ReleaseFile):
                self.file_storage.release(directive.file_path)
            elif isinstance(directive, StoreFile):
                blob = await self.transport.download_attachment(directive.attachment)
                stored_path = self.file_storage.store(
                    conversation_id, blob, directive.file_name
                )
                next_session = replace(next_session, file_path=str(stored_path))
            self.session_store.set(next_session)
            await self.transport.send_message(conversation_id, decision.reply)
        except StorageError:
            _logger.exception(
                "Failed to store upload", extra={"conversation_id": conversation_id}
            )
            await self._abort(conversation_id, storage_failure_reply(), stored_path)
        except Exception:
            _logger.exception(
                "Failed to process message", extra={"conversation_id": conversation_id}
            )
            await self._abort(conversation_id, recovery_reply(), stored_path)

    async def _finish(
        self, conversation_id: str, decision: Decision, directive: SubmitPrint
    ) -> None:
        job = directive.job
        await self.transport.send_message(conversation_id, decision.reply)
        succeeded = False
        try:
            await self.print_submitter.submit(job)
            succeeded = True
        except PrintError as exc:
            _logger.warning(
                "Print job failed: conversation=%s kind=%s detail=%s",
                conversation_id,
                exc.kind.value,
                exc.detail,
            )
        finally:
            self._release_logged(job.file_path)
            self.session_store.delete(conversation_id)
        await self.transport.send_message(
            conversation_id, print_result_reply(succeeded)
        )

    async def _abort(
        self, conversation_id: str, reply: str, stored_path: Path | None
    ) -> None:
        paths = {str(stored_path)} if stored_path else set()
        try:
            session = self.session_store.get(conversation_id)
            if session is not None and session.file_path:
                paths.add(session.file_path)
        except Exception:
            _logger.exception(
                "Failed to load session for cleanup",
                extra={"conversation_id": conversation_id},
            )
        for path in paths:
            self._release_logged(path)
        try:
            self.session_store.delete(conversation_id)
        except Exception:
            _logger.exception(
                "Failed to delete session",
                extra={"conversation_id": conversation_id},
            )
        try:
            await self.transport.send_message(conversation_id, reply)
        except Exception:
            _logger.exception(
                "Failed to send recovery message",
                extra={"conversation_id": conversation_id},
            )

    def _release_logged(self, path: str) -> None:
        try:
            self.file_storage.release(path)
        except StorageError:
            _logger.exception("Failed to release upload: path=%s", path)


async def reap_idle_sessions(
    router: MessageRouter, max_idle: timedelta, interval_seconds: float
) -> None:
    """Periodically evict idle sessions until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await router.evict_idle(max_idle)
        except Exception:
            _logger.exception("Idle session eviction failed")
