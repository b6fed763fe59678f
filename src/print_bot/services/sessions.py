"""Session storage and per-conversation serialization."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Protocol

from print_bot.domain.sessions import Session, SessionStatus


class SessionStore(Protocol):
    """Persistence interface for conversation sessions."""

    def get(self, conversation_id: str) -> Session | None:
        """Return the stored session for a conversation, if present."""

    def set(self, session: Session) -> None:
        """Create or replace the session for its conversation."""

    def delete(self, conversation_id: str) -> None:
        """Remove the session for a conversation, if present."""

    def list_sessions(self) -> list[Session]:
        """Return every stored session."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store."""

    sessions: dict[str, Session] = field(default_factory=dict)

    def get(self, conversation_id: str) -> Session | None:
        return self.sessions.get(conversation_id)

    def set(self, session: Session) -> None:
        if session.status is SessionStatus.AWAITING_WELCOME:
            raise ValueError("The initial session is never stored")
        self.sessions[session.conversation_id] = session

    def delete(self, conversation_id: str) -> None:
        self.sessions.pop(conversation_id, None)

    def list_sessions(self) -> list[Session]:
        return list(self.sessions.values())


def load_session(store: SessionStore, conversation_id: str) -> Session:
    """Return the stored session or the initial one when none exists."""
    return store.get(conversation_id) or Session.initial(conversation_id)


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


@dataclass
class ConversationLocks:
    """Serializes work per conversation id.

    Locks are created on first use and dropped once nobody holds or waits
    for them, so idle conversations do not accumulate entries.
    """

    _entries: dict[str, _LockEntry] = field(default_factory=dict)

    @asynccontextmanager
    async def hold(self, conversation_id: str) -> AsyncIterator[None]:
        """Hold the lock for ``conversation_id`` for the duration of the block."""
        entry = self._entries.setdefault(conversation_id, _LockEntry())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                self._entries.pop(conversation_id, None)

    def __len__(self) -> int:
        return len(self._entries)
