"""Supabase-backed session store."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from print_bot.domain.sessions import ColorMode, Session, SessionStatus
from print_bot.services.sessions import SessionStore

_COLUMNS = "conversation_id, status, file_path, file_name, color_mode, updated_at"


@dataclass
class SupabaseSessionStore(SessionStore):
    """Supabase implementation for print sessions."""

    client: Client
    table_name: str = "print_sessions"

    def get(self, conversation_id: str) -> Session | None:
        """Return a session by conversation id, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("conversation_id", conversation_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_session(response.data[0])

    def set(self, session: Session) -> None:
        """Insert or replace the row for the session's conversation."""
        if session.status is SessionStatus.AWAITING_WELCOME:
            raise ValueError("The initial session is never stored")
        self.client.table(self.table_name).upsert(
            {
                "conversation_id": session.conversation_id,
                "status": session.status.value,
                "file_path": session.file_path,
                "file_name": session.file_name,
                "color_mode": session.color_mode.value if session.color_mode else None,
                "updated_at": session.updated_at.isoformat(),
            },
            on_conflict="conversation_id",
        ).execute()

    def delete(self, conversation_id: str) -> None:
        """Delete the row for a conversation."""
        self.client.table(self.table_name).delete().eq(
            "conversation_id", conversation_id
        ).execute()

    def list_sessions(self) -> list[Session]:
        """Return every stored session, oldest first."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .order("updated_at")
            .execute()
        )
        return [_to_session(row) for row in response.data or []]


def _to_session(row: dict[str, object]) -> Session:
    color_mode = row.get("color_mode")
    return Session(
        conversation_id=str(row["conversation_id"]),
        status=SessionStatus(row["status"]),
        file_path=str(row["file_path"]) if row.get("file_path") else None,
        file_name=str(row["file_name"]) if row.get("file_name") else None,
        color_mode=ColorMode(color_mode) if color_mode else None,
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )
