"""Domain models for print sessions."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum


class SessionStatus(Enum):
    """Steps of the document collection flow."""

    AWAITING_WELCOME = "awaiting_welcome"
    AWAITING_FILE = "awaiting_file"
    AWAITING_COLOR_CHOICE = "awaiting_color_choice"
    AWAITING_COPIES = "awaiting_copies"


class ColorMode(Enum):
    """Print color options offered to the user."""

    MONO = "mono"
    COLOR = "color"

    @property
    def ipp_keyword(self) -> str:
        """Return the IPP print-color-mode keyword."""
        return "color" if self is ColorMode.COLOR else "monochrome"

    @property
    def label(self) -> str:
        """Return the menu label shown to the user."""
        return "Colorida" if self is ColorMode.COLOR else "Preto e Branco"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class Session:
    """Represents one conversation's progress through the print flow."""

    conversation_id: str
    status: SessionStatus
    file_path: str | None = None
    file_name: str | None = None
    color_mode: ColorMode | None = None
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def initial(cls, conversation_id: str) -> "Session":
        """Return the implicit starting session for a conversation."""
        return cls(
            conversation_id=conversation_id, status=SessionStatus.AWAITING_WELCOME
        )

    def advance(self, status: SessionStatus, **changes: object) -> "Session":
        """Return a copy moved to ``status`` with a fresh timestamp."""
        return replace(self, status=status, updated_at=_utcnow(), **changes)
