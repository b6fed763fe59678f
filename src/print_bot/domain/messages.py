"""Transport-neutral message models."""

from dataclasses import dataclass
from enum import Enum


class InputKind(Enum):
    """Input alphabet understood by the conversation state machine."""

    ATTACHMENT = "attachment"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Attachment:
    """Media attached to an inbound message."""

    file_id: str
    mime_type: str
    suggested_name: str | None = None


@dataclass(frozen=True)
class InboundEvent:
    """A message as delivered by the messaging transport."""

    conversation_id: str
    message_id: str
    kind: str
    is_from_self: bool = False
    text: str | None = None
    attachment: Attachment | None = None


@dataclass(frozen=True)
class NormalizedInput:
    """Inbound event reduced to what the state machine needs."""

    conversation_id: str
    message_id: str
    kind: InputKind
    text: str = ""
    attachment: Attachment | None = None

    @property
    def is_text(self) -> bool:
        return self.kind is InputKind.TEXT
