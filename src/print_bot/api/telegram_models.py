"""Pydantic models for Telegram webhook payloads."""

from pydantic import BaseModel, Field

from print_bot.domain.messages import Attachment, InboundEvent

_PHOTO_MIME_TYPE = "image/jpeg"
_DEFAULT_MIME_TYPE = "application/octet-stream"


class TelegramUser(BaseModel):
    """Telegram user payload."""

    id: int
    is_bot: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


class TelegramChat(BaseModel):
    """Telegram chat payload."""

    id: int
    type: str
    title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class TelegramPhotoSize(BaseModel):
    """Telegram photo size payload."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None


class TelegramDocument(BaseModel):
    """Telegram document payload."""

    file_id: str
    file_unique_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class TelegramMessage(BaseModel):
    """Telegram message payload."""

    message_id: int
    date: int
    chat: TelegramChat
    from_user: TelegramUser = Field(alias="from")
    text: str | None = None
    caption: str | None = None
    photo: list[TelegramPhotoSize] | None = None
    document: TelegramDocument | None = None


class TelegramUpdate(BaseModel):
    """Telegram update payload."""

    update_id: int
    message: TelegramMessage | None = None


def select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def to_inbound_event(message: TelegramMessage) -> InboundEvent:
    """Convert a Telegram message into a transport-neutral event."""
    kind = "unsupported"
    attachment: Attachment | None = None
    if message.document is not None:
        kind = "document"
        attachment = Attachment(
            file_id=message.document.file_id,
            mime_type=message.document.mime_type or _DEFAULT_MIME_TYPE,
            suggested_name=message.document.file_name,
        )
    elif message.photo:
        kind = "image"
        photo = select_largest_photo(message.photo)
        attachment = Attachment(file_id=photo.file_id, mime_type=_PHOTO_MIME_TYPE)
    elif message.text is not None:
        kind = "text"
    return InboundEvent(
        conversation_id=str(message.chat.id),
        message_id=str(message.message_id),
        kind=kind,
        is_from_self=bool(message.from_user.is_bot),
        text=message.text if kind == "text" else message.caption,
        attachment=attachment,
    )
