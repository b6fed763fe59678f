"""Telegram Bot API messaging transport."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from print_bot.domain.messages import Attachment


class TelegramApiError(RuntimeError):
    """Raised when the Telegram API answers with ``ok: false``."""


class MessagingTransport(Protocol):
    """Interface for the chat channel the bot talks over."""

    async def send_message(self, conversation_id: str, text: str) -> None:
        """Send a text message to a conversation."""

    async def download_attachment(self, attachment: Attachment) -> bytes:
        """Download an attachment and return its bytes."""


class UpdateSource(Protocol):
    """Interface for pulling updates when no webhook is configured."""

    async def get_updates(
        self, offset: int | None, timeout: int
    ) -> list[dict[str, object]]:
        """Return pending updates after ``offset``."""

    async def delete_webhook(self) -> None:
        """Disable webhook delivery."""


@dataclass
class HttpxTelegramTransport(MessagingTransport, UpdateSource):
    """Telegram transport implemented with httpx."""

    bot_token: str
    http_client: httpx.AsyncClient
    base_url: str = "https://api.telegram.org"

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramTransport":
        """Create a transport with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.bot_token}/{method}"

    async def send_message(self, conversation_id: str, text: str) -> None:
        """Send a message using Telegram's sendMessage API."""
        payload: dict[str, object] = {"chat_id": conversation_id, "text": text}
        response = await self.http_client.post(
            self._method_url("sendMessage"), json=payload, timeout=10
        )
        response.raise_for_status()

    async def download_attachment(self, attachment: Attachment) -> bytes:
        """Download attachment bytes via getFile."""
        response = await self.http_client.get(
            self._method_url("getFile"),
            params={"file_id": attachment.file_id},
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise TelegramApiError("Telegram getFile failed")
        file_path = payload["result"]["file_path"]
        download_url = f"{self.base_url}/file/bot{self.bot_token}/{file_path}"
        file_response = await self.http_client.get(download_url, timeout=60)
        file_response.raise_for_status()
        return file_response.content

    async def get_updates(
        self, offset: int | None, timeout: int
    ) -> list[dict[str, object]]:
        """Long-poll for new updates."""
        params: dict[str, object] = {
            "timeout": timeout,
            "allowed_updates": '["message"]',
        }
        if offset is not None:
            params["offset"] = offset
        response = await self.http_client.get(
            self._method_url("getUpdates"), params=params, timeout=timeout + 10
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise TelegramApiError(
                f"Telegram getUpdates failed: {payload.get('description')}"
            )
        return list(payload.get("result", []))

    async def delete_webhook(self) -> None:
        """Remove any webhook so long polling can receive updates."""
        response = await self.http_client.post(
            self._method_url("deleteWebhook"), json={}, timeout=10
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
