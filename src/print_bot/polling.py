"""Long-polling runner for environments without a public webhook."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from print_bot.adapters.telegram_transport import TelegramApiError
from print_bot.api.dispatch import dispatch_update
from print_bot.api.telegram_models import TelegramUpdate
from print_bot.containers import AppContainer

_logger = logging.getLogger(__name__)


@dataclass
class Backoff:
    """Exponential delay between reconnect attempts."""

    initial: float
    maximum: float
    factor: float = 2.0
    _next: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self._next = self.initial

    def next_delay(self) -> float:
        """Return the delay to wait now and grow the following one."""
        delay = min(self._next, self.maximum)
        self._next = min(self._next * self.factor, self.maximum)
        return delay

    def reset(self) -> None:
        self._next = self.initial


@dataclass
class TelegramPoller:
    """Pulls updates with getUpdates and hands them to the router."""

    container: AppContainer
    allowed_user_ids: set[int] | None
    backoff: Backoff
    timeout: int = 30
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    offset: int | None = None

    async def poll_once(self) -> int:
        """Fetch and dispatch one batch of updates. Return its size."""
        raw_updates = await self.container.update_source.get_updates(
            self.offset, self.timeout
        )
        updates: list[TelegramUpdate] = []
        for raw in raw_updates:
            update_id = raw.get("update_id")
            if isinstance(update_id, int):
                self.offset = max(self.offset or 0, update_id + 1)
            try:
                updates.append(TelegramUpdate.model_validate(raw))
            except ValidationError:
                _logger.warning("Skipping malformed update: update_id=%s", update_id)
        if updates:
            # Tasks start in arrival order, so per-conversation locks keep it.
            results = await asyncio.gather(
                *(
                    dispatch_update(self.container, update, self.allowed_user_ids)
                    for update in updates
                ),
                return_exceptions=True,
            )
            for update, result in zip(updates, results, strict=True):
                if isinstance(result, Exception):
                    _logger.error(
                        "Failed to dispatch update: update_id=%s",
                        update.update_id,
                        exc_info=result,
                    )
        return len(raw_updates)

    async def run(self) -> None:
        """Poll until cancelled, reconnecting after transport failures."""
        await self.container.update_source.delete_webhook()
        _logger.info("Polling for Telegram updates")
        while True:
            try:
                await self.poll_once()
            except (httpx.HTTPError, TelegramApiError) as exc:
                delay = self.backoff.next_delay()
                _logger.warning(
                    "Telegram polling failed, reconnecting in %.1fs: %s", delay, exc
                )
                await self.sleep(delay)
            else:
                self.backoff.reset()
