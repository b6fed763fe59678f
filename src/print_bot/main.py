"""Command-line entrypoint running the bot with long polling."""

import asyncio
import contextlib
import logging

from print_bot.app_logging import configure_logging
from print_bot.config import parse_allowed_user_ids
from print_bot.containers import AppContainer, build_container
from print_bot.polling import Backoff, TelegramPoller

_logger = logging.getLogger(__name__)


def build_poller(container: AppContainer) -> TelegramPoller:
    """Create a poller configured from the container settings."""
    settings = container.settings
    return TelegramPoller(
        container=container,
        allowed_user_ids=parse_allowed_user_ids(settings.telegram_allowed_user_ids),
        backoff=Backoff(
            initial=settings.polling_backoff_initial_seconds,
            maximum=settings.polling_backoff_max_seconds,
        ),
        timeout=settings.polling_timeout_seconds,
    )


async def run(container: AppContainer) -> None:
    """Run the poller and background tasks until cancelled."""
    if not container.print_submitter.is_configured:
        _logger.warning("printer_uri is not set; print jobs will fail")
    reaper = container.start_session_reaper()
    try:
        await build_poller(container).run()
    finally:
        if reaper is not None:
            reaper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reaper
        await container.close_resources()


def main() -> None:
    """Start the bot."""
    configure_logging()
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run(build_container()))


if __name__ == "__main__":
    main()
