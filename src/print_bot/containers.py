"""Dependency container wiring for the application."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from supabase import create_client

from print_bot.adapters.ipp_connector import PyIppConnector
from print_bot.adapters.supabase_session_repository import SupabaseSessionStore
from print_bot.adapters.telegram_transport import (
    HttpxTelegramTransport,
    MessagingTransport,
    UpdateSource,
)
from print_bot.config import Settings
from print_bot.domain.errors import ConfigurationError
from print_bot.services.files import FileStorage
from print_bot.services.printing import PrintJobSubmitter
from print_bot.services.router import MessageRouter, reap_idle_sessions
from print_bot.services.sessions import InMemorySessionStore, SessionStore

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    transport: MessagingTransport
    update_source: UpdateSource
    session_store: SessionStore
    file_storage: FileStorage
    print_submitter: PrintJobSubmitter
    router: MessageRouter
    close_resources: Callable[[], Awaitable[None]]

    def start_session_reaper(self) -> asyncio.Task[None] | None:
        """Start idle-session eviction when a timeout is configured."""
        idle_timeout = self.settings.session_idle_timeout_seconds
        if not idle_timeout:
            return None
        _logger.info("Idle session eviction enabled: timeout=%ss", idle_timeout)
        return asyncio.create_task(
            reap_idle_sessions(
                self.router,
                timedelta(seconds=idle_timeout),
                self.settings.session_eviction_interval_seconds,
            )
        )


def build_session_store(settings: Settings) -> SessionStore:
    """Create the session store selected by ``session_backend``."""
    backend = settings.session_backend.strip().lower()
    if backend == "memory":
        return InMemorySessionStore()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ConfigurationError(
                "supabase_url and supabase_service_key are required "
                "for the supabase session backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseSessionStore(client)
    raise ConfigurationError(f"Unknown session backend: {settings.session_backend}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    transport = HttpxTelegramTransport.create(resolved_settings.telegram_bot_token)
    connector = PyIppConnector(timeout=resolved_settings.printer_timeout_seconds)
    session_store = build_session_store(resolved_settings)
    file_storage = FileStorage(Path(resolved_settings.uploads_dir))
    print_submitter = PrintJobSubmitter(
        connector=connector,
        printer_uri=resolved_settings.printer_uri,
        requesting_user_name=resolved_settings.printer_user_name,
    )
    router = MessageRouter(
        session_store=session_store,
        file_storage=file_storage,
        print_submitter=print_submitter,
        transport=transport,
    )

    async def close_resources() -> None:
        await transport.close()
        await connector.close()

    return AppContainer(
        settings=resolved_settings,
        transport=transport,
        update_source=transport,
        session_store=session_store,
        file_storage=file_storage,
        print_submitter=print_submitter,
        router=router,
        close_resources=close_resources,
    )
