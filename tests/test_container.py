"""Tests for container wiring."""

import asyncio

import pytest

from print_bot.containers import build_container, build_session_store
from print_bot.domain.errors import ConfigurationError
from print_bot.services.sessions import InMemorySessionStore


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.session_store, InMemorySessionStore)
    assert container.router.session_store is container.session_store
    assert container.print_submitter.is_configured
    assert container.update_source is container.transport
    asyncio.run(container.close_resources())


def test_session_reaper_disabled_without_timeout(settings) -> None:
    container = build_container(settings)

    assert container.start_session_reaper() is None
    asyncio.run(container.close_resources())


def test_supabase_backend_requires_credentials(settings) -> None:
    settings.session_backend = "supabase"

    with pytest.raises(ConfigurationError):
        build_session_store(settings)


def test_unknown_backend_is_rejected(settings) -> None:
    settings.session_backend = "redis"

    with pytest.raises(ConfigurationError):
        build_session_store(settings)
