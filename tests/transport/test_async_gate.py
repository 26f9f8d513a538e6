"""
Unit tests for the asynchronous request gate.
"""

import asyncio

import aiohttp
import pytest

from musicbrainz_client.runtime.errors import DisposedError, InvalidStateError, TransportError
from musicbrainz_client.transport.async_gate import AsyncRequestGate
from musicbrainz_client.transport.base import LIBRARY_PRODUCT_TOKEN, LogicalRequest

from helpers import FakeAsyncResponse, FakeAsyncSession

REQUEST = LogicalRequest("GET", "/ws/2/genre/all", (("fmt", "json"),))


class TestAsyncGate:
    """Tests for AsyncRequestGate."""

    @pytest.mark.asyncio
    async def test_serialises_concurrent_tasks(self, config):
        """Test sends from concurrent tasks never overlap."""
        session = FakeAsyncSession(delay=0.01)
        gate = AsyncRequestGate(config, session)
        await asyncio.gather(*(gate.acquire_and_run(REQUEST) for _ in range(10)))
        assert len(session.calls) == 10
        assert session.max_active == 1

    @pytest.mark.asyncio
    async def test_lazy_creation_via_factory(self, config):
        """Test the factory is used once and the configurator sees the session."""
        sessions = []
        configured = []

        def factory():
            sessions.append(FakeAsyncSession())
            return sessions[-1]

        gate = AsyncRequestGate(config)
        gate.configure_creation(factory)
        gate.configure_setup(configured.append)
        await gate.acquire_and_run(REQUEST)
        await gate.acquire_and_run(REQUEST)
        assert len(sessions) == 1
        assert configured == sessions

    @pytest.mark.asyncio
    async def test_close_and_recreate(self, config):
        """Test close() closes an owned session and the next request opens another."""
        sessions = []
        gate = AsyncRequestGate(config)
        gate.configure_creation(lambda: sessions.append(FakeAsyncSession()) or sessions[-1])
        await gate.acquire_and_run(REQUEST)
        await gate.close()
        assert sessions[0].closed
        await gate.acquire_and_run(REQUEST)
        assert len(sessions) == 2
        await gate.shutdown()
        assert sessions[1].closed

    @pytest.mark.asyncio
    async def test_caller_session_never_closed(self, config, fake_async_session):
        """Test a caller-owned session survives close attempts and shutdown."""
        gate = AsyncRequestGate(config, fake_async_session)
        with pytest.raises(InvalidStateError):
            await gate.close()
        await gate.shutdown()
        assert not fake_async_session.closed

    @pytest.mark.asyncio
    async def test_shutdown_idempotent_and_final(self, config, fake_async_session):
        """Test shutdown twice is harmless and later requests fail."""
        gate = AsyncRequestGate(config, fake_async_session, take_ownership=True)
        await gate.shutdown()
        await gate.shutdown()
        assert fake_async_session.close_count == 1
        with pytest.raises(DisposedError):
            await gate.acquire_and_run(REQUEST)

    @pytest.mark.asyncio
    async def test_async_context_manager(self, config, fake_async_session):
        """Test leaving an async with block shuts the gate down."""
        async with AsyncRequestGate(config, fake_async_session, take_ownership=True) as gate:
            await gate.acquire_and_run(REQUEST)
        assert gate.disposed
        assert fake_async_session.closed

    @pytest.mark.asyncio
    async def test_client_error_is_transport_error(self, config):
        """Test an aiohttp client error becomes a TransportError."""
        failure = aiohttp.ClientConnectionError("connection refused")
        gate = AsyncRequestGate(config, FakeAsyncSession([failure]))
        with pytest.raises(TransportError) as exc_info:
            await gate.acquire_and_run(REQUEST)
        assert exc_info.value.__cause__ is failure

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, config):
        """Test a timeout becomes a TransportError and the lock is released."""
        gate = AsyncRequestGate(config, FakeAsyncSession([asyncio.TimeoutError(), FakeAsyncResponse()]))
        with pytest.raises(TransportError):
            await gate.acquire_and_run(REQUEST)
        raw = await gate.acquire_and_run(REQUEST)
        assert raw.ok

    @pytest.mark.asyncio
    async def test_headers_and_timeout(self, config, fake_async_session):
        """Test the user agent and the per-call timeout reach the session."""
        fake_async_session.headers["User-Agent"] = "Preset/2.0"
        gate = AsyncRequestGate(config, fake_async_session)
        await gate.acquire_and_run(REQUEST.with_timeout(3.0))
        call = fake_async_session.calls[0]
        assert call["headers"]["User-Agent"].startswith("TestApp/1.0 Preset/2.0 " + LIBRARY_PRODUCT_TOKEN)
        assert call["timeout"].total == 3.0
        assert call["url"] == "https://musicbrainz.org/ws/2/genre/all"

    @pytest.mark.asyncio
    async def test_request_spacing_follows_config_changes(self, config, fake_async_session, monkeypatch):
        """Test the interval is read from the configuration on every send."""
        sleeps = []

        async def record(delay):
            sleeps.append(delay)

        monkeypatch.setattr("musicbrainz_client.transport.async_gate.asyncio.sleep", record)
        config.request_interval = 5.0
        gate = AsyncRequestGate(config, fake_async_session)
        await gate.acquire_and_run(REQUEST)
        await gate.acquire_and_run(REQUEST)
        assert len(sleeps) == 1
        config.request_interval = 0
        await gate.acquire_and_run(REQUEST)
        assert len(sleeps) == 1

    @pytest.mark.asyncio
    async def test_content_type_header_case_insensitive(self, config):
        """Test a lowercase content-type header is still picked up."""
        response = FakeAsyncResponse(200, b"{}", headers={"content-type": "application/json"})
        gate = AsyncRequestGate(config, FakeAsyncSession([response]))
        raw = await gate.acquire_and_run(REQUEST)
        assert raw.content_type == "application/json"
