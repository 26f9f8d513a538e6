"""
Asynchronous request gate.

The ``aiohttp`` counterpart of :class:`~musicbrainz_client.transport.gate.RequestGate`.
Waiting for the gate suspends only the calling task; the event loop keeps
running unrelated work.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, Optional

import aiohttp
from multidict import CIMultiDict

from ..runtime.config import ServiceConfig, default_config
from ..runtime.errors import DisposedError, InvalidStateError, TransportError
from .base import LogicalRequest, RawResponse, RequestSpacing, build_headers

logger = logging.getLogger(__name__)

AsyncSessionFactory = Callable[[], aiohttp.ClientSession]
AsyncSessionConfigurator = Callable[[aiohttp.ClientSession], None]


class AsyncRequestGate:
    """
    Mutual-exclusion wrapper around one shared ``aiohttp.ClientSession``.

    Ownership rules are the same as for the synchronous gate. The default
    session is created inside the running event loop on the first request.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        take_ownership: bool = False,
    ):
        """
        Initialize the gate.

        Args:
            config: Service configuration (copied from the default when omitted)
            session: Optional caller-supplied session
            take_ownership: Treat ``session`` as if the gate had created it
        """
        self.config = config if config is not None else default_config().model_copy()
        self.bearer_token: Optional[str] = None
        self._session = session
        self._owns_session = session is None or take_ownership
        self._factory: Optional[AsyncSessionFactory] = None
        self._configurator: Optional[AsyncSessionConfigurator] = None
        self._lock = asyncio.Lock()
        self._spacing = RequestSpacing()
        self._disposed = False

    @property
    def owns_session(self) -> bool:
        return self._owns_session

    @property
    def has_session(self) -> bool:
        return self._session is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def configure_creation(self, factory: Optional[AsyncSessionFactory]) -> None:
        """Set (or clear) the callable used to create a new session."""
        self._factory = factory

    def configure_setup(self, configurator: Optional[AsyncSessionConfigurator]) -> None:
        """Set (or clear) the callable applied to each newly created session."""
        self._configurator = configurator

    async def acquire_and_run(self, request: LogicalRequest) -> RawResponse:
        """
        Perform one physical send under the gate's lock.

        Raises:
            DisposedError: If the gate has been shut down
            TransportError: If the send could not complete
        """
        if self._disposed:
            raise DisposedError(type(self).__name__)
        async with self._lock:
            if self._disposed:
                raise DisposedError(type(self).__name__)
            session = self._ensure_session()
            delay = self._spacing.delay(self.config.request_interval)
            if delay > 0:
                await asyncio.sleep(delay)
            self._spacing.mark()
            return await self._send(session, request)

    async def close(self) -> None:
        """
        Close the current session; the next request creates a new one.

        Raises:
            InvalidStateError: If the session is owned by the caller
            DisposedError: If the gate has been shut down
        """
        if not self._owns_session:
            raise InvalidStateError("An explicitly provided session is in use.")
        if self._disposed:
            raise DisposedError(type(self).__name__)
        async with self._lock:
            await self._close_session()

    async def shutdown(self) -> None:
        """Release the session (closing it only if gate-owned). Idempotent."""
        if self._disposed:
            return
        async with self._lock:
            if self._disposed:
                return
            try:
                if self._owns_session:
                    await self._close_session()
                self._session = None
            finally:
                self._disposed = True
        logger.debug("Async request gate shut down")

    async def __aenter__(self) -> AsyncRequestGate:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            session = self._factory() if self._factory is not None else aiohttp.ClientSession()
            if self._configurator is not None:
                self._configurator(session)
            self._session = session
            logger.info("Created async HTTP session for %s", self.config.base_url)
        return self._session

    async def _close_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            await session.close()
            logger.info("Closed async HTTP session for %s", self.config.base_url)

    async def _send(self, session: aiohttp.ClientSession, request: LogicalRequest) -> RawResponse:
        url = self.config.url_for(request.path)
        preset = getattr(session, "headers", None) or {}
        headers = build_headers(request, self.config, preset.get("User-Agent"), self.bearer_token)
        timeout = request.timeout if request.timeout is not None else self.config.timeout
        body = request.encoded_body()
        logger.debug("Web service request: %s %s", request.method, request.display_url(self.config))
        if body is not None:
            logger.debug("=> body (%s): %d bytes", headers.get("Content-Type"), len(body))
        try:
            async with session.request(
                request.method,
                url,
                params=list(request.params) or None,
                data=body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                content = await response.read()
                response_headers = CIMultiDict((str(k), str(v)) for k, v in response.headers.items())
                raw = RawResponse(
                    status=int(response.status),
                    reason=response.reason or "",
                    headers=response_headers,
                    body=content or b"",
                    content_type=response_headers.get("Content-Type"),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("Web service request failed: %r", e)
            raise TransportError(
                f"{request.method} {url} failed: {e!r}",
                {"method": request.method, "url": url},
                cause=e,
            ) from e
        logger.debug(
            "Web service response: %d '%s' (%s, %d bytes)",
            raw.status, raw.reason, raw.content_type, len(raw.body),
        )
        return raw


__all__ = ["AsyncRequestGate", "AsyncSessionFactory", "AsyncSessionConfigurator"]
