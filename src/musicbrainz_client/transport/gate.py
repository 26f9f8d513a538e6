"""
Synchronous request gate.

Owns one lazily-created ``requests.Session`` and serialises every physical
send through a single lock, so at most one request is in flight at a time and
session creation/teardown can never race with a send.
"""

from __future__ import annotations
import logging
import threading
import time
from typing import Callable, Optional

import requests
from requests.structures import CaseInsensitiveDict
from requests.utils import default_user_agent

from ..runtime.config import ServiceConfig, default_config
from ..runtime.errors import DisposedError, InvalidStateError, TransportError
from .base import LogicalRequest, RawResponse, RequestSpacing, build_headers

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]
SessionConfigurator = Callable[[requests.Session], None]


class RequestGate:
    """
    Mutual-exclusion wrapper around one shared HTTP session.

    Two ownership regimes:
    - gate-owned (no session passed, or ``take_ownership=True``): the session is
      created on first use, closed by ``close()``/``shutdown()`` and recreated
      by the next request after ``close()``;
    - caller-owned (session passed without ``take_ownership``): the gate never
      closes it; ``close()`` raises ``InvalidStateError`` and ``shutdown()``
      only drops the gate's reference.

    Example:
        ```python
        with RequestGate(ServiceConfig(user_agent="MyApp/1.0")) as gate:
            raw = gate.acquire_and_run(LogicalRequest("GET", "/ws/2/genre/all"))
        ```
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        session: Optional[requests.Session] = None,
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
        self._factory: Optional[SessionFactory] = None
        self._configurator: Optional[SessionConfigurator] = None
        self._lock = threading.Lock()
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

    def configure_creation(self, factory: Optional[SessionFactory]) -> None:
        """Set (or clear) the callable used to create a new session."""
        self._factory = factory

    def configure_setup(self, configurator: Optional[SessionConfigurator]) -> None:
        """Set (or clear) the callable applied to each newly created session."""
        self._configurator = configurator

    def acquire_and_run(self, request: LogicalRequest) -> RawResponse:
        """
        Perform one physical send under the gate's lock.

        Args:
            request: Logical request to send

        Returns:
            The raw response, body fully read

        Raises:
            DisposedError: If the gate has been shut down
            TransportError: If the send could not complete
        """
        if self._disposed:
            raise DisposedError(type(self).__name__)
        with self._lock:
            if self._disposed:
                raise DisposedError(type(self).__name__)
            session = self._ensure_session()
            delay = self._spacing.delay(self.config.request_interval)
            if delay > 0:
                time.sleep(delay)
            self._spacing.mark()
            return self._send(session, request)

    def close(self) -> None:
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
        with self._lock:
            self._close_session()

    def shutdown(self) -> None:
        """Release the session (closing it only if gate-owned). Idempotent."""
        if self._disposed:
            return
        with self._lock:
            if self._disposed:
                return
            try:
                if self._owns_session:
                    self._close_session()
                self._session = None
            finally:
                self._disposed = True
        logger.debug("Request gate shut down")

    def __enter__(self) -> RequestGate:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def _ensure_session(self) -> requests.Session:
        if self._session is None:
            session = self._factory() if self._factory is not None else requests.Session()
            if self._configurator is not None:
                self._configurator(session)
            self._session = session
            logger.info("Created HTTP session for %s", self.config.base_url)
        return self._session

    def _close_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            session.close()
            logger.info("Closed HTTP session for %s", self.config.base_url)

    @staticmethod
    def _session_user_agent(session: requests.Session) -> Optional[str]:
        headers = getattr(session, "headers", None) or {}
        value = headers.get("User-Agent")
        if value == default_user_agent():
            return None
        return value

    def _send(self, session: requests.Session, request: LogicalRequest) -> RawResponse:
        url = self.config.url_for(request.path)
        headers = build_headers(request, self.config, self._session_user_agent(session), self.bearer_token)
        timeout = request.timeout if request.timeout is not None else self.config.timeout
        body = request.encoded_body()
        logger.debug("Web service request: %s %s", request.method, request.display_url(self.config))
        if body is not None:
            logger.debug("=> body (%s): %d bytes", headers.get("Content-Type"), len(body))
        try:
            response = session.request(
                request.method,
                url,
                params=list(request.params) or None,
                data=body,
                headers=headers,
                timeout=timeout,
            )
            content = response.content
        except requests.RequestException as e:
            logger.debug("Web service request failed: %s", e)
            raise TransportError(
                f"{request.method} {url} failed: {e}",
                {"method": request.method, "url": url},
                cause=e,
            ) from e
        response_headers = CaseInsensitiveDict(response.headers)
        raw = RawResponse(
            status=int(response.status_code),
            reason=response.reason or "",
            headers=response_headers,
            body=content or b"",
            content_type=response_headers.get("Content-Type"),
        )
        logger.debug(
            "Web service response: %d '%s' (%s, %d bytes)",
            raw.status, raw.reason, raw.content_type, len(raw.body),
        )
        return raw


__all__ = ["RequestGate", "SessionFactory", "SessionConfigurator"]
