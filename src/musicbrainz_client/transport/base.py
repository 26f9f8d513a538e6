"""
Transport-neutral request and response values.

Shared by the synchronous (``requests``) and asynchronous (``aiohttp``)
gates: the logical request description, the raw response, its status
classification, header construction and request spacing.
"""

from __future__ import annotations
import json
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from .._version import __version__
from ..runtime.config import ServiceConfig

JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "application/xml"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Appended to every User-Agent header, in this order.
LIBRARY_PRODUCT_TOKEN = f"musicbrainz-client/{__version__}"
LIBRARY_COMMENT_TOKEN = "(python-musicbrainz-client)"

Params = Tuple[Tuple[str, str], ...]


class Classification(Enum):
    """Outcome class of one physical send."""

    SUCCESS = "success"
    REDIRECT = "redirect"
    CLIENT_ERROR = "client-error"
    SERVER_ERROR = "server-error"
    TRANSPORT_FAILURE = "transport-failure"


def classify(status: int) -> Classification:
    """
    Map an HTTP status onto an outcome class.

    A 3xx reaching here is a redirect the HTTP stack did not follow. Only
    ``SUCCESS`` is ok; every other class ends in a ``RemoteError``.
    """
    if 200 <= status < 300:
        return Classification.SUCCESS
    if 300 <= status < 400:
        return Classification.REDIRECT
    if status >= 500:
        return Classification.SERVER_ERROR
    return Classification.CLIENT_ERROR


@dataclass(frozen=True)
class LogicalRequest:
    """
    One intended call to the web service, independent of transport encoding.

    Attributes:
        method: HTTP method
        path: Absolute path on the server (``/ws/2/artist/<mbid>``)
        params: Ordered query parameters; duplicate keys are allowed
        body: Optional request body
        content_type: Content type of ``body``
        accept: Accepted response media type
        authenticated: Send the bearer token, if one is configured
        timeout: Per-call deadline overriding the configured timeout
    """

    method: str
    path: str
    params: Params = ()
    body: Optional[Union[bytes, str]] = None
    content_type: Optional[str] = None
    accept: str = JSON_CONTENT_TYPE
    authenticated: bool = False
    timeout: Optional[float] = None

    def with_params(self, *extra: Tuple[str, str]) -> LogicalRequest:
        return replace(self, params=self.params + tuple(extra))

    def with_timeout(self, timeout: Optional[float]) -> LogicalRequest:
        return replace(self, timeout=timeout)

    @property
    def query_string(self) -> str:
        return urlencode(self.params)

    def display_url(self, config: ServiceConfig) -> str:
        url = config.url_for(self.path)
        return f"{url}?{self.query_string}" if self.params else url

    def encoded_body(self) -> Optional[bytes]:
        if self.body is None:
            return None
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body


@dataclass
class RawResponse:
    """A completed physical exchange, body fully read."""

    status: int
    reason: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    content_type: Optional[str] = None

    @property
    def classification(self) -> Classification:
        return classify(self.status)

    @property
    def ok(self) -> bool:
        return self.classification is Classification.SUCCESS

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


def build_user_agent(caller_tokens: Iterable[str] = (), session_tokens: Iterable[str] = ()) -> str:
    """
    Merge caller-supplied user agent tokens with the library's own.

    Caller tokens come first (configured tokens, then any user agent the
    session owner preset), followed by the product token and the comment token.
    """
    tokens = [t for t in caller_tokens if t]
    for token in session_tokens:
        if token and token not in tokens:
            tokens.append(token)
    tokens.append(LIBRARY_PRODUCT_TOKEN)
    tokens.append(LIBRARY_COMMENT_TOKEN)
    return " ".join(tokens)


def split_user_agent(value: Optional[str]) -> Sequence[str]:
    """Split a preset User-Agent value into tokens, keeping comments whole."""
    if not value:
        return []
    tokens = []
    depth = 0
    current = []
    for ch in value.strip():
        if ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        if ch.isspace() and depth == 0:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


def build_headers(request: LogicalRequest, config: ServiceConfig,
                  session_user_agent: Optional[str] = None,
                  bearer_token: Optional[str] = None) -> Dict[str, str]:
    """
    Headers for one physical send.

    Args:
        request: The logical request being sent
        config: Service configuration (caller user agent tokens)
        session_user_agent: User agent preset on the session by its owner
        bearer_token: OAuth2 access token, used when the request is authenticated

    Returns:
        Header mapping
    """
    headers = {
        "Accept": request.accept,
        "User-Agent": build_user_agent(config.user_agent, split_user_agent(session_user_agent)),
    }
    if request.authenticated and bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"
    if request.body is not None:
        headers["Content-Type"] = request.content_type or "application/octet-stream"
    return headers


class RequestSpacing:
    """Tracks the minimum spacing between physical sends; callers do the sleeping."""

    def __init__(self) -> None:
        self._last_start: Optional[float] = None

    def delay(self, interval: float) -> float:
        """Seconds to wait before the next send may start, given the current ``interval``."""
        if interval <= 0 or self._last_start is None:
            return 0.0
        elapsed = time.monotonic() - self._last_start
        return max(0.0, interval - elapsed)

    def mark(self) -> None:
        self._last_start = time.monotonic()


__all__ = [
    "Classification",
    "classify",
    "LogicalRequest",
    "RawResponse",
    "build_user_agent",
    "split_user_agent",
    "build_headers",
    "RequestSpacing",
    "LIBRARY_PRODUCT_TOKEN",
    "LIBRARY_COMMENT_TOKEN",
    "JSON_CONTENT_TYPE",
    "XML_CONTENT_TYPE",
    "FORM_CONTENT_TYPE",
]
