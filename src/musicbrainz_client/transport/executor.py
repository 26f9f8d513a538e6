"""
Transport executors.

Run a logical request through a gate, classify the raw response and route it
either to a decoder or to a ``RemoteError``. No caching and no retries.
"""

from __future__ import annotations
import json
import logging
import xml.etree.ElementTree as ElementTree
from typing import Any, Callable, Optional, Tuple, TypeVar

from pydantic import ValidationError

from ..runtime.errors import DecodeError, MusicBrainzError, RemoteError
from .async_gate import AsyncRequestGate
from .base import LogicalRequest, RawResponse
from .gate import RequestGate

logger = logging.getLogger(__name__)

T = TypeVar("T")
Decoder = Callable[[bytes], T]


def _error_texts(raw: RawResponse) -> Tuple[Optional[str], Optional[str]]:
    """Pull the service's error/help texts out of an error body, if present."""
    if not raw.body:
        return None, None
    try:
        data = json.loads(raw.body)
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        help_text = data.get("help")
        return (str(error) if error is not None else None,
                str(help_text) if help_text is not None else None)
    try:
        root = ElementTree.fromstring(raw.body)
    except ElementTree.ParseError:
        return None, None
    texts = [el.text.strip() for el in root.iter() if el.tag.rsplit("}", 1)[-1] == "text" and el.text]
    if not texts:
        return None, None
    return texts[0], (texts[1] if len(texts) > 1 else None)


def remote_error_for(raw: RawResponse) -> RemoteError:
    """Build the ``RemoteError`` for a non-success response."""
    error, help_text = _error_texts(raw)
    return RemoteError(raw.status, raw.reason, raw.body, error=error, help=help_text)


def decode_response(raw: RawResponse, decoder: Decoder[T]) -> T:
    """
    Interpret one raw response.

    Args:
        raw: Response returned by a gate
        decoder: Callable turning a success body into a value

    Returns:
        Decoded value

    Raises:
        RemoteError: For non-success statuses
        DecodeError: If the success body does not have the expected shape
    """
    if not raw.ok:
        error = remote_error_for(raw)
        logger.debug("Web service reported an error: %s", error)
        raise error
    try:
        return decoder(raw.body)
    except MusicBrainzError:
        raise
    except ValidationError as e:
        raise DecodeError(
            f"Response body did not match the expected shape: {e.error_count()} error(s)",
            {"errors": e.errors(include_url=False)},
            cause=e,
        ) from e
    except (ValueError, KeyError, TypeError) as e:
        raise DecodeError(f"Failed to decode response body: {e}", cause=e) from e


def message_text(body: bytes) -> str:
    """The result message of a submission reply (usually ``OK``)."""
    if not body:
        return ""
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, dict):
            message = message.get("text")
        if message is not None:
            return str(message)
        raise DecodeError("Submission reply has no message", {"keys": sorted(data)})
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError:
        return body.decode("utf-8", errors="replace").strip()
    for el in root.iter():
        if el.tag.rsplit("}", 1)[-1] == "text" and el.text:
            return el.text.strip()
    return ""


class Executor:
    """Synchronous transport executor over a :class:`RequestGate`."""

    def __init__(self, gate: RequestGate):
        self.gate = gate

    def execute(self, request: LogicalRequest, decoder: Decoder[T]) -> T:
        """Send ``request`` and decode a single value from the reply."""
        raw = self.gate.acquire_and_run(request)
        return decode_response(raw, decoder)

    def execute_for_page(self, request: LogicalRequest, page_decoder: Decoder[Any]) -> Any:
        """Send ``request`` and decode one result page from the reply."""
        raw = self.gate.acquire_and_run(request)
        return decode_response(raw, page_decoder)

    def execute_text(self, request: LogicalRequest) -> str:
        """Send a submission and return the service's result message."""
        raw = self.gate.acquire_and_run(request)
        return decode_response(raw, message_text)


class AsyncExecutor:
    """Asynchronous transport executor over an :class:`AsyncRequestGate`."""

    def __init__(self, gate: AsyncRequestGate):
        self.gate = gate

    async def execute(self, request: LogicalRequest, decoder: Decoder[T]) -> T:
        raw = await self.gate.acquire_and_run(request)
        return decode_response(raw, decoder)

    async def execute_for_page(self, request: LogicalRequest, page_decoder: Decoder[Any]) -> Any:
        raw = await self.gate.acquire_and_run(request)
        return decode_response(raw, page_decoder)

    async def execute_text(self, request: LogicalRequest) -> str:
        raw = await self.gate.acquire_and_run(request)
        return decode_response(raw, message_text)


__all__ = [
    "Executor",
    "AsyncExecutor",
    "Decoder",
    "decode_response",
    "remote_error_for",
    "message_text",
]
