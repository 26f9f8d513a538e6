"""
Fake HTTP sessions for both stacks.

The fakes record every physical send and answer from a queue of canned
responses (or a handler callable); an exception in the queue is raised.
"""

import asyncio
import threading
import time
from typing import Any, Callable, Dict, List, Optional


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, body: bytes = b"{}", reason: str = "OK",
                 headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.reason = reason
        self.content = body
        self.headers = headers if headers is not None else {"Content-Type": "application/json"}


class FakeSession:
    """
    Minimal stand-in for ``requests.Session``.

    Responses come from ``handler(call)`` when set, else from the queue; an
    exception in the queue is raised instead of answering.
    """

    def __init__(self, responses: Optional[List[Any]] = None, handler: Optional[Callable] = None,
                 delay: float = 0.0):
        self.headers: Dict[str, str] = {}
        self.responses = list(responses or [])
        self.handler = handler
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self.close_count = 0
        self.active = 0
        self.max_active = 0
        self._counter = threading.Lock()

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        call = {"method": method, "url": url, "params": list(params or []), "data": data,
                "headers": dict(headers or {}), "timeout": timeout}
        with self._counter:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.calls.append(call)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.handler is not None:
                answer = self.handler(call)
            elif self.responses:
                answer = self.responses.pop(0)
            else:
                answer = FakeResponse()
            if isinstance(answer, BaseException):
                raise answer
            return answer
        finally:
            with self._counter:
                self.active -= 1

    def close(self):
        self.closed = True
        self.close_count += 1


class FakeAsyncResponse:
    """Minimal stand-in for ``aiohttp.ClientResponse`` used as a context manager."""

    def __init__(self, status: int = 200, body: bytes = b"{}", reason: str = "OK",
                 headers: Optional[Dict[str, str]] = None):
        self.status = status
        self.reason = reason
        self._body = body
        self.headers = headers if headers is not None else {"Content-Type": "application/json"}

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class _PendingRequest:
    def __init__(self, session: "FakeAsyncSession", call: Dict[str, Any]):
        self._session = session
        self._call = call

    async def __aenter__(self):
        return await self._session._answer(self._call)

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeAsyncSession:
    """Minimal stand-in for ``aiohttp.ClientSession``."""

    def __init__(self, responses: Optional[List[Any]] = None, handler: Optional[Callable] = None,
                 delay: float = 0.0):
        self.headers: Dict[str, str] = {}
        self.responses = list(responses or [])
        self.handler = handler
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self.close_count = 0
        self.active = 0
        self.max_active = 0

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        call = {"method": method, "url": url, "params": list(params or []), "data": data,
                "headers": dict(headers or {}), "timeout": timeout}
        self.calls.append(call)
        return _PendingRequest(self, call)

    async def _answer(self, call):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.handler is not None:
                answer = self.handler(call)
            elif self.responses:
                answer = self.responses.pop(0)
            else:
                answer = FakeAsyncResponse()
            if isinstance(answer, BaseException):
                raise answer
            return answer
        finally:
            self.active -= 1

    async def close(self):
        self.closed = True
        self.close_count += 1
