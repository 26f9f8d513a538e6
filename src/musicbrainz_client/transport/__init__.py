"""
HTTP execution engine: request gates (sync and async) and transport executors.
"""

from .base import Classification, LogicalRequest, RawResponse, build_headers, build_user_agent
from .gate import RequestGate
from .async_gate import AsyncRequestGate
from .executor import Executor, AsyncExecutor, decode_response

__all__ = [
    "Classification",
    "LogicalRequest",
    "RawResponse",
    "build_headers",
    "build_user_agent",
    "RequestGate",
    "AsyncRequestGate",
    "Executor",
    "AsyncExecutor",
    "decode_response",
]
