"""Runtime helpers for the MusicBrainz client: configuration, errors, results"""

from .config import ServiceConfig, default_config, set_default_config
from .errors import (
    ErrorCode,
    MusicBrainzError,
    TransportError,
    RemoteError,
    DecodeError,
    InvalidStateError,
    DisposedError,
    ConfigurationError,
    TokenTypeError,
)
from .result import Result

__all__ = [
    "ServiceConfig",
    "default_config",
    "set_default_config",
    "ErrorCode",
    "MusicBrainzError",
    "TransportError",
    "RemoteError",
    "DecodeError",
    "InvalidStateError",
    "DisposedError",
    "ConfigurationError",
    "TokenTypeError",
    "Result",
]
