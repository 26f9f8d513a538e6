"""
MusicBrainz web service client

Lookups, browses and searches against the MusicBrainz ``/ws/2`` API, the
OAuth2 token exchange, and authenticated submissions. Synchronous clients run
on ``requests``; asynchronous clients run on ``aiohttp``.
"""

# Core facade
from .query import Query, AsyncQuery
from .oauth2 import OAuth2, AsyncOAuth2, AuthorizationScope, OUT_OF_BAND_URI
from .endpoints import Include, ReleaseType, ReleaseStatus
from .submissions import RatingSubmission, TagSubmission, TagVote

# Paging
from .paging import ResultPage, PageAnomaly, AnomalyKind, PagedQuery, AsyncPagedQuery, CursorState

# Runtime components
from .runtime import (
    ServiceConfig,
    default_config,
    set_default_config,
    ErrorCode,
    MusicBrainzError,
    TransportError,
    RemoteError,
    DecodeError,
    InvalidStateError,
    DisposedError,
    ConfigurationError,
    TokenTypeError,
    Result,
)

# Error recovery
from .recovery import RetryPolicy

# Models
from .models import *
from .models import __all__ as _model_names

from ._version import __version__

__all__ = [
    "Query",
    "AsyncQuery",
    "OAuth2",
    "AsyncOAuth2",
    "AuthorizationScope",
    "OUT_OF_BAND_URI",
    "Include",
    "ReleaseType",
    "ReleaseStatus",
    "RatingSubmission",
    "TagSubmission",
    "TagVote",
    "ResultPage",
    "PageAnomaly",
    "AnomalyKind",
    "PagedQuery",
    "AsyncPagedQuery",
    "CursorState",
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
    "RetryPolicy",
    "__version__",
] + list(_model_names)
