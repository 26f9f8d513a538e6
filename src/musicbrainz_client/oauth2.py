"""
OAuth2 token exchange for the MusicBrainz web service.

Builds the authorization URL a user visits, then exchanges the returned code
(or a refresh token) for a bearer token at ``/oauth2/token``.
"""

from __future__ import annotations
import logging
from enum import Flag
from typing import Optional
from urllib.parse import urlencode

import aiohttp
import requests

from .codec import entity_decoder
from .endpoints import flag_names
from .models.token import AuthorizationToken
from .runtime.config import ServiceConfig, default_config
from .runtime.errors import ConfigurationError, TokenTypeError
from .transport.async_gate import AsyncRequestGate
from .transport.base import FORM_CONTENT_TYPE, LogicalRequest
from .transport.executor import AsyncExecutor, Executor
from .transport.gate import RequestGate

logger = logging.getLogger(__name__)

AUTHORIZATION_ENDPOINT = "/oauth2/authorize"
TOKEN_ENDPOINT = "/oauth2/token"
OUT_OF_BAND_URI = "urn:ietf:wg:oauth:2.0:oob"
BEARER = "bearer"


class AuthorizationScope(Flag):
    """Permissions an application can request."""

    NONE = 0
    COLLECTION = 1 << 0
    EMAIL = 1 << 1
    PROFILE = 1 << 2
    RATING = 1 << 3
    SUBMIT_BARCODE = 1 << 4
    SUBMIT_ISRC = 1 << 5
    TAG = 1 << 6
    EVERYTHING = COLLECTION | EMAIL | PROFILE | RATING | SUBMIT_BARCODE | SUBMIT_ISRC | TAG


def scope_names(scope: AuthorizationScope):
    return [name.replace("-", "_") for name in flag_names(scope) if name != "everything"]


def _require(value: Optional[str], name: str, message: str) -> str:
    if value is None or not str(value).strip():
        raise ConfigurationError(message, name, value)
    return str(value)


class _OAuth2Base:
    """Request construction shared by :class:`OAuth2` and :class:`AsyncOAuth2`."""

    config: ServiceConfig

    @property
    def client_id(self) -> Optional[str]:
        return self.config.client_id

    def create_authorization_request(
        self,
        redirect_uri: str = OUT_OF_BAND_URI,
        scope: AuthorizationScope = AuthorizationScope.NONE,
        state: Optional[str] = None,
        offline_access: bool = False,
        force_prompt: bool = False,
    ) -> str:
        """
        Build the URL a user visits to authorize this application.

        Args:
            redirect_uri: Where the service sends the user afterwards; the
                out-of-band URI shows the code to the user instead
            scope: Requested permissions (at least one)
            state: Opaque value echoed back to the redirect URI
            offline_access: Also request a refresh token
            force_prompt: Ask the user even if access was granted before

        Returns:
            Authorization URL

        Raises:
            ConfigurationError: If no scope is selected or no client ID is configured
        """
        names = scope_names(scope)
        if not names:
            raise ConfigurationError("At least one authorization scope must be selected.", "scope", scope)
        client_id = _require(self.client_id, "client_id", "The client ID must not be blank.")
        params = [
            ("response_type", "code"),
            ("client_id", client_id),
            ("redirect_uri", str(redirect_uri)),
            ("scope", " ".join(names)),
        ]
        if state is not None:
            params.append(("state", state))
        if offline_access:
            params.append(("access_type", "offline"))
        if force_prompt:
            params.append(("approval_prompt", "force"))
        return f"{self.config.url_for(AUTHORIZATION_ENDPOINT)}?{urlencode(params)}"

    def _code_request(self, code: str, client_secret: str, redirect_uri: str) -> LogicalRequest:
        code = _require(code, "code", "The authorization code must not be blank.")
        return self._token_request(client_secret, [
            ("grant_type", "authorization_code"),
            ("code", code),
            ("redirect_uri", str(redirect_uri)),
        ])

    def _refresh_request(self, refresh_token: str, client_secret: str) -> LogicalRequest:
        refresh_token = _require(refresh_token, "refresh_token", "The refresh token must not be blank.")
        return self._token_request(client_secret, [
            ("grant_type", "refresh_token"),
            ("refresh_token", refresh_token),
        ])

    def _token_request(self, client_secret: str, grant) -> LogicalRequest:
        client_id = _require(self.client_id, "client_id", "The client ID must not be blank.")
        client_secret = _require(client_secret, "client_secret", "The client secret must not be blank.")
        form = [("client_id", client_id), ("client_secret", client_secret), ("token_type", BEARER)] + grant
        return LogicalRequest("POST", TOKEN_ENDPOINT, body=urlencode(form), content_type=FORM_CONTENT_TYPE)

    @staticmethod
    def _check_token(token: AuthorizationToken) -> AuthorizationToken:
        if (token.token_type or "").lower() != BEARER:
            raise TokenTypeError(BEARER, token.token_type)
        logger.debug("Obtained %s token (expires in %s s)", token.token_type, token.expires_in)
        return token


class OAuth2(_OAuth2Base):
    """
    Synchronous OAuth2 client.

    Example:
        ```python
        oauth = OAuth2(ServiceConfig(client_id="...", user_agent="MyApp/1.0"))
        url = oauth.create_authorization_request(scope=AuthorizationScope.RATING | AuthorizationScope.TAG)
        token = oauth.get_bearer_token(code, secret)
        ```
    """

    def __init__(self, config: Optional[ServiceConfig] = None, session: Optional[requests.Session] = None,
                 take_ownership: bool = False):
        self.config = config if config is not None else default_config().model_copy()
        self.gate = RequestGate(self.config, session, take_ownership)
        self._executor = Executor(self.gate)

    def get_bearer_token(self, code: str, client_secret: str,
                         redirect_uri: str = OUT_OF_BAND_URI) -> AuthorizationToken:
        """
        Exchange an authorization code for a bearer token.

        Raises:
            RemoteError: If the service rejects the exchange
            TokenTypeError: If the service returns a token that is not a bearer token
        """
        request = self._code_request(code, client_secret, redirect_uri)
        return self._check_token(self._executor.execute(request, entity_decoder(AuthorizationToken)))

    def refresh_bearer_token(self, refresh_token: str, client_secret: str) -> AuthorizationToken:
        """Obtain a fresh bearer token using a refresh token."""
        request = self._refresh_request(refresh_token, client_secret)
        return self._check_token(self._executor.execute(request, entity_decoder(AuthorizationToken)))

    def configure_creation(self, factory) -> None:
        self.gate.configure_creation(factory)

    def configure_setup(self, configurator) -> None:
        self.gate.configure_setup(configurator)

    def close(self) -> None:
        self.gate.close()

    def shutdown(self) -> None:
        self.gate.shutdown()

    def __enter__(self) -> OAuth2:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()


class AsyncOAuth2(_OAuth2Base):
    """Asynchronous OAuth2 client on ``aiohttp``."""

    def __init__(self, config: Optional[ServiceConfig] = None, session: Optional[aiohttp.ClientSession] = None,
                 take_ownership: bool = False):
        self.config = config if config is not None else default_config().model_copy()
        self.gate = AsyncRequestGate(self.config, session, take_ownership)
        self._executor = AsyncExecutor(self.gate)

    async def get_bearer_token(self, code: str, client_secret: str,
                               redirect_uri: str = OUT_OF_BAND_URI) -> AuthorizationToken:
        request = self._code_request(code, client_secret, redirect_uri)
        return self._check_token(await self._executor.execute(request, entity_decoder(AuthorizationToken)))

    async def refresh_bearer_token(self, refresh_token: str, client_secret: str) -> AuthorizationToken:
        request = self._refresh_request(refresh_token, client_secret)
        return self._check_token(await self._executor.execute(request, entity_decoder(AuthorizationToken)))

    def configure_creation(self, factory) -> None:
        self.gate.configure_creation(factory)

    def configure_setup(self, configurator) -> None:
        self.gate.configure_setup(configurator)

    async def close(self) -> None:
        await self.gate.close()

    async def shutdown(self) -> None:
        await self.gate.shutdown()

    async def __aenter__(self) -> AsyncOAuth2:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()


__all__ = [
    "AUTHORIZATION_ENDPOINT",
    "TOKEN_ENDPOINT",
    "OUT_OF_BAND_URI",
    "AuthorizationScope",
    "OAuth2",
    "AsyncOAuth2",
]
