"""
Service configuration for the MusicBrainz client.

Values are validated when the configuration is created and again on every
assignment, so a blank server name or an out-of-range port is rejected where
it is set rather than when the next request goes out.
"""

from __future__ import annotations
import os
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_SERVER = "musicbrainz.org"
DEFAULT_URL_SCHEME = "https"
DEFAULT_TIMEOUT = 30.0
DEFAULT_REQUEST_INTERVAL = 1.0


def _raise_configuration_error(exc: ValidationError) -> None:
    first = exc.errors()[0]
    option = ".".join(str(part) for part in first.get("loc", ())) or None
    message = first.get("msg", str(exc))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    raise ConfigurationError(message, option, first.get("input")) from exc


class ServiceConfig(BaseModel):
    """
    Where and how to reach the web service.

    Attributes:
        server: Host name of the web service
        port: Port number, or -1 for the scheme's default port
        url_scheme: Internet access protocol (``https`` or ``http``)
        client_id: Application identifier (submissions and OAuth2)
        user_agent: Application product tokens sent ahead of the library's own
        timeout: Per-send transport timeout in seconds
        request_interval: Minimum spacing between physical sends in seconds
    """

    server: str = Field(default=DEFAULT_SERVER)
    port: int = Field(default=-1)
    url_scheme: str = Field(default=DEFAULT_URL_SCHEME)
    client_id: Optional[str] = Field(default=None)
    user_agent: Tuple[str, ...] = Field(default=())
    timeout: float = Field(default=DEFAULT_TIMEOUT)
    request_interval: float = Field(default=DEFAULT_REQUEST_INTERVAL)

    model_config = {"validate_assignment": True}

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            _raise_configuration_error(e)

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except ValidationError as e:
            _raise_configuration_error(e)

    @field_validator("server")
    @classmethod
    def _check_server(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("The server name must not be blank.")
        return v.strip()

    @field_validator("url_scheme")
    @classmethod
    def _check_url_scheme(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("The URL scheme must not be blank.")
        return v.strip()

    @field_validator("port")
    @classmethod
    def _check_port(cls, v: int) -> int:
        if v < -1 or v > 65535:
            raise ValueError("The port number must not be less than -1 or greater than 65535.")
        return v

    @field_validator("client_id")
    @classmethod
    def _check_client_id(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("The client ID must not be blank.")
        return v.strip() if v is not None else None

    @field_validator("user_agent", mode="before")
    @classmethod
    def _split_user_agent(cls, v: Union[str, Tuple[str, ...], list, None]) -> Tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split()
        tokens = tuple(v)
        for token in tokens:
            if not isinstance(token, str) or not token.strip():
                raise ValueError("User agent tokens must not be blank.")
        return tuple(token.strip() for token in tokens)

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("The timeout must be positive.")
        return v

    @field_validator("request_interval")
    @classmethod
    def _check_request_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError("The request interval must not be negative.")
        return v

    @property
    def base_url(self) -> str:
        """Scheme, host and (if explicit) port, without a trailing slash."""
        if self.port == -1:
            return f"{self.url_scheme}://{self.server}"
        return f"{self.url_scheme}://{self.server}:{self.port}"

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url + path

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> ServiceConfig:
        """
        Build a configuration from ``MUSICBRAINZ_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Explicit values that win over the environment

        Returns:
            Validated configuration
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        mapping = {
            "MUSICBRAINZ_SERVER": "server",
            "MUSICBRAINZ_PORT": "port",
            "MUSICBRAINZ_URL_SCHEME": "url_scheme",
            "MUSICBRAINZ_CLIENT_ID": "client_id",
            "MUSICBRAINZ_USER_AGENT": "user_agent",
        }
        for variable, option in mapping.items():
            raw = env.get(variable)
            if raw is not None and raw != "":
                values[option] = raw
        values.update(overrides)
        return cls(**values)


_default_config: Optional[ServiceConfig] = None


def default_config() -> ServiceConfig:
    """
    Process-wide default configuration.

    Only consulted when a client is created without an explicit config; the
    returned object is copied by each client, so later changes here do not
    affect existing clients.
    """
    global _default_config
    if _default_config is None:
        _default_config = ServiceConfig()
    return _default_config


def set_default_config(config: Optional[ServiceConfig]) -> None:
    """Replace (or with ``None``, reset) the process-wide default configuration."""
    global _default_config
    _default_config = config


__all__ = [
    "ServiceConfig",
    "default_config",
    "set_default_config",
    "DEFAULT_SERVER",
    "DEFAULT_URL_SCHEME",
    "DEFAULT_TIMEOUT",
    "DEFAULT_REQUEST_INTERVAL",
]
