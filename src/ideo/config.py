"""Environment-backed client configuration."""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import AuthError, ConfigError
from .registry import DEFAULT_API_URL

_DOTENV_FILE = Path(".env")

API_KEY_VAR = "IDEOGRAM_API_KEY"
API_URL_VAR = "IDEOGRAM_API_URL"
TIMEOUT_VAR = "IDEOGRAM_TIMEOUT"
DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"ClientConfig(api_key='***', api_url={self.api_url!r}, "
            f"timeout={self.timeout!r})"
        )


def load_env_file() -> None:
    """Load variables from ./.env without overriding the real environment."""

    load_dotenv(_DOTENV_FILE)  # silently ignore if there is none, assume defaults.


def load_config(environ: Mapping[str, str] | None = None) -> ClientConfig:
    """Read the API key, endpoint and timeout from ``environ``.

    Called right before the API request so that a missing key surfaces as
    ``AuthError`` and options such as ``--help`` work without one.
    """

    if environ is None:
        environ = os.environ

    api_key = environ.get(API_KEY_VAR, "").strip()
    if not api_key:
        raise AuthError(
            f"{API_KEY_VAR} environment variable is not set "
            "(export it or add it to a .env file in the current directory)"
        )

    api_url = environ.get(API_URL_VAR, "").strip() or DEFAULT_API_URL
    return ClientConfig(
        api_key=api_key,
        api_url=api_url,
        timeout=_parse_timeout(environ.get(TIMEOUT_VAR, "")),
    )


def _parse_timeout(raw_value: str) -> float:
    value = raw_value.strip()
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ConfigError(
            f"value {raw_value} for {TIMEOUT_VAR} must be a number of seconds"
        ) from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError(f"value {raw_value} for {TIMEOUT_VAR} must be positive")
    return timeout
