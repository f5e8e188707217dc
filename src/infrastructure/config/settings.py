"""
Infrastructure configuration: provider settings resolved from the environment.

ProviderSettings.from_env() is called once by each Composition Root (after
load_dotenv()); the resulting object is passed into adapters explicitly so
nothing below the entrypoints reads os.environ.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from src.domain.errors import ConfigurationError

BASE_URL_VAR = "POLYGON_API_BASE_URL"
API_KEY_VAR = "POLYGON_API_KEY"
TIMEOUT_VAR = "POLYGON_TIMEOUT_SECONDS"
LOG_LEVEL_VAR = "LOG_LEVEL"

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_QUIET_LOGGERS = ("httpx", "httpcore")


@dataclass(frozen=True)
class ProviderSettings:
    base_url: str
    api_key: str
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProviderSettings":
        """Build settings from *environ* (defaults to os.environ).

        Raises:
            ConfigurationError: if the base URL or API key is missing or blank,
                                or the timeout is not a positive number.
        """
        env = os.environ if environ is None else environ
        base_url = _required(env, BASE_URL_VAR, "Polygon API base URL is not configured.")
        api_key = _required(env, API_KEY_VAR, "Polygon API key is not configured.")

        raw_timeout = env.get(TIMEOUT_VAR, "").strip()
        timeout_seconds = cls.timeout_seconds
        if raw_timeout:
            try:
                timeout_seconds = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{TIMEOUT_VAR} must be a number, got {raw_timeout!r}."
                ) from exc
            if timeout_seconds <= 0:
                raise ConfigurationError(f"{TIMEOUT_VAR} must be positive.")

        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            timeout_seconds=timeout_seconds,
        )


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """Configure root logging from LOG_LEVEL (default INFO)."""
    env = os.environ if environ is None else environ
    level = env.get(LOG_LEVEL_VAR, "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"{LOG_LEVEL_VAR} is not a logging level: {level!r}.")
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    # httpx logs full request URLs at INFO, and the Polygon URL carries apiKey
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _required(env: Mapping[str, str], name: str, message: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise ConfigurationError(message)
    return value
