"""Environment-driven configuration.

Every value can be overridden with a ``KV_RECORDS_*`` environment variable;
``Settings.from_env`` reads them at call time so tests can patch the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Mapping


ENV_PREFIX = "KV_RECORDS_"

DEFAULT_URL = "redis://localhost:6379/0"
DEFAULT_MAX_CONNECTIONS = 12000
DEFAULT_NAMESPACE = "user:"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Connection and logging settings."""

    url: str = DEFAULT_URL
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    namespace: str = DEFAULT_NAMESPACE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        raw_max = env.get(f"{ENV_PREFIX}MAX_CONNECTIONS", str(DEFAULT_MAX_CONNECTIONS))
        try:
            max_connections = int(raw_max)
        except ValueError as error:
            msg = f"{ENV_PREFIX}MAX_CONNECTIONS must be an integer, got {raw_max!r}"
            raise ValueError(msg) from error
        if max_connections < 1:
            msg = f"{ENV_PREFIX}MAX_CONNECTIONS must be positive, got {max_connections}"
            raise ValueError(msg)

        return cls(
            url=env.get(f"{ENV_PREFIX}URL", DEFAULT_URL),
            max_connections=max_connections,
            namespace=env.get(f"{ENV_PREFIX}NAMESPACE", DEFAULT_NAMESPACE),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
