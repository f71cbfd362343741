"""Redis backend over a ``redis.asyncio`` connection pool."""

from __future__ import annotations

import re
from contextlib import contextmanager
from inspect import isawaitable
from typing import TYPE_CHECKING, Any, override

import redis.asyncio as redis_async
import structlog
from redis import exceptions as redis_exceptions

from kv_records.errors import DecodeError, StoreConnectionError

from .protocol import Backend


if TYPE_CHECKING:
    from collections.abc import Iterator

    from kv_records.settings import Settings


_LOGGER = structlog.get_logger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _normalize_string(value: str | bytes | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode()
    return value


def _escape_glob(prefix: str) -> str:
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


@contextmanager
def _store_errors(url: str, key: str | None = None) -> Iterator[None]:
    try:
        yield
    except (redis_exceptions.ConnectionError, redis_exceptions.TimeoutError) as error:
        msg = f"redis store at {url} is unavailable: {error}"
        raise StoreConnectionError(msg, key=key) from error


class RedisBackend(Backend):
    """Redis backend using ``redis.asyncio`` client APIs.

    The backend builds its own ``ConnectionPool`` unless one (or a whole
    client) is injected. A pool built here is disconnected by ``close``; an
    injected pool is left to its owner.
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        max_connections: int | None = None,
        pool: Any | None = None,
        client: Any | None = None,
    ) -> None:
        """Create a backend from URL, an injected pool, or an injected client.

        Parameters
        ----------
        url
            Redis connection URL used when neither ``pool`` nor ``client`` is provided.
        max_connections
            Upper bound on pooled connections for a pool built from ``url``.
        pool
            Optional caller-owned ``redis.asyncio.ConnectionPool``.
        client
            Optional injected client with ``get/set/delete/scan_iter/ping/aclose`` API.
        """
        super().__init__()
        self._url = url
        self._owned_pool: Any | None = None

        if client is not None:
            self._client = client
            return

        if pool is None:
            pool = redis_async.ConnectionPool.from_url(
                url,
                max_connections=max_connections,
                decode_responses=True,
            )
            self._owned_pool = pool
        self._client = redis_async.Redis(connection_pool=pool)

    @classmethod
    def from_settings(cls, settings: Settings) -> RedisBackend:
        """Build a backend and its pool from ``settings``."""
        return cls(settings.url, max_connections=settings.max_connections)

    @property
    def client(self) -> Any:
        """The underlying client, for commands this layer does not wrap."""
        return self._client

    @override
    async def get(self, key: str) -> str | None:
        """Return raw value for key, or None when key does not exist."""
        try:
            with _store_errors(self._url, key):
                value = await self._client.get(key)
            text = _normalize_string(value)
        except UnicodeDecodeError as error:
            msg = f"stored value for {key!r} is not valid UTF-8 text"
            raise DecodeError(msg, key=key) from error
        _LOGGER.debug("kv.get", key=key, found=text is not None)
        return text

    @override
    async def set(self, key: str, value: str) -> None:
        """Store raw value for key."""
        with _store_errors(self._url, key):
            await self._client.set(key, value)
        _LOGGER.debug("kv.set", key=key)

    @override
    async def delete(self, key: str) -> bool:
        """Delete key, returning True when it existed."""
        with _store_errors(self._url, key):
            removed = await self._client.delete(key)
        _LOGGER.debug("kv.delete", key=key, removed=removed)
        return bool(removed)

    @override
    async def list_keys(self, prefix: str) -> list[str]:
        """List all keys beginning with prefix in sorted order."""
        keys: list[str] = []
        with _store_errors(self._url):
            async for key in self._client.scan_iter(match=f"{_escape_glob(prefix)}*"):
                normalized = _normalize_string(key)
                if normalized is not None:
                    keys.append(normalized)
        return sorted(keys)

    @override
    async def ping(self) -> str:
        """Send PING; redis-py reports a PONG reply as ``True``."""
        with _store_errors(self._url):
            reply = await self._client.ping()
        if reply is True:
            return "PONG"
        return _normalize_string(reply) or ""

    @override
    async def close(self) -> None:
        """Release the client and, when built here, the connection pool."""
        close_method = getattr(self._client, "aclose", None)
        if close_method is None:
            close_method = getattr(self._client, "close", None)
        if close_method is not None:
            maybe_awaitable = close_method()
            if isawaitable(maybe_awaitable):
                await maybe_awaitable

        if self._owned_pool is not None:
            await self._owned_pool.disconnect()
            self._owned_pool = None
