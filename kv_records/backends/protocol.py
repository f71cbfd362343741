"""Backend interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Backend(ABC):
    """Async key-value store connection interface.

    A backend owns whatever connection resources it needs (a pool for Redis)
    and releases them in ``close``.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return raw value for key, or None when key does not exist."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store raw value for key."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key, returning True when it existed."""

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """List all keys beginning with prefix."""

    @abstractmethod
    async def ping(self) -> str:
        """Round-trip a PING and return the reply text."""

    @abstractmethod
    async def close(self) -> None:
        """Close any backend resources."""
