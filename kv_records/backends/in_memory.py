"""In-memory backend implementation."""

from __future__ import annotations

import asyncio
from typing import override

from .protocol import Backend


class InMemoryAsyncBackend(Backend):
    """Dict-backed backend for local development and tests."""

    def __init__(self) -> None:
        super().__init__()
        self._store: dict[str, str] = {}
        self._lock = asyncio.Lock()
        self.closed = False

    @override
    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._store.get(key)

    @override
    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._store[key] = value

    @override
    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._store.pop(key, None) is not None

    @override
    async def list_keys(self, prefix: str) -> list[str]:
        """List all keys beginning with prefix in sorted order."""
        async with self._lock:
            matching = [key for key in self._store if key.startswith(prefix)]
        return sorted(matching)

    @override
    async def ping(self) -> str:
        return "PONG"

    @override
    async def close(self) -> None:
        self.closed = True
