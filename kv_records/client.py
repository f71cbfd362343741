"""Blocking record store facade."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self, TypeVar, overload

from kv_records import store
from kv_records.bridge import AsyncLoopBridge
from kv_records.mappings import RecordMapping


if TYPE_CHECKING:
    from types import TracebackType

    from kv_records.backends import Backend
    from kv_records.codecs import RecordCodec
    from kv_records.lookup import Lookup


_R = TypeVar("_R")


class RecordStore:
    """Synchronous API over an async backend.

    The store owns the backend passed in: ``close`` (or leaving the ``with``
    block) closes the backend, releasing its connection pool, and stops the
    loop thread.
    """

    def __init__(self, backend: Backend) -> None:
        super().__init__()
        self._backend = backend
        self._bridge = AsyncLoopBridge()

    @property
    def backend(self) -> Backend:
        return self._backend

    def put_scalar(self, key: str, value: str | int) -> None:
        self._bridge.run(store.put_scalar(self._backend, key, value))

    @overload
    def get_scalar(self, key: str, expected_type: type[int]) -> Lookup[int]: ...

    @overload
    def get_scalar(self, key: str, expected_type: type[str]) -> Lookup[str]: ...

    def get_scalar(self, key: str, expected_type: type[Any]) -> Lookup[Any]:
        return self._bridge.run(store.get_scalar(self._backend, key, expected_type))

    def put_record(self, namespace: str, identity: str, record: _R, codec: RecordCodec[_R]) -> None:
        self._bridge.run(store.put_record(self._backend, namespace, identity, record, codec))

    def get_record(self, namespace: str, identity: str, codec: RecordCodec[_R]) -> Lookup[_R]:
        return self._bridge.run(store.get_record(self._backend, namespace, identity, codec))

    def delete(self, key: str) -> bool:
        """Delete ``key``; returns True when it existed."""
        return self._bridge.run(self._backend.delete(key))

    def list_keys(self, prefix: str) -> list[str]:
        return self._bridge.run(self._backend.list_keys(prefix))

    def ping(self) -> str:
        return self._bridge.run(store.ping(self._backend))

    def mapping(self, namespace: str, codec: RecordCodec[_R]) -> RecordMapping[_R]:
        """Return a dict-like view over every record in ``namespace``."""
        return RecordMapping(self, namespace, codec)

    def close(self) -> None:
        """Close backend and bridge resources."""
        if not self._bridge.is_running:
            return
        try:
            self._bridge.run(self._backend.close())
        finally:
            self._bridge.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
