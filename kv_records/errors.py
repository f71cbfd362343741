"""Error types raised by the record store."""

from __future__ import annotations


class KVRecordsError(Exception):
    """Base exception for kv-records errors."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StoreConnectionError(KVRecordsError, ConnectionError):
    """The store is unreachable or the connection broke mid-command."""


class DecodeError(KVRecordsError, ValueError):
    """Stored text cannot be parsed as the requested type or record."""


class EncodeError(KVRecordsError, ValueError):
    """A value or record cannot be serialized for storage."""
