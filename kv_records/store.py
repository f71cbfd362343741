"""Typed put/get operations over a store backend.

Every operation takes the backend as its first argument and issues exactly
one store command. Absent keys come back as ``Lookup(found=False, ...)``;
everything else either succeeds or raises.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, TypeVar, overload

import structlog

from kv_records.errors import DecodeError, EncodeError
from kv_records.key_mapping import KeyMapper
from kv_records.lookup import Lookup


if TYPE_CHECKING:
    from kv_records.backends import Backend
    from kv_records.codecs import RecordCodec


__all__ = ["get_record", "get_scalar", "ping", "put_record", "put_scalar"]

_LOGGER = structlog.get_logger(__name__)

_R = TypeVar("_R")

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _require_key(key: str) -> None:
    if not key:
        msg = "key must not be empty"
        raise ValueError(msg)


def _encode_scalar(key: str, value: str | int) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        msg = f"scalar value must be str or int, got {type(value).__name__}"
        raise EncodeError(msg, key=key)
    return str(value)


def _decode_int(key: str, raw: str) -> int:
    if _INTEGER.fullmatch(raw) is None:
        msg = f"stored value for {key!r} is not an integer: {raw!r}"
        raise DecodeError(msg, key=key)
    return int(raw)


async def put_scalar(backend: Backend, key: str, value: str | int) -> None:
    """Store a string or integer under ``key`` verbatim."""
    _require_key(key)
    encoded = _encode_scalar(key, value)
    await backend.set(key, encoded)


@overload
async def get_scalar(backend: Backend, key: str, expected_type: type[int]) -> Lookup[int]: ...


@overload
async def get_scalar(backend: Backend, key: str, expected_type: type[str]) -> Lookup[str]: ...


async def get_scalar(backend: Backend, key: str, expected_type: type[Any]) -> Lookup[Any]:
    """Read ``key`` as ``str`` or ``int``.

    A missing key yields the zero value (``""`` or ``0``) with ``found=False``.
    Text that does not parse as the requested type raises ``DecodeError``.
    """
    _require_key(key)
    if expected_type is not str and expected_type is not int:
        msg = f"expected_type must be str or int, got {expected_type!r}"
        raise TypeError(msg)

    raw = await backend.get(key)
    if raw is None:
        _LOGGER.debug("kv.miss", key=key)
        return Lookup.miss(expected_type())

    if expected_type is int:
        return Lookup.hit(_decode_int(key, raw))
    return Lookup.hit(raw)


async def put_record(backend: Backend, namespace: str, identity: str, record: _R, codec: RecordCodec[_R]) -> None:
    """Store ``record`` at ``namespace + identity``.

    The record is encoded before the store is touched, so an ``EncodeError``
    never leaves a partial write behind.
    """
    key = KeyMapper(namespace).full_key(identity)
    try:
        encoded = codec.encode(record)
    except EncodeError as error:
        error.key = key
        raise
    await backend.set(key, encoded)


async def get_record(backend: Backend, namespace: str, identity: str, codec: RecordCodec[_R]) -> Lookup[_R]:
    """Read the record at ``namespace + identity``.

    An absent key skips decoding and yields ``codec.zero()``. Store errors
    propagate before any decode is attempted.
    """
    key = KeyMapper(namespace).full_key(identity)
    raw = await backend.get(key)
    if raw is None:
        _LOGGER.debug("kv.miss", key=key)
        return Lookup.miss(codec.zero())

    try:
        record = codec.decode(raw)
    except DecodeError as error:
        error.key = key
        raise
    return Lookup.hit(record)


async def ping(backend: Backend) -> str:
    return await backend.ping()
