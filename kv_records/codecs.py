"""Explicit field-by-field record codecs.

Each record type gets a pair of plain functions, one flattening the record
into a ``dict[str, str]`` and one rebuilding it, wrapped in a ``RecordCodec``
that owns the JSON text encoding. There is no reflection: a record type only
round-trips the fields its functions name.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from kv_records.errors import DecodeError, EncodeError


_R = TypeVar("_R")


def require_text(fields: Mapping[str, Any], name: str) -> str:
    """Return the string field ``name``, or raise ``DecodeError``."""
    try:
        value = fields[name]
    except KeyError:
        msg = f"stored record is missing field {name!r}"
        raise DecodeError(msg) from None
    if not isinstance(value, str):
        msg = f"stored record field {name!r} must be a string, got {type(value).__name__}"
        raise DecodeError(msg)
    return value


class RecordCodec(Generic[_R]):
    """Encode records of one type to JSON text and back."""

    def __init__(
        self,
        to_fields: Callable[[_R], dict[str, str]],
        from_fields: Callable[[Mapping[str, Any]], _R],
        zero: Callable[[], _R],
        *,
        json_encoder: Callable[[Any], str] = json.dumps,
        json_decoder: Callable[[str], Any] = json.loads,
    ) -> None:
        super().__init__()
        self._to_fields = to_fields
        self._from_fields = from_fields
        self._zero = zero
        self._json_encoder = json_encoder
        self._json_decoder = json_decoder

    def zero(self) -> _R:
        """Return the record used for absent keys."""
        return self._zero()

    def encode(self, record: _R) -> str:
        """Serialize ``record``; raises ``EncodeError`` on unencodable content."""
        try:
            fields = self._to_fields(record)
        except (AttributeError, TypeError, ValueError) as error:
            msg = f"cannot flatten {type(record).__name__} record: {error}"
            raise EncodeError(msg) from error

        for name, value in fields.items():
            if not isinstance(name, str) or not isinstance(value, str):
                msg = f"record field {name!r} must map a string name to a string value"
                raise EncodeError(msg)

        try:
            return self._json_encoder(fields)
        except (TypeError, ValueError) as error:
            msg = f"cannot encode record: {error}"
            raise EncodeError(msg) from error

    def decode(self, raw: str) -> _R:
        """Rebuild a record; raises ``DecodeError`` on malformed stored text."""
        try:
            payload = self._json_decoder(raw)
        except ValueError as error:
            msg = f"stored record is not valid JSON: {error}"
            raise DecodeError(msg) from error

        if not isinstance(payload, dict):
            msg = f"stored record must be a JSON object, got {type(payload).__name__}"
            raise DecodeError(msg)

        try:
            return self._from_fields(payload)
        except DecodeError:
            raise
        except (KeyError, TypeError, ValueError) as error:
            msg = f"stored record fields are unparseable: {error}"
            raise DecodeError(msg) from error


@dataclass(frozen=True, slots=True)
class User:
    """A user profile; every field is plain text."""

    username: str = ""
    mobile_id: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""


def user_to_fields(user: User) -> dict[str, str]:
    return {
        "Username": user.username,
        "MobileID": user.mobile_id,
        "Email": user.email,
        "FirstName": user.first_name,
        "LastName": user.last_name,
    }


def user_from_fields(fields: Mapping[str, Any]) -> User:
    return User(
        username=require_text(fields, "Username"),
        mobile_id=require_text(fields, "MobileID"),
        email=require_text(fields, "Email"),
        first_name=require_text(fields, "FirstName"),
        last_name=require_text(fields, "LastName"),
    )


USER_CODEC: RecordCodec[User] = RecordCodec(user_to_fields, user_from_fields, User)
