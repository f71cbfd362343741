"""MutableMapping view over the records stored in one namespace."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, Generic, TypeVar, override

from kv_records.key_mapping import KeyMapper


if TYPE_CHECKING:
    from kv_records.client import RecordStore
    from kv_records.codecs import RecordCodec


_R = TypeVar("_R")


class RecordMapping(MutableMapping[str, _R], Generic[_R]):
    """Dict-like sync API keyed by record identity.

    ``mapping["alice"]`` reads ``namespace + "alice"`` through the codec;
    absent identities raise ``KeyError`` like a dict would.
    """

    def __init__(self, store: RecordStore, namespace: str, codec: RecordCodec[_R]) -> None:
        super().__init__()
        if not namespace:
            msg = "namespace must not be empty"
            raise ValueError(msg)
        self._store = store
        self._mapper = KeyMapper(namespace)
        self._codec = codec

    @property
    def namespace(self) -> str:
        return self._mapper.namespace

    @override
    def __getitem__(self, identity: str) -> _R:
        """Return the decoded record stored for identity."""
        lookup = self._store.get_record(self.namespace, identity, self._codec)
        if not lookup.found:
            raise KeyError(identity)
        return lookup.value

    @override
    def __setitem__(self, identity: str, record: _R) -> None:
        self._store.put_record(self.namespace, identity, record, self._codec)

    @override
    def __delitem__(self, identity: str) -> None:
        if not self._store.delete(self._mapper.full_key(identity)):
            raise KeyError(identity)

    @override
    def __iter__(self) -> Iterator[str]:
        """Iterate sorted identities under the namespace."""
        keys = self._store.list_keys(self.namespace)
        return iter(sorted(self._mapper.identity(key) for key in keys if self._mapper.matches(key)))

    @override
    def __len__(self) -> int:
        return len(list(iter(self)))

    def copy(self) -> dict[str, _R]:
        """Return a detached snapshot of every record in the namespace."""
        return {identity: self[identity] for identity in self}

    @override
    def __repr__(self) -> str:
        return f"RecordMapping(namespace={self.namespace!r}, identities={list(self)!r})"
