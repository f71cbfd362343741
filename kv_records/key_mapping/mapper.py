"""Key mapping between record identities and namespaced store keys."""

from __future__ import annotations


class KeyMapper:
    """Map between store keys and record identities within one namespace.

    Keys are the plain concatenation ``namespace + identity``; the namespace
    carries its own separator (``"user:"``) and may be empty.
    """

    def __init__(self, namespace: str = "") -> None:
        super().__init__()
        self.namespace = namespace

    def full_key(self, identity: str) -> str:
        """Build a store key for one record identity."""
        if not identity:
            msg = "identity must not be empty"
            raise ValueError(msg)
        return self.namespace + identity

    def matches(self, kv_key: str) -> bool:
        """Return True when a store key belongs to this namespace."""
        return kv_key.startswith(self.namespace) and len(kv_key) > len(self.namespace)

    def identity(self, kv_key: str) -> str:
        """Convert a store key back into the record identity."""
        if not kv_key.startswith(self.namespace):
            msg = f"key does not match namespace prefix: {kv_key}"
            raise ValueError(msg)

        identity = kv_key.removeprefix(self.namespace)
        if not identity:
            msg = "identity must not be empty"
            raise ValueError(msg)
        return identity

    def __repr__(self) -> str:
        return f"KeyMapper(namespace={self.namespace!r})"
