"""Tagged result for store reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


_T = TypeVar("_T")


@dataclass(frozen=True, slots=True)
class Lookup(Generic[_T]):
    """Outcome of a read: ``found`` tells a hit from an absent key.

    On a miss ``value`` holds the zero value of the requested type so callers
    never have to special-case ``None``.
    """

    found: bool
    value: _T

    @classmethod
    def hit(cls, value: _T) -> Lookup[_T]:
        return cls(found=True, value=value)

    @classmethod
    def miss(cls, zero: _T) -> Lookup[_T]:
        return cls(found=False, value=zero)

    def __bool__(self) -> bool:
        return self.found

    def unwrap(self) -> _T:
        """Return the value, raising ``LookupError`` when the key was absent."""
        if not self.found:
            msg = "key is absent"
            raise LookupError(msg)
        return self.value
