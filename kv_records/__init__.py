"""kv-records - typed record access over a remote key-value store"""

from ._version import version as __version__
from .backends import Backend, InMemoryAsyncBackend, RedisBackend
from .client import RecordStore
from .codecs import USER_CODEC, RecordCodec, User
from .errors import DecodeError, EncodeError, KVRecordsError, StoreConnectionError
from .key_mapping import KeyMapper
from .lookup import Lookup
from .mappings import RecordMapping
from .settings import Settings
from .store import get_record, get_scalar, ping, put_record, put_scalar


__all__ = [
    "USER_CODEC",
    "Backend",
    "DecodeError",
    "EncodeError",
    "InMemoryAsyncBackend",
    "KVRecordsError",
    "KeyMapper",
    "Lookup",
    "RecordCodec",
    "RecordMapping",
    "RecordStore",
    "RedisBackend",
    "Settings",
    "StoreConnectionError",
    "User",
    "__version__",
    "get_record",
    "get_scalar",
    "ping",
    "put_record",
    "put_scalar",
]
