import asyncio
import json
from typing import override

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kv_records import store
from kv_records.backends.in_memory import InMemoryAsyncBackend
from kv_records.codecs import USER_CODEC, User
from kv_records.errors import DecodeError, EncodeError, StoreConnectionError


CODERMINER = User(
    username="coderminer.com",
    mobile_id="12345678941",
    email="kevin@163.com",
    first_name="coderminer.com",
    last_name="coderminer.com",
)

_KEYS = st.text(min_size=1, max_size=20)
_SCALARS = st.text(max_size=30) | st.integers(min_value=-(2**63), max_value=2**63 - 1)


class _RecordingBackend(InMemoryAsyncBackend):
    def __init__(self) -> None:
        super().__init__()
        self.commands: list[tuple[str, str]] = []

    @override
    async def get(self, key: str) -> str | None:
        self.commands.append(("GET", key))
        return await super().get(key)

    @override
    async def set(self, key: str, value: str) -> None:
        self.commands.append(("SET", key))
        await super().set(key, value)


class _BrokenBackend(InMemoryAsyncBackend):
    @override
    async def get(self, key: str) -> str | None:
        msg = "connection reset by peer"
        raise StoreConnectionError(msg, key=key)

    @override
    async def set(self, key: str, value: str) -> None:
        msg = "connection reset by peer"
        raise StoreConnectionError(msg, key=key)


@pytest.mark.asyncio
async def test_release_year_roundtrips_as_integer() -> None:
    backend = InMemoryAsyncBackend()
    await store.put_scalar(backend, "Release Year", 1984)

    lookup = await store.get_scalar(backend, "Release Year", int)
    assert lookup.found is True
    assert lookup.value == 1984
    assert await backend.get("Release Year") == "1984"


@pytest.mark.asyncio
async def test_nonexistent_key_is_absent_not_an_error() -> None:
    backend = InMemoryAsyncBackend()

    text = await store.get_scalar(backend, "Nonexistent Key", str)
    assert (text.value, text.found) == ("", False)

    number = await store.get_scalar(backend, "Nonexistent Key", int)
    assert (number.value, number.found) == (0, False)


@pytest.mark.asyncio
async def test_user_record_roundtrips_under_namespace() -> None:
    backend = InMemoryAsyncBackend()
    await store.put_record(backend, "user:", CODERMINER.username, CODERMINER, USER_CODEC)

    assert await backend.list_keys("user:") == ["user:coderminer.com"]
    lookup = await store.get_record(backend, "user:", "coderminer.com", USER_CODEC)
    assert lookup.found is True
    assert lookup.value == CODERMINER


@pytest.mark.asyncio
async def test_absent_record_returns_zero_record() -> None:
    backend = InMemoryAsyncBackend()
    lookup = await store.get_record(backend, "user:", "nobody", USER_CODEC)
    assert lookup.found is False
    assert lookup.value == User()


@pytest.mark.asyncio
async def test_scalar_stored_as_text_read_as_integer_fails() -> None:
    backend = InMemoryAsyncBackend()
    await store.put_scalar(backend, "Favorite Movie", "Repo Man")

    with pytest.raises(DecodeError, match="not an integer") as info:
        _ = await store.get_scalar(backend, "Favorite Movie", int)
    assert info.value.key == "Favorite Movie"


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["", " 12", "12 ", "1_000", "1.5", "0x1f", "١٢"])
async def test_integer_decoding_is_strict(raw: str) -> None:
    backend = InMemoryAsyncBackend()
    await backend.set("n", raw)
    with pytest.raises(DecodeError):
        _ = await store.get_scalar(backend, "n", int)


@pytest.mark.asyncio
@pytest.mark.parametrize(("raw", "expected"), [("+7", 7), ("-42", -42), ("007", 7)])
async def test_integer_decoding_accepts_signed_decimal(raw: str, expected: int) -> None:
    backend = InMemoryAsyncBackend()
    await backend.set("n", raw)
    assert (await store.get_scalar(backend, "n", int)).value == expected


@pytest.mark.asyncio
async def test_integer_is_readable_as_text() -> None:
    backend = InMemoryAsyncBackend()
    await store.put_scalar(backend, "Release Year", 1984)
    assert (await store.get_scalar(backend, "Release Year", str)).value == "1984"


@pytest.mark.asyncio
async def test_malformed_record_fails_instead_of_partial_record() -> None:
    backend = InMemoryAsyncBackend()
    await backend.set("user:alice", json.dumps({"Username": "alice", "Email": "a@example.com"}))

    with pytest.raises(DecodeError, match="missing field") as info:
        _ = await store.get_record(backend, "user:", "alice", USER_CODEC)
    assert info.value.key == "user:alice"


@pytest.mark.asyncio
async def test_corrupted_record_text_fails() -> None:
    backend = InMemoryAsyncBackend()
    await backend.set("user:alice", '{"Username": "ali')

    with pytest.raises(DecodeError, match="not valid JSON"):
        _ = await store.get_record(backend, "user:", "alice", USER_CODEC)


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [True, 1.5, None, b"bytes", ["list"]])
async def test_unsupported_scalar_fails_before_store_call(value: object) -> None:
    backend = _RecordingBackend()
    with pytest.raises(EncodeError, match="must be str or int"):
        await store.put_scalar(backend, "k", value)  # type: ignore[arg-type]
    assert backend.commands == []


@pytest.mark.asyncio
async def test_unencodable_record_fails_before_store_call() -> None:
    backend = _RecordingBackend()
    bad = User(username="alice", email=None)  # type: ignore[arg-type]

    with pytest.raises(EncodeError) as info:
        await store.put_record(backend, "user:", "alice", bad, USER_CODEC)
    assert info.value.key == "user:alice"
    assert backend.commands == []


@pytest.mark.asyncio
async def test_put_issues_one_set_with_composed_key() -> None:
    backend = _RecordingBackend()
    await store.put_record(backend, "user:", "alice", User(username="alice"), USER_CODEC)
    await store.put_scalar(backend, "Favorite Movie", "Repo Man")
    assert backend.commands == [("SET", "user:alice"), ("SET", "Favorite Movie")]


@pytest.mark.asyncio
async def test_store_errors_propagate_before_decoding() -> None:
    backend = _BrokenBackend()

    with pytest.raises(StoreConnectionError):
        _ = await store.get_scalar(backend, "Release Year", int)
    with pytest.raises(StoreConnectionError):
        _ = await store.get_record(backend, "user:", "alice", USER_CODEC)
    with pytest.raises(StoreConnectionError):
        await store.put_scalar(backend, "Release Year", 1984)
    with pytest.raises(StoreConnectionError):
        await store.put_record(backend, "user:", "alice", User(username="alice"), USER_CODEC)


@pytest.mark.asyncio
async def test_argument_validation() -> None:
    backend = InMemoryAsyncBackend()
    with pytest.raises(ValueError, match="key must not be empty"):
        await store.put_scalar(backend, "", "x")
    with pytest.raises(ValueError, match="key must not be empty"):
        _ = await store.get_scalar(backend, "", str)
    with pytest.raises(TypeError, match="expected_type must be str or int"):
        _ = await store.get_scalar(backend, "k", float)  # type: ignore[call-overload]
    with pytest.raises(ValueError, match="identity must not be empty"):
        await store.put_record(backend, "user:", "", User(), USER_CODEC)
    with pytest.raises(ValueError, match="identity must not be empty"):
        _ = await store.get_record(backend, "user:", "", USER_CODEC)


@pytest.mark.asyncio
async def test_ping() -> None:
    assert await store.ping(InMemoryAsyncBackend()) == "PONG"


@pytest.mark.asyncio
async def test_concurrent_operations_on_one_backend() -> None:
    backend = InMemoryAsyncBackend()
    users = [User(username=f"user{i}", email=f"user{i}@example.com") for i in range(20)]

    await asyncio.gather(*(store.put_record(backend, "user:", u.username, u, USER_CODEC) for u in users))
    lookups = await asyncio.gather(*(store.get_record(backend, "user:", u.username, USER_CODEC) for u in users))

    assert [lookup.value for lookup in lookups] == users


@given(key=_KEYS, value=_SCALARS)
def test_scalar_put_then_get_returns_same_value(key: str, value: str | int) -> None:
    async def scenario() -> None:
        backend = InMemoryAsyncBackend()
        await store.put_scalar(backend, key, value)
        lookup = await store.get_scalar(backend, key, type(value))
        assert lookup.found is True
        assert lookup.value == value

    asyncio.run(scenario())


@given(key=_KEYS)
def test_unwritten_keys_are_absent(key: str) -> None:
    async def scenario() -> None:
        backend = InMemoryAsyncBackend()
        assert not await store.get_scalar(backend, key, str)
        assert not await store.get_record(backend, "user:", key, USER_CODEC)

    asyncio.run(scenario())


@given(
    identity=_KEYS,
    user=st.builds(
        User,
        username=st.text(max_size=20),
        mobile_id=st.text(max_size=20),
        email=st.text(max_size=20),
        first_name=st.text(max_size=20),
        last_name=st.text(max_size=20),
    ),
)
def test_record_put_then_get_returns_equal_record(identity: str, user: User) -> None:
    async def scenario() -> None:
        backend = InMemoryAsyncBackend()
        await store.put_record(backend, "user:", identity, user, USER_CODEC)
        lookup = await store.get_record(backend, "user:", identity, USER_CODEC)
        assert lookup.found is True
        assert lookup.value == user

    asyncio.run(scenario())
