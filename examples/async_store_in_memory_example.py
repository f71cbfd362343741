"""Use the async operations directly against the in-memory backend."""

import asyncio

from kv_records import USER_CODEC, InMemoryAsyncBackend, User, get_record, get_scalar, put_record, put_scalar


async def main() -> None:
    """Run the async put/get flow without a live store."""
    backend = InMemoryAsyncBackend()
    try:
        await put_scalar(backend, "Favorite Movie", "Repo Man")
        print(await get_scalar(backend, "Favorite Movie", str))

        await put_record(backend, "user:", "alice", User(username="alice"), USER_CODEC)
        print(await get_record(backend, "user:", "alice", USER_CODEC))
        print(await get_record(backend, "user:", "nobody", USER_CODEC))
    finally:
        await backend.close()


if __name__ == "__main__":
    asyncio.run(main())
