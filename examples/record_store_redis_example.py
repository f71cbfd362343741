"""Store and read back scalars and a user record in Redis."""

from kv_records import USER_CODEC, RecordStore, RedisBackend, Settings, User


def main() -> None:
    """Run a basic put/get flow against the Redis named by ``KV_RECORDS_URL``."""
    backend = RedisBackend.from_settings(Settings.from_env())
    with RecordStore(backend) as store:
        print("PING Response =", store.ping())

        store.put_scalar("Release Year", 1984)
        print("Release Year =", store.get_scalar("Release Year", int).value)

        missing = store.get_scalar("Nonexistent Key", str)
        print(f"{missing=}")

        user = User(username="alice", email="alice@example.com")
        store.put_record("user:", user.username, user, USER_CODEC)
        print("user:", store.get_record("user:", "alice", USER_CODEC))

        users = store.mapping("user:", USER_CODEC)
        users["bob"] = User(username="bob")
        print(f"{users=}")


if __name__ == "__main__":
    main()
