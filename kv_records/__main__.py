"""Interface for ``python -m kv_records``.

``demo`` walks through the basic flow against a live store: PING, a couple
of scalar SET/GET round trips, a read of a missing key, then storing and
reading back a JSON-encoded user record.
"""

from __future__ import annotations

import sys
from argparse import ArgumentParser
from typing import TYPE_CHECKING

import structlog
from redis.exceptions import RedisError

from ._version import version
from .backends import RedisBackend
from .client import RecordStore
from .codecs import USER_CODEC, User
from .errors import KVRecordsError
from .log import configure_logging
from .settings import Settings


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


__all__ = ["get_parser", "main", "run_demo"]

_LOGGER = structlog.get_logger("kv_records")

DEMO_USER = User(
    username="coderminer.com",
    mobile_id="12345678941",
    email="kevin@163.com",
    first_name="coderminer.com",
    last_name="coderminer.com",
)


def get_parser(settings: Settings) -> ArgumentParser:
    parser = ArgumentParser(prog="kv_records", description=__doc__)
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    _ = parser.add_argument("--url", default=settings.url, help="store URL (default: %(default)s)")
    _ = parser.add_argument("--log-level", default=settings.log_level, help="log level (default: %(default)s)")
    _ = parser.add_argument(
        "--namespace", default=settings.namespace, help="record namespace for the demo (default: %(default)s)"
    )
    _ = parser.add_argument("command", choices=["ping", "demo"], help="what to run")
    return parser


def _ping(store: RecordStore) -> None:
    print(f"PING Response = {store.ping()}")


def _set(store: RecordStore) -> None:
    store.put_scalar("Favorite Movie", "Repo Man")
    store.put_scalar("Release Year", 1984)


def _get(store: RecordStore) -> None:
    key = "Favorite Movie"
    text = store.get_scalar(key, str)
    print(f"{key} = {text.value}")

    key = "Release Year"
    year = store.get_scalar(key, int)
    print(f"{key} = {year.value}")

    key = "Nonexistent Key"
    missing = store.get_scalar(key, str)
    if missing.found:
        print(f"{key} = {missing.value}")
    else:
        print(f"{key} does not exist")


def run_demo(store: RecordStore, namespace: str) -> int:
    """Run each demo step, printing failures and carrying on. Returns the exit status."""

    def set_user() -> None:
        store.put_record(namespace, DEMO_USER.username, DEMO_USER, USER_CODEC)

    def get_user() -> None:
        lookup = store.get_record(namespace, DEMO_USER.username, USER_CODEC)
        if lookup.found:
            print(lookup.value)
        else:
            print("User does not exist")

    steps: list[Callable[[], None]] = [
        lambda: _ping(store),
        lambda: _set(store),
        lambda: _get(store),
        set_user,
        get_user,
    ]
    status = 0
    for step in steps:
        try:
            step()
        except (KVRecordsError, RedisError) as error:
            _LOGGER.warning("demo.step_failed", key=getattr(error, "key", None), error=str(error))
            print(error)
            status = 1
    return status


def main(args: Sequence[str] | None = None) -> int:
    """Argument parser and dispatch for the CLI."""
    settings = Settings.from_env()
    parser = get_parser(settings)
    cli_args = parser.parse_args(args)
    try:
        configure_logging(cli_args.log_level)
    except ValueError as error:
        parser.error(str(error))

    backend = RedisBackend(cli_args.url, max_connections=settings.max_connections)
    with RecordStore(backend) as store:
        if cli_args.command == "ping":
            try:
                _ping(store)
            except (KVRecordsError, RedisError) as error:
                print(error)
                return 1
            return 0
        return run_demo(store, cli_args.namespace)


if __name__ == "__main__":
    sys.exit(main())
