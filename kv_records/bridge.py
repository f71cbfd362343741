"""Run backend coroutines from synchronous code on a dedicated loop thread."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any, TypeVar


if TYPE_CHECKING:
    from collections.abc import Coroutine
    from concurrent.futures import Future


_T = TypeVar("_T")


class AsyncLoopBridge:
    """Bridge sync calls to async backend operations on a dedicated loop.

    The loop lives on a daemon thread, so the bridge also works when the
    caller is itself running inside an event loop. Any number of threads may
    call ``run`` concurrently.
    """

    def __init__(self, name: str = "kv-records-loop") -> None:
        super().__init__()
        self._loop_ready = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()
        _ = self._loop_ready.wait()

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._loop_ready.set()
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                _ = task.cancel()
            if pending:
                _ = loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.close()

    @property
    def is_running(self) -> bool:
        return self._loop is not None and self._thread.is_alive()

    def run(self, coroutine: Coroutine[Any, Any, _T]) -> _T:
        """Block until ``coroutine`` finishes on the bridge loop; re-raise its error."""
        if self._loop is None:
            coroutine.close()
            msg = "record store event loop is not running"
            raise RuntimeError(msg)
        future: Future[_T] = asyncio.run_coroutine_threadsafe(coroutine, self._loop)
        return future.result()

    def close(self) -> None:
        """Stop the loop; calls still in flight are cancelled and raise ``CancelledError``."""
        if self._loop is None:
            return
        loop, self._loop = self._loop, None
        _ = loop.call_soon_threadsafe(loop.stop)
        self._thread.join(timeout=5)
