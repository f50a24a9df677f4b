"""At-most-once-in-flight memoization for async loads.

Module loads and file reads are shared across concurrent renders.  The
first caller for a key performs the load; concurrent callers for the same
key wait for it instead of starting a duplicate.  Failed loads are not
cached: one of the waiters becomes the next loader.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import anyio


class OnceCache:
    """Append-only ``key -> value`` table with per-key load coalescing.

    All bookkeeping happens between awaits, so no lock is needed under a
    single event loop.
    """

    __slots__ = ("_pending", "_values")

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._pending: dict[str, anyio.Event] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    async def get(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for *key*, loading it with *factory* once."""
        while True:
            if key in self._values:
                return self._values[key]
            in_flight = self._pending.get(key)
            if in_flight is None:
                break
            await in_flight.wait()

        done = anyio.Event()
        self._pending[key] = done
        try:
            value = await factory()
            self._values[key] = value
            return value
        finally:
            del self._pending[key]
            done.set()

    def clear(self) -> None:
        """Drop every cached value. In-flight loads are unaffected."""
        self._values.clear()
