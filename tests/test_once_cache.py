"""Tests for trellis._internal.once — at-most-once-in-flight memoization."""

import anyio
import pytest

from trellis._internal.once import OnceCache


@pytest.mark.anyio
async def test_caches_value() -> None:
    cache = OnceCache()
    calls = 0

    async def factory() -> str:
        nonlocal calls
        calls += 1
        return "value"

    assert await cache.get("k", factory) == "value"
    assert await cache.get("k", factory) == "value"
    assert calls == 1
    assert "k" in cache
    assert len(cache) == 1


@pytest.mark.anyio
async def test_concurrent_callers_share_one_load() -> None:
    cache = OnceCache()
    calls = 0
    results: list[str] = []

    async def factory() -> str:
        nonlocal calls
        calls += 1
        await anyio.sleep(0.01)
        return "loaded"

    async def caller() -> None:
        results.append(await cache.get("k", factory))

    async with anyio.create_task_group() as tg:
        for _ in range(5):
            tg.start_soon(caller)

    assert calls == 1
    assert results == ["loaded"] * 5


@pytest.mark.anyio
async def test_failures_are_not_cached() -> None:
    cache = OnceCache()
    attempts = 0

    async def flaky() -> str:
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise OSError("transient")
        return "ok"

    with pytest.raises(OSError, match="transient"):
        await cache.get("k", flaky)
    assert "k" not in cache
    assert await cache.get("k", flaky) == "ok"
    assert attempts == 2


@pytest.mark.anyio
async def test_keys_are_independent() -> None:
    cache = OnceCache()

    async def a() -> str:
        return "a"

    async def b() -> str:
        return "b"

    assert await cache.get("a", a) == "a"
    assert await cache.get("b", b) == "b"


@pytest.mark.anyio
async def test_clear() -> None:
    cache = OnceCache()

    async def factory() -> int:
        return 1

    await cache.get("k", factory)
    cache.clear()
    assert len(cache) == 0
