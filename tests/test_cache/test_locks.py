"""Tests for per-key async locks."""

import asyncio

from rmd2html.cache.locks import KeyedLock


class TestKeyedLock:
    async def test_same_key_is_serialised(self):
        locks = KeyedLock()
        events: list[str] = []

        async def worker(name: str) -> None:
            async with locks.hold("k"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert events == ["a-in", "a-out", "b-in", "b-out"]

    async def test_different_keys_run_concurrently(self):
        locks = KeyedLock()
        events: list[str] = []

        async def worker(key: str) -> None:
            async with locks.hold(key):
                events.append(f"{key}-in")
                await asyncio.sleep(0.01)
                events.append(f"{key}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert events[:2] == ["a-in", "b-in"]

    async def test_locked_while_held(self):
        locks = KeyedLock()
        async with locks.hold("k"):
            assert locks.locked("k")
            assert not locks.locked("other")
        assert not locks.locked("k")

    async def test_locks_dropped_after_use(self):
        locks = KeyedLock()
        async with locks.hold("a"):
            assert len(locks) == 1
        assert len(locks) == 0

    async def test_released_on_exception(self):
        locks = KeyedLock()
        try:
            async with locks.hold("k"):
                raise ValueError("boom")
        except ValueError:
            pass
        assert len(locks) == 0
        async with locks.hold("k"):
            assert locks.locked("k")
