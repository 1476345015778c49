"""Tests for per-key locking."""

import asyncio

import pytest

from staffguard.state.keyed_locks import KeyedLocks


@pytest.mark.asyncio
async def test_same_key_is_serialized():
    locks = KeyedLocks()
    events = []

    async def worker(name):
        async with locks.lock("100:1"):
            events.append(f"{name}-start")
            await asyncio.sleep(0.01)
            events.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))

    assert events == ["a-start", "a-end", "b-start", "b-end"]


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    locks = KeyedLocks()
    inside = asyncio.Event()

    async def holder():
        async with locks.lock("100:1"):
            await asyncio.wait_for(inside.wait(), timeout=1)

    async def other():
        async with locks.lock("100:2"):
            inside.set()

    await asyncio.gather(holder(), other())


@pytest.mark.asyncio
async def test_locks_are_released_and_dropped():
    locks = KeyedLocks()

    async with locks.lock("k"):
        assert locks.is_locked("k")
        assert len(locks) == 1

    assert not locks.is_locked("k")
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_released_when_body_raises():
    locks = KeyedLocks()

    with pytest.raises(RuntimeError):
        async with locks.lock("k"):
            raise RuntimeError("boom")

    assert len(locks) == 0
