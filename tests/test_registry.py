"""Tests for the in-flight request registry."""

import asyncio

import pytest

from rawej_booking.transport.registry import Fingerprint, RevalidationRegistry
from rawej_booking.utils.errors import TransportError


def test_fingerprint_sorts_and_dedupes_tags():
    first = Fingerprint.of("https://api/x", ["user-1", "available-slots", "user-1"])
    second = Fingerprint.of("https://api/x", ["available-slots", "user-1"])

    assert first == second
    assert first.tags == ("available-slots", "user-1")


def test_begin_or_join_claims_once():
    registry = RevalidationRegistry()
    fingerprint = Fingerprint.of("https://api/x")

    claim = registry.begin_or_join(fingerprint)
    join = registry.begin_or_join(fingerprint)

    assert claim.proceed is True
    assert join.proceed is False
    assert join.entry is claim.entry
    assert registry.is_in_flight(fingerprint)

    registry.complete(fingerprint, result="done")
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_concurrent_runs_share_one_call():
    registry = RevalidationRegistry()
    fingerprint = Fingerprint.of("https://api/x", ["tag"])
    release = asyncio.Event()
    calls = 0

    async def call():
        nonlocal calls
        calls += 1
        await release.wait()
        return {"value": 42}

    tasks = [asyncio.create_task(registry.run(fingerprint, call)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*tasks)

    assert calls == 1
    assert results == [{"value": 42}] * 3
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_failure_is_shared_and_entry_released():
    registry = RevalidationRegistry()
    fingerprint = Fingerprint.of("https://api/x")
    release = asyncio.Event()

    async def call():
        await release.wait()
        raise TransportError("boom")

    owner = asyncio.create_task(registry.run(fingerprint, call))
    await asyncio.sleep(0)
    joiner = asyncio.create_task(registry.run(fingerprint, call))
    await asyncio.sleep(0)
    release.set()

    with pytest.raises(TransportError):
        await owner
    with pytest.raises(TransportError):
        await joiner
    assert not registry.is_in_flight(fingerprint)


@pytest.mark.asyncio
async def test_cancelled_call_releases_entry_and_fails_joiners():
    registry = RevalidationRegistry()
    fingerprint = Fingerprint.of("https://api/x")

    async def never_returns():
        await asyncio.Event().wait()

    owner = asyncio.create_task(registry.run(fingerprint, never_returns))
    await asyncio.sleep(0)
    joiner = asyncio.create_task(registry.run(fingerprint, never_returns))
    await asyncio.sleep(0)

    owner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await owner
    with pytest.raises(TransportError, match="abandoned"):
        await joiner
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_timeout_releases_entry():
    registry = RevalidationRegistry()
    fingerprint = Fingerprint.of("https://api/slow")

    async def slow():
        await asyncio.sleep(10)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(registry.run(fingerprint, slow), timeout=0.01)
    assert not registry.is_in_flight(fingerprint)
