"""Tests for waiting on services with ready().

These tests verify:
- ready() returns the same instances start() resolved to
- ready() refuses names that were never started, without waiting
- ready() waits for in-flight starts and fails together
"""

import asyncio

import pytest

from polyservice import (
    NotStartedError,
    ServiceRegistry,
    ServiceStartError,
)

from .conftest import CallLog, make_implementation


class TestReady:
    """Tests for ready()."""

    async def test_ready_returns_started_instance(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify ready() returns the running instance."""
        registry.register("storage", make_implementation(log, "A"))
        [result] = await registry.start("storage")

        instances = await registry.ready("storage")

        assert instances == [result.instance]
        assert instances[0] is result.instance

    async def test_ready_returns_instances_in_request_order(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify ready() returns instances in request order."""
        registry.register("storage", make_implementation(log, "A"))
        registry.register("cache", make_implementation(log, "B"))
        storage, cache = await registry.start(["storage", "cache"])

        instances = await registry.ready(["cache", "storage"])

        assert instances == [cache.instance, storage.instance]

    async def test_ready_on_unstarted_name_raises_not_started(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify ready() of a name with no start raises NotStartedError."""
        registry.register("storage", make_implementation(log, "A"))

        with pytest.raises(NotStartedError) as exc_info:
            await registry.ready("storage")

        assert exc_info.value.name == "storage"
        assert log.hooks_for("A") == []

    async def test_ready_raises_not_started_if_any_name_is_missing(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify one unstarted name makes the whole ready() call fail."""
        registry.register("storage", make_implementation(log, "A"))
        await registry.start("storage")

        with pytest.raises(NotStartedError, match="cache"):
            await registry.ready(["storage", "cache"])

    async def test_ready_waits_for_in_flight_start(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify ready() waits for a start still in flight."""
        gate = asyncio.Event()
        registry.register("storage", make_implementation(log, "A", start_gate=gate))

        start = asyncio.create_task(registry.start("storage"))
        await asyncio.sleep(0)
        waiter = asyncio.create_task(registry.ready("storage"))
        await asyncio.sleep(0)
        assert not waiter.done()

        gate.set()
        [result] = await start

        assert await waiter == [result.instance]

    async def test_ready_fails_together_when_any_start_fails(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify ready() fails as soon as any requested start fails."""
        gate = asyncio.Event()
        registry.register("storage", make_implementation(log, "A"))
        registry.register(
            "cache",
            make_implementation(log, "B", start_gate=gate, start_error=RuntimeError("x")),
        )

        start = asyncio.create_task(registry.start(["storage", "cache"]))
        await asyncio.sleep(0)
        waiter = asyncio.create_task(registry.ready(["storage", "cache"]))
        gate.set()

        with pytest.raises(ServiceStartError) as exc_info:
            await waiter
        assert exc_info.value.name == "cache"

        storage, cache = await start
        assert storage.ok
        assert not cache.ok

    async def test_cancelled_ready_does_not_cancel_start(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify cancelling a ready() waiter leaves the start running."""
        gate = asyncio.Event()
        registry.register("storage", make_implementation(log, "A", start_gate=gate))

        start = asyncio.create_task(registry.start("storage"))
        await asyncio.sleep(0)
        waiter = asyncio.create_task(registry.ready("storage"))
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        gate.set()
        [result] = await start

        assert result.ok

    async def test_ready_with_no_names_returns_empty_list(
        self, registry: ServiceRegistry
    ) -> None:
        """Verify ready() with no names returns an empty list."""
        assert await registry.ready([]) == []
