"""Tests for status() and state() introspection."""

import asyncio

from polyservice import (
    OutcomeState,
    ServiceRegistry,
    ServiceState,
)

from .conftest import CallLog, make_implementation


class TestStatus:
    """Tests for status()."""

    async def test_status_after_successful_start(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify status() lists registrations and the running instance."""
        a = make_implementation(log, "A", usable=False)
        b = make_implementation(log, "B")
        c = make_implementation(log, "C")
        for impl in (a, b, c):
            registry.register("X", impl)
        [result] = await registry.start("X")

        status = registry.status()

        assert status.registered == {"X": 3}
        snapshot = status.running["X"]
        assert snapshot.state is OutcomeState.FULFILLED
        assert snapshot.instance is result.instance
        assert snapshot.implementation is b
        assert snapshot.error is None
        assert not snapshot.stopping

    async def test_status_shows_pending_start_without_waiting(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify status() omits a pending start without blocking."""
        gate = asyncio.Event()
        registry.register("X", make_implementation(log, "A", start_gate=gate))

        start = asyncio.create_task(registry.start("X"))
        await asyncio.sleep(0)

        snapshot = registry.status().running["X"]
        assert snapshot.state is OutcomeState.PENDING
        assert snapshot.instance is None

        gate.set()
        await start

    def test_status_of_empty_registry(self, registry: ServiceRegistry) -> None:
        """Verify status() of an empty registry is empty."""
        status = registry.status()

        assert status.registered == {}
        assert status.running == {}

    async def test_status_is_a_snapshot(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify status() results do not change with later operations."""
        registry.register("X", make_implementation(log, "A"))
        before = registry.status()

        await registry.start("X")

        assert before.running == {}
        assert "X" in registry.status().running


class TestState:
    """Tests for the derived per-name state."""

    async def test_state_follows_lifecycle(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify state() tracks each lifecycle transition."""
        gate = asyncio.Event()
        assert registry.state("X") is ServiceState.UNREGISTERED

        registry.register("X", make_implementation(log, "A", start_gate=gate))
        assert registry.state("X") is ServiceState.REGISTERED

        start = asyncio.create_task(registry.start("X"))
        await asyncio.sleep(0)
        assert registry.state("X") is ServiceState.STARTING

        gate.set()
        await start
        assert registry.state("X") is ServiceState.RUNNING

        await registry.stop("X")
        assert registry.state("X") is ServiceState.REGISTERED

        registry.unregister("X")
        assert registry.state("X") is ServiceState.UNREGISTERED

    async def test_failed_start_returns_to_registered(
        self, registry: ServiceRegistry, log: CallLog
    ) -> None:
        """Verify a failed start leaves the name REGISTERED."""
        registry.register("X", make_implementation(log, "A", usable=False))

        await registry.start("X")

        assert registry.state("X") is ServiceState.REGISTERED
