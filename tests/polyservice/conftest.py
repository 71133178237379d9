"""Shared test fixtures for polyservice tests."""

from __future__ import annotations

import asyncio

import pytest

from polyservice import BaseService, ServiceRegistry


class CallLog:
    """Records (label, hook) pairs in the order hooks were invoked."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def record(self, label: str, hook: str) -> None:
        self.calls.append((label, hook))

    def hooks_for(self, label: str) -> list[str]:
        return [hook for name, hook in self.calls if name == label]


def make_implementation(
    log: CallLog,
    label: str,
    *,
    usable: bool = True,
    async_hooks: bool = False,
    start_error: Exception | None = None,
    stop_error: Exception | None = None,
    start_gate: asyncio.Event | None = None,
) -> type[BaseService]:
    """Build a BaseService subclass whose hooks record themselves in the log.

    Args:
        log: Shared call log
        label: Name recorded for this implementation
        usable: Value returned by is_usable()
        async_hooks: Make is_usable(), on_start() and on_stop() coroutines
        start_error: Raised from on_start() when set
        stop_error: Raised from on_stop() when set
        start_gate: on_start() waits for this event before completing

    """
    if async_hooks or start_gate is not None:

        class AsyncFakeService(BaseService):
            def on_initialize(self) -> None:
                log.record(label, "on_initialize")

            async def is_usable(self) -> bool:  # type: ignore[override]
                log.record(label, "is_usable")
                await asyncio.sleep(0)
                return usable

            async def on_start(self) -> None:  # type: ignore[override]
                log.record(label, "on_start")
                if start_gate is not None:
                    await start_gate.wait()
                await asyncio.sleep(0)
                if start_error is not None:
                    raise start_error

            async def on_stop(self) -> None:  # type: ignore[override]
                log.record(label, "on_stop")
                await asyncio.sleep(0)
                if stop_error is not None:
                    raise stop_error

        AsyncFakeService.__qualname__ = label
        return AsyncFakeService

    class FakeService(BaseService):
        def on_initialize(self) -> None:
            log.record(label, "on_initialize")

        def is_usable(self) -> bool:
            log.record(label, "is_usable")
            return usable

        def on_start(self) -> None:
            log.record(label, "on_start")
            if start_error is not None:
                raise start_error

        def on_stop(self) -> None:
            log.record(label, "on_stop")
            if stop_error is not None:
                raise stop_error

    FakeService.__qualname__ = label
    return FakeService


@pytest.fixture
def log() -> CallLog:
    return CallLog()


@pytest.fixture
def registry() -> ServiceRegistry:
    return ServiceRegistry()
