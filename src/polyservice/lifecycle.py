"""Service lifecycle orchestration.

The ServiceLifecycle drives the start/stop state machine of every service
name. It owns the outcome table: one memoised asyncio Future per name whose
result is the running instance. All bookkeeping on that table happens
synchronously before the first await of an operation, which is what keeps
"at most one outcome per name" true on a single event loop without locks.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Any

from polyservice.configuration import ServiceRegistryConfiguration
from polyservice.errors import (
    AlreadyRunningError,
    AlreadyStartingError,
    NoUsableImplementationError,
    NotStartedError,
    ServiceRegistryError,
    ServiceStartError,
)
from polyservice.models import OutcomeSnapshot, OutcomeState, SettledResult
from polyservice.registry import Implementation, ImplementationRegistry

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class _Outcome:
    """Memoised start outcome for one service name.

    Compared by identity: removal only ever deletes the exact outcome the
    remover holds, never a newer one installed for the same name.
    """

    future: asyncio.Future[Any]
    implementation: Implementation | None = None


class ServiceLifecycle:
    """Starts, stops and awaits services using registered implementations."""

    def __init__(
        self,
        registry: ImplementationRegistry,
        config: ServiceRegistryConfiguration | None = None,
    ) -> None:
        """Initialise the lifecycle orchestrator.

        Args:
            registry: Source of candidate implementations per service name
            config: Registry configuration (defaults apply when omitted)

        """
        self._registry = registry
        self._config = config or ServiceRegistryConfiguration()
        self._outcomes: dict[str, _Outcome] = {}
        self._stops: dict[str, asyncio.Task[None]] = {}
        self._searches: set[asyncio.Future[SettledResult[Any]]] = set()

    # -------------------------------------------------------------------------
    # Start
    # -------------------------------------------------------------------------

    async def start(self, names: Sequence[str]) -> list[SettledResult[Any]]:
        """Start each named service with the first usable implementation.

        Every name is searched independently and concurrently. A failure for
        one name never affects another, and no failure is raised: each name's
        result is reported as a SettledResult in request order.

        Args:
            names: Service names to start

        Returns:
            One SettledResult per requested name.

        """
        # Claim every name before the first suspension point
        searches = [asyncio.ensure_future(self._claim(name)) for name in names]
        for search in searches:
            self._searches.add(search)
            search.add_done_callback(self._searches.discard)

        # Shielded so a cancelled caller never aborts an in-flight on_start()
        return list(await asyncio.shield(asyncio.gather(*searches)))

    def _claim(self, name: str) -> Awaitable[SettledResult[Any]]:
        existing = self._outcomes.get(name)
        if existing is not None:
            error: ServiceRegistryError
            if existing.future.done():
                error = AlreadyRunningError(name)
            else:
                error = AlreadyStartingError(name)
            logger.debug("Refusing to start '%s': %s", name, error)
            return _settled(SettledResult(name, error=error))

        candidates = self._registry.candidates(name)
        outcome = _Outcome(asyncio.get_running_loop().create_future())
        self._outcomes[name] = outcome
        logger.debug("Starting '%s' with %d candidate(s)", name, len(candidates))
        return self._search(name, candidates, outcome)

    async def _search(
        self, name: str, candidates: list[Implementation], outcome: _Outcome
    ) -> SettledResult[Any]:
        try:
            instance = await self._start_first_usable(name, candidates, outcome)
        except ServiceRegistryError as e:
            self._discard(name, outcome)
            outcome.future.set_exception(e)
            # Mark retrieved; the failure is reported through the start result
            outcome.future.exception()
            logger.warning("Failed to start '%s': %s", name, e)
            return SettledResult(name, error=e)

        outcome.future.set_result(instance)
        logger.info("Started service '%s' using %r", name, outcome.implementation)
        return SettledResult(name, instance=instance)

    async def _start_first_usable(
        self, name: str, candidates: list[Implementation], outcome: _Outcome
    ) -> Any:
        for implementation in candidates:
            try:
                instance = implementation()
                _initialize(instance)
                usable = await _resolve(_call_hook(instance, "is_usable", True))
            except Exception as e:
                raise ServiceStartError(name, implementation, str(e)) from e

            if not usable:
                logger.debug(
                    "Implementation %r of '%s' is not usable, trying next",
                    implementation,
                    name,
                )
                continue

            outcome.implementation = implementation
            try:
                await _resolve(_call_hook(instance, "on_start"))
            except Exception as e:
                raise ServiceStartError(name, implementation, str(e)) from e
            return instance

        raise NoUsableImplementationError(name, len(candidates))

    # -------------------------------------------------------------------------
    # Stop
    # -------------------------------------------------------------------------

    async def stop(self, names: Sequence[str] | None = None) -> None:
        """Stop services, waiting out any start still in flight.

        Stopping a name with no outcome, or one already being stopped, is a
        no-op for that name; on_stop() runs at most once per running instance.
        Failures raised by on_stop() are logged and never propagated.

        Args:
            names: Service names to stop. None stops every name with an outcome.

        """
        if names is None:
            names = list(self._outcomes)
        tasks = [
            task
            for task in (self._stop_task(name) for name in dict.fromkeys(names))
            if task is not None
        ]
        if tasks:
            await asyncio.gather(*(asyncio.shield(task) for task in tasks))

    def _stop_task(self, name: str) -> asyncio.Task[None] | None:
        task = self._stops.get(name)
        if task is not None:
            return task

        outcome = self._outcomes.get(name)
        if outcome is None:
            logger.debug("Service '%s' has no outcome, nothing to stop", name)
            return None

        task = asyncio.create_task(self._stop_one(name, outcome))
        self._stops[name] = task
        return task

    async def _stop_one(self, name: str, outcome: _Outcome) -> None:
        try:
            await asyncio.wait([outcome.future])
            if outcome.future.cancelled() or outcome.future.exception() is not None:
                logger.debug("Start of '%s' did not succeed, nothing to stop", name)
                return

            instance = outcome.future.result()
            try:
                async with asyncio.timeout(self._config.stop_timeout):
                    await _resolve(_call_hook(instance, "on_stop"))
            except Exception as e:
                self._log_stop_failure(name, e)

            self._discard(name, outcome)
            logger.info("Stopped service '%s'", name)
        finally:
            # Released in the same step as the outcome, never a later stop's task
            if self._stops.get(name) is asyncio.current_task():
                del self._stops[name]

    def _log_stop_failure(self, name: str, error: Exception) -> None:
        level = logging.WARNING if self._config.log_hook_failures else logging.DEBUG
        if isinstance(error, TimeoutError):
            logger.log(
                level,
                "on_stop() of '%s' timed out after %s seconds",
                name,
                self._config.stop_timeout,
            )
        else:
            logger.log(level, "on_stop() of '%s' failed: %s", name, error)

    # -------------------------------------------------------------------------
    # Ready
    # -------------------------------------------------------------------------

    async def ready(self, names: Sequence[str]) -> list[Any]:
        """Wait until every named service is running.

        Args:
            names: Service names to wait for

        Returns:
            The running instances, in request order.

        Raises:
            NotStartedError: If any name has no outcome (raised without waiting)
            ServiceRegistryError: The first start failure among the names

        """
        outcomes: list[_Outcome] = []
        for name in names:
            outcome = self._outcomes.get(name)
            if outcome is None:
                raise NotStartedError(name)
            outcomes.append(outcome)

        # Shielded so a cancelled waiter never cancels the shared outcome
        return list(
            await asyncio.gather(*(asyncio.shield(o.future) for o in outcomes))
        )

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def has_outcome(self, name: str) -> bool:
        """Check whether a name is starting, running or stopping."""
        return name in self._outcomes

    def snapshot(self, name: str) -> OutcomeSnapshot | None:
        """Get a non-blocking view of a name's outcome, or None if it has none."""
        outcome = self._outcomes.get(name)
        if outcome is None:
            return None
        return _snapshot(outcome, stopping=name in self._stops)

    def snapshots(self) -> dict[str, OutcomeSnapshot]:
        """Get a view of every live outcome."""
        return {
            name: _snapshot(outcome, stopping=name in self._stops)
            for name, outcome in self._outcomes.items()
        }

    def _discard(self, name: str, outcome: _Outcome) -> None:
        if self._outcomes.get(name) is outcome:
            del self._outcomes[name]


async def _settled(result: SettledResult[Any]) -> SettledResult[Any]:
    return result


def _call_hook(instance: object, hook_name: str, default: Any = None) -> Any:
    hook = getattr(instance, hook_name, None)
    if hook is None:
        return default
    return hook()


def _initialize(instance: object) -> None:
    result = _call_hook(instance, "on_initialize")
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError("on_initialize() must be synchronous")


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _snapshot(outcome: _Outcome, *, stopping: bool) -> OutcomeSnapshot:
    future = outcome.future
    if not future.done():
        return OutcomeSnapshot(
            OutcomeState.PENDING,
            implementation=outcome.implementation,
            stopping=stopping,
        )
    if future.cancelled():
        return OutcomeSnapshot(OutcomeState.REJECTED, stopping=stopping)
    error = future.exception()
    if error is not None:
        return OutcomeSnapshot(OutcomeState.REJECTED, error=error, stopping=stopping)
    return OutcomeSnapshot(
        OutcomeState.FULFILLED,
        instance=future.result(),
        implementation=outcome.implementation,
        stopping=stopping,
    )
