"""Service registry facade.

The ServiceRegistry combines the ImplementationRegistry (which candidates
exist) with the ServiceLifecycle (which services are starting or running)
behind a single API:

    registry = ServiceRegistry()
    registry.register("storage", S3Storage)
    registry.register("storage", LocalFileStorage)

    [result] = await registry.start("storage")
    storage, = await registry.ready("storage")
    ...
    await registry.stop()

Each ServiceRegistry is independent. get_default_registry() provides a
process-wide instance for applications that want one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from polyservice.configuration import ServiceRegistryConfiguration
from polyservice.errors import StateConflictError
from polyservice.lifecycle import ServiceLifecycle
from polyservice.models import (
    OutcomeSnapshot,
    OutcomeState,
    RegistryStatus,
    ServiceState,
    SettledResult,
)
from polyservice.registry import Implementation, ImplementationRegistry

logger = logging.getLogger(__name__)

type ServiceNames = str | Sequence[str]


def _normalise(names: ServiceNames) -> list[str]:
    if isinstance(names, str):
        return [names]
    return list(names)


class ServiceRegistry:
    """Registers implementations and manages the lifecycle of named services."""

    def __init__(self, config: ServiceRegistryConfiguration | None = None) -> None:
        """Initialise an empty registry.

        Args:
            config: Registry configuration (defaults apply when omitted)

        """
        self._config = config or ServiceRegistryConfiguration()
        self._implementations = ImplementationRegistry()
        self._lifecycle = ServiceLifecycle(self._implementations, self._config)
        logger.debug("ServiceRegistry initialized")

    @property
    def config(self) -> ServiceRegistryConfiguration:
        """Get the registry configuration."""
        return self._config

    def register(self, name: str, implementation: Implementation) -> int:
        """Register an implementation of a service.

        Implementations are tried in registration order when the service is
        started.

        Args:
            name: Service name
            implementation: Zero-argument callable (usually a class) deriving
                a service instance

        Returns:
            The priority of this implementation, i.e. the number of
            implementations now registered for the name.

        """
        return self._implementations.register(name, implementation)

    def unregister(self, name: str, implementation: Implementation | None = None) -> int:
        """Unregister one implementation, or all implementations, of a service.

        Args:
            name: Service name
            implementation: Implementation to remove. If omitted, the entire
                entry for the name is removed.

        Returns:
            Number of implementations remaining for the name.

        Raises:
            StateConflictError: If the service is starting, running or stopping

        """
        if self._lifecycle.has_outcome(name):
            raise StateConflictError(name)
        return self._implementations.remove(name, implementation)

    def candidates(self, name: str) -> list[Implementation]:
        """Get the implementations registered for a name, in fallback order."""
        return self._implementations.candidates(name)

    async def start(self, names: ServiceNames | None = None) -> list[SettledResult[Any]]:
        """Start services using the first usable implementation of each.

        Args:
            names: Name or names to start. None starts every registered name.

        Returns:
            One SettledResult per requested name, in request order. Failures
            are reported in the results, never raised.

        """
        requested = (
            self._implementations.names() if names is None else _normalise(names)
        )
        return await self._lifecycle.start(requested)

    async def stop(self, names: ServiceNames | None = None) -> None:
        """Stop services. Idempotent; stop hook failures are never raised.

        Args:
            names: Name or names to stop. None stops every started service.

        """
        await self._lifecycle.stop(None if names is None else _normalise(names))

    async def ready(self, names: ServiceNames) -> list[Any]:
        """Wait for services to finish starting.

        Args:
            names: Name or names to wait for

        Returns:
            The running instances, in request order.

        Raises:
            NotStartedError: If a name was never started (raised without waiting)
            ServiceRegistryError: If any of the services fails to start

        """
        return await self._lifecycle.ready(_normalise(names))

    def status(self) -> RegistryStatus:
        """Get a snapshot of registered implementations and live outcomes."""
        return RegistryStatus(
            registered=self._implementations.counts(),
            running=self._lifecycle.snapshots(),
        )

    def state(self, name: str) -> ServiceState:
        """Get the lifecycle state of a service name."""
        snapshot: OutcomeSnapshot | None = self._lifecycle.snapshot(name)
        if snapshot is not None:
            if snapshot.stopping:
                return ServiceState.STOPPING
            if snapshot.state is OutcomeState.PENDING:
                return ServiceState.STARTING
            if snapshot.state is OutcomeState.FULFILLED:
                return ServiceState.RUNNING
        if self._implementations.is_registered(name):
            return ServiceState.REGISTERED
        return ServiceState.UNREGISTERED


_default_registry: ServiceRegistry | None = None


def get_default_registry() -> ServiceRegistry:
    """Get the process-wide registry, creating it from the environment on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ServiceRegistry(ServiceRegistryConfiguration.from_properties({}))
    return _default_registry


def reset_default_registry(registry: ServiceRegistry | None = None) -> ServiceRegistry | None:
    """Replace the process-wide registry.

    This is primarily used for test isolation. Services running in the
    replaced registry are not stopped.

    Args:
        registry: New default registry. None discards the current one so the
            next get_default_registry() call creates a fresh registry.

    Returns:
        The previous default registry, if one had been created.

    """
    global _default_registry
    previous = _default_registry
    _default_registry = registry
    return previous
