"""Result and status types for the service registry.

This module defines the value types returned by the public API:
- ServiceState: Derived lifecycle state of a service name
- OutcomeState: Disposition of a name's memoised start outcome
- SettledResult: Per-name result of a batch start
- OutcomeSnapshot: Non-blocking view of one outcome
- RegistryStatus: Diagnostic snapshot returned by ServiceRegistry.status()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ServiceState(Enum):
    """Lifecycle state of a service name, derived from registry and outcomes.

    A failed start and a completed stop both return the name to REGISTERED.
    """

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


class OutcomeState(Enum):
    """Disposition of a memoised start outcome."""

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class SettledResult[T]:
    """Settled result of starting one service in a batch.

    Exactly one of instance and error is set.
    """

    name: str
    """Service name this result belongs to."""

    instance: T | None = None
    """The started instance on success."""

    error: BaseException | None = None
    """The failure that ended this name's start attempt."""

    @property
    def ok(self) -> bool:
        """Whether the service started successfully."""
        return self.error is None

    def unwrap(self) -> T:
        """Return the started instance, or raise the recorded failure.

        Raises:
            BaseException: The error recorded for this name

        """
        if self.error is not None:
            raise self.error
        return self.instance  # type: ignore[return-value]


@dataclass(frozen=True)
class OutcomeSnapshot:
    """Point-in-time view of a service's outcome, taken without awaiting it."""

    state: OutcomeState
    instance: object | None = None
    error: BaseException | None = None

    implementation: object | None = None
    """The candidate that produced the instance, once known."""

    stopping: bool = False
    """True while a stop is in progress for this outcome."""


@dataclass(frozen=True)
class RegistryStatus:
    """Diagnostic snapshot of a ServiceRegistry."""

    registered: dict[str, int] = field(default_factory=dict)
    """Candidate count per registered service name."""

    running: dict[str, OutcomeSnapshot] = field(default_factory=dict)
    """Outcome snapshot per name with a live outcome (starting, running or stopping)."""
