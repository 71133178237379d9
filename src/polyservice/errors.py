"""Error classes for the polyservice registry.

This module provides:
- ServiceRegistryError: Base exception class for all registry errors
- ServiceStateError: Caller-fault bookkeeping errors (AlreadyStarting, AlreadyRunning,
  StateConflict, NotStarted)
- NoUsableImplementationError: Fallback search exhausted every candidate
- ServiceStartError: A candidate's hook raised during start
"""


class ServiceRegistryError(Exception):
    """Base exception for all service registry errors."""

    def __init__(self, name: str, message: str) -> None:
        """Initialise the error.

        Args:
            name: Name of the service the error concerns
            message: Human-readable description

        """
        super().__init__(message)
        self.name = name


class ServiceStateError(ServiceRegistryError):
    """Base exception for operations invalid in the service's current state."""

    pass


class ServiceActiveError(ServiceStateError):
    """Raised when start is requested for a service that already has an outcome."""

    pass


class AlreadyStartingError(ServiceActiveError):
    """Raised when start is requested while a start for the name is in flight."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Service '{name}' is already starting")


class AlreadyRunningError(ServiceActiveError):
    """Raised when start is requested for a service that is already running."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Service '{name}' is already running")


class StateConflictError(ServiceStateError):
    """Raised when unregistering implementations of an active service."""

    def __init__(self, name: str) -> None:
        super().__init__(
            name,
            f"Cannot unregister implementations of '{name}' while it is "
            f"starting or running",
        )


class NotStartedError(ServiceStateError):
    """Raised when waiting for a service that was never started."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Service '{name}' has not been started")


class NoUsableImplementationError(ServiceRegistryError):
    """Raised when no registered implementation of a service is usable."""

    def __init__(self, name: str, tried: int) -> None:
        if tried:
            message = f"No usable implementations of '{name}' ({tried} tried)"
        else:
            message = f"Service '{name}' has no implementations"
        super().__init__(name, message)
        self.tried = tried


class ServiceStartError(ServiceRegistryError):
    """Raised when a candidate implementation fails while being started."""

    def __init__(self, name: str, implementation: object, reason: str) -> None:
        super().__init__(
            name, f"Failed to start '{name}' using {_describe(implementation)}: {reason}"
        )
        self.implementation = implementation


def _describe(implementation: object) -> str:
    return getattr(implementation, "__qualname__", None) or repr(implementation)
