"""polyservice - Runtime service registry with ordered fallback.

This package lets applications register several candidate implementations of
a named service, start the first usable one at runtime, wait for services to
become ready and stop them cleanly.
"""

__version__ = "0.1.0"

from polyservice.base_service import BaseService
from polyservice.configuration import BaseConfiguration, ServiceRegistryConfiguration
from polyservice.errors import (
    AlreadyRunningError,
    AlreadyStartingError,
    NoUsableImplementationError,
    NotStartedError,
    ServiceActiveError,
    ServiceRegistryError,
    ServiceStartError,
    ServiceStateError,
    StateConflictError,
)
from polyservice.factory import ServiceRegistryFactory
from polyservice.lifecycle import ServiceLifecycle
from polyservice.models import (
    OutcomeSnapshot,
    OutcomeState,
    RegistryStatus,
    ServiceState,
    SettledResult,
)
from polyservice.protocols import ServiceContract, ServiceImplementation
from polyservice.registry import ImplementationRegistry
from polyservice.service_registry import (
    ServiceRegistry,
    get_default_registry,
    reset_default_registry,
)

__all__ = [
    # Version
    "__version__",
    # Registry
    "ServiceRegistry",
    "ServiceRegistryFactory",
    "ImplementationRegistry",
    "ServiceLifecycle",
    "get_default_registry",
    "reset_default_registry",
    # Service contract
    "BaseService",
    "ServiceContract",
    "ServiceImplementation",
    # Configuration
    "BaseConfiguration",
    "ServiceRegistryConfiguration",
    # Results and status
    "OutcomeSnapshot",
    "OutcomeState",
    "RegistryStatus",
    "ServiceState",
    "SettledResult",
    # Errors
    "ServiceRegistryError",
    "ServiceStateError",
    "ServiceActiveError",
    "AlreadyStartingError",
    "AlreadyRunningError",
    "StateConflictError",
    "NotStartedError",
    "NoUsableImplementationError",
    "ServiceStartError",
]
