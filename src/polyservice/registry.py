"""Implementation registry mapping service names to ordered candidates.

The ImplementationRegistry is pure bookkeeping: it records which
implementations are available for each service name and in which order they
should be tried. It knows nothing about running services; guarding mutations
of active services is the ServiceRegistry's job.
"""

from __future__ import annotations

import logging

from polyservice.protocols import ServiceImplementation

logger = logging.getLogger(__name__)

type Implementation = ServiceImplementation[object]


class ImplementationRegistry:
    """Ordered candidate lists keyed by service name.

    Registration order is fallback order: the first implementation registered
    for a name is the first one tried. A name whose candidates have all been
    removed individually stays registered with zero candidates, which is
    observably different from a name that was never registered.
    """

    def __init__(self) -> None:
        """Initialise an empty registry."""
        self._candidates: dict[str, list[Implementation]] = {}

    def register(self, name: str, implementation: Implementation) -> int:
        """Append an implementation to a service's candidate list.

        Args:
            name: Service name (created on first registration)
            implementation: Zero-argument callable deriving a service instance

        Returns:
            The 1-based priority of this implementation, which is also the
            number of candidates now registered for the name.

        Raises:
            TypeError: If implementation is not callable

        """
        if not callable(implementation):
            raise TypeError(
                f"Implementation for '{name}' must be callable, got {type(implementation).__name__}"
            )
        candidates = self._candidates.setdefault(name, [])
        candidates.append(implementation)
        logger.debug(
            "Registered implementation %r for '%s' with priority %d",
            implementation,
            name,
            len(candidates),
        )
        return len(candidates)

    def remove(self, name: str, implementation: Implementation | None = None) -> int:
        """Remove one implementation, or the whole entry, for a service.

        Args:
            name: Service name
            implementation: Implementation to remove (first identity match).
                If omitted, the entire entry for the name is deleted.

        Returns:
            Number of candidates remaining for the name (0 if the entry was
            deleted or never existed).

        """
        if implementation is None:
            if self._candidates.pop(name, None) is not None:
                logger.debug("Removed all implementations for '%s'", name)
            return 0

        candidates = self._candidates.get(name)
        if candidates is None:
            return 0

        for index, candidate in enumerate(candidates):
            if candidate is implementation:
                del candidates[index]
                logger.debug("Removed implementation %r for '%s'", implementation, name)
                break
        else:
            logger.debug(
                "Implementation %r is not registered for '%s'", implementation, name
            )
        return len(candidates)

    def candidates(self, name: str) -> list[Implementation]:
        """Get a snapshot copy of a service's candidates in fallback order."""
        return list(self._candidates.get(name, ()))

    def is_registered(self, name: str) -> bool:
        """Check whether a name has an entry, even one with zero candidates."""
        return name in self._candidates

    def names(self) -> list[str]:
        """Get all registered service names in registration order."""
        return list(self._candidates)

    def counts(self) -> dict[str, int]:
        """Get the candidate count for every registered name."""
        return {name: len(candidates) for name, candidates in self._candidates.items()}
