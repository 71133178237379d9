"""Service registry factory for dependency injection integration.

This module provides a factory for ServiceRegistry instances that follows the
create() / can_create() service factory convention, so a registry can itself
be provided by an application's DI container.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from polyservice.configuration import ServiceRegistryConfiguration
from polyservice.service_registry import ServiceRegistry

logger = logging.getLogger(__name__)


class ServiceRegistryFactory:
    """Factory for creating ServiceRegistry instances.

    Configuration can be provided explicitly or will be read from environment
    variables as a fallback.

    Example:
        ```python
        # Zero-config (reads POLYSERVICE_* environment variables)
        registry = ServiceRegistryFactory().create()

        # Explicit configuration
        config = ServiceRegistryConfiguration(stop_timeout=10.0)
        registry = ServiceRegistryFactory(config).create()
        ```

    """

    def __init__(self, config: ServiceRegistryConfiguration | None = None) -> None:
        """Initialize factory with optional configuration.

        Args:
            config: Optional explicit configuration. If None, will attempt
                   to create configuration from environment variables.

        """
        self._config = config

    def _get_config(self) -> ServiceRegistryConfiguration | None:
        if self._config:
            return self._config

        try:
            return ServiceRegistryConfiguration.from_properties({})
        except ValidationError as e:
            logger.debug("Cannot create configuration from environment: %s", e)
            return None

    def can_create(self) -> bool:
        """Check if a registry can be created with the current configuration."""
        return self._get_config() is not None

    def create(self) -> ServiceRegistry | None:
        """Create a service registry.

        Returns:
            ServiceRegistry instance, or None if the configuration is invalid.

        """
        config = self._get_config()
        if not config:
            logger.warning("Cannot create service registry - configuration invalid")
            return None
        return ServiceRegistry(config)
