"""Configuration for the service registry.

This module provides the base configuration class shared by registry
configuration objects, and the ServiceRegistryConfiguration itself.
Configuration supports both explicit instantiation and environment variable
fallback.
"""

from __future__ import annotations

import os
from typing import Any, Self, override

from pydantic import BaseModel, ConfigDict, Field


class BaseConfiguration(BaseModel):
    """Base class for polyservice configuration objects.

    Features:
        - Pydantic validation for type safety
        - Immutable by default (frozen) for configuration integrity
        - from_properties() factory method for dictionary-based creation
        - Strict validation (no extra fields allowed)

    """

    model_config = ConfigDict(
        # Immutable - configuration cannot be modified after creation
        frozen=True,
        # Strict - extra fields not in the model are rejected
        extra="forbid",
    )

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from properties dictionary with validation.

        Args:
            properties: Dictionary containing configuration properties

        Returns:
            Validated configuration instance

        Raises:
            ValidationError: If properties are invalid or missing required fields

        """
        return cls.model_validate(properties)


class ServiceRegistryConfiguration(BaseConfiguration):
    """Configuration for a ServiceRegistry with environment fallback.

    Attributes:
        stop_timeout: Seconds to wait for each on_stop() hook before giving up
            on it and continuing the stop sweep. None waits indefinitely.
        log_hook_failures: Log swallowed on_stop() failures at WARNING level
            (DEBUG when disabled).

    Example:
        ```python
        # Explicit configuration
        config = ServiceRegistryConfiguration(stop_timeout=5.0)

        # From properties dict with env fallback
        config = ServiceRegistryConfiguration.from_properties({})
        ```

    """

    stop_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Per-service on_stop() timeout in seconds (None = no timeout)",
    )
    log_hook_failures: bool = Field(
        default=True, description="Log swallowed on_stop() failures at WARNING"
    )

    @classmethod
    @override
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from properties with environment fallback.

        This method implements a layered configuration system:
        1. Explicit properties (highest priority)
        2. Environment variables (fallback)
        3. Defaults (lowest priority)

        Environment variables used:
        - POLYSERVICE_STOP_TIMEOUT: Per-service stop timeout in seconds
        - POLYSERVICE_LOG_HOOK_FAILURES: "true"/"false"

        Args:
            properties: Configuration properties dictionary

        Returns:
            Validated configuration instance

        Raises:
            ValidationError: If configuration is invalid

        """
        config_data = properties.copy()

        if "stop_timeout" not in config_data:
            env_timeout = os.getenv("POLYSERVICE_STOP_TIMEOUT")
            if env_timeout:
                config_data["stop_timeout"] = env_timeout

        if "log_hook_failures" not in config_data:
            env_log = os.getenv("POLYSERVICE_LOG_HOOK_FAILURES")
            if env_log:
                config_data["log_hook_failures"] = env_log

        return cls.model_validate(config_data)
