"""Testing utilities for service implementations.

This module provides contract tests that implementation authors can inherit
to verify their implementations behave the way a ServiceRegistry expects.
"""

import inspect
from collections.abc import Callable

import pytest

from polyservice.errors import NoUsableImplementationError
from polyservice.service_registry import ServiceRegistry


class ServiceImplementationContractTests:
    """Abstract contract tests that all service implementations must pass.

    Required Fixtures:
        implementation: The implementation (class or factory) under test

    Contract Requirements:
        1. Calling the implementation derives a fresh, non-None instance
        2. on_initialize(), if defined, is synchronous
        3. is_usable(), if defined, yields a bool (directly or when awaited)
        4. A usable implementation starts and stops through a ServiceRegistry

    Usage Pattern:
        class TestRedisCache(ServiceImplementationContractTests):
            @pytest.fixture
            def implementation(self) -> Callable[[], object]:
                return RedisCache

            # All contract tests run automatically

    Design Decision:
        The abstract fixture raises NotImplementedError instead of skipping so
        inheriting classes are forced to provide it.

    """

    @pytest.fixture
    def implementation(self) -> Callable[[], object]:
        """Provide the implementation to test.

        Raises:
            NotImplementedError: If subclass doesn't override this fixture

        """
        raise NotImplementedError(
            "Subclass must provide 'implementation' fixture with a service implementation"
        )

    # CONTRACT TEST 1
    def test_implementation_derives_fresh_instances(
        self, implementation: Callable[[], object]
    ) -> None:
        """Verify each call derives a distinct, non-None instance.

        Why This Matters:
            Every start attempt derives its own instance; per-run state must
            never leak between attempts.

        """
        first = implementation()
        second = implementation()
        assert first is not None, "Implementation must return an instance, not None"
        assert first is not second, "Implementation must derive a new instance per call"

    # CONTRACT TEST 2
    def test_on_initialize_is_synchronous(
        self, implementation: Callable[[], object]
    ) -> None:
        """Verify on_initialize() does not return an awaitable.

        Why This Matters:
            on_initialize() runs before the first suspension point of a start;
            an awaitable result would be rejected as a start failure.

        """
        hook = getattr(implementation(), "on_initialize", None)
        if hook is None:
            return
        result = hook()
        is_awaitable = inspect.isawaitable(result)
        if inspect.iscoroutine(result):
            result.close()
        assert not is_awaitable, "on_initialize() must be synchronous"

    # CONTRACT TEST 3
    async def test_is_usable_returns_bool(
        self, implementation: Callable[[], object]
    ) -> None:
        """Verify is_usable() yields a bool, directly or when awaited."""
        instance = implementation()
        initialize = getattr(instance, "on_initialize", None)
        if initialize is not None:
            initialize()
        hook = getattr(instance, "is_usable", None)
        if hook is None:
            return
        result = hook()
        if inspect.isawaitable(result):
            result = await result
        assert isinstance(result, bool), (
            f"is_usable() must return bool, got {type(result).__name__}"
        )

    # CONTRACT TEST 4
    async def test_starts_and_stops_through_registry(
        self, implementation: Callable[[], object]
    ) -> None:
        """Verify a usable implementation round-trips through a ServiceRegistry.

        Unusable implementations must instead be reported as having no usable
        implementation, never as a start failure.

        """
        registry = ServiceRegistry()
        registry.register("contract", implementation)

        [result] = await registry.start("contract")
        if not result.ok:
            assert isinstance(result.error, NoUsableImplementationError), (
                f"Start failed unexpectedly: {result.error}"
            )
            return

        [instance] = await registry.ready("contract")
        assert instance is result.instance
        await registry.stop("contract")
        assert registry.status().running == {}
