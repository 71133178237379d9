"""Service protocols for runtime-selected implementations."""

from collections.abc import Awaitable
from typing import Protocol


class ServiceContract(Protocol):
    """Protocol for running service instances managed by a ServiceRegistry.

    Every hook is optional. When an instance does not define a hook, the
    lifecycle orchestrator supplies the default behaviour described below, so
    any object exposing some or none of these methods qualifies.

    Hook order during start:
        1. on_initialize() - synchronous setup, right after the instance is created
        2. is_usable()     - may this candidate run in the current environment?
        3. on_start()      - startup side effects, only for the first usable candidate

    Hook order during stop:
        1. on_stop()       - teardown; failures are logged and never propagated

    Example:
        ```python
        class RedisCache:
            def on_initialize(self) -> None:
                self._url = os.getenv("REDIS_URL")

            async def is_usable(self) -> bool:
                return self._url is not None

            async def on_start(self) -> None:
                self._client = await connect(self._url)

            async def on_stop(self) -> None:
                await self._client.close()
        ```

    """

    def on_initialize(self) -> None:
        """Synchronous setup hook. Must not return an awaitable.

        Default: no-op.

        """
        ...

    def is_usable(self) -> bool | Awaitable[bool]:
        """Check whether this candidate may be started in the current environment.

        Returns:
            A boolean, or an awaitable resolving to one.

        Default: always True.

        """
        ...

    def on_start(self) -> Awaitable[object] | None:
        """Perform startup side effects.

        The return value is ignored; an awaitable is awaited before the service
        is considered running.

        Default: no-op.

        """
        ...

    def on_stop(self) -> Awaitable[object] | None:
        """Perform teardown side effects for a running instance.

        Default: no-op.

        """
        ...


class ServiceImplementation[T](Protocol):
    """Protocol for implementation templates registered under a service name.

    An implementation is any zero-argument callable that derives a fresh
    instance, usually the service class itself. Registries compare
    implementations by identity, so the same class registered twice is two
    independent candidates.

    Example:
        ```python
        registry.register("cache", RedisCache)
        registry.register("cache", InMemoryCache)
        registry.register("cache", functools.partial(InMemoryCache, max_size=100))
        ```

    """

    def __call__(self) -> T:
        """Derive a new service instance."""
        ...
