"""Base class providing the default service hooks."""


class BaseService:
    """Convenience base class for service implementations.

    Subclasses override only the hooks they need; the rest keep the defaults
    the lifecycle orchestrator would otherwise supply. Subclassing is optional,
    see ServiceContract for the structural protocol.

    Example:
        ```python
        class LocalFileStorage(BaseService):
            def on_initialize(self) -> None:
                self.root = Path(os.getenv("STORAGE_ROOT", "/tmp/storage"))

            def is_usable(self) -> bool:
                return self.root.parent.exists()

            def on_start(self) -> None:
                self.root.mkdir(exist_ok=True)
        ```

    """

    def on_initialize(self) -> None:
        """Called once the instance is created. Must be synchronous."""
        pass

    def is_usable(self) -> bool:
        """Report whether this implementation can run here. Defaults to True."""
        return True

    def on_start(self) -> None:
        """Called when the service is being started. May be a coroutine."""
        pass

    def on_stop(self) -> None:
        """Called when the service is being stopped. May be a coroutine."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} at {id(self):#x}>"
