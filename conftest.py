"""Workspace-level pytest configuration and fixtures."""

import pytest

from polyservice import reset_default_registry


@pytest.fixture(autouse=True, scope="function")
def isolate_default_registry():
    """Give every test a fresh process-wide default registry.

    The default registry is module-level mutable state; without isolation,
    services registered or started in one test would leak into the next.
    """
    previous = reset_default_registry()

    yield

    reset_default_registry(previous)
