"""
tests/unit/instrumentation/test_registry.py

Tests for InterceptionRegistry.
"""

from typing import Any, Callable

import pytest

from crawl_hooks.instrumentation.registry import InterceptionRegistry
from crawl_hooks.instrumentation.simulated import SimulatedPage


def wrap_with_marker(original: Callable[..., Any]) -> Callable[..., Any]:
    def replacement(*args: Any, **kwargs: Any) -> Any:
        return ("hooked", original(*args, **kwargs))
    return replacement


class TestInterceptionRegistry:
    """
    Tests for registering and applying interceptors.
    """

    def test_apply_replaces_and_locks(self) -> None:
        page = SimulatedPage(url="https://example.com/")
        registry = InterceptionRegistry()
        registry.register("window", "fetch", wrap_with_marker)
        original = page.window.fetch

        assert registry.apply(page.environment) is True

        marker, connection = page.window.fetch("https://example.com/api")
        assert marker == "hooked"
        assert connection.url == "https://example.com/api"
        assert page.window.is_locked("fetch") is True
        assert registry.is_installed("window", "fetch") is True
        assert registry.original("window", "fetch") == original

    def test_unlocked_interceptor(self) -> None:
        page = SimulatedPage()
        registry = InterceptionRegistry()
        registry.register("window", "fetch", wrap_with_marker, lock=False)
        registry.apply(page.environment)

        page.window.fetch = print

        assert page.window.fetch is print

    def test_apply_once(self) -> None:
        page = SimulatedPage()
        registry = InterceptionRegistry()
        registry.register("window", "fetch", wrap_with_marker)

        assert registry.apply(page.environment) is True
        assert registry.apply(page.environment) is False
        assert registry.applied is True

    def test_register_errors(self) -> None:
        page = SimulatedPage()
        registry = InterceptionRegistry()
        registry.register("window", "fetch", wrap_with_marker)

        with pytest.raises(ValueError):
            registry.register("window", "fetch", wrap_with_marker)
        registry.apply(page.environment)
        with pytest.raises(ValueError):
            registry.register("window", "open", wrap_with_marker)
        assert len(registry) == 1

    def test_missing_and_locked_members_are_skipped(self) -> None:
        """Members the host lacks or already locked are left alone."""
        page = SimulatedPage()
        page.window.define_property("open", print, writable=False, configurable=False)
        registry = InterceptionRegistry()
        registry.register("window", "missing", wrap_with_marker)
        registry.register("window", "open", wrap_with_marker)
        registry.register("unknown_capability", "x", wrap_with_marker)
        registry.register("window", "fetch", wrap_with_marker)

        registry.apply(page.environment)

        assert registry.is_installed("window", "missing") is False
        assert registry.is_installed("window", "open") is False
        assert registry.is_installed("unknown_capability", "x") is False
        assert registry.is_installed("window", "fetch") is True
        assert page.window.open is print
        with pytest.raises(KeyError):
            registry.original("window", "open")
