"""Backend registry mapping backend names to view factories."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pi.views.errors import BackendLoadError

if TYPE_CHECKING:
    from pi.views.cache import ViewCache
    from pi.views.view import View

BackendFactory = Callable[..., "View"]


class BackendRegistry:
    """Table of backend factories keyed by backend name.

    A factory is called as ``factory(options, context=cache)`` and must return
    a :class:`~pi.views.view.View`.
    """

    def __init__(self) -> None:
        self._backends: dict[str, BackendFactory] = {}

    def register(self, name: str, factory: BackendFactory) -> None:
        """Register (or replace) the factory for *name*."""
        self._backends[name] = factory

    def unregister(self, name: str) -> None:
        self._backends.pop(name, None)

    def get(self, name: str) -> BackendFactory:
        """Return the factory for *name* or raise ``BackendLoadError``."""
        factory = self._backends.get(name)
        if factory is None:
            raise BackendLoadError(name, "no such backend")
        return factory

    def create(self, name: str, options: dict[str, Any], context: ViewCache | None = None) -> View:
        """Construct a view for backend *name*.

        Any failure inside the factory is reported as ``BackendLoadError``.
        """
        factory = self.get(name)
        try:
            return factory(options, context=context)
        except BackendLoadError:
            raise
        except Exception as e:
            raise BackendLoadError(name, str(e)) from e

    def names(self) -> list[str]:
        return list(self._backends)

    def clear(self) -> None:
        self._backends.clear()


def register_builtin_backends(registry: BackendRegistry) -> None:
    """Register the bundled backends."""
    from pi.views.backends import NotifyView, PopupView, SplitView

    registry.register("popup", PopupView)
    registry.register("split", SplitView)
    registry.register("notify", NotifyView)


_default_registry: BackendRegistry | None = None


def default_backends() -> BackendRegistry:
    """Return the shared registry holding the built-in backends."""
    global _default_registry
    if _default_registry is None:
        _default_registry = BackendRegistry()
        register_builtin_backends(_default_registry)
    return _default_registry
