"""Tests for the backend registry."""

import pytest

from pi.views.backends import NotifyView, PopupView, SplitView
from pi.views.errors import BackendLoadError
from pi.views.registry import BackendRegistry, default_backends
from pi.views.view import View


class _Stub(View):
    def show(self) -> None:
        pass

    def hide(self) -> None:
        pass


def _broken(options, context=None):
    raise ValueError("cannot build")


def test_register_and_create():
    registry = BackendRegistry()
    registry.register("stub", _Stub)
    view = registry.create("stub", {"view": "x"})
    assert isinstance(view, _Stub)
    assert view.options == {"view": "x"}


def test_unknown_backend_raises_load_error():
    registry = BackendRegistry()
    with pytest.raises(BackendLoadError) as exc_info:
        registry.get("missing")
    assert exc_info.value.backend == "missing"
    assert isinstance(exc_info.value, ImportError)


def test_factory_failure_becomes_load_error():
    registry = BackendRegistry()
    registry.register("broken", _broken)
    with pytest.raises(BackendLoadError, match="cannot build"):
        registry.create("broken", {})


def test_unregister():
    registry = BackendRegistry()
    registry.register("a", _Stub)
    registry.register("b", _Stub)
    registry.unregister("a")
    registry.unregister("missing")
    assert registry.names() == ["b"]
    with pytest.raises(BackendLoadError):
        registry.create("a", {})


def test_clear():
    registry = BackendRegistry()
    registry.register("a", _Stub)
    registry.clear()
    assert registry.names() == []


def test_default_backends_have_builtins():
    registry = default_backends()
    assert registry.get("popup") is PopupView
    assert registry.get("split") is SplitView
    assert registry.get("notify") is NotifyView
    assert default_backends() is registry
