"""Fake view backends that record what the display pipeline asks of them."""

from __future__ import annotations

from typing import Any

from pi.views.view import InstanceMode, View


class RecordingView(View):
    """Backend that records show/hide/reset/destroy calls."""

    def __init__(self, options: dict[str, Any] | None = None, *, context: Any = None) -> None:
        self.calls: list[str] = []
        self.resets: list[tuple[dict[str, Any], dict[str, Any]]] = []
        super().__init__(options, context=context)

    def show(self) -> None:
        self.calls.append("show")

    def hide(self) -> None:
        self.calls.append("hide")

    def reset(self, old: dict[str, Any], new: dict[str, Any]) -> None:
        self.resets.append((old, new))

    def destroy(self) -> None:
        self.calls.append("destroy")


class UnavailableView(RecordingView):
    def is_available(self) -> bool:
        return False


class PerViewView(RecordingView):
    instance = InstanceMode.VIEW


class PerBackendView(RecordingView):
    instance = InstanceMode.BACKEND


class FailingView(RecordingView):
    """Backend whose show() always raises."""

    def show(self) -> None:
        self.calls.append("show")
        raise RuntimeError("boom")
