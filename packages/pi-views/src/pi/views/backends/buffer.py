"""Backends that paint messages into a host buffer shown in a window."""

from __future__ import annotations

from typing import Any

from pi.views.view import View

# Options that change how the window is laid out.  Drift in any of them means
# the window has to be reopened.
_LAYOUT_KEYS = ("type", "size", "position", "border", "relative")


class BufferView(View):
    """A view owning one buffer and, while visible, one window."""

    default_type = "popup"

    def __init__(self, options: dict[str, Any] | None = None, *, context: Any = None) -> None:
        self.buf: int | None = None
        self.win: int | None = None
        super().__init__(options, context=context)

    def update_options(self) -> None:
        self.options.setdefault("type", self.default_type)

    def is_available(self) -> bool:
        return self.context is not None and self.context.host is not None

    def _win_config(self) -> dict[str, Any]:
        return {
            "type": self.options.get("type"),
            "position": self.options.get("position"),
            "size": self.options.get("size"),
            "height": self.height(),
            "width": self.width(),
        }

    def _mount(self) -> None:
        host = self.host
        if self.buf is None or not host.buf_is_valid(self.buf):
            self.buf = host.create_buf()
        if self.win is None or not host.win_is_valid(self.win):
            self.win = host.open_win(self.buf, self._win_config())
            self.set_win_options(self.win)
        else:
            host.set_win_config(self.win, self._win_config())

    def show(self) -> None:
        self._mount()
        assert self.buf is not None and self.win is not None
        self.tick += 1
        self.render(self.buf)
        self.host.set_cursor(self.win, (1, 0))

    def hide(self) -> None:
        if self.win is not None and self.host.win_is_valid(self.win):
            self.host.close_win(self.win)
        self.win = None

    def reset(self, old: dict[str, Any], new: dict[str, Any]) -> None:
        layout_changed = any(old.get(k) != new.get(k) for k in _LAYOUT_KEYS)
        if layout_changed or old.get("win_options") != new.get("win_options"):
            self.hide()

    def destroy(self) -> None:
        if self.context is None or self.context.host is None:
            return
        host = self.host
        if self.win is not None and host.win_is_valid(self.win):
            host.close_win(self.win)
        if self.buf is not None and host.buf_is_valid(self.buf):
            host.delete_buf(self.buf)
        self.win = None
        self.buf = None


class PopupView(BufferView):
    """Floating window backend."""

    default_type = "popup"


class SplitView(BufferView):
    """Split window backend."""

    default_type = "split"
