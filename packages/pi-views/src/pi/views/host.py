"""Host editor abstraction.

Views never talk to an editor directly: every buffer, window, decoration and
deferred callback goes through a ``Host``.  ``MemoryHost`` keeps all of that
state in memory and is what the CLI and the test-suite run against.

Line numbers passed to ``Host`` methods are 0-based and ``end=-1`` means
"through the last line", the same convention editor buffer APIs use.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

__all__ = [
    "Decoration",
    "Host",
    "MemoryHost",
]


@dataclass(frozen=True)
class Decoration:
    """A highlight placed on a buffer line."""

    namespace: str
    hl_group: str
    line: int
    col_start: int
    col_end: int


class Host(Protocol):
    """Interface for the editor primitives the view engine needs."""

    def is_running(self) -> bool: ...

    # -- Buffers ------------------------------------------------------------

    def create_buf(self) -> int: ...

    def buf_is_valid(self, buf: int) -> bool: ...

    def delete_buf(self, buf: int) -> None: ...

    def set_buf_options(self, buf: int, options: dict[str, Any]) -> None: ...

    def get_buf_option(self, buf: int, name: str) -> Any: ...

    def get_buf_var(self, buf: int, name: str) -> Any: ...

    def set_buf_var(self, buf: int, name: str, value: Any) -> None: ...

    def line_count(self, buf: int) -> int: ...

    def get_lines(self, buf: int, start: int, end: int) -> list[str]: ...

    def set_lines(self, buf: int, start: int, end: int, lines: list[str]) -> None: ...

    def add_highlight(
        self, buf: int, namespace: str, hl_group: str, line: int, col_start: int, col_end: int
    ) -> None: ...

    def clear_namespace(self, buf: int, namespace: str, start: int, end: int) -> None: ...

    def ignore_events(self) -> contextlib.AbstractContextManager[None]: ...

    # -- Windows ------------------------------------------------------------

    def open_win(self, buf: int, config: dict[str, Any]) -> int: ...

    def win_is_valid(self, win: int) -> bool: ...

    def close_win(self, win: int) -> None: ...

    def set_win_config(self, win: int, config: dict[str, Any]) -> None: ...

    def set_win_options(self, win: int, options: dict[str, Any]) -> None: ...

    def set_cursor(self, win: int, pos: tuple[int, int]) -> None: ...

    def scroll_cursor_top(self, win: int) -> None: ...

    # -- Loop ---------------------------------------------------------------

    def schedule(self, callback: Callable[[], None]) -> None: ...


# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------


@dataclass
class _Buffer:
    lines: list[str] = field(default_factory=lambda: [""])
    options: dict[str, Any] = field(default_factory=dict)
    variables: dict[str, Any] = field(default_factory=dict)
    decorations: list[Decoration] = field(default_factory=list)


@dataclass
class _Window:
    buf: int
    config: dict[str, Any]
    options: dict[str, Any] = field(default_factory=dict)
    cursor: tuple[int, int] = (1, 0)
    topline: int = 1


class MemoryHost:
    """Host that keeps buffers and windows in memory.

    Deferred callbacks queue up until :meth:`run_scheduled` drains them,
    which stands in for the editor's next event-loop tick.
    """

    def __init__(self, running: bool = True) -> None:
        self.running = running
        self.notifier: Callable[[str, str, dict[str, Any]], None] | None = None
        self._buffers: dict[int, _Buffer] = {}
        self._windows: dict[int, _Window] = {}
        self._next_buf = 1
        self._next_win = 1000
        self._pending: list[Callable[[], None]] = []
        self._events_ignored = 0
        self.option_events: list[tuple[int, str]] = []

    def is_running(self) -> bool:
        return self.running

    # -- Buffers ------------------------------------------------------------

    def _buf(self, buf: int) -> _Buffer:
        try:
            return self._buffers[buf]
        except KeyError:
            raise ValueError(f"Invalid buffer id: {buf}") from None

    def create_buf(self) -> int:
        buf = self._next_buf
        self._next_buf += 1
        self._buffers[buf] = _Buffer()
        return buf

    def buf_is_valid(self, buf: int) -> bool:
        return buf in self._buffers

    def delete_buf(self, buf: int) -> None:
        self._buf(buf)
        for win_id in [w for w, win in self._windows.items() if win.buf == buf]:
            del self._windows[win_id]
        del self._buffers[buf]

    def set_buf_options(self, buf: int, options: dict[str, Any]) -> None:
        b = self._buf(buf)
        for name, value in options.items():
            b.options[name] = value
            if not self._events_ignored:
                self.option_events.append((buf, name))

    def get_buf_option(self, buf: int, name: str) -> Any:
        return self._buf(buf).options.get(name)

    def get_buf_var(self, buf: int, name: str) -> Any:
        return self._buf(buf).variables.get(name)

    def set_buf_var(self, buf: int, name: str, value: Any) -> None:
        self._buf(buf).variables[name] = value

    def line_count(self, buf: int) -> int:
        return len(self._buf(buf).lines)

    def _span(self, b: _Buffer, start: int, end: int) -> tuple[int, int]:
        size = len(b.lines)
        stop = size if end == -1 else end
        if start < 0 or start > size or stop < start or stop > size:
            raise IndexError(f"Line range out of bounds: {start}..{end}")
        return start, stop

    def get_lines(self, buf: int, start: int, end: int) -> list[str]:
        b = self._buf(buf)
        lo, hi = self._span(b, start, end)
        return list(b.lines[lo:hi])

    def set_lines(self, buf: int, start: int, end: int, lines: list[str]) -> None:
        b = self._buf(buf)
        lo, hi = self._span(b, start, end)
        b.lines[lo:hi] = list(lines)
        # A buffer always has at least one (possibly empty) line
        if not b.lines:
            b.lines.append("")

    def buffer_lines(self, buf: int) -> list[str]:
        return list(self._buf(buf).lines)

    def add_highlight(
        self, buf: int, namespace: str, hl_group: str, line: int, col_start: int, col_end: int
    ) -> None:
        self._buf(buf).decorations.append(Decoration(namespace, hl_group, line, col_start, col_end))

    def clear_namespace(self, buf: int, namespace: str, start: int, end: int) -> None:
        b = self._buf(buf)
        b.decorations = [
            d
            for d in b.decorations
            if not (d.namespace == namespace and d.line >= start and (end == -1 or d.line < end))
        ]

    def decorations(self, buf: int, namespace: str | None = None) -> list[Decoration]:
        return [d for d in self._buf(buf).decorations if namespace is None or d.namespace == namespace]

    @contextlib.contextmanager
    def ignore_events(self) -> Iterator[None]:
        self._events_ignored += 1
        try:
            yield
        finally:
            self._events_ignored -= 1

    # -- Windows ------------------------------------------------------------

    def _win(self, win: int) -> _Window:
        try:
            return self._windows[win]
        except KeyError:
            raise ValueError(f"Invalid window id: {win}") from None

    def open_win(self, buf: int, config: dict[str, Any]) -> int:
        self._buf(buf)
        win = self._next_win
        self._next_win += 1
        self._windows[win] = _Window(buf=buf, config=dict(config))
        return win

    def win_is_valid(self, win: int) -> bool:
        return win in self._windows

    def close_win(self, win: int) -> None:
        self._win(win)
        del self._windows[win]

    def win_get_buf(self, win: int) -> int:
        return self._win(win).buf

    def get_win_config(self, win: int) -> dict[str, Any]:
        return dict(self._win(win).config)

    def set_win_config(self, win: int, config: dict[str, Any]) -> None:
        self._win(win).config.update(config)

    def set_win_options(self, win: int, options: dict[str, Any]) -> None:
        self._win(win).options.update(options)

    def get_win_option(self, win: int, name: str) -> Any:
        return self._win(win).options.get(name)

    def set_cursor(self, win: int, pos: tuple[int, int]) -> None:
        self._win(win).cursor = (pos[0], pos[1])

    def get_cursor(self, win: int) -> tuple[int, int]:
        return self._win(win).cursor

    def scroll_cursor_top(self, win: int) -> None:
        w = self._win(win)
        w.topline = w.cursor[0]

    def get_topline(self, win: int) -> int:
        return self._win(win).topline

    def windows(self) -> list[int]:
        return list(self._windows)

    # -- Notifications ------------------------------------------------------

    def has_notifier(self) -> bool:
        return self.notifier is not None

    def notify(self, text: str, level: str, options: dict[str, Any]) -> None:
        if self.notifier is None:
            raise RuntimeError("No notifier configured")
        self.notifier(text, level, options)

    # -- Loop ---------------------------------------------------------------

    def schedule(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_scheduled(self) -> int:
        """Run every queued callback (including ones queued meanwhile)."""
        ran = 0
        while self._pending:
            callback = self._pending.pop(0)
            callback()
            ran += 1
        return ran
