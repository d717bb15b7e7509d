"""View base class: message buffer, option layering and the display pipeline.

A view holds the messages queued for display and delegates the actual
painting to ``show()``/``hide()``, which every backend must implement.  The
optional hooks ``update_options()``, ``reset()`` and ``destroy()`` default to
no-ops.

Options come in three layers::

    options = merge(view_options, route_options)

``view_options`` is the snapshot taken at construction and never changes,
``route_options`` are the latest per-call overrides from the dispatch layer,
and ``options`` is recomputed from both on every ``check_options()``.
"""

from __future__ import annotations

import enum
import itertools
import logging
from collections.abc import Sequence
from copy import deepcopy
from typing import TYPE_CHECKING, Any, Union

from pi.views.config import Config
from pi.views.errors import MissingImplementationError
from pi.views.format import align, format_message
from pi.views.message import Message
from pi.views.options import merge_options, options_equal
from pi.views.render import RenderRegistry, render_messages
from pi.views.utils import protect

if TYPE_CHECKING:
    from pi.views.cache import ViewCache
    from pi.views.host import Host

logger = logging.getLogger(__name__)

__all__ = ["InstanceMode", "View"]


class InstanceMode(str, enum.Enum):
    """How far a view instance is shared by the view cache."""

    OPTIONS = "opts"
    """One instance per distinct set of resolved options."""
    VIEW = "view"
    """One instance per view name; option changes go through ``check_options``."""
    BACKEND = "backend"
    """One instance shared by every view using the same backend."""


_ids = itertools.count(1)


class View:
    """Base class for all backends."""

    instance: InstanceMode = InstanceMode.OPTIONS

    def __init__(self, options: dict[str, Any] | None = None, *, context: ViewCache | None = None) -> None:
        self.id = next(_ids)
        self.tick = 0
        self.messages: list[Message] = []
        self.options: dict[str, Any] = options if options is not None else {}
        self.view_options: dict[str, Any] = deepcopy(self.options)
        self.route_options: dict[str, Any] = {}
        self.visible = False
        self.errors = 0
        self.context = context
        self.update_options()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} view={self.options.get('view')!r}>"

    # -- Collaborators ------------------------------------------------------

    @property
    def config(self) -> Config:
        if self.context is not None:
            return self.context.config
        return Config.default()

    @property
    def host(self) -> Host:
        if self.context is None:
            raise RuntimeError(f"{self!r} is not attached to a host")
        return self.context.host

    @property
    def render_registry(self) -> RenderRegistry:
        if self.context is None:
            raise RuntimeError(f"{self!r} is not attached to a view cache")
        return self.context.renders

    # -- Hooks --------------------------------------------------------------

    def is_available(self) -> bool:
        return True

    def update_options(self) -> None:
        """Called after ``options`` is (re)computed."""

    def reset(self, old: dict[str, Any], new: dict[str, Any]) -> None:
        """Called when ``check_options`` finds the effective options changed."""

    def destroy(self) -> None:
        """Release backend-owned resources.  Must be safe to call repeatedly."""

    def show(self) -> None:
        raise MissingImplementationError("show", self)

    def hide(self) -> None:
        raise MissingImplementationError("hide", self)

    # -- Message buffer -----------------------------------------------------

    def push(self, messages: Union[Message, Sequence[Message]], *, format: bool = True) -> None:
        """Append one or more messages, formatting them unless ``format=False``."""
        if isinstance(messages, Message):
            messages = [messages]
        for message in messages:
            if format:
                message = format_message(message, self.options.get("format"), self.config.formats)
            self.messages.append(message)

    def clear(self) -> None:
        self.messages = []
        self.route_options = {}

    def dismiss(self) -> None:
        self.clear()

    def set(self, messages: Union[Message, Sequence[Message]], *, format: bool = True) -> None:
        """Replace the buffered messages."""
        self.clear()
        self.push(messages, format=format)

    def set_route_options(self, options: dict[str, Any] | None) -> None:
        """Store per-call overrides, applied on the next ``check_options``."""
        self.route_options = deepcopy(options) if options else {}

    # -- Options ------------------------------------------------------------

    def check_options(self) -> None:
        old = deepcopy(self.options)
        self.options = merge_options(self.view_options, self.route_options)
        self.update_options()
        if not options_equal(old, self.options):
            self.reset(old, self.options)

    # -- Display pipeline ---------------------------------------------------

    def debug(self, msg: object, exc: BaseException | None = None) -> None:
        """Log *msg* with a full trace when debugging, a single warning otherwise."""
        view = self.options.get("view")
        if self.config.debug:
            logger.debug("[%s] %s", view, msg, exc_info=exc, stack_info=exc is None)
        elif exc is not None:
            logger.warning("[%s] %s", view, msg)

    def _show(self) -> None:
        self.errors += 1
        self.show()
        self.errors = 0

    def _recover(self, method: str, err: Exception) -> None:
        self.debug(f"{method}() failed ({self.errors} consecutive): {err!r}", exc=err)
        protect(self.destroy, lambda e: self.debug(f"destroy() failed: {e!r}", exc=e))

    def display(self) -> bool:
        """Show buffered messages, or hide the view when there are none.

        Failures raised by the backend are logged and the backend resources
        are destroyed so the next call starts from scratch; they never reach
        the caller.
        """
        if self.messages:
            align(self.messages, self.options.get("align"))
            self.check_options()
            # A failed show destroys the backend, so nothing is left to hide
            self.visible = protect(self._show, lambda e: self._recover("show", e))
        else:
            if self.visible:
                protect(self.hide, lambda e: self._recover("hide", e))
            self.visible = False
        return True

    # -- Measuring ----------------------------------------------------------

    def height(self, messages: Sequence[Message] | None = None) -> int:
        return sum(m.height() for m in (self.messages if messages is None else messages))

    def width(self, messages: Sequence[Message] | None = None) -> int:
        return max((m.width() for m in (self.messages if messages is None else messages)), default=0)

    def content(self) -> str:
        return "\n".join(m.content() for m in self.messages)

    # -- Rendering helpers for buffer-backed views --------------------------

    def set_win_options(self, win: int) -> None:
        """Apply ``win_options`` to *win* and move the cursor to the top."""
        host = self.host
        win_options = self.options.get("win_options")
        if win_options:
            host.set_win_options(win, win_options)
        host.set_cursor(win, (1, 0))

        if self.options.get("type") == "split":

            def fix_cursor() -> None:
                # The window may have been closed before this runs
                if host.win_is_valid(win):
                    host.set_cursor(win, (1, 0))
                    host.scroll_cursor_top(win)

            host.schedule(fix_cursor)

    def render(
        self,
        buf: int,
        *,
        offset: int = 1,
        highlight: bool = False,
        messages: Sequence[Message] | None = None,
    ) -> None:
        """Render messages into *buf* starting at 1-based line *offset*.

        With ``highlight=True`` only decorations are re-applied.
        """
        render_messages(
            self.host,
            self.render_registry,
            buf,
            self.messages if messages is None else messages,
            self.options,
            self.config.namespace,
            offset=offset,
            highlight=highlight,
        )
