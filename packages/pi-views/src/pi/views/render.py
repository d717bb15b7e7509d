"""Render adapter: projects a view's messages into a host buffer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pi.views.errors import HighlighterError
from pi.views.highlight import get_highlighter, start_highlighter, update_highlighter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pi.views.host import Host
    from pi.views.message import Message

logger = logging.getLogger(__name__)


class RenderRegistry:
    """Remembers which messages were last rendered into each buffer."""

    def __init__(self) -> None:
        self._buffers: dict[int, list[Message]] = {}
        self._offsets: dict[int, int] = {}

    def set(self, buf: int, messages: Sequence[Message], offset: int = 1) -> None:
        self._buffers[buf] = list(messages)
        self._offsets[buf] = offset

    def get(self, buf: int) -> list[Message]:
        return list(self._buffers.get(buf, []))

    def message_at(self, buf: int, line: int) -> Message | None:
        """Return the message that produced 1-based *line* of *buf*."""
        current = self._offsets.get(buf, 1)
        for message in self._buffers.get(buf, []):
            height = message.height()
            if current <= line < current + height:
                return message
            current += height
        return None

    def buffers(self) -> list[int]:
        return list(self._buffers)


def _plain_syntax(host: Host, buf: int, lang: str, err: HighlighterError) -> None:
    logger.debug("Falling back to plain syntax for %s: %s", lang, err)
    try:
        host.set_buf_options(buf, {"syntax": lang})
    except Exception:
        logger.debug("Could not set syntax=%s on buffer %s", lang, buf, exc_info=True)


def _start_syntax(host: Host, buf: int, lang: str) -> None:
    if get_highlighter(host, buf) is not None:
        return
    try:
        start_highlighter(host, buf, lang)
    except HighlighterError as e:
        _plain_syntax(host, buf, lang, e)


def render_messages(
    host: Host,
    registry: RenderRegistry,
    buf: int,
    messages: Sequence[Message],
    options: dict[str, Any],
    namespace: str,
    *,
    offset: int = 1,
    highlight: bool = False,
) -> None:
    """Render *messages* into *buf* from 1-based line *offset* on.

    With *highlight* set the buffer text is left alone and only decorations
    are re-applied.
    """
    if not host.is_running():
        return

    buf_options = options.get("buf_options")
    if buf_options:
        with host.ignore_events():
            host.set_buf_options(buf, buf_options)

    lang = options.get("lang")
    if lang:
        _start_syntax(host, buf, lang)

    start = min(offset - 1, host.line_count(buf))
    host.clear_namespace(buf, namespace, start, -1)
    registry.set(buf, messages, start + 1)

    if not highlight:
        host.set_lines(buf, start, -1, [])

    linenr = start + 1
    for message in messages:
        if highlight:
            message.highlight(host, buf, namespace, linenr)
        else:
            message.render(host, buf, namespace, linenr)
        linenr += message.height()

    if not highlight:
        try:
            update_highlighter(host, buf)
        except HighlighterError as e:
            _plain_syntax(host, buf, e.lang, e)
