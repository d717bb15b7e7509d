"""Message formatting and alignment.

A format spec is a list of items.  String items mix literal text with
``{field}`` placeholders; an item whose placeholders all expand to nothing is
dropped entirely, so ``"{title} "`` leaves no stray space for untitled
messages.  Callable items receive the message and return plain text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Union

from pi.views.message import Chunk, Message
from pi.views.utils import text_width

logger = logging.getLogger(__name__)

FormatItem = Union[str, Callable[[Message], str]]
FormatSpec = Union[str, Sequence[FormatItem], None]

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

_FIELD_HL = {
    "title": "PiViewsTitle",
    "kind": "PiViewsKind",
    "date": "PiViewsDate",
}


def _level_hl(level: str) -> str:
    return f"PiViewsLevel{level.capitalize()}"


def _field_text(message: Message, name: str) -> str:
    if name == "level":
        return message.level.upper()
    if name == "title":
        return message.title
    if name == "kind":
        return message.kind
    if name == "date":
        return message.created.strftime("%H:%M:%S")
    raise KeyError(name)


def _resolve_spec(spec: FormatSpec, formats: Mapping[str, Sequence[Any]] | None) -> list[FormatItem]:
    if spec is None:
        spec = "default"
    if isinstance(spec, str):
        named = (formats or {}).get(spec)
        if named is None:
            logger.debug("Unknown format %r, using the message as is", spec)
            return ["{message}"]
        return list(named)
    return list(spec)


def _apply_item(item: FormatItem, message: Message, out: Message) -> None:
    if callable(item):
        text = item(message)
        if text:
            out.append(text)
        return

    parts = _PLACEHOLDER_RE.split(item)
    # Odd indices are field names
    fields = parts[1::2]
    if fields and all(
        (f == "message" and message.height() == 0) or (f != "message" and not _safe_field(message, f))
        for f in fields
    ):
        return

    for i, part in enumerate(parts):
        if i % 2 == 0:
            if part:
                out.append(part)
        elif part == "message":
            for row, chunks in enumerate(message.lines):
                if row > 0:
                    out.newline()
                elif not out.lines:
                    out.newline()
                out.lines[-1].extend(Chunk(c.text, c.hl_group) for c in chunks)
        else:
            text = _safe_field(message, part)
            if text:
                hl = _level_hl(message.level) if part == "level" else _FIELD_HL.get(part)
                out.append(text, hl)


def _safe_field(message: Message, name: str) -> str:
    try:
        return _field_text(message, name)
    except KeyError:
        logger.debug("Unknown format field {%s}", name)
        return ""


def format_message(
    message: Message,
    spec: FormatSpec = None,
    formats: Mapping[str, Sequence[Any]] | None = None,
) -> Message:
    """Return a new message laid out according to *spec*.

    The original message is not modified; the result keeps its id, kind,
    level, title and timestamp.
    """
    items = _resolve_spec(spec, formats)
    out = message.copy()
    out.lines = []
    for item in items:
        _apply_item(item, message, out)
    return out


def align(messages: list[Message], how: str | None) -> None:
    """Pad *messages* in place so they line up against the widest one.

    ``left`` (or ``None``) leaves messages untouched; ``right`` pads every line
    on the left and ``center`` splits the padding over both sides.  Aligning
    an already aligned list is a no-op.
    """
    if how in (None, "left"):
        return
    if how not in ("right", "center"):
        logger.debug("Unknown alignment %r, leaving messages as is", how)
        return

    width = max((m.width() for m in messages), default=0)
    for message in messages:
        for i, chunks in enumerate(message.lines):
            gap = width - text_width(message.line_text(i))
            if gap <= 0:
                continue
            pad = gap if how == "right" else gap // 2
            if pad > 0:
                chunks.insert(0, Chunk(" " * pad))
            if gap - pad > 0:
                chunks.append(Chunk(" " * (gap - pad)))
