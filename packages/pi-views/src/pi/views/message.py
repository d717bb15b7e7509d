"""Message model: lines of highlighted text chunks that know how to render."""

from __future__ import annotations

import itertools
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from pi.views.utils import text_width

if TYPE_CHECKING:
    from pi.views.host import Host

__all__ = ["Chunk", "Message", "LEVELS"]

# Ordered from least to most severe
LEVELS = ("trace", "debug", "info", "warn", "error")

_ids = itertools.count(1)


@dataclass
class Chunk:
    text: str
    hl_group: str | None = None


@dataclass
class Message:
    """A message made of lines, each line a list of :class:`Chunk`."""

    kind: str = ""
    level: str = "info"
    title: str = ""
    lines: list[list[Chunk]] = field(default_factory=list)
    created: datetime = field(default_factory=datetime.now)
    id: int = field(default_factory=lambda: next(_ids))

    @classmethod
    def from_text(cls, text: str, hl_group: str | None = None, **kwargs: object) -> Message:
        msg = cls(**kwargs)  # type: ignore[arg-type]
        msg.append(text, hl_group)
        return msg

    # -- Building -----------------------------------------------------------

    def newline(self) -> Message:
        self.lines.append([])
        return self

    def append(self, text: str, hl_group: str | None = None) -> Message:
        """Append *text* to the last line; embedded newlines start new lines."""
        for i, part in enumerate(text.split("\n")):
            if i > 0 or not self.lines:
                self.lines.append([])
            if part:
                self.lines[-1].append(Chunk(part, hl_group))
        return self

    def copy(self) -> Message:
        """Return a detached copy that keeps the same id."""
        return deepcopy(self)

    # -- Measuring ----------------------------------------------------------

    def line_text(self, index: int) -> str:
        return "".join(c.text for c in self.lines[index])

    def height(self) -> int:
        return len(self.lines)

    def width(self) -> int:
        return max((text_width(self.line_text(i)) for i in range(len(self.lines))), default=0)

    def content(self) -> str:
        return "\n".join(self.line_text(i) for i in range(len(self.lines)))

    # -- Rendering ----------------------------------------------------------

    def render(self, host: Host, buf: int, namespace: str, line: int) -> None:
        """Write this message into *buf* starting at 1-based *line*."""
        start = line - 1
        end = min(start + self.height(), host.line_count(buf))
        host.set_lines(buf, start, end, [self.line_text(i) for i in range(len(self.lines))])
        self.highlight(host, buf, namespace, line)

    def highlight(self, host: Host, buf: int, namespace: str, line: int) -> None:
        """Place chunk highlights for this message starting at 1-based *line*."""
        for row, chunks in enumerate(self.lines):
            col = 0
            for chunk in chunks:
                end = col + len(chunk.text)
                if chunk.hl_group:
                    host.add_highlight(buf, namespace, chunk.hl_group, line - 1 + row, col, end)
                col = end
