"""Structured (parser based) highlighters attached to buffers by language.

A highlighter is attached once per buffer and stored in the buffer variable
``HIGHLIGHTER_VAR``; the render adapter asks it to ``update()`` after text
changes.  Languages without a registered highlighter raise
``HighlighterError`` so the caller can fall back to a plain syntax tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

from markdown_it import MarkdownIt

from pi.views.errors import HighlighterError

if TYPE_CHECKING:
    from pi.views.host import Host

HIGHLIGHTER_VAR = "structured_highlighter"
SYNTAX_NAMESPACE = "pi_views_syntax"


class Highlighter(Protocol):
    lang: str

    def update(self) -> None: ...


HighlighterFactory = Callable[["Host", int], Highlighter]

_highlighters: dict[str, HighlighterFactory] = {}


def register_highlighter(lang: str, factory: HighlighterFactory) -> None:
    _highlighters[lang] = factory


def get_highlighter(host: Host, buf: int) -> Highlighter | None:
    """Return the highlighter attached to *buf*, if any."""
    return host.get_buf_var(buf, HIGHLIGHTER_VAR)


def start_highlighter(host: Host, buf: int, lang: str) -> Highlighter:
    """Attach the highlighter for *lang* to *buf* and run it once."""
    factory = _highlighters.get(lang)
    if factory is None:
        raise HighlighterError(lang, "not registered")
    try:
        highlighter = factory(host, buf)
        highlighter.update()
    except HighlighterError:
        raise
    except Exception as e:
        raise HighlighterError(lang, str(e)) from e
    host.set_buf_var(buf, HIGHLIGHTER_VAR, highlighter)
    return highlighter


def update_highlighter(host: Host, buf: int) -> None:
    """Re-run the highlighter attached to *buf*, if any.

    A highlighter that fails is detached before ``HighlighterError`` is raised.
    """
    highlighter = get_highlighter(host, buf)
    if highlighter is None:
        return
    try:
        highlighter.update()
    except Exception as e:
        host.set_buf_var(buf, HIGHLIGHTER_VAR, None)
        raise HighlighterError(highlighter.lang, str(e)) from e


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

_md_parser = MarkdownIt("commonmark")

_BLOCK_HL = {
    "heading_open": "PiViewsMarkdownHeading",
    "fence": "PiViewsMarkdownCode",
    "code_block": "PiViewsMarkdownCode",
    "blockquote_open": "PiViewsMarkdownQuote",
}


class MarkdownHighlighter:
    """Highlights headings, code blocks and quotes of a markdown buffer."""

    lang = "markdown"

    def __init__(self, host: Host, buf: int) -> None:
        self._host = host
        self._buf = buf

    def update(self) -> None:
        host, buf = self._host, self._buf
        if not host.buf_is_valid(buf):
            return
        lines = host.get_lines(buf, 0, -1)
        host.clear_namespace(buf, SYNTAX_NAMESPACE, 0, -1)

        for token in _md_parser.parse("\n".join(lines)):
            hl = _BLOCK_HL.get(token.type)
            if hl is None or token.map is None:
                continue
            start, end = token.map
            for row in range(start, min(end, len(lines))):
                host.add_highlight(buf, SYNTAX_NAMESPACE, hl, row, 0, len(lines[row]))


register_highlighter("markdown", MarkdownHighlighter)
