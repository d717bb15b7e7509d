"""Small helpers shared across the view engine: text width and fault isolation."""

from __future__ import annotations

import unicodedata
from typing import Callable

import grapheme
import wcwidth as _wcwidth

from pi.views.errors import MissingImplementationError

# ---------------------------------------------------------------------------
# Width measurement
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cluster_width(g: str) -> int:
    """Display width of one grapheme cluster."""
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tones, regional indicators
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first) in ("Mn", "Mc", "Me", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def text_width(text: str) -> int:
    """Return the number of terminal cells *text* occupies.

    Tabs count as a single cell; message text is expected to be expanded
    before it reaches a view.
    """
    if not text:
        return 0
    if text.isascii() and text.isprintable():
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(_cluster_width(g) for g in grapheme.graphemes(text))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[text] = total
    return total


# ---------------------------------------------------------------------------
# Fault isolation
# ---------------------------------------------------------------------------


def protect(
    fn: Callable[[], object],
    catch: Callable[[Exception], None] | None = None,
) -> bool:
    """Call *fn*, routing any failure to *catch* instead of the caller.

    Returns ``True`` when *fn* completed and ``False`` when an exception was
    absorbed.  ``MissingImplementationError`` is a programming error and is
    always re-raised.
    """
    try:
        fn()
    except MissingImplementationError:
        raise
    except Exception as e:
        if catch is not None:
            catch(e)
        return False
    return True
