"""Option resolution: merging config defaults, view options and route overrides."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import TYPE_CHECKING, Any, TypedDict, Union

from pi.views.config import deep_merge

if TYPE_CHECKING:
    from pi.views.config import Config

__all__ = [
    "ViewOptions",
    "merge_options",
    "options_equal",
    "resolve",
]


class ViewOptions(TypedDict, total=False):
    """Option keys the engine itself reads.  Backends accept more."""

    view: str
    backend: Union[str, list[str]]
    render: Union[str, list[str]]
    fallback: str
    format: Union[str, list[Any]]
    align: str
    lang: str
    buf_options: dict[str, Any]
    win_options: dict[str, Any]
    type: str


def resolve(
    view_name: str,
    caller_options: Mapping[str, Any] | None,
    config: Config,
) -> dict[str, Any]:
    """Build the effective options for *view_name*.

    The config defaults for the view form the base layer, *caller_options*
    are merged on top and ``view`` is stamped last.  ``backend`` falls back to
    ``render`` and then to the view name, and always comes back as a
    non-empty list.  *caller_options* is left untouched.
    """
    opts = deep_merge(config.get_options(view_name), dict(caller_options or {}))
    opts["view"] = view_name

    backend = opts.get("backend") or opts.get("render") or view_name
    if isinstance(backend, str):
        backends = [backend]
    else:
        backends = [b for b in backend if b] or [view_name]
    opts["backend"] = backends
    return opts


def merge_options(
    view_options: Mapping[str, Any],
    route_options: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Merge per-call route overrides over a view's static options."""
    return deep_merge(deepcopy(dict(view_options)), dict(route_options or {}))


def _canonical(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def options_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    """Structural equality of two option tables.

    Dict key order is irrelevant and tuples compare equal to lists.
    """
    return _canonical(a or {}) == _canonical(b or {})
