"""View cache: resolves a view name to a live backend instance.

Entries are kept for the lifetime of the cache and scanned in registration
order on every lookup; the first reusable entry wins.  Nothing is ever
evicted, so the order in which views were first requested decides which
instance later lookups return.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pi.views.config import Config
from pi.views.errors import BackendLoadError
from pi.views.options import options_equal, resolve
from pi.views.registry import BackendRegistry, default_backends
from pi.views.render import RenderRegistry
from pi.views.view import InstanceMode

if TYPE_CHECKING:
    from pi.views.host import Host
    from pi.views.view import View

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    view: View
    options: dict[str, Any]
    """Resolved options at creation time, with ``backend`` narrowed to one name."""


class ViewCache:
    """Owns the live views plus the collaborators they render through."""

    def __init__(
        self,
        config: Config | None = None,
        host: Host | None = None,
        backends: BackendRegistry | None = None,
    ) -> None:
        self.config = config or Config.default()
        self.host = host
        self.backends = backends if backends is not None else default_backends()
        self.renders = RenderRegistry()
        self._entries: list[CacheEntry] = []

    @property
    def entries(self) -> list[CacheEntry]:
        return list(self._entries)

    def _find(self, options: dict[str, Any], backend: str) -> View | None:
        for entry in self._entries:
            instance = entry.view.instance
            if entry.options.get("view") == options["view"]:
                if instance == InstanceMode.OPTIONS and options_equal(options, entry.options):
                    return entry.view
                if instance == InstanceMode.VIEW:
                    return entry.view
            if entry.options.get("backend") == backend and instance == InstanceMode.BACKEND:
                return entry.view
        return None

    def get_view(
        self,
        view: str,
        options: dict[str, Any] | None = None,
        _seen: frozenset[str] = frozenset(),
    ) -> View | None:
        """Return a view for *view*, reusing a cached instance when allowed.

        Candidate backends are tried in order; a backend that cannot be loaded
        or reports itself unavailable is skipped.  When none works the
        ``fallback`` view is tried with the original *options*.  Returns
        ``None`` once the whole chain is exhausted.
        """
        original = deepcopy(options) if options is not None else None
        opts = resolve(view, options, self.config)
        candidates: list[str] = opts["backend"]

        for backend in candidates:
            opts["backend"] = backend

            cached = self._find(opts, backend)
            if cached is not None:
                return cached

            init_opts = deepcopy(opts)
            try:
                # Each candidate gets its own copy; update_options() may mutate it
                ret = self.backends.create(backend, deepcopy(opts), context=self)
            except BackendLoadError as e:
                logger.debug("Skipping backend %s for view %s: %s", backend, view, e)
                continue
            if self._available(ret):
                self._entries.append(CacheEntry(view=ret, options=init_opts))
                return ret
            logger.debug("Backend %s for view %s is not available", backend, view)

        fallback = opts.get("fallback")
        if fallback and fallback not in _seen | {view}:
            logger.debug("No backend available for view %s, falling back to %s", view, fallback)
            return self.get_view(fallback, original, _seen | {view})
        return None

    def _available(self, view: View) -> bool:
        try:
            return bool(view.is_available())
        except Exception:
            logger.debug("is_available() failed for %r", view, exc_info=True)
            return False
