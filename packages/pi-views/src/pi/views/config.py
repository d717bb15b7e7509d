"""View configuration store with JSON persistence.

Holds the per-view default options every view resolution starts from, the
named message formats, and the debug switch.  Settings on disk are merged
over the built-in defaults, nested tables recursively.
"""

from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
CONFIG_FILE_NAME = "views.json"


# --- Deep merge ---


def deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *base*.

    Nested dicts merge key by key; any other override value replaces the base
    value wholesale.  ``None`` means "unset" and leaves the base value alone.
    Neither argument is mutated.
    """
    result = deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)
    return result


# --- Defaults ---


def _default_views() -> dict[str, dict[str, Any]]:
    return {
        "popup": {
            "backend": "popup",
            "size": {"width": "auto", "height": "auto"},
            "position": "50%",
            "win_options": {"wrap": True, "winhighlight": "Normal:PiViewsPopup"},
            "buf_options": {"buftype": "nofile", "modifiable": True},
        },
        "split": {
            "backend": "split",
            "type": "split",
            "size": "20%",
            "position": "bottom",
            "win_options": {"wrap": True},
            "buf_options": {"buftype": "nofile", "modifiable": True},
        },
        "notify": {
            "backend": "notify",
            "fallback": "mini",
            "format": "notify",
            "title": "Notification",
        },
        "mini": {
            "view": "popup",
            "align": "right",
            "size": {"width": "auto", "height": "auto", "max_height": 10},
            "position": {"row": -1, "col": "100%"},
            "format": "level",
        },
        "messages": {
            "view": "split",
            "lang": "markdown",
            "format": "details",
        },
    }


def _default_formats() -> dict[str, list[Any]]:
    return {
        "default": ["{message}"],
        "level": ["{level} ", "{message}"],
        "notify": ["{message}"],
        "details": ["{level} ", "{date} ", "{title} ", "{kind} ", "{message}"],
    }


@dataclass
class Config:
    """View engine configuration."""

    views: dict[str, dict[str, Any]] = field(default_factory=_default_views)
    formats: dict[str, list[Any]] = field(default_factory=_default_formats)
    debug: bool = False
    namespace: str = "pi_views"

    @classmethod
    def default(cls) -> Config:
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a config from settings merged over the built-in defaults."""
        merged = deep_merge(cls().to_dict(), data)
        return cls(
            views=merged["views"],
            formats=merged["formats"],
            debug=bool(merged["debug"]),
            namespace=str(merged["namespace"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "views": deepcopy(self.views),
            "formats": deepcopy(self.formats),
            "debug": self.debug,
            "namespace": self.namespace,
        }

    def get_options(self, view: str) -> dict[str, Any]:
        """Return a deep copy of the default options for *view*.

        A view table naming a different ``view`` inherits that view's
        options, its own keys winning.  Unknown views yield ``{}``.
        """
        seen: set[str] = set()
        chain: list[dict[str, Any]] = []
        name: str | None = view
        while name is not None and name not in seen:
            seen.add(name)
            opts = self.views.get(name)
            if opts is None:
                break
            chain.append(opts)
            parent = opts.get("view")
            name = parent if isinstance(parent, str) and parent != name else None

        result: dict[str, Any] = {}
        for opts in reversed(chain):
            result = deep_merge(result, opts)
        return result


# --- Persistence ---


def default_config_path() -> str:
    """Default settings file (~/.pi/views.json)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, CONFIG_FILE_NAME)


def _load_from_file(path: str) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not os.path.exists(path):
        return {}, None
    try:
        content = Path(path).read_text(encoding="utf-8")
        settings = json.loads(content)
    except (OSError, json.JSONDecodeError) as e:
        return {}, e
    if not isinstance(settings, dict):
        return {}, ValueError(f"Expected a JSON object in {path}")
    return settings, None


def load_config(path: str | None = None) -> Config:
    """Load view settings from *path* over the built-in defaults."""
    path = path or default_config_path()
    settings, error = _load_from_file(path)
    if error is not None:
        logger.warning("Ignoring view settings in %s: %s", path, error)
    return Config.from_dict(settings)


def save_config(config: Config, path: str | None = None) -> None:
    """Write *config* as JSON to *path*."""
    path = path or default_config_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    Path(path).write_text(
        json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
