"""Backend that forwards messages to the host's notification service."""

from __future__ import annotations

from typing import Any

from pi.views.message import LEVELS
from pi.views.view import InstanceMode, View


class NotifyView(View):
    """Sends the buffered content as a single notification.

    One instance serves the whole ``notify`` view; per-call options arrive
    as route options.
    """

    instance = InstanceMode.VIEW

    def is_available(self) -> bool:
        host = self.context.host if self.context is not None else None
        has_notifier = getattr(host, "has_notifier", None)
        return bool(has_notifier and has_notifier())

    def _level(self) -> str:
        levels = [m.level for m in self.messages if m.level in LEVELS]
        if not levels:
            return self.options.get("level", "info")
        return max(levels, key=LEVELS.index)

    def show(self) -> None:
        opts: dict[str, Any] = {"title": self.options.get("title", "")}
        if "timeout" in self.options:
            opts["timeout"] = self.options["timeout"]
        self.host.notify(self.content(), self._level(), opts)  # type: ignore[attr-defined]

    def hide(self) -> None:
        # Notifications expire on their own
        pass
