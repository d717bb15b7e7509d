"""Exception types raised by the view engine."""

from __future__ import annotations


class ViewError(Exception):
    """Base class for all view engine errors."""


class BackendLoadError(ViewError, ImportError):
    """A backend could not be found or constructed.

    The view cache treats this exactly like a backend that reports itself
    unavailable and moves on to the next candidate.
    """

    def __init__(self, backend: str, reason: str | None = None) -> None:
        self.backend = backend
        self.reason = reason
        msg = f"Unable to load backend {backend!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class MissingImplementationError(ViewError, NotImplementedError):
    """A concrete view did not override a required method."""

    def __init__(self, method: str, view: object) -> None:
        self.method = method
        super().__init__(f"Missing implementation `View.{method}()` for {view!r}")


class HighlighterError(ViewError):
    """A structured highlighter could not be attached to or update a buffer."""

    def __init__(self, lang: str, reason: str) -> None:
        self.lang = lang
        self.reason = reason
        super().__init__(f"Highlighter for {lang!r}: {reason}")
