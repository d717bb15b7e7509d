"""Bundled view backends."""

from pi.views.backends.buffer import BufferView, PopupView, SplitView
from pi.views.backends.notify import NotifyView

__all__ = [
    "BufferView",
    "NotifyView",
    "PopupView",
    "SplitView",
]
