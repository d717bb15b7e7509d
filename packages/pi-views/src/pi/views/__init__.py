"""pi-views: pluggable notification views with cached backends."""

# Backends
from pi.views.backends import BufferView, NotifyView, PopupView, SplitView

# View cache
from pi.views.cache import CacheEntry, ViewCache

# Configuration
from pi.views.config import Config, deep_merge, load_config, save_config

# Errors
from pi.views.errors import (
    BackendLoadError,
    HighlighterError,
    MissingImplementationError,
    ViewError,
)

# Formatting
from pi.views.format import align, format_message

# Structured highlighters
from pi.views.highlight import MarkdownHighlighter, register_highlighter, start_highlighter

# Host primitives
from pi.views.host import Decoration, Host, MemoryHost

# Messages
from pi.views.message import Chunk, Message

# Option resolution
from pi.views.options import ViewOptions, merge_options, options_equal, resolve

# Backend registry
from pi.views.registry import BackendRegistry, default_backends, register_builtin_backends

# Rendering
from pi.views.render import RenderRegistry, render_messages

# View base
from pi.views.view import InstanceMode, View

__all__ = [
    "BackendLoadError",
    "BackendRegistry",
    "BufferView",
    "CacheEntry",
    "Chunk",
    "Config",
    "Decoration",
    "HighlighterError",
    "Host",
    "InstanceMode",
    "MarkdownHighlighter",
    "MemoryHost",
    "Message",
    "MissingImplementationError",
    "NotifyView",
    "PopupView",
    "RenderRegistry",
    "SplitView",
    "View",
    "ViewCache",
    "ViewError",
    "ViewOptions",
    "align",
    "deep_merge",
    "default_backends",
    "format_message",
    "load_config",
    "merge_options",
    "options_equal",
    "register_builtin_backends",
    "register_highlighter",
    "render_messages",
    "resolve",
    "save_config",
    "start_highlighter",
]
