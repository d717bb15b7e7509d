from __future__ import annotations

import pytest

from pi.views.cache import ViewCache
from pi.views.config import Config
from pi.views.host import MemoryHost
from pi.views.registry import BackendRegistry

from .fake_backends import FailingView, PerBackendView, PerViewView, RecordingView, UnavailableView


@pytest.fixture
def host() -> MemoryHost:
    return MemoryHost()


@pytest.fixture
def config() -> Config:
    return Config(views={}, formats={"default": ["{message}"]})


@pytest.fixture
def backends() -> BackendRegistry:
    registry = BackendRegistry()
    registry.register("recording", RecordingView)
    registry.register("unavailable", UnavailableView)
    registry.register("per_view", PerViewView)
    registry.register("per_backend", PerBackendView)
    registry.register("failing", FailingView)
    return registry


@pytest.fixture
def cache(config: Config, host: MemoryHost, backends: BackendRegistry) -> ViewCache:
    return ViewCache(config, host, backends)
