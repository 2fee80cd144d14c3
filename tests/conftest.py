"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from classmite import EngineSettings, Registry, api


@pytest.fixture
def settings():
    """Settings independent of the environment."""
    return EngineSettings(autoload=False, _env_file=None)


@pytest.fixture
def registry(settings):
    """Fresh Registry instance."""
    return Registry(settings)


@pytest.fixture
def global_registry():
    """Fresh global registry, restored afterwards."""
    previous = api.get_registry()
    fresh = api.reset_registry(EngineSettings(_env_file=None))
    yield fresh
    api._registry = previous


@pytest.fixture
def diamond(registry):
    """A <- B, A <- C, D(B, C), each hook appending its name to ``order``."""
    order: list[str] = []
    for name in "ABCD":
        registry.declare_type(name)
        registry.set_init_hook(name, lambda inst, args, n=name: order.append(n))
    registry.add_parent("B", "A")
    registry.add_parent("C", "A")
    registry.add_parent("D", "B", "C")
    return registry, order
