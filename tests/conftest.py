import os

import pytest

from shapewrap.core.capabilities.registry import reset_wrapper_registry
from shapewrap.core.config import reset_settings
from shapewrap.core.observability.metrics import reset_metrics
from shapewrap.core.shape import clear_registrations, get_shape_cache


@pytest.fixture(scope="session", autouse=True)
def _force_test_env():
    # Deterministic runtime: strict type matching and shape cache on
    os.environ.setdefault("SHAPEWRAP_STRICT_TYPES", "1")
    os.environ.setdefault("SHAPEWRAP_SHAPE_CACHE", "1")


@pytest.fixture(autouse=True)
def _isolated_state():
    """Module-level caches and registries must not leak between tests."""
    reset_settings()
    reset_wrapper_registry()
    get_shape_cache().clear()
    clear_registrations()
    reset_metrics()
    yield
    reset_settings()
    reset_wrapper_registry()
    get_shape_cache().clear()
    clear_registrations()


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "SHAPEWRAP_CONFIG_FILE",
        "SHAPEWRAP_STRICT_TYPES",
        "SHAPEWRAP_SHAPE_CACHE",
        "SHAPEWRAP_PLUGINS_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
