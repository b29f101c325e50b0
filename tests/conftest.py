"""
Pytest configuration for the metaversion test suite.

Every test runs with a clean environment: no METAVERSION_* variables,
no .env file in the working directory, quiet logging, and no cached
process registry.
"""

import pytest

from metaversion.env import Env
from metaversion.logging import LoggingConfig
from metaversion.protocol import CompatibilityRegistry, Version, reset_registry


BUILD_VERSION = Version(260205, 0, 0)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for envar_name in Env.types_map():
        monkeypatch.delenv(envar_name, raising=False)

    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def configure_log_level():
    config = LoggingConfig()
    config.set_defaults(log_level="error", log_output="stderr", disabled_loggers=[])
    config.update(log_level="error", log_output="stderr", disabled_loggers=[])
    yield
    config.set_defaults(log_level="error", log_output="stderr", disabled_loggers=[])
    config.update(log_level="error", log_output="stderr", disabled_loggers=[])


@pytest.fixture(autouse=True)
def fresh_registry():
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def build_version() -> Version:
    return BUILD_VERSION


@pytest.fixture
def build_registry() -> CompatibilityRegistry:
    return CompatibilityRegistry.from_history(BUILD_VERSION)
