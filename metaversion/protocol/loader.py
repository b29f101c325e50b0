"""
Process-wide registry handle.

The registry is built once, on the first call to `registry()` or on
an explicit `configure()` at startup. Concurrent first callers block
on a lock until the single build completes. A failed build raises to
every caller and is not cached, so a misconfigured process never
serves with a partial registry.
"""

from __future__ import annotations

import threading

from metaversion.env import Env, load_env
from metaversion.logging import LoggingConfig, logger
from metaversion.metadata import __version__

from .compatibility import LOGGER_NAME as COMPATIBILITY_LOGGER_NAME
from .compatibility_registry import LOGGER_NAME as REGISTRY_LOGGER_NAME
from .compatibility_registry import CompatibilityRegistry
from .version import Version


_registry: CompatibilityRegistry | None = None
_registry_lock = threading.Lock()


def version_str(env: Env | None = None) -> str:
    """
    The running build's version string.

    METAVERSION_BUILD_VERSION replaces the packaged version when set.
    """
    if env is None:
        env = load_env(Env)

    return env.METAVERSION_BUILD_VERSION or __version__


def current_version(env: Env | None = None) -> Version:
    """
    The running build's version.

    Raises:
        VersionParseError: If the build version is not a numeric
            major.minor.patch triple.
    """
    return Version.parse(version_str(env))


def configure(env: Env | None = None) -> CompatibilityRegistry:
    """
    Apply logging settings and build the process registry.

    The log level and output become the process defaults seen by every
    thread. When METAVERSION_LOG_PATH is set, registry and peer check
    events are both written to that file.

    Calling it again after a successful build returns the existing
    registry unchanged.
    """
    global _registry

    if _registry is not None:
        return _registry

    with _registry_lock:
        if _registry is None:
            if env is None:
                env = load_env(Env)

            LoggingConfig().set_defaults(
                log_level=env.METAVERSION_LOG_LEVEL,
                log_output=env.METAVERSION_LOG_OUTPUT,
            )

            if env.METAVERSION_LOG_PATH:
                for logger_name in (REGISTRY_LOGGER_NAME, COMPATIBILITY_LOGGER_NAME):
                    logger.configure(
                        name=logger_name,
                        path=env.METAVERSION_LOG_PATH,
                    )

            _registry = CompatibilityRegistry.load(current_version(env))

        return _registry


def registry() -> CompatibilityRegistry:
    """The validated registry for the running build."""
    registry = _registry
    if registry is None:
        registry = configure()

    return registry


def reset_registry():
    """Drop the process registry. Intended for tests."""
    global _registry

    with _registry_lock:
        _registry = None


def min_compatible_server_version() -> Version:
    """Oldest server this build's client can talk to."""
    return registry().min_server_version


def min_compatible_client_version() -> Version:
    """Oldest client this build's server accepts."""
    return registry().min_client_version
