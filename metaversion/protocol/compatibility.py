"""
Peer Version Checks.

Helpers for the handshake layer: compare a peer's build version with
the minimum the local build requires and, on rejection, produce an
error naming both versions.
"""

from __future__ import annotations

from dataclasses import dataclass

from metaversion.errors import IncompatibleVersionError
from metaversion.logging import logger
from metaversion.logging.metaversion_logging_models import PeerRejected

from .history import Role
from .compatibility_registry import CompatibilityRegistry
from .version import Version


LOGGER_NAME = "metaversion.compatibility"


@dataclass(slots=True, frozen=True)
class CompatibilityResult:
    """
    Outcome of checking one peer.

    Attributes:
        local_version: Our build version.
        peer_role: The peer's side of the protocol.
        peer_version: The peer's build version.
        required_version: The oldest peer version we accept.
        compatible: Whether peer_version >= required_version.
    """

    local_version: Version
    peer_role: Role
    peer_version: Version
    required_version: Version
    compatible: bool

    def to_error(self) -> IncompatibleVersionError:
        return IncompatibleVersionError(
            peer_role=str(self.peer_role),
            peer_version=str(self.peer_version),
            required_version=str(self.required_version),
            local_version=str(self.local_version),
        )


def check_server(
    registry: CompatibilityRegistry,
    server_version: Version,
) -> CompatibilityResult:
    """Check a server peer against this build acting as a client."""
    required = registry.min_server_version
    return CompatibilityResult(
        local_version=registry.version,
        peer_role=Role.SERVER,
        peer_version=server_version,
        required_version=required,
        compatible=server_version >= required,
    )


def check_client(
    registry: CompatibilityRegistry,
    client_version: Version,
) -> CompatibilityResult:
    """Check a client peer against this build acting as a server."""
    required = registry.min_client_version
    return CompatibilityResult(
        local_version=registry.version,
        peer_role=Role.CLIENT,
        peer_version=client_version,
        required_version=required,
        compatible=client_version >= required,
    )


def _ensure(result: CompatibilityResult) -> CompatibilityResult:
    if result.compatible:
        return result

    logger[LOGGER_NAME].log(
        PeerRejected(
            message="Rejected peer below minimum compatible version",
            peer_role=str(result.peer_role),
            peer_version=str(result.peer_version),
            required_version=str(result.required_version),
            local_version=str(result.local_version),
        )
    )

    raise result.to_error()


def ensure_compatible_server(
    registry: CompatibilityRegistry,
    server_version: Version,
) -> CompatibilityResult:
    """
    Raises:
        IncompatibleVersionError: If the server is older than
            registry.min_server_version.
    """
    return _ensure(check_server(registry, server_version))


def ensure_compatible_client(
    registry: CompatibilityRegistry,
    client_version: Version,
) -> CompatibilityResult:
    """
    Raises:
        IncompatibleVersionError: If the client is older than
            registry.min_client_version.
    """
    return _ensure(check_client(registry, client_version))
