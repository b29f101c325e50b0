"""
Protocol feature compatibility.

This module provides:
- Build versions and the feature catalog
- The recorded history of feature additions and removals
- The registry computing minimum compatible peer versions
- Peer checks for the handshake layer
"""

from metaversion.protocol.version import (
    Version as Version,
    MIN_VERSION as MIN_VERSION,
    MAX_VERSION as MAX_VERSION,
)
from metaversion.protocol.feature import (
    Feature as Feature,
    FEATURE_CATALOG as FEATURE_CATALOG,
)
from metaversion.protocol.feature_span import FeatureSpan as FeatureSpan
from metaversion.protocol.history import (
    Role as Role,
    ChangeKind as ChangeKind,
    FeatureChange as FeatureChange,
    FEATURE_HISTORY as FEATURE_HISTORY,
)
from metaversion.protocol.compatibility_registry import (
    CompatibilityRegistry as CompatibilityRegistry,
)
from metaversion.protocol.compatibility import (
    CompatibilityResult as CompatibilityResult,
    check_client as check_client,
    check_server as check_server,
    ensure_compatible_client as ensure_compatible_client,
    ensure_compatible_server as ensure_compatible_server,
)
from metaversion.protocol.loader import (
    configure as configure,
    current_version as current_version,
    min_compatible_client_version as min_compatible_client_version,
    min_compatible_server_version as min_compatible_server_version,
    registry as registry,
    reset_registry as reset_registry,
    version_str as version_str,
)
