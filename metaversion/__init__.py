from .metadata import __version__ as __version__
from .protocol import (
    CompatibilityRegistry as CompatibilityRegistry,
    Feature as Feature,
    FeatureSpan as FeatureSpan,
    Role as Role,
    Version as Version,
    configure as configure,
    current_version as current_version,
    min_compatible_client_version as min_compatible_client_version,
    min_compatible_server_version as min_compatible_server_version,
    registry as registry,
    version_str as version_str,
)
