from .models import Entry, LogLevel


class FeatureChangeApplied(Entry, kw_only=True):
    role: str
    feature: str
    kind: str
    version: str
    level: LogLevel = LogLevel.TRACE

class RegistryLoaded(Entry, kw_only=True):
    build_version: str
    features: int
    changes: int
    min_server_version: str
    min_client_version: str
    level: LogLevel = LogLevel.INFO

class RegistryInvalid(Entry, kw_only=True):
    build_version: str
    error_type: str
    category: str
    context: dict[str, str]
    level: LogLevel = LogLevel.FATAL

class PeerRejected(Entry, kw_only=True):
    peer_role: str
    peer_version: str
    required_version: str
    local_version: str
    level: LogLevel = LogLevel.WARN
