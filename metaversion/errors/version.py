"""
Version Compatibility Error Hierarchy

Categorized exceptions raised while loading the feature history and
while checking peers during a handshake. Errors are classified by:
- Category: What went wrong (build metadata, history, catalog, peer)
- Severity: How serious (degraded, fatal)

Fatal errors are programming or release mistakes and must stop the
process before it serves traffic.
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any


class ErrorSeverity(Enum):
    """How serious is this error?"""

    DEGRADED = auto()
    """A single peer cannot be served. The process keeps running."""

    FATAL = auto()
    """The build itself is misconfigured. The process must not start."""


class ErrorCategory(Enum):
    """What kind of error is this?"""

    BUILD_METADATA = auto()
    """The running build's version string cannot be parsed."""

    HISTORY = auto()
    """The feature change log violates add-before-remove ordering."""

    CATALOG = auto()
    """A catalog feature has no recorded history."""

    COMPATIBILITY = auto()
    """A peer is older than the required minimum version."""


@dataclass
class VersionError(Exception):
    """
    Base exception for version compatibility errors.

    All errors carry:
    - message: Human-readable description
    - category: What kind of error
    - severity: How serious
    - context: The roles, features and versions involved
    - cause: Original exception if wrapping

    Example:
        raise DuplicateFeatureAddError(
            role="server",
            feature="kv_api",
            version="1.2.163",
            since="1.2.163",
        )
    """

    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    context: dict[str, Any] = field(default_factory=dict)
    cause: BaseException | None = None

    @property
    def is_fatal(self) -> bool:
        return self.severity == ErrorSeverity.FATAL

    def __str__(self) -> str:
        parts = [f"[{self.category.name}/{self.severity.name}] {self.message}"]

        if self.context:
            details = ", ".join(
                f"{name}={value}" for name, value in self.context.items()
            )
            parts.append(f"({details})")

        if self.cause:
            parts.append(f"(caused by {_describe_cause(self.cause)})")

        return " ".join(parts)

    def with_context(self, **kwargs: Any) -> 'VersionError':
        """
        Attach more detail, such as the build version the registry was
        being loaded for. Existing keys are kept.
        """
        for name, value in kwargs.items():
            self.context.setdefault(name, value)

        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'category': self.category.name,
            'severity': self.severity.name,
            'context': {name: str(value) for name, value in self.context.items()},
            'cause': _describe_cause(self.cause) if self.cause else None,
        }


def _describe_cause(cause: BaseException) -> str:
    cause_type = type(cause).__name__
    cause_str = str(cause)

    return f"{cause_type}: {cause_str}" if cause_str else cause_type


# =============================================================================
# Build Metadata Errors
# =============================================================================

class VersionParseError(VersionError):
    """The build version string is not a numeric major.minor.patch triple."""

    def __init__(
        self,
        value: str,
        reason: str,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message=f"Invalid build version {value!r}: {reason}",
            category=ErrorCategory.BUILD_METADATA,
            severity=ErrorSeverity.FATAL,
            context={'value': value},
            cause=cause,
        )


# =============================================================================
# History Errors - the change log is malformed
# =============================================================================

class FeatureHistoryError(VersionError):
    """
    The feature change log is malformed.

    Every (role, feature) pair must be added exactly once before it is
    removed, and removed at most once.
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.HISTORY,
            severity=ErrorSeverity.FATAL,
            context=context,
            cause=cause,
        )


class DuplicateFeatureAddError(FeatureHistoryError):
    """A feature was added twice for the same role."""

    def __init__(self, role: str, feature: str, version: str, since: str):
        super().__init__(
            message=f"{role} feature {feature} added at {version} but already added at {since}",
            role=role,
            feature=feature,
            version=version,
            since=since,
        )


class DuplicateFeatureRemoveError(FeatureHistoryError):
    """A feature was removed twice for the same role."""

    def __init__(self, role: str, feature: str, version: str, until: str):
        super().__init__(
            message=f"{role} feature {feature} removed at {version} but already removed at {until}",
            role=role,
            feature=feature,
            version=version,
            until=until,
        )


class RemoveBeforeAddError(FeatureHistoryError):
    """A feature was removed before, or at the same version as, its addition."""

    def __init__(self, role: str, feature: str, version: str, since: str | None):
        if since is None:
            message = f"{role} feature {feature} removed at {version} but was never added"
        else:
            message = f"{role} feature {feature} removed at {version}, not after its addition at {since}"

        super().__init__(
            message=message,
            role=role,
            feature=feature,
            version=version,
            since=since,
        )


class AddAtMinimumError(FeatureHistoryError):
    """
    A feature was added at 0.0.0.

    0.0.0 marks a lifetime that was never started, so an addition there
    could not be told apart from no addition at all.
    """

    def __init__(self, role: str, feature: str):
        super().__init__(
            message=f"{role} feature {feature} added at 0.0.0, the earliest addition is 0.0.1",
            role=role,
            feature=feature,
        )


# =============================================================================
# Catalog Errors
# =============================================================================

class MissingFeatureError(VersionError):
    """A catalog feature has no lifetime recorded for a role."""

    def __init__(self, role: str, feature: str):
        super().__init__(
            message=f"Missing {role} history for feature {feature}",
            category=ErrorCategory.CATALOG,
            severity=ErrorSeverity.FATAL,
            context={'role': role, 'feature': feature},
        )


# =============================================================================
# Compatibility Errors - raised on behalf of the handshake layer
# =============================================================================

class IncompatibleVersionError(VersionError):
    """A peer build is older than the minimum this build can talk to."""

    def __init__(
        self,
        peer_role: str,
        peer_version: str,
        required_version: str,
        local_version: str,
    ):
        super().__init__(
            message=f"{peer_role} version {peer_version} is below required minimum {required_version}",
            category=ErrorCategory.COMPATIBILITY,
            severity=ErrorSeverity.DEGRADED,
            context={
                'peer_role': peer_role,
                'peer_version': peer_version,
                'required_version': required_version,
                'local_version': local_version,
            },
        )
