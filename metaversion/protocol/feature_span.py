from __future__ import annotations

from dataclasses import dataclass, field, replace

from .feature import Feature
from .version import Version


@dataclass(slots=True, frozen=True)
class FeatureSpan:
    """
    The lifetime of one feature on one side of the protocol.

    The span is half-open: the feature is active from `since`
    (inclusive) until `until` (exclusive).

    Attributes:
        feature: The feature being described.
        since: The version that added the feature.
        until: The version that removed the feature, or Version.max()
            if it is still supported.
    """

    feature: Feature
    since: Version
    until: Version = field(default_factory=Version.max)

    def with_until(self, until: Version) -> FeatureSpan:
        """Return a copy of this span that ends at `until`."""
        return replace(self, until=until)

    def until3(self, major: int, minor: int, patch: int) -> FeatureSpan:
        return self.with_until(Version(major, minor, patch))

    def is_active_at(self, version: Version) -> bool:
        """True if `since <= version < until`."""
        return self.since <= version < self.until

    @property
    def is_removed(self) -> bool:
        return self.until != Version.max()

    @property
    def is_reserved(self) -> bool:
        """True for a feature recorded but not yet adopted by any build."""
        return self.since == Version.max()

    def __str__(self) -> str:
        until = "..." if not self.is_removed else str(self.until)
        return f"{self.feature}: [{self.since}, {until})"
