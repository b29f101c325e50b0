"""
Build Version Numbers.

A Version is the three-component (major, minor, patch) number of a
client or server build. Versions compare lexicographically and have two
sentinels:

- Version.min(): 0.0.0, "active since the beginning"
- Version.max(): the largest representable version, "never removed"
  or "not yet adopted"

The compact digit encoding packs a version into one integer as
major * 1_000_000 + minor * 1_000 + patch. It assumes minor and patch
are both below 1000; larger components overflow into the next field
when decoded.
"""

from __future__ import annotations

from dataclasses import dataclass

from packaging.version import InvalidVersion
from packaging.version import Version as ReleaseVersion

from metaversion.errors import VersionParseError


UINT64_MAX = 2**64 - 1

DIGIT_MAJOR_FACTOR = 1_000_000
DIGIT_MINOR_FACTOR = 1_000


@dataclass(slots=True, frozen=True, order=True)
class Version:
    """
    A build version, ordered by (major, minor, patch).

    Attributes:
        major: Major version. Calendar builds use YYMMDD here.
        minor: Minor version.
        patch: Patch version.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self):
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(
                    f"Version {name} must be an int, got {type(value).__name__}"
                )

            if not 0 <= value <= UINT64_MAX:
                raise ValueError(
                    f"Version {name} must be between 0 and {UINT64_MAX}, got {value}"
                )

    @classmethod
    def min(cls) -> Version:
        """The smallest version, 0.0.0."""
        return cls(0, 0, 0)

    @classmethod
    def max(cls) -> Version:
        """The largest version. Used as the default `until` of a feature."""
        return cls(UINT64_MAX, UINT64_MAX, UINT64_MAX)

    @classmethod
    def parse(cls, value: str) -> Version:
        """
        Parse a build version string such as "1.2.770" or "v260205.0.0".

        Only the numeric release triple is kept. Pre-release, post,
        dev and local segments are accepted by the parser but dropped.

        Args:
            value: The version string.

        Returns:
            The parsed version.

        Raises:
            VersionParseError: If the string is not a three-component
                numeric version.
        """
        text = value.strip()
        if text.startswith("v"):
            text = text[1:]

        try:
            release = ReleaseVersion(text)

        except InvalidVersion as err:
            raise VersionParseError(value, "not a valid version", cause=err) from err

        if release.epoch != 0:
            raise VersionParseError(value, "epochs are not supported")

        if len(release.release) != 3:
            raise VersionParseError(
                value,
                f"expected 3 release components, got {len(release.release)}",
            )

        if any(component > UINT64_MAX for component in release.release):
            raise VersionParseError(value, "component exceeds 64 bits")

        return cls.from_release(release)

    @classmethod
    def from_release(cls, release: ReleaseVersion) -> Version:
        """
        Convert from a packaging Version, keeping major.minor.micro.

        Missing components are treated as zero.
        """
        return cls(release.major, release.minor, release.micro)

    def to_release(self) -> ReleaseVersion:
        """Convert to a packaging Version."""
        return ReleaseVersion(str(self))

    @classmethod
    def from_digit(cls, value: int) -> Version:
        """
        Decode a version packed by `to_digit()`.

        Raises:
            ValueError: If the decoded major exceeds 64 bits or value is
                negative.
        """
        return cls(
            value // DIGIT_MAJOR_FACTOR,
            value // DIGIT_MINOR_FACTOR % 1_000,
            value % 1_000,
        )

    def to_digit(self) -> int:
        """
        Pack the version into a single integer.

        Lossy when minor or patch is 1000 or more: the excess carries
        into the next component, so Version(260205, 1000, 0) decodes as
        Version(260206, 0, 0).
        """
        return (
            self.major * DIGIT_MAJOR_FACTOR
            + self.minor * DIGIT_MINOR_FACTOR
            + self.patch
        )

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __repr__(self) -> str:
        return f"Version({self.major}, {self.minor}, {self.patch})"


MIN_VERSION = Version.min()
MAX_VERSION = Version.max()
