"""
Feature Compatibility Registry.

The registry replays FEATURE_HISTORY into one FeatureSpan per
(role, feature) and answers the two questions a handshake needs:

- min_compatible_server_version(): the oldest server that supports
  every feature this client build uses.
- min_compatible_client_version(): the oldest client that does not
  depend on any feature this server build has dropped.

Replay rules:
- ADD requires the span to still be unset (since == MIN, until == MAX)
- REMOVE requires an earlier ADD, no earlier REMOVE, and a version
  after the ADD
- After replay every catalog feature must have a span for both roles

A registry is immutable once built and may be shared between threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from metaversion.errors import (
    AddAtMinimumError,
    DuplicateFeatureAddError,
    DuplicateFeatureRemoveError,
    MissingFeatureError,
    RemoveBeforeAddError,
    VersionError,
)
from metaversion.logging import logger
from metaversion.logging.metaversion_logging_models import (
    FeatureChangeApplied,
    RegistryInvalid,
    RegistryLoaded,
)

from .feature import Feature
from .feature_span import FeatureSpan
from .history import FEATURE_HISTORY, ChangeKind, FeatureChange, Role
from .version import Version


LOGGER_NAME = "metaversion.registry"


def _span_for(
    spans: dict[Feature, FeatureSpan],
    feature: Feature,
) -> FeatureSpan:
    span = spans.get(feature)
    if span is None:
        span = FeatureSpan(feature, Version.min())

    return span


def _apply(spans: dict[Feature, FeatureSpan], change: FeatureChange):
    span = _span_for(spans, change.feature)

    if change.kind == ChangeKind.ADD:
        if span.since != Version.min() or span.is_removed:
            raise DuplicateFeatureAddError(
                role=str(change.role),
                feature=str(change.feature),
                version=str(change.version),
                since=str(span.since),
            )

        if change.version == Version.min():
            raise AddAtMinimumError(
                role=str(change.role),
                feature=str(change.feature),
            )

        spans[change.feature] = FeatureSpan(change.feature, change.version)
        return

    if span.since == Version.min():
        raise RemoveBeforeAddError(
            role=str(change.role),
            feature=str(change.feature),
            version=str(change.version),
            since=None,
        )

    if span.is_removed:
        raise DuplicateFeatureRemoveError(
            role=str(change.role),
            feature=str(change.feature),
            version=str(change.version),
            until=str(span.until),
        )

    if change.version <= span.since:
        raise RemoveBeforeAddError(
            role=str(change.role),
            feature=str(change.feature),
            version=str(change.version),
            since=str(span.since),
        )

    spans[change.feature] = span.with_until(change.version)


def _assert_all_features(
    role: Role,
    spans: Mapping[Feature, FeatureSpan],
    catalog: Iterable[Feature],
):
    for feature in catalog:
        if feature not in spans:
            raise MissingFeatureError(role=str(role), feature=str(feature))


@dataclass(slots=True, frozen=True, eq=False)
class CompatibilityRegistry:
    """
    Per-role feature lifetimes for one build.

    Attributes:
        version: The build version this registry answers for.
        server_features: Lifetime of every catalog feature on the server.
        client_features: Lifetime of every catalog feature on the client.
        catalog: The features checked for coverage, in canonical order.
        min_server_version: min_compatible_server_version() at `version`.
        min_client_version: min_compatible_client_version() at `version`.
    """

    version: Version
    server_features: Mapping[Feature, FeatureSpan]
    client_features: Mapping[Feature, FeatureSpan]
    catalog: tuple[Feature, ...]
    min_server_version: Version
    min_client_version: Version

    @classmethod
    def load(cls, version: Version | None = None) -> CompatibilityRegistry:
        """
        Build the registry from the recorded feature history.

        Args:
            version: The build version to answer for. Defaults to the
                running build's version.
        """
        if version is None:
            from .loader import current_version

            version = current_version()

        return cls.from_history(version)

    @classmethod
    def from_history(
        cls,
        version: Version,
        history: Sequence[FeatureChange] = FEATURE_HISTORY,
        catalog: Iterable[Feature] | None = None,
    ) -> CompatibilityRegistry:
        """
        Replay `history` in order and validate coverage of `catalog`.

        Args:
            version: The build version to answer for.
            history: Chronologically ordered feature changes.
            catalog: Features that must have a span for both roles.
                Defaults to the full Feature catalog.

        Returns:
            A validated, immutable registry.

        Raises:
            FeatureHistoryError: If the history adds a feature twice,
                removes it twice, or removes it before adding it.
            MissingFeatureError: If a catalog feature has no history
                for a role.
        """
        catalog = Feature.all() if catalog is None else tuple(catalog)
        stream = logger[LOGGER_NAME]

        spans: dict[Role, dict[Feature, FeatureSpan]] = {
            Role.SERVER: {},
            Role.CLIENT: {},
        }

        try:
            for change in history:
                _apply(spans[change.role], change)

                stream.log(
                    FeatureChangeApplied(
                        message="Applied feature change",
                        role=str(change.role),
                        feature=str(change.feature),
                        kind=change.kind.value,
                        version=str(change.version),
                    )
                )

            for role, role_spans in spans.items():
                _assert_all_features(role, role_spans, catalog)

        except VersionError as err:
            error = err.with_context(build_version=str(version)).to_dict()
            stream.log(
                RegistryInvalid(
                    message=error["message"],
                    build_version=str(version),
                    error_type=error["error_type"],
                    category=error["category"],
                    context=error["context"],
                )
            )

            raise

        server_features = MappingProxyType(spans[Role.SERVER])
        client_features = MappingProxyType(spans[Role.CLIENT])

        registry = cls(
            version=version,
            server_features=server_features,
            client_features=client_features,
            catalog=catalog,
            min_server_version=_min_server_version(
                catalog,
                server_features,
                client_features,
                version,
            ),
            min_client_version=_min_client_version(
                catalog,
                server_features,
                client_features,
                version,
            ),
        )

        stream.log(
            RegistryLoaded(
                message="Loaded feature compatibility registry",
                build_version=str(version),
                features=len(catalog),
                changes=len(history),
                min_server_version=str(registry.min_server_version),
                min_client_version=str(registry.min_client_version),
            )
        )

        return registry

    def features(self, role: Role) -> Mapping[Feature, FeatureSpan]:
        if role == Role.SERVER:
            return self.server_features

        return self.client_features

    def span(self, role: Role, feature: Feature) -> FeatureSpan:
        return self.features(role)[feature]

    def active_features(
        self,
        role: Role,
        version: Version | None = None,
    ) -> tuple[Feature, ...]:
        """Features `role` uses at `version`, in catalog order."""
        if version is None:
            version = self.version

        spans = self.features(role)
        return tuple(
            feature
            for feature in self.catalog
            if spans[feature].is_active_at(version)
        )

    def min_compatible_server_version(
        self,
        version: Version | None = None,
    ) -> Version:
        """
        Oldest server able to serve a client of `version`.

        The maximum server `since` across every feature the client
        uses at `version`, or Version.min() if it uses none.
        """
        if version is None or version == self.version:
            return self.min_server_version

        return _min_server_version(
            self.catalog,
            self.server_features,
            self.client_features,
            version,
        )

    def min_compatible_client_version(
        self,
        version: Version | None = None,
    ) -> Version:
        """
        Oldest client able to connect to a server of `version`.

        The maximum client `until` across every feature the server no
        longer provides at `version`, or Version.min() if none. A
        feature the server dropped while clients still depend on it
        (client until == MAX) makes every client incompatible.
        """
        if version is None or version == self.version:
            return self.min_client_version

        return _min_client_version(
            self.catalog,
            self.server_features,
            self.client_features,
            version,
        )


def _min_server_version(
    catalog: Iterable[Feature],
    server_features: Mapping[Feature, FeatureSpan],
    client_features: Mapping[Feature, FeatureSpan],
    version: Version,
) -> Version:
    min_server = Version.min()

    for feature in catalog:
        if client_features[feature].is_active_at(version):
            min_server = max(min_server, server_features[feature].since)

    return min_server


def _min_client_version(
    catalog: Iterable[Feature],
    server_features: Mapping[Feature, FeatureSpan],
    client_features: Mapping[Feature, FeatureSpan],
    version: Version,
) -> Version:
    min_client = Version.min()

    for feature in catalog:
        if not server_features[feature].is_active_at(version):
            min_client = max(min_client, client_features[feature].until)

    return min_client
