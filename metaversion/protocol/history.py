"""
Feature Change History.

FEATURE_HISTORY is the chronological log of every feature added to or
removed from the meta-service server and client. The registry replays
it in order, so the order of entries is significant: an addition must
come before the matching removal.

To record a protocol change, append entries at the end. Never rewrite
past entries; released builds were shipped against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .feature import Feature
from .version import Version


class Role(Enum):
    """Side of the protocol."""

    SERVER = "server"
    CLIENT = "client"

    def __str__(self) -> str:
        return self.value


class ChangeKind(Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(slots=True, frozen=True)
class FeatureChange:
    """
    A single entry of the change log.

    Attributes:
        role: The side that changed.
        feature: The feature that was added or removed.
        kind: Whether the feature was added or removed.
        version: The first build carrying the change.
    """

    role: Role
    feature: Feature
    kind: ChangeKind
    version: Version

    def __str__(self) -> str:
        return f"{self.role} {self.kind.value} {self.feature} at {self.version}"


def server_add(feature: Feature, version: Version) -> FeatureChange:
    return FeatureChange(Role.SERVER, feature, ChangeKind.ADD, version)


def server_remove(feature: Feature, version: Version) -> FeatureChange:
    return FeatureChange(Role.SERVER, feature, ChangeKind.REMOVE, version)


def client_add(feature: Feature, version: Version) -> FeatureChange:
    return FeatureChange(Role.CLIENT, feature, ChangeKind.ADD, version)


def client_remove(feature: Feature, version: Version) -> FeatureChange:
    return FeatureChange(Role.CLIENT, feature, ChangeKind.REMOVE, version)


F = Feature
V = Version


FEATURE_HISTORY: tuple[FeatureChange, ...] = (
    # 2023-10-17, 1.2.163: server adds streaming kv_read_v1().
    # The other features already existed; 1.2.163 is their recorded start.
    server_add(F.OPERATION_AS_IS, V(1, 2, 163)),
    server_add(F.KV_API, V(1, 2, 163)),
    server_add(F.KV_API_GET_KV, V(1, 2, 163)),
    server_add(F.KV_API_MGET_KV, V(1, 2, 163)),
    server_add(F.KV_API_LIST_KV, V(1, 2, 163)),
    server_add(F.KV_READ_V1, V(1, 2, 163)),

    client_add(F.OPERATION_AS_IS, V(1, 2, 163)),
    client_add(F.KV_API, V(1, 2, 163)),
    client_add(F.KV_API_GET_KV, V(1, 2, 163)),
    client_add(F.KV_API_MGET_KV, V(1, 2, 163)),
    client_add(F.KV_API_LIST_KV, V(1, 2, 163)),

    # 2023-10-20, 1.2.176: client calls kv_read_v1().
    client_add(F.KV_READ_V1, V(1, 2, 176)),

    # 2023-12-16, 1.2.258: server adds transaction TTL and reply errors.
    server_add(F.TRANSACTION, V(1, 2, 258)),
    server_add(F.TRANSACTION_REPLY_ERROR, V(1, 2, 258)),
    server_add(F.TRANSACTION_PUT_WITH_TTL, V(1, 2, 258)),

    client_add(F.TRANSACTION_REPLY_ERROR, V(1, 2, 258)),

    # 1.2.259: server exposes export, watch and cluster RPCs.
    # Recorded as 1.2.259 because the 1.2.258 binary reports 1.2.257.
    server_add(F.EXPORT, V(1, 2, 259)),
    server_add(F.WATCH, V(1, 2, 259)),
    server_add(F.MEMBER_LIST, V(1, 2, 259)),
    server_add(F.GET_CLUSTER_STATUS, V(1, 2, 259)),
    server_add(F.GET_CLIENT_INFO, V(1, 2, 259)),

    client_add(F.TRANSACTION, V(1, 2, 259)),
    client_add(F.EXPORT, V(1, 2, 259)),
    client_add(F.WATCH, V(1, 2, 259)),
    client_add(F.MEMBER_LIST, V(1, 2, 259)),
    client_add(F.GET_CLUSTER_STATUS, V(1, 2, 259)),
    client_add(F.GET_CLIENT_INFO, V(1, 2, 259)),

    # 2024-01-07, 1.2.287: client stops sending GetKV/MGetKV/ListKV via kv_api().
    client_remove(F.KV_API_GET_KV, V(1, 2, 287)),
    client_remove(F.KV_API_MGET_KV, V(1, 2, 287)),
    client_remove(F.KV_API_LIST_KV, V(1, 2, 287)),

    # 2024-01-25, 1.2.315: server adds export_v1() with a client chosen chunk size.
    server_add(F.EXPORT_V1, V(1, 2, 315)),

    # 2024-03-04, 1.2.361: client writes ttl instead of expire_at.
    client_add(F.TRANSACTION_PUT_WITH_TTL, V(1, 2, 361)),

    # 2024-11-22, 1.2.663: server drops GetKV/MGetKV/ListKV.
    server_remove(F.KV_API_GET_KV, V(1, 2, 663)),
    server_remove(F.KV_API_MGET_KV, V(1, 2, 663)),
    server_remove(F.KV_API_LIST_KV, V(1, 2, 663)),

    # 2024-11-23, 1.2.663: client stops using Operation::AsIs.
    client_remove(F.OPERATION_AS_IS, V(1, 2, 663)),

    # 2024-12-16, 1.2.674: server adds the keys-with-prefix condition.
    server_add(F.TRANSACTION_CONDITION_KEYS_PREFIX, V(1, 2, 674)),

    # 2024-12-20, 1.2.676: server adds TxnRequest::operations;
    # both sides stop relying on TxnReply::error.
    server_add(F.TRANSACTION_OPERATIONS, V(1, 2, 676)),

    client_remove(F.TRANSACTION_REPLY_ERROR, V(1, 2, 676)),

    # 2024-12-26, 1.2.677: server adds WatchRequest::initial_flush.
    server_add(F.WATCH_INITIAL_FLUSH, V(1, 2, 677)),

    # 2025-04-15, 1.2.726: client starts requiring 1.2.677 features.
    client_add(F.WATCH_INITIAL_FLUSH, V(1, 2, 726)),
    client_add(F.WATCH_RESPONSE_IS_INIT, V(1, 2, 726)),
    client_add(F.TRANSACTION_CONDITION_KEYS_PREFIX, V(1, 2, 726)),
    client_add(F.TRANSACTION_OPERATIONS, V(1, 2, 726)),

    # 2025-05-08, 1.2.736: server adds WatchResponse::is_initialization.
    server_add(F.WATCH_RESPONSE_IS_INIT, V(1, 2, 736)),

    # 2025-06-09, 1.2.755: server drops TxnReply::error.
    server_remove(F.TRANSACTION_REPLY_ERROR, V(1, 2, 755)),

    # 2025-06-11, 1.2.756: TxnPutResponse::current on both sides.
    server_add(F.PUT_RESPONSE_CURRENT, V(1, 2, 756)),

    client_add(F.PUT_RESPONSE_CURRENT, V(1, 2, 756)),

    # 2025-06-24, 1.2.764: server adds FetchAddU64.
    server_add(F.FETCH_ADD_U64, V(1, 2, 764)),

    # 2025-07-03/04, 1.2.770: server accepts expire_at in milliseconds
    # and adds PutSequential.
    server_add(F.EXPIRE_IN_MILLIS, V(1, 2, 770)),
    server_add(F.PUT_SEQUENTIAL, V(1, 2, 770)),

    # 2025-09-27, 1.2.821: client uses FetchAddU64
    # (1.2.764 was yanked, 1.2.768 is the first usable server).
    client_add(F.FETCH_ADD_U64, V(1, 2, 821)),

    # 2025-09-30, 1.2.823: server stores proposed_at_ms in KV metadata.
    server_add(F.PROPOSED_AT_MS, V(1, 2, 823)),

    # 2025-09-27, 1.2.823: client stops calling kv_api().
    client_remove(F.KV_API, V(1, 2, 823)),

    # 2025-10-16, 1.2.828: server renames FetchAddU64 to FetchIncreaseU64.
    server_add(F.FETCH_INCREASE_U64, V(1, 2, 828)),

    # 2026-01-12/13, 1.2.869: server adds kv_list() and kv_get_many().
    server_add(F.KV_LIST, V(1, 2, 869)),
    server_add(F.KV_GET_MANY, V(1, 2, 869)),

    # 2026-02-05, 260205.0.0: client lets applications use expire_at
    # in milliseconds and PutSequential.
    client_add(F.EXPIRE_IN_MILLIS, V(260205, 0, 0)),
    client_add(F.PUT_SEQUENTIAL, V(260205, 0, 0)),

    # Reserved: no client build uses these yet.
    client_add(F.EXPORT_V1, V.max()),
    client_add(F.PROPOSED_AT_MS, V.max()),
    client_add(F.FETCH_INCREASE_U64, V.max()),
    client_add(F.KV_LIST, V.max()),
    client_add(F.KV_GET_MANY, V.max()),
)


del F, V
