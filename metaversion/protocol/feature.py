"""
Feature Catalog.

Each Feature is a named, independently versioned unit of the
meta-service protocol. The enum value is the stable string id used in
logs and error messages.

The catalog is closed: adding a member requires recording its history
for both roles in FEATURE_HISTORY, which the registry checks on load.
"""

from __future__ import annotations

from enum import Enum


class Feature(Enum):
    """A capability of the meta-service protocol."""

    # Unary kv_api() RPC and its sub-operations.
    KV_API = "kv_api"
    KV_API_GET_KV = "kv_api/get_kv"
    KV_API_MGET_KV = "kv_api/mget_kv"
    KV_API_LIST_KV = "kv_api/list_kv"

    # Streaming kv_read_v1() RPC.
    KV_READ_V1 = "kv_read_v1"

    TRANSACTION = "transaction"
    TRANSACTION_REPLY_ERROR = "transaction/reply_error"
    TRANSACTION_PUT_WITH_TTL = "transaction/put_with_ttl"
    TRANSACTION_CONDITION_KEYS_PREFIX = "transaction/condition_keys_prefix"
    TRANSACTION_OPERATIONS = "transaction/operations"

    # Keep the value, update only the metadata.
    OPERATION_AS_IS = "operation/as_is"

    EXPORT = "export"
    EXPORT_V1 = "export_v1"

    WATCH = "watch"
    WATCH_INITIAL_FLUSH = "watch/initial_flush"
    WATCH_RESPONSE_IS_INIT = "watch/init_flag"

    MEMBER_LIST = "member_list"
    GET_CLUSTER_STATUS = "get_cluster_status"
    GET_CLIENT_INFO = "get_client_info"

    PUT_RESPONSE_CURRENT = "put_response/current"

    # Superseded by FETCH_INCREASE_U64.
    FETCH_ADD_U64 = "fetch_add_u64"

    # expire_at accepts both seconds and milliseconds.
    EXPIRE_IN_MILLIS = "expire_in_millis"
    PUT_SEQUENTIAL = "put_sequential"

    # Raft-log proposing time stored in KV metadata.
    PROPOSED_AT_MS = "proposed_at_ms"
    FETCH_INCREASE_U64 = "fetch_increase_u64"

    # Streaming kv_list() and kv_get_many() RPCs.
    KV_LIST = "kv_list"
    KV_GET_MANY = "kv_get_many"

    @classmethod
    def all(cls) -> tuple[Feature, ...]:
        """All features in canonical (declaration) order."""
        return FEATURE_CATALOG

    @classmethod
    def from_str(cls, name: str) -> Feature:
        """
        Look up a feature by its string id.

        Raises:
            KeyError: If no feature has this id.
        """
        return FEATURE_IDS[name]

    def as_str(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


FEATURE_CATALOG: tuple[Feature, ...] = tuple(Feature)

FEATURE_IDS: dict[str, Feature] = {
    feature.value: feature for feature in FEATURE_CATALOG
}
