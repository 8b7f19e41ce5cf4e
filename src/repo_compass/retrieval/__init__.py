"""후보 조회 모듈."""

from repo_compass.retrieval.cluster import ClusterRetriever, detect_primary_cluster
from repo_compass.retrieval.shuffle import shuffle_for_user, stable_shuffle, string_hash32
from repo_compass.retrieval.strategies import (
    DynamicSearchStrategy,
    GenericFallbackStrategy,
    PoolContext,
    PrimaryClusterStrategy,
    RetrievalStrategy,
    SecondaryClusterStrategy,
    TagSearchStrategy,
)

__all__ = [
    "ClusterRetriever",
    "DynamicSearchStrategy",
    "GenericFallbackStrategy",
    "PoolContext",
    "PrimaryClusterStrategy",
    "RetrievalStrategy",
    "SecondaryClusterStrategy",
    "TagSearchStrategy",
    "detect_primary_cluster",
    "shuffle_for_user",
    "stable_shuffle",
    "string_hash32",
]
