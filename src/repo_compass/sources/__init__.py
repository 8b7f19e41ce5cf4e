"""외부 데이터 소스 모듈."""

from repo_compass.sources.base import (
    ClusterStore,
    InteractionLog,
    PoolStore,
    RepositoryIndex,
    TrendingSource,
)
from repo_compass.sources.github import GitHubRepositoryIndex
from repo_compass.sources.trending import GitHubTrendingSource

__all__ = [
    "ClusterStore",
    "GitHubRepositoryIndex",
    "GitHubTrendingSource",
    "InteractionLog",
    "PoolStore",
    "RepositoryIndex",
    "TrendingSource",
]
