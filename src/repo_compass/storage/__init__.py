"""스토리지 모듈."""

from repo_compass.storage.memory import (
    InMemoryClusterStore,
    InMemoryInteractionLog,
    InMemoryPoolStore,
)
from repo_compass.storage.supabase import SupabaseStore

__all__ = [
    "InMemoryClusterStore",
    "InMemoryInteractionLog",
    "InMemoryPoolStore",
    "SupabaseStore",
]
