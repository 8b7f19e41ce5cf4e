"""TTL 캐시 테스트."""

from repo_compass.cache import TTLCache


class FakeClock:
    """수동으로 진행시키는 시계."""

    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value


class TestTTLCache:
    """TTLCache 테스트."""

    def test_get_returns_stored_value(self) -> None:
        """저장한 값을 TTL 안에서 조회한다."""
        cache: TTLCache[str, int] = TTLCache(60)
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert "a" in cache

    def test_missing_key_returns_none(self) -> None:
        """없는 키는 None이다."""
        cache: TTLCache[str, int] = TTLCache(60)
        assert cache.get("missing") is None

    def test_entry_expires_after_ttl(self) -> None:
        """TTL이 지나면 만료된다."""
        clock = FakeClock()
        cache: TTLCache[str, int] = TTLCache(10, clock=clock)
        cache.set("a", 1)

        clock.value = 9.9
        assert cache.get("a") == 1

        clock.value = 10.0
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_invalidate_removes_key(self) -> None:
        """invalidate는 해당 키만 제거한다."""
        cache: TTLCache[str, int] = TTLCache(60)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        cache.invalidate("not-there")

        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_clear(self) -> None:
        """clear는 모든 항목을 제거한다."""
        cache: TTLCache[str, int] = TTLCache(60)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0

    def test_set_refreshes_timestamp(self) -> None:
        """다시 저장하면 만료 시각이 갱신된다."""
        clock = FakeClock()
        cache: TTLCache[str, str] = TTLCache(10, clock=clock)
        cache.set("a", "old")
        clock.value = 8
        cache.set("a", "new")
        clock.value = 15
        assert cache.get("a") == "new"

    def test_set_evicts_expired_keys(self) -> None:
        """다시 조회되지 않는 만료 키도 새 값을 저장할 때 정리된다."""
        clock = FakeClock()
        cache: TTLCache[str, int] = TTLCache(10, clock=clock)
        for i in range(1000):
            cache.set(f"user-{i}", i)
            clock.value += 11

        assert len(cache._entries) == 1
        assert len(cache) == 0

    def test_len_counts_live_entries(self) -> None:
        """len은 만료되지 않은 항목만 센다."""
        clock = FakeClock()
        cache: TTLCache[str, int] = TTLCache(10, clock=clock)
        cache.set("old", 1)
        clock.value = 5
        cache.set("new", 2)
        clock.value = 12

        assert len(cache) == 1
        assert cache.purge() == 0
        assert cache.get("new") == 2
