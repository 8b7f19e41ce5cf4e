"""결정적 셔플 테스트."""

from repo_compass.retrieval.shuffle import shuffle_for_user, stable_shuffle, string_hash32


class TestStringHash32:
    """string_hash32 테스트."""

    def test_known_values(self) -> None:
        """h = h * 31 + code."""
        assert string_hash32("") == 0
        assert string_hash32("a") == 97
        assert string_hash32("ab") == 97 * 31 + 98

    def test_wraps_to_32_bits(self) -> None:
        """긴 문자열도 32비트 범위 안이다."""
        value = string_hash32("user-" * 200)
        assert 0 <= value < 2**32

    def test_matches_java_style_hash(self) -> None:
        """부호 없는 32비트 표현이 Java String.hashCode와 같다."""
        # "hello".hashCode() == 99162322
        assert string_hash32("hello") == 99162322


class TestStableShuffle:
    """stable_shuffle 테스트."""

    def test_same_seed_same_order(self) -> None:
        """seed가 같으면 순서도 같다."""
        items = list(range(50))
        assert stable_shuffle(items, 7) == stable_shuffle(items, 7)

    def test_is_permutation_and_does_not_mutate(self) -> None:
        """입력을 바꾸지 않고 같은 원소를 반환한다."""
        items = list(range(20))
        shuffled = stable_shuffle(items, 3)
        assert items == list(range(20))
        assert sorted(shuffled) == items

    def test_users_get_different_orders(self) -> None:
        """사용자마다 순서가 다르다."""
        items = list(range(50))
        alice = shuffle_for_user(items, "alice")
        bob = shuffle_for_user(items, "bob")
        assert alice != bob
        assert alice == shuffle_for_user(items, "alice")

    def test_empty(self) -> None:
        """빈 목록은 빈 목록이다."""
        assert stable_shuffle([], 1) == []
