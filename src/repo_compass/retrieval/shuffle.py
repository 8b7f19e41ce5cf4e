"""사용자별 결정적 셔플."""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF


def string_hash32(value: str) -> int:
    """다항식 롤링 해시 (h = h * 31 + code, 32비트 wraparound)."""
    h = 0
    for char in value:
        h = (h * 31 + ord(char)) & _MASK_32
    return h


def stable_shuffle(items: Sequence[T], seed: int) -> list[T]:
    """seed가 같으면 항상 같은 순서를 내는 Fisher-Yates 셔플. 입력은 바꾸지 않는다."""
    shuffled = list(items)
    random.Random(seed).shuffle(shuffled)
    return shuffled


def shuffle_for_user(items: Sequence[T], user_id: str) -> list[T]:
    """사용자 ID에서 얻은 seed로 셔플한다."""
    return stable_shuffle(items, string_hash32(user_id))
