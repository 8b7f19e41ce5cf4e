"""자유 질의를 GitHub 검색어로 압축하는 규칙 기반 정규화기."""

import re
from dataclasses import dataclass

# 검색어에서 빼는 불용어
STOP_WORDS = frozenset(
    {
        "a", "an", "the", "and", "or", "for", "to", "of", "in", "on", "with",
        "me", "my", "i", "we", "our", "you", "is", "are", "be", "that", "this",
        "some", "any", "good", "best", "great", "nice", "cool", "top", "please",
        "can", "could", "would", "should", "want", "need", "looking", "help",
        "repo", "repos", "repository", "repositories", "project", "projects",
        "library", "libraries", "github", "open", "source", "something",
    }
)  # fmt: skip

MAX_TERMS = 5


@dataclass(frozen=True)
class Rule:
    """순서대로 적용되는 치환 규칙 하나."""

    name: str
    pattern: re.Pattern[str]
    replacement: str = " "

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule("urls", re.compile(r"https?://\S+")),
    Rule(
        "request_prefix",
        re.compile(
            r"^\s*(?:can you |could you |please )?"
            r"(?:show me|find me|find|search for|search|look for|get me|give me|"
            r"recommend|suggest|i need|i want|i'm looking for|looking for)\b",
            re.IGNORECASE,
        ),
    ),
    Rule(
        "question_words",
        re.compile(r"\b(?:what|which|where|how|are there|is there)\b", re.IGNORECASE),
    ),
    Rule("punctuation", re.compile(r"[^\w\s#+.\-/]")),
    Rule("trailing_dots", re.compile(r"\.+(?=\s|$)")),
    Rule("whitespace", re.compile(r"\s+")),
)


class QueryNormalizer:
    """정규식 규칙을 순서대로 적용한 뒤 불용어를 제거한다."""

    def __init__(
        self,
        rules: tuple[Rule, ...] = DEFAULT_RULES,
        stop_words: frozenset[str] = STOP_WORDS,
        max_terms: int = MAX_TERMS,
    ) -> None:
        self.rules = rules
        self.stop_words = stop_words
        self.max_terms = max_terms

    def strip(self, text: str) -> str:
        """규칙만 적용한 결과."""
        for rule in self.rules:
            text = rule.apply(text)
        return text.strip()

    def terms(self, text: str) -> list[str]:
        """불용어를 뺀 소문자 검색어 목록. 중복은 제거한다."""
        terms: list[str] = []
        for word in self.strip(text).lower().split():
            if word in self.stop_words or word in terms:
                continue
            terms.append(word)
        return terms[: self.max_terms]

    def normalize(self, text: str) -> str:
        """검색어 문자열. 남는 단어가 없으면 공백을 정리한 원문."""
        terms = self.terms(text)
        if not terms:
            return " ".join(text.split())
        return " ".join(terms)
