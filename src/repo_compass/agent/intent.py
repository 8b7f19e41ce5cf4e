"""자유 질의 의도 분류.

LLM 호출 없이 정규식만으로 비교, 건강도, 대안, 트렌딩, 검색 중 하나로 분류한다.
"""

import logging
import re

from repo_compass.agent.normalizer import QueryNormalizer
from repo_compass.models import Intent, IntentKind

logger = logging.getLogger(__name__)

COMPARE_PATTERNS = (
    re.compile(r"compare\s+(.+?)\s+(?:vs\.?|versus|and|with)\s+(.+)", re.IGNORECASE),
    re.compile(r"(.+?)\s+(?:vs\.?|versus)\s+(.+)", re.IGNORECASE),
    re.compile(
        r"(?:which is better|difference between)\s+(.+?)\s+(?:and|or|vs\.?)\s+(.+)",
        re.IGNORECASE,
    ),
)

HEALTH_PATTERNS = (
    re.compile(
        r"(?:health|score|status|maintained|active|alive)\s+(?:of|for|check)?\s*(.+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:is|how)\s+(.+?)\s+(?:maintained|active|healthy|alive|good)",
        re.IGNORECASE,
    ),
    re.compile(r"(?:analyze|check|inspect|review)\s+(.+)", re.IGNORECASE),
)

ALTERNATIVE_PATTERNS = (
    re.compile(
        r"(?:alternatives?|replacement|substitute|similar|like)\s+(?:to|for)?\s*(.+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:what can i use instead of|something like|repos? like)\s+(.+)",
        re.IGNORECASE,
    ),
)

# "new"는 today / this week가 뒤따를 때만 트렌딩으로 본다
TRENDING_PATTERN = re.compile(
    r"\b(?:trending|popular|hot|rising|new(?=.*\b(?:today|this\s+week)\b))\b\s*"
    r"(?:repos?|repositories|projects?)?\s*(?:in|for)?\s*([\w#+.]*)",
    re.IGNORECASE,
)

# 트렌딩 질의에서 언어로 오인하면 안 되는 단어
NON_LANGUAGE_WORDS = frozenset(
    {
        "this", "today", "week", "weekly", "month", "monthly", "daily", "now",
        "on", "github", "stars", "repos", "repositories",
    }
)

# 검색 질의의 언어 힌트 (앞에서부터 첫 일치)
LANGUAGE_HINTS = {
    "typescript": "TypeScript",
    "javascript": "JavaScript",
    "python": "Python",
    "rust": "Rust",
    "go": "Go",
    "java": "Java",
    "kotlin": "Kotlin",
    "swift": "Swift",
    "dart": "Dart",
    "ruby": "Ruby",
    "php": "PHP",
    "c#": "C#",
    "c++": "C++",
    "react": "TypeScript",
    "nextjs": "TypeScript",
    "vue": "JavaScript",
    "angular": "TypeScript",
    "svelte": "JavaScript",
    "flutter": "Dart",
}

_REPO_SEPARATOR = re.compile(r"[,&]|\s+and\s+", re.IGNORECASE)
_TOKEN = re.compile(r"[\w#+.]+")


def clean_repo_name(text: str) -> str:
    """따옴표, GitHub URL 접두사, .git 접미사, 앞의 @를 제거한다."""
    name = text.strip().rstrip("?!,;")
    name = name.strip("\"'`")
    name = re.sub(r"^https?://github\.com/", "", name, flags=re.IGNORECASE)
    name = re.sub(r"\.git$", "", name, flags=re.IGNORECASE)
    name = name.removeprefix("@")
    return name.strip().strip("/")


def parse_repo_names(*parts: str) -> list[str]:
    """쉼표, &, and로 나뉜 owner/repo 이름을 순서대로 추출한다."""
    names: list[str] = []
    for part in parts:
        for chunk in _REPO_SEPARATOR.split(part):
            name = clean_repo_name(chunk)
            if "/" in name and name not in names:
                names.append(name)
    return names


def detect_language(text: str) -> str | None:
    """질의 단어 중 언어 힌트에 해당하는 첫 언어."""
    tokens = {t.rstrip(".") for t in _TOKEN.findall(text.lower())}
    for keyword, language in LANGUAGE_HINTS.items():
        if keyword in tokens:
            return language
    return None


class IntentRouter:
    """자유 질의를 Intent로 분류한다."""

    def __init__(self, normalizer: QueryNormalizer | None = None) -> None:
        self.normalizer = normalizer or QueryNormalizer()

    def route(self, text: str) -> Intent:
        """패턴 우선순위: 비교 > 건강도 > 대안 > 트렌딩 > 검색."""
        query = text.strip()
        intent = (
            self._match_compare(query)
            or self._match_single(query, HEALTH_PATTERNS, IntentKind.health)
            or self._match_single(query, ALTERNATIVE_PATTERNS, IntentKind.alternatives)
            or self._match_trending(query)
            or Intent(
                kind=IntentKind.search,
                query=query,
                search_terms=self.normalizer.normalize(query),
                language=detect_language(query),
            )
        )
        logger.info(f"Routed '{query}' -> {intent.kind.value}")
        return intent

    def _match_compare(self, query: str) -> Intent | None:
        for pattern in COMPARE_PATTERNS:
            match = pattern.search(query)
            if not match:
                continue
            repos = parse_repo_names(match.group(1), match.group(2))
            if len(repos) >= 2:
                return Intent(kind=IntentKind.compare, query=query, repos=repos)
        return None

    def _match_single(
        self,
        query: str,
        patterns: tuple[re.Pattern[str], ...],
        kind: IntentKind,
    ) -> Intent | None:
        for pattern in patterns:
            match = pattern.search(query)
            if not match:
                continue
            name = clean_repo_name(match.group(1))
            if "/" in name:
                return Intent(kind=kind, query=query, repos=[name])
        return None

    def _match_trending(self, query: str) -> Intent | None:
        lower = query.lower()
        match = TRENDING_PATTERN.search(lower)
        if not match and "rising stars" not in lower:
            return None

        if "week" in lower:
            period = "weekly"
        elif "month" in lower:
            period = "monthly"
        else:
            period = "daily"

        language = match.group(1).rstrip(".") if match else ""
        if language in NON_LANGUAGE_WORDS:
            language = ""
        return Intent(
            kind=IntentKind.trending,
            query=query,
            language=language or None,
            period=period,
        )
