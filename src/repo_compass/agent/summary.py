"""검색 결과 요약 모듈.

Gemini API 키가 있으면 LLM으로 요약하고, 없거나 실패하면 템플릿을 쓴다.
"""

import logging

from google import genai
from google.genai import types

from repo_compass.config import settings
from repo_compass.models import ScoredRepository

logger = logging.getLogger(__name__)

# 프롬프트에 넣는 최대 저장소 수
PROMPT_REPO_LIMIT = 5

SYSTEM_INSTRUCTION = (
    "You are a helpful GitHub repository discovery agent. Be concise and specific."
)


def template_summary(query: str, repos: list[ScoredRepository]) -> str:
    """LLM 없이 만드는 한두 문장 요약."""
    if not repos:
        return f'No results found for "{query}".'

    best = repos[0]
    avg_health = round(sum(r.health.overall for r in repos) / len(repos))
    return (
        f"Found {len(repos)} repositories ranked by health score (avg: {avg_health}/100). "
        f"**{best.repository.full_name}** leads with a {best.health.grade} grade "
        f"({best.health.overall}/100) and {best.repository.stars:,} stars."
    )


class SearchSummarizer:
    """Gemini로 검색 결과를 요약한다."""

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        """
        Args:
            api_key: Gemini API 키. None이면 설정값 사용.
            model: 모델 이름. None이면 설정값 사용.
        """
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.client = genai.Client(api_key=self.api_key) if self.api_key else None

    @property
    def is_configured(self) -> bool:
        """Gemini가 설정되었는지 확인한다."""
        return self.client is not None

    def _build_prompt(self, query: str, repos: list[ScoredRepository]) -> str:
        """요약 프롬프트를 생성한다."""
        lines = []
        for i, item in enumerate(repos[:PROMPT_REPO_LIMIT], 1):
            repo = item.repository
            lines.append(
                f"{i}. {repo.full_name} — {repo.stars:,} stars, "
                f"health: {item.health.overall}/100 ({item.health.grade}), "
                f"{item.star_velocity} stars/month. {repo.description}"
            )
        repos_text = "\n".join(lines)

        return f"""The user searched: "{query}"

Here are the top results (ranked by health score, not just stars):
{repos_text}

Write a 2-3 sentence summary explaining why these repos are good choices.
Be specific about what makes each one stand out. Mention health scores.
Be concise and conversational, no fluff."""

    async def summarize(self, query: str, repos: list[ScoredRepository]) -> str:
        """검색 결과를 요약한다. 실패하면 템플릿 요약."""
        if self.client is None or not repos:
            return template_summary(query, repos)

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self._build_prompt(query, repos),
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION,
                    temperature=0.6,
                    max_output_tokens=300,
                ),
            )
        except Exception as e:
            logger.warning(f"Gemini summary failed, using template: {e}")
            return template_summary(query, repos)

        if not response.text:
            logger.warning("Gemini summary was empty, using template")
            return template_summary(query, repos)
        return response.text.strip()
