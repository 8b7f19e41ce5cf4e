"""GitHub Trending 스크래퍼."""

import logging

import httpx
from selectolax.parser import HTMLParser, Node

from repo_compass.config import settings
from repo_compass.errors import UpstreamError
from repo_compass.models import TrendingRepository

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly")


def parse_count(text: str) -> int:
    """숫자 문자열을 파싱한다 (예: '1,234' -> 1234, '1.2k' -> 1200).

    형식이 깨진 값은 0으로 본다.
    """
    cleaned = text.strip().replace(",", "").lower()
    if cleaned.endswith("k"):
        try:
            return round(float(cleaned[:-1]) * 1000)
        except (ValueError, OverflowError):
            return 0
    return int(cleaned) if cleaned.isdigit() else 0


class GitHubTrendingSource:
    """GitHub Trending 페이지에서 기간별 급상승 저장소를 수집한다."""

    BASE_URL = "https://github.com/trending"

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            timeout: HTTP 요청 타임아웃 (초)
            transport: httpx 전송 계층 (테스트용)
        """
        self.timeout = timeout or settings.http_timeout
        self._transport = transport

    def build_url(self, since: str = "daily", language: str | None = None) -> str:
        """요청 URL을 생성한다."""
        if since not in PERIODS:
            since = "daily"
        url = self.BASE_URL
        if language:
            url = f"{url}/{language.lower()}"
        return f"{url}?since={since}"

    def _parse_stars_in_period(self, text: str) -> int:
        """기간 스타 수를 파싱한다 (예: '123 stars today' -> 123)."""
        parts = text.strip().split()
        return parse_count(parts[0]) if parts else 0

    def parse_article(self, article: Node) -> TrendingRepository | None:
        """article 요소에서 저장소 정보를 추출한다."""
        name_elem = article.css_first("h2 a")
        if not name_elem:
            return None

        href = name_elem.attributes.get("href") or ""
        full_name = href.strip("/")
        if "/" not in full_name:
            return None

        desc_elem = article.css_first("p")
        lang_elem = article.css_first("[itemprop='programmingLanguage']")

        star_links = article.css("a[href$='/stargazers']")
        fork_links = article.css("a[href$='/forks']")
        period_elem = article.css_first("span.d-inline-block.float-sm-right")

        return TrendingRepository(
            full_name=full_name,
            url=f"https://github.com/{full_name}",
            description=desc_elem.text(strip=True) if desc_elem else None,
            language=lang_elem.text(strip=True) if lang_elem else None,
            stars=parse_count(star_links[0].text()) if star_links else 0,
            forks=parse_count(fork_links[0].text()) if fork_links else 0,
            stars_in_period=self._parse_stars_in_period(period_elem.text())
            if period_elem
            else 0,
        )

    def parse(self, html: str) -> list[TrendingRepository]:
        """Trending 페이지 HTML을 파싱한다."""
        parser = HTMLParser(html)
        repositories = []
        for article in parser.css("article.Box-row"):
            repo = self.parse_article(article)
            if repo:
                repositories.append(repo)
        return repositories

    async def fetch(
        self,
        since: str = "daily",
        language: str | None = None,
    ) -> list[TrendingRepository]:
        """GitHub Trending 페이지에서 저장소 목록을 가져온다."""
        url = self.build_url(since, language)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(
                    url,
                    headers={"Accept-Language": "en-US,en;q=0.9"},
                    follow_redirects=True,
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise UpstreamError("github-trending", str(e)) from e

        repositories = self.parse(response.text)
        logger.info(f"Trending ({since}, {language or 'all'}): {len(repositories)} repos")
        return repositories
