"""GitHub REST API 저장소 인덱스."""

import asyncio
import logging
import re
from datetime import datetime
from typing import Any

import httpx

from repo_compass.cache import TTLCache
from repo_compass.config import settings
from repo_compass.errors import UpstreamError
from repo_compass.models import HealthSignals, Owner, Repository, build_tags

logger = logging.getLogger(__name__)

# 대안 검색에서 설명 키워드로 쓰지 않는 단어
STOP_WORDS = frozenset({"this", "that", "with", "from", "your", "the", "and", "for"})

# 평균 처리 시간 계산에서 제외하는 이상치 (일)
ISSUE_OUTLIER_DAYS = 365


def to_repository(item: dict[str, Any]) -> Repository:
    """GitHub API 저장소 응답을 Repository로 변환한다."""
    language = item.get("language")
    topics = item.get("topics") or []
    owner = item.get("owner") or {}
    license_info = item.get("license") or {}
    return Repository(
        id=str(item["id"]),
        name=item["name"],
        full_name=item["full_name"],
        description=item.get("description") or "",
        stars=item.get("stargazers_count", 0),
        forks=item.get("forks_count", 0),
        pushed_at=item.get("pushed_at") or item.get("updated_at"),
        language=language,
        tags=build_tags(language, topics),
        topics=topics,
        owner=Owner(login=owner["login"], avatar_url=owner.get("avatar_url", ""))
        if owner.get("login")
        else None,
        license=license_info.get("name"),
        url=item.get("html_url", ""),
    )


def _last_page(response: httpx.Response) -> int | None:
    """Link 헤더의 rel="last" 페이지 번호."""
    last = response.links.get("last")
    if not last or "url" not in last:
        return None
    page = httpx.URL(last["url"]).params.get("page")
    return int(page) if page and page.isdigit() else None


def _description_keywords(description: str, limit: int = 4) -> list[str]:
    words = re.sub(r"[^\w\s]", "", description.lower()).split()
    return [w for w in words if len(w) > 3 and w not in STOP_WORDS][:limit]


class GitHubRepositoryIndex:
    """GitHub REST API로 저장소와 건강 신호를 조회한다."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        signal_cache: TTLCache[str, HealthSignals] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            token: GitHub API 토큰. None이면 설정값 사용.
            base_url: API 기본 URL. None이면 설정값 사용.
            timeout: HTTP 요청 타임아웃 (초)
            signal_cache: 건강 신호 캐시. None이면 설정된 TTL로 생성.
            transport: httpx 전송 계층 (테스트용)
        """
        self.token = token or settings.github_token
        self.base_url = base_url or settings.github_api_base
        self.timeout = timeout or settings.http_timeout
        self.signal_cache = (
            signal_cache
            if signal_cache is not None
            else TTLCache(settings.health_cache_minutes * 60)
        )
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any | None:
        """JSON을 가져온다. 실패하면 None."""
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"GitHub request failed {path}: {e}")
            return None
        return response.json()

    async def search_repositories(
        self,
        query: str,
        sort: str = "stars",
        order: str = "desc",
        per_page: int = 30,
        max_pages: int = 1,
    ) -> list[Repository]:
        """/search/repositories를 페이지 단위로 조회한다."""
        repositories: list[Repository] = []
        async with self._client() as client:
            for page in range(1, max_pages + 1):
                params = {
                    "q": query,
                    "sort": sort,
                    "order": order,
                    "per_page": per_page,
                    "page": page,
                }
                try:
                    response = await client.get("/search/repositories", params=params)
                    response.raise_for_status()
                except httpx.HTTPError as e:
                    raise UpstreamError("github", f"search failed: {e}") from e

                items = response.json().get("items") or []
                repositories.extend(to_repository(item) for item in items)
                if len(items) < per_page:
                    break

        logger.info(f"GitHub search '{query}': {len(repositories)} repos")
        return repositories

    async def get_repository(self, full_name: str) -> Repository | None:
        """저장소 하나를 가져온다. 없거나 실패하면 None."""
        async with self._client() as client:
            data = await self._get_json(client, f"/repos/{full_name}")
        return to_repository(data) if data else None

    async def get_health_signals(self, full_name: str) -> HealthSignals | None:
        """건강 신호를 모은다. 저장소가 없으면 None."""
        cached = self.signal_cache.get(full_name)
        if cached is not None:
            return cached

        async with self._client() as client:
            repo = await self._get_json(client, f"/repos/{full_name}")
            if not repo:
                return None

            contributors, commits, issues, releases, community = await asyncio.gather(
                self._contributor_count(client, full_name),
                self._commit_activity(client, full_name),
                self._issue_metrics(client, full_name),
                self._release_info(client, full_name),
                self._community_profile(client, full_name),
            )

        avg_close_time, close_rate = issues
        release_count, last_release = releases
        has_readme, has_contributing = community
        license_info = repo.get("license") or {}

        signals = HealthSignals(
            stars=repo.get("stargazers_count", 0),
            forks=repo.get("forks_count", 0),
            open_issues=repo.get("open_issues_count", 0),
            watchers=repo.get("subscribers_count", 0),
            last_push=repo.get("pushed_at") or repo["updated_at"],
            created_at=repo["created_at"],
            license=license_info.get("spdx_id") or license_info.get("name"),
            language=repo.get("language"),
            topics=repo.get("topics") or [],
            default_branch=repo.get("default_branch") or "main",
            contributor_count=contributors,
            avg_issue_close_time_days=avg_close_time,
            issue_close_rate=close_rate,
            commit_activity_52w=commits,
            release_count=release_count,
            last_release_date=last_release,
            has_readme=has_readme,
            has_contributing=has_contributing,
            size_kb=repo.get("size", 0),
        )
        self.signal_cache.set(full_name, signals)
        return signals

    async def _contributor_count(self, client: httpx.AsyncClient, full_name: str) -> int:
        try:
            response = await client.get(
                f"/repos/{full_name}/contributors",
                params={"per_page": 1, "anon": "false"},
            )
            response.raise_for_status()
        except httpx.HTTPError:
            return 0
        last = _last_page(response)
        if last is not None:
            return last
        # 204 No Content (빈 저장소)
        if not response.content:
            return 0
        items = response.json()
        return len(items) if isinstance(items, list) else 0

    async def _commit_activity(self, client: httpx.AsyncClient, full_name: str) -> int:
        data = await self._get_json(client, f"/repos/{full_name}/stats/participation")
        if not isinstance(data, dict) or not data.get("all"):
            return 0
        return sum(data["all"])

    async def _issue_metrics(
        self, client: httpx.AsyncClient, full_name: str
    ) -> tuple[float | None, float | None]:
        """(평균 처리 일수, 닫힘 비율)."""
        closed, open_search = await asyncio.gather(
            self._get_json(
                client,
                f"/repos/{full_name}/issues",
                params={
                    "state": "closed",
                    "per_page": 30,
                    "sort": "updated",
                    "direction": "desc",
                },
            ),
            self._get_json(
                client,
                "/search/issues",
                params={"q": f"repo:{full_name} is:issue is:open", "per_page": 1},
            ),
        )

        closed_issues = [
            issue
            for issue in (closed if isinstance(closed, list) else [])
            if "pull_request" not in issue
        ]
        open_count = open_search.get("total_count", 0) if isinstance(open_search, dict) else 0

        durations: list[float] = []
        for issue in closed_issues:
            if not issue.get("closed_at") or not issue.get("created_at"):
                continue
            created = datetime.fromisoformat(issue["created_at"])
            closed_at = datetime.fromisoformat(issue["closed_at"])
            days = (closed_at - created).total_seconds() / 86400
            if 0 <= days < ISSUE_OUTLIER_DAYS:
                durations.append(days)

        avg_close_time = sum(durations) / len(durations) if durations else None
        total = len(closed_issues) + open_count
        close_rate = len(closed_issues) / total if total > 0 else None
        return avg_close_time, close_rate

    async def _release_info(
        self, client: httpx.AsyncClient, full_name: str
    ) -> tuple[int, str | None]:
        try:
            response = await client.get(
                f"/repos/{full_name}/releases", params={"per_page": 1}
            )
            response.raise_for_status()
        except httpx.HTTPError:
            return 0, None
        releases = response.json()
        if not isinstance(releases, list):
            return 0, None
        last_date = releases[0].get("published_at") if releases else None
        count = _last_page(response) or len(releases)
        return count, last_date

    async def _community_profile(
        self, client: httpx.AsyncClient, full_name: str
    ) -> tuple[bool, bool]:
        """(README 유무, CONTRIBUTING 유무). 프로필이 없으면 README는 있다고 본다."""
        data = await self._get_json(client, f"/repos/{full_name}/community/profile")
        files = data.get("files") if isinstance(data, dict) else None
        if not files:
            return True, False
        return bool(files.get("readme")), bool(files.get("contributing"))

    async def find_alternatives(self, full_name: str, limit: int = 6) -> list[Repository]:
        """토픽과 설명 키워드로 비슷한 저장소를 찾는다. 원본은 제외한다."""
        async with self._client() as client:
            repo = await self._get_json(client, f"/repos/{full_name}")
        if not repo:
            return []

        queries: list[str] = []
        topics = repo.get("topics") or []
        if topics:
            queries.append(" ".join(f"topic:{t}" for t in topics[:3]))
        keywords = _description_keywords(repo.get("description") or "")
        if keywords:
            query = " ".join(keywords)
            if repo.get("language"):
                query += f" language:{repo['language']}"
            queries.append(query)

        seen = {full_name.lower()}
        results: list[Repository] = []
        for query in queries:
            if len(results) >= limit:
                break
            found = await self.search_repositories(
                f"{query} stars:>=20", per_page=min(limit * 2, 50)
            )
            for candidate in found:
                key = candidate.full_name.lower()
                if key in seen or len(results) >= limit:
                    continue
                seen.add(key)
                results.append(candidate)
        return results
