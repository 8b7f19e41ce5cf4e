"""CLI 엔트리포인트."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from repo_compass.agent import Assistant, AssistantResponse, IntentRouter
from repo_compass.config import settings
from repo_compass.engine import RecommendationEngine
from repo_compass.enrichers import HealthEnricher
from repo_compass.errors import CompassError
from repo_compass.models import (
    Comparison,
    Goal,
    HealthScore,
    PopularityWeight,
    Repository,
    ScoredRepository,
    UserPreferences,
)
from repo_compass.recommender import PoolBuilder
from repo_compass.sources import GitHubRepositoryIndex, GitHubTrendingSource
from repo_compass.sources.base import ClusterStore, InteractionLog, PoolStore
from repo_compass.storage import (
    InMemoryClusterStore,
    InMemoryInteractionLog,
    InMemoryPoolStore,
    SupabaseStore,
)

console = Console()

T = TypeVar("T")

app = typer.Typer(
    name="repo-compass",
    help="GitHub 저장소를 개인화 추천하고 건강도를 분석합니다.",
    no_args_is_help=True,
)


@dataclass
class _Services:
    engine: RecommendationEngine
    assistant: Assistant


def _build_services() -> _Services:
    """설정에 따라 Supabase 또는 인메모리 저장소로 엔진을 조립한다."""
    supabase = SupabaseStore(settings.supabase_url, settings.supabase_key)
    cluster_store: ClusterStore
    interactions: InteractionLog
    pool_store: PoolStore
    if supabase.is_configured:
        cluster_store = interactions = pool_store = supabase
    else:
        console.print("[dim]Supabase 미설정: 인메모리 저장소를 사용합니다.[/dim]")
        cluster_store = InMemoryClusterStore()
        interactions = InMemoryInteractionLog()
        pool_store = InMemoryPoolStore()

    index = GitHubRepositoryIndex()
    enricher = HealthEnricher(index)
    engine = RecommendationEngine(
        pool_builder=PoolBuilder(cluster_store, interactions, pool_store, index),
        interactions=interactions,
        enricher=enricher,
    )
    assistant = Assistant(index, GitHubTrendingSource(), enricher=enricher)
    return _Services(engine=engine, assistant=assistant)


def _run(coro: Coroutine[Any, Any, T], status: str) -> T:
    """코루틴을 스피너와 함께 실행한다. 실패하면 종료 코드 1."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(status, total=None)
            return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[dim]중단됨[/dim]")
        raise typer.Exit(0) from None
    except CompassError as e:
        console.print(f"[red]오류 발생: {e}[/red]")
        raise typer.Exit(1) from e


def _grade_style(score: int) -> str:
    if score >= 75:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def _render_recommendations(repos: list[Repository]) -> None:
    if not repos:
        console.print("\n[yellow]추천할 저장소가 없습니다.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("저장소", style="bold")
    table.add_column("언어", width=12)
    table.add_column("⭐ Stars", justify="right", width=10)
    table.add_column("적합도", justify="center", width=8)

    for i, repo in enumerate(repos, 1):
        fit = repo.fit_score or 0
        table.add_row(
            str(i),
            f"[link={repo.url}]{repo.full_name}[/link]",
            repo.language or "-",
            f"{repo.stars:,}",
            f"[{_grade_style(fit)}]{fit}[/]",
        )
    console.print(table)


def _render_health(name: str, health: HealthScore) -> None:
    style = _grade_style(health.overall)
    title = f"[bold]{name}[/bold]  [{style}]{health.overall}/100 ({health.grade})[/]"
    if health.is_estimate:
        title += "  [dim](추정치)[/dim]"

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("항목")
    table.add_column("점수", justify="right")
    for pillar, score in health.breakdown.model_dump().items():
        table.add_row(pillar, f"[{_grade_style(score)}]{score}[/]")

    console.print(Panel(table, title=title, border_style="blue"))
    if health.summary:
        console.print(Markdown(health.summary))


def _render_scored(repos: list[ScoredRepository]) -> None:
    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("저장소", style="bold")
    table.add_column("⭐ Stars", justify="right", width=10)
    table.add_column("월간 ⭐", justify="right", width=8)
    table.add_column("건강도", justify="center", width=12)

    for i, item in enumerate(repos, 1):
        repo, health = item.repository, item.health
        table.add_row(
            str(i),
            f"[link={repo.url}]{repo.full_name}[/link]",
            f"{repo.stars:,}",
            f"{item.star_velocity:,}",
            f"[{_grade_style(health.overall)}]{health.overall} ({health.grade})[/]",
        )
    console.print(table)


def _render_comparison(comparison: Comparison) -> None:
    if comparison.reason:
        console.print(f"[yellow]{comparison.reason}[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("항목")
    for item in comparison.repos:
        table.add_column(item.repository.full_name, justify="center")

    table.add_row("overall", *(f"{r.health.overall} ({r.health.grade})" for r in comparison.repos))
    for pillar, winner in comparison.category_winners.items():
        cells = []
        for item in comparison.repos:
            score = getattr(item.health.breakdown, pillar)
            is_winner = item.repository.full_name == winner
            cells.append(f"[bold green]{score}[/]" if is_winner else str(score))
        table.add_row(pillar, *cells)

    console.print(table)
    console.print(Panel(Markdown(comparison.verdict), title="판정", border_style="green"))
    console.print(comparison.summary)


def _render_response(response: AssistantResponse) -> None:
    console.print(Panel(Markdown(response.text), border_style="blue"))
    if response.comparison:
        _render_comparison(response.comparison)
    if response.health_report:
        _render_health(
            response.health_report.repository.full_name, response.health_report.health
        )
    if response.recommendations:
        _render_scored(response.recommendations)
    if response.actions:
        console.print("[dim]💡 " + " · ".join(response.actions) + "[/dim]")


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="INFO 로그 출력"),
    ] = False,
) -> None:
    """로깅을 설정한다."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def recommend(
    user: Annotated[str, typer.Option("--user", "-u", help="사용자 ID")] = "local",
    cluster: Annotated[
        str | None,
        typer.Option("--cluster", "-c", help="주 관심 클러스터 (예: frontend, ai-ml)"),
    ] = None,
    stack: Annotated[
        list[str] | None,
        typer.Option("--stack", "-s", help="기술 스택 태그 (반복 가능)"),
    ] = None,
    goal: Annotated[
        list[Goal] | None,
        typer.Option("--goal", "-g", help="목표 (반복 가능)"),
    ] = None,
    popularity: Annotated[
        PopularityWeight,
        typer.Option("--popularity", "-p", help="인기도 가중치"),
    ] = PopularityWeight.medium,
    count: Annotated[int, typer.Option("--count", "-n", min=1, max=100)] = 20,
) -> None:
    """선호에 맞는 저장소를 추천합니다."""
    preferences = UserPreferences(
        primary_cluster=cluster,
        tech_stack=stack or [],
        goals=goal or [],
        popularity_weight=popularity,
    )
    services = _build_services()
    repos = _run(
        services.engine.get_recommendations(user, preferences, count),
        "추천 후보 수집 중...",
    )
    _render_recommendations(repos)


@app.command()
def health(
    name: Annotated[str, typer.Argument(help="저장소 (owner/repo)")],
) -> None:
    """저장소 건강도를 분석합니다."""
    services = _build_services()
    score = _run(services.engine.get_health_score(name), "건강 신호 수집 중...")
    _render_health(name, score)


@app.command()
def compare(
    names: Annotated[list[str], typer.Argument(help="비교할 저장소 2-5개 (owner/repo)")],
) -> None:
    """저장소를 나란히 비교합니다."""
    services = _build_services()
    comparison = _run(services.engine.compare(names), "저장소 비교 중...")
    _render_comparison(comparison)


@app.command()
def ask(
    message: Annotated[str, typer.Argument(help="자유 질의")],
) -> None:
    """자유 질의에 답합니다 (검색, 비교, 건강도, 대안, 트렌딩)."""
    services = _build_services()
    response = _run(services.assistant.respond(message), "분석 중...")
    _render_response(response)


@app.command()
def route(
    message: Annotated[str, typer.Argument(help="자유 질의")],
) -> None:
    """질의 의도 분류 결과를 출력합니다."""
    intent = IntentRouter().route(message)
    console.print_json(intent.model_dump_json())


if __name__ == "__main__":
    app()
