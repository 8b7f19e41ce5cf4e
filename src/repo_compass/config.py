"""설정 관리 모듈."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitHub
    github_token: str | None = Field(default=None, description="GitHub API 토큰")
    github_api_base: str = Field(
        default="https://api.github.com",
        description="GitHub REST API 기본 URL",
    )
    http_timeout: float = Field(default=10.0, gt=0, description="HTTP 타임아웃 (초)")

    # Supabase
    supabase_url: str | None = Field(default=None, description="Supabase URL")
    supabase_key: str | None = Field(default=None, description="Supabase anon key")

    # Gemini (검색 요약용, 선택)
    gemini_api_key: str | None = Field(default=None, description="Gemini API 키")
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        description="사용할 Gemini 모델",
    )

    # 추천 풀
    pool_size: int = Field(default=100, ge=1, description="사용자별 후보 풀 크기")
    pool_ttl_hours: float = Field(default=24.0, gt=0, description="풀 캐시 유효 시간")
    tag_search_floor: int = Field(
        default=50,
        ge=0,
        description="이 개수 미만이면 태그 기반 검색으로 보충",
    )
    tag_search_limit: int = Field(default=150, ge=1, description="태그 검색 최대 개수")
    fallback_cluster_limit: int = Field(
        default=50,
        ge=1,
        description="일반 폴백 클러스터에서 가져올 개수",
    )
    score_band_width: int = Field(
        default=5,
        ge=1,
        description="적합도 정렬 시 같은 밴드로 취급할 점수 폭",
    )
    min_relevance_score: int = Field(
        default=20,
        ge=0,
        le=100,
        description="동적 검색 결과의 최소 적합도",
    )

    # 캐시
    health_cache_minutes: float = Field(default=30.0, gt=0, description="건강 신호 캐시")
    seen_cache_minutes: float = Field(default=5.0, gt=0, description="본 저장소 ID 캐시")


settings = Settings()
