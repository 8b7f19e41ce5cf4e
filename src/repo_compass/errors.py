"""예외 정의."""


class CompassError(Exception):
    """repo-compass 예외의 기본 클래스."""


class UpstreamError(CompassError):
    """외부 협력자(GitHub, Supabase 등) 호출이 실패했을 때 발생한다."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"[{source}] {message}")


class PoolExhaustedError(CompassError):
    """모든 후보 수집 단계가 0개를 반환했을 때 발생한다."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No candidates available for user {user_id}")
