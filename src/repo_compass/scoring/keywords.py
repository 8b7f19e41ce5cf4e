"""키워드 테이블."""

from repo_compass.models import Goal, ProjectType

# 튜토리얼/학습용 저장소 표식
TUTORIAL_MARKERS = (
    "tutorial",
    "tutorials",
    "learn",
    "learning",
    "course",
    "courses",
    "workshop",
    "workshops",
    "guide",
    "guides",
    "example",
    "examples",
    "lesson",
    "lessons",
    "training",
    "education",
    "educational",
)

# 학습 목표 매칭에서만 추가로 인정하는 표식
EXTENDED_TUTORIAL_MARKERS = TUTORIAL_MARKERS + (
    "beginner",
    "beginners",
    "getting-started",
    "getting started",
    "how-to",
    "howto",
    "walkthrough",
    "walk-through",
    "demo",
    "demos",
)

# 이름에 있으면 가장 강한 학습 신호
TUTORIAL_NAME_MARKERS = ("tutorial", "learn", "course")

# 큐레이션 목록 표식
LIST_MARKERS = (
    "curated list",
    "awesome list",
    "awesome-",
    "awesome.",
    "awesome/",
    "collection of",
    "list of",
    "curated collection",
)

CORPORATE_ORGS = (
    "microsoft/",
    "facebook/",
    "google/",
    "apple/",
    "amazon/",
    "netflix/",
    "uber/",
    "airbnb/",
)

# 대형 미러/교육 플랫폼 저장소
MIRROR_MARKERS = ("freecodecamp", "vscode", "visual-studio-code")

GENERIC_WORDS = ("awesome", "curated", "list", "collection", "resources")

POOR_DESCRIPTION_WORDS = (
    "awesome",
    "curated",
    "list",
    "collection",
    "just",
    "simple",
    "basic",
)

EXCELLENT_DESCRIPTION_WORDS = (
    "framework",
    "library",
    "tutorial",
    "guide",
    "example",
    "boilerplate",
    "starter",
    "template",
    "course",
    "learn",
)

PURPOSE_WORDS = EXCELLENT_DESCRIPTION_WORDS + (
    "build",
    "create",
    "implement",
    "demo",
    "project",
    "app",
    "application",
    "tool",
    "utility",
    "plugin",
    "extension",
    "package",
    "module",
)

# 목표별 태그 검색 키워드
GOAL_TAGS: dict[Goal, tuple[str, ...]] = {
    Goal.learning: ("tutorial", "course", "learn", "guide", "example"),
    Goal.building: ("boilerplate", "starter", "template"),
    Goal.finding_solutions: ("library", "package", "tool", "utility"),
    Goal.contributing: ("open-source", "contributing", "good-first-issue"),
    Goal.exploring: (),
}

# 클러스터 후보 선별용 텍스트 키워드. 없는 항목은 모두 통과한다.
GOAL_TEXT_FILTERS: dict[Goal, tuple[str, ...]] = {
    Goal.learning: ("tutorial", "learn", "course"),
    Goal.building: ("boilerplate", "starter", "template"),
    Goal.finding_solutions: ("library", "package", "tool"),
}

PROJECT_TYPE_TEXT_FILTERS: dict[ProjectType, tuple[str, ...]] = {
    ProjectType.tutorial: ("tutorial", "course", "learn"),
    ProjectType.boilerplate: ("boilerplate", "starter", "template"),
    ProjectType.library: ("library", "package"),
}

# 관심사/기술 스택 → 클러스터. 순서대로 검사한다.
CLUSTER_HINTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("frontend", ("web-frontend", "frontend")),
    ("backend", ("web-backend", "backend")),
    ("ai-ml", ("ai-ml", "ai", "machine-learning")),
    ("mobile", ("mobile",)),
    ("devops", ("devops",)),
    ("data-science", ("data-science", "data")),
    ("frontend", ("react", "vue", "angular", "svelte", "next.js", "nuxt")),
    ("backend", ("express", "django", "flask", "fastapi", "spring", "laravel")),
    ("ai-ml", ("tensorflow", "pytorch")),
    ("mobile", ("flutter", "react-native", "ionic")),
    ("data-science", ("pandas", "numpy")),
)
DEFAULT_CLUSTER = "frontend"


def contains_any(text: str, markers: tuple[str, ...]) -> bool:
    """text에 markers 중 하나라도 포함되는지 확인한다."""
    return any(marker in text for marker in markers)
