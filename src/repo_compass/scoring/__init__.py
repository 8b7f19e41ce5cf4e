"""점수 계산 모듈."""

from repo_compass.scoring.classifier import RepoClassification, classify
from repo_compass.scoring.content import ContentScorer
from repo_compass.scoring.health import HealthScorer, fallback_score, log_scale

__all__ = [
    "ContentScorer",
    "HealthScorer",
    "RepoClassification",
    "classify",
    "fallback_score",
    "log_scale",
]
