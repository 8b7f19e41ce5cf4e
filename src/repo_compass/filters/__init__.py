"""필터링 모듈."""

from repo_compass.filters.quality import QualityGate

__all__ = ["QualityGate"]
