"""enrichment 모듈."""

from repo_compass.enrichers.health import HealthEnricher, star_velocity

__all__ = ["HealthEnricher", "star_velocity"]
