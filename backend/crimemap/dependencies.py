"""FastAPI providers for the external collaborators."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from crimemap.config import get_settings
from crimemap.services.cache import InMemoryTTLCache
from crimemap.services.prediction_client import PredictionClient
from crimemap.services.safety_analyst import SafetyAnalyst

settings = get_settings()


def get_prediction_client() -> PredictionClient:
    return PredictionClient()


@lru_cache
def get_analysis_cache() -> InMemoryTTLCache:
    """Process-wide analysis cache."""
    return InMemoryTTLCache(
        default_ttl=settings.analysis_cache_ttl_seconds,
        max_entries=settings.analysis_cache_max_entries,
    )


def get_safety_analyst(
    cache: Annotated[InMemoryTTLCache, Depends(get_analysis_cache)],
) -> SafetyAnalyst:
    return SafetyAnalyst(cache=cache)
