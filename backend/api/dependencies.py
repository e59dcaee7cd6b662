"""Shared dependencies for API routes.

Each getter returns a process-wide instance; tests replace them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from config import settings
from services.description_enhancer import DescriptionEnhancer, GeminiDescriptionEnhancer
from services.onet_client import OnetClient
from services.skill_pipeline import SkillPipeline
from services.taxonomy_cache import TaxonomyCache


@lru_cache
def get_skill_cache() -> TaxonomyCache:
    return TaxonomyCache.load(settings.skills_cache_path, missing_ok=True)


@lru_cache
def get_pipeline() -> SkillPipeline:
    return SkillPipeline(cache=get_skill_cache())


@lru_cache
def get_onet_client() -> OnetClient:
    return OnetClient()


@lru_cache
def get_description_enhancer() -> DescriptionEnhancer:
    return GeminiDescriptionEnhancer()
