"""Pydantic contracts shared by the skill pipeline, API and scripts."""

from models.schemas.description import DescriptionSection, StructuredDescription
from models.schemas.jobs import CleanReport, JobRecord
from models.schemas.skill_cache import CacheRecord, CacheSnapshot, CacheStats
from models.schemas.taxonomy import (
    Occupation,
    OccupationMatch,
    OccupationRef,
    OccupationSkill,
    SearchResult,
    SkillsResult,
    TaxonomyEntry,
)

__all__ = [
    "CacheRecord",
    "CacheSnapshot",
    "CacheStats",
    "CleanReport",
    "DescriptionSection",
    "JobRecord",
    "Occupation",
    "OccupationMatch",
    "OccupationRef",
    "OccupationSkill",
    "SearchResult",
    "SkillsResult",
    "StructuredDescription",
    "TaxonomyEntry",
]
