from pydantic import BaseModel

from models.schemas.taxonomy import TaxonomyEntry


class HealthResponse(BaseModel):
    status: str = "ok"
    skills_cached: int = 0
    onet_configured: bool = False
    llm_configured: bool = False


class ProcessSkillsResponse(BaseModel):
    skills: list[str] = []


class SkillLookupResponse(BaseModel):
    skill: str
    normalized: str
    matched: bool = False
    canonical_name: str
    onet: TaxonomyEntry | None = None
