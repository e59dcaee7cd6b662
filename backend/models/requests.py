from pydantic import BaseModel, Field


class ProcessSkillsRequest(BaseModel):
    skills: list[str] = Field(default_factory=list, max_length=500, description="Raw skill phrases from a job posting")
    live: bool = Field(False, description="Match cache misses against O*NET instead of returning normalized text")


class EnhanceDescriptionRequest(BaseModel):
    description: str = Field(..., max_length=20000, description="Raw job description text")
