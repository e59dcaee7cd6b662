"""Job records as read from the exported jobs file."""

from pydantic import BaseModel, ConfigDict, field_validator


class JobRecord(BaseModel):
    """A job posting. Only ``skills`` is interpreted; other keys pass through."""
    model_config = ConfigDict(extra="allow")

    skills: list[str] = []

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value):
        if not isinstance(value, list):
            return []
        return [s for s in value if isinstance(s, str)]


class CleanReport(BaseModel):
    """Aggregate result of running the skill pipeline over a jobs file."""
    total_jobs: int = 0
    jobs_with_skills: int = 0
    jobs_without_skills: int = 0
    skills_before: int = 0
    skills_after: int = 0

    @property
    def filtered_out(self) -> int:
        return self.skills_before - self.skills_after

    @property
    def filtered_percent(self) -> float:
        if not self.skills_before:
            return 0.0
        return round(self.filtered_out / self.skills_before * 100, 1)
