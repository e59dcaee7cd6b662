"""O*NET taxonomy records: search results, occupation skills, matched entries."""

from pydantic import BaseModel, ConfigDict, Field


class Occupation(BaseModel):
    """An occupation returned by a taxonomy keyword search."""
    code: str
    title: str = ""


class OccupationSkill(BaseModel):
    """A skill element listed under an occupation."""
    id: str = ""
    name: str
    description: str = ""


class SearchResult(BaseModel):
    occupations: list[Occupation] = []
    total: int = 0


class SkillsResult(BaseModel):
    skills: list[OccupationSkill] = []


class OccupationRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = ""
    title: str = ""


class TaxonomyEntry(BaseModel):
    """A standardized skill from the taxonomy. Immutable; identity is ``id``.

    Only ``name`` is required so that hand-maintained cache files holding just
    a canonical name still load.
    """
    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str
    description: str = ""
    occupation: OccupationRef | None = None

    @property
    def canonical_name(self) -> str:
        return self.name

    @property
    def source_occupation_code(self) -> str:
        return self.occupation.code if self.occupation else ""

    @property
    def source_occupation_title(self) -> str:
        return self.occupation.title if self.occupation else ""


class OccupationMatch(BaseModel):
    """Best occupation for a job title, with a coarse confidence label."""
    code: str
    title: str = ""
    confidence: str = "low"  # high | medium | low
    alternates: list[Occupation] = Field(default_factory=list)
