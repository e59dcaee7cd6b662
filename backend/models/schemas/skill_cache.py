"""Persisted skill cache document: ``{version, generatedAt, stats, cache}``."""

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from models.schemas.taxonomy import TaxonomyEntry

CACHE_FORMAT_VERSION = "1.0.0"


class CacheRecord(BaseModel):
    """One cache entry. ``onet`` is ``None`` when the lookup found no match."""
    model_config = ConfigDict(frozen=True)

    normalized: str
    onet: TaxonomyEntry | None = None

    @property
    def taxonomy(self) -> TaxonomyEntry | None:
        return self.onet


class CacheStats(BaseModel):
    total_skills: int = 0
    onet_matched: int = 0
    unmatched: int = 0
    match_rate: str = "0%"

    @property
    def match_rate_percent(self) -> int:
        return int(self.match_rate.rstrip("%") or 0)

    @classmethod
    def from_records(cls, records: dict[str, CacheRecord]) -> "CacheStats":
        total = len(records)
        matched = sum(1 for r in records.values() if r.onet is not None)
        rate = round(matched / total * 100) if total else 0
        return cls(
            total_skills=total,
            onet_matched=matched,
            unmatched=total - matched,
            match_rate=f"{rate}%",
        )


class CacheSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = CACHE_FORMAT_VERSION
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        validation_alias=AliasChoices("generatedAt", "generated", "generated_at"),
        serialization_alias="generatedAt",
    )
    stats: CacheStats = CacheStats()
    cache: dict[str, CacheRecord] = {}
