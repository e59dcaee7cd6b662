"""Skill pipeline: raw job skill phrases -> deduplicated canonical skill names.

Flow per raw phrase:
    drop pay / percentage phrases -> normalize -> split
      -> normalize parts -> validate
      -> case-insensitive dedup (first seen wins)
      -> resolve: skill cache | live fuzzy match (async only) | normalized text
      -> case-insensitive dedup of the resolved names

Per-item failures never escape; the worst case for a candidate is its
normalized text.
"""

import logging
from typing import Iterable

from models.schemas.jobs import CleanReport, JobRecord
from services.fuzzy_matcher import FuzzyMatcher
from services.remote_lookup import RemoteAuthError, RemoteLookup
from services.skill_splitter import split
from services.skill_validator import is_valid, mentions_pay
from services.taxonomy_cache import TaxonomyCache
from services.text_normalizer import normalize

logger = logging.getLogger(__name__)


def dedupe(items: Iterable[str]) -> list[str]:
    """Case-insensitive deduplication preserving first occurrence."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out


class SkillPipeline:
    def __init__(
        self,
        cache: TaxonomyCache | None = None,
        matcher: FuzzyMatcher | None = None,
    ) -> None:
        self.cache = cache if cache is not None else TaxonomyCache()
        self.matcher = matcher or FuzzyMatcher()

    def candidates(self, raw_skills: Iterable[str] | None) -> list[str]:
        """Cleaned, validated, deduplicated candidates in input order."""
        found: list[str] = []
        for phrase in raw_skills or []:
            if mentions_pay(phrase):
                continue
            normalized = normalize(phrase)
            if normalized is None:
                continue
            for part in split(normalized):
                candidate = normalize(part)
                if candidate is None or not is_valid(candidate):
                    continue
                found.append(candidate)
        return dedupe(found)

    def _from_cache(self, candidate: str) -> str | None:
        record = self.cache.get(candidate)
        if record is None:
            return None
        if record.onet is not None:
            return record.onet.canonical_name
        return record.normalized or candidate

    def process(self, raw_skills: Iterable[str] | None) -> list[str]:
        """Synchronous, cache-only standardization."""
        resolved = []
        for candidate in self.candidates(raw_skills):
            resolved.append(self._from_cache(candidate) or candidate)
        return dedupe(resolved)

    async def process_with_remote(
        self,
        raw_skills: Iterable[str] | None,
        remote: RemoteLookup,
    ) -> list[str]:
        """Like :meth:`process`, matching cache misses against the live taxonomy.

        Live matches are not written back; the offline build owns the cache.
        """
        resolved = []
        for candidate in self.candidates(raw_skills):
            name = self._from_cache(candidate)
            if name is None:
                try:
                    entry = await self.matcher.match(candidate, remote)
                except RemoteAuthError as e:
                    logger.error("Live skill lookup unavailable: %s", e)
                    entry = None
                except Exception as e:
                    logger.warning("Live lookup failed for %r: %s", candidate, e)
                    entry = None
                name = entry.canonical_name if entry is not None else candidate
            resolved.append(name)
        return dedupe(resolved)

    # -- corpus helpers ------------------------------------------------------

    def collect_candidates(self, jobs: Iterable[JobRecord]) -> list[str]:
        """Unique candidates across every job, in first-seen order."""
        found: list[str] = []
        for job in jobs:
            found.extend(self.candidates(job.skills))
        return dedupe(found)

    def clean_jobs(self, jobs: list[JobRecord]) -> tuple[list[JobRecord], CleanReport]:
        """Replace each job's skills with the processed list."""
        report = CleanReport(total_jobs=len(jobs))
        cleaned_jobs = []

        for job in jobs:
            before = len(job.skills)
            report.skills_before += before
            cleaned = self.process(job.skills) if before else []
            report.skills_after += len(cleaned)

            if before:
                if cleaned:
                    report.jobs_with_skills += 1
                else:
                    report.jobs_without_skills += 1
                    logger.warning("%s - %s: all %d raw skills filtered out",
                                   getattr(job, "company", "?"),
                                   str(getattr(job, "title", "?"))[:50], before)

            cleaned_jobs.append(job.model_copy(update={"skills": cleaned}))

        return cleaned_jobs, report
