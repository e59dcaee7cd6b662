"""Match a candidate skill to the O*NET taxonomy.

The matcher searches occupations related to the candidate, walks the skill
lists of up to ``max_occupations`` of them (priority trade and engineering
occupations first) and keeps the best-scoring skill name above a threshold.
"""

import logging

from config import settings
from models.schemas.taxonomy import Occupation, OccupationRef, TaxonomyEntry
from services.remote_lookup import RemoteAuthError, RemoteLookup, RemoteLookupError
from services.skill_validator import is_valid

logger = logging.getLogger(__name__)

# Energy / skilled-trades occupations searched first and weighted higher.
PRIORITY_OCCUPATIONS: dict[str, str] = {
    "47-2111.00": "Electricians",
    "49-9021.00": "Heating, Air Conditioning, and Refrigeration Mechanics and Installers",
    "51-4121.00": "Welders, Cutters, Solderers, and Brazers",
    "17-2199.11": "Solar Energy Systems Engineers",
    "17-2141.00": "Mechanical Engineers",
    "47-2152.00": "Plumbers, Pipefitters, and Steamfitters",
    "17-2071.00": "Electrical Engineers",
    "17-2141.01": "Fuel Cell Engineers",
    "47-2221.00": "Structural Iron and Steel Workers",
    "49-9051.00": "Electrical Power-Line Installers and Repairers",
    "17-3023.00": "Electrical and Electronic Engineering Technologists and Technicians",
    "17-3026.00": "Industrial Engineering Technologists and Technicians",
    "51-8013.00": "Power Plant Operators",
    "47-2031.00": "Carpenters",
    "49-9041.00": "Industrial Machinery Mechanics",
    "17-2112.00": "Industrial Engineers",
    "11-9041.00": "Architectural and Engineering Managers",
}

# Soft skills that rarely hit occupations on their own; retried as "<skill> skills".
SOFT_SKILL_FALLBACKS: frozenset[str] = frozenset({
    "communication", "planning", "leadership", "teamwork",
})


def fuzzy_score(candidate: str, taxonomy_name: str) -> float:
    """Similarity in [0, 1] between a candidate and a taxonomy skill name.

    Exact match 1.0; taxonomy name contains candidate 0.9; candidate contains
    taxonomy name 0.85; otherwise 0.8 * token Jaccard + 0.2 * length ratio.
    """
    a = candidate.strip().lower()
    b = taxonomy_name.strip().lower()

    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a in b:
        return 0.9
    if b in a:
        return 0.85

    tokens_a = set(a.split())
    tokens_b = set(b.split())
    jaccard = len(tokens_a & tokens_b) / len(tokens_a | tokens_b)
    length_ratio = min(len(a), len(b)) / max(len(a), len(b))
    return jaccard * 0.8 + length_ratio * 0.2


class FuzzyMatcher:
    def __init__(
        self,
        *,
        threshold: float | None = None,
        priority_boost: float | None = None,
        max_occupations: int | None = None,
        early_exit_score: float | None = None,
        priority_occupations: set[str] | frozenset[str] | None = None,
        soft_skill_fallbacks: frozenset[str] = SOFT_SKILL_FALLBACKS,
    ) -> None:
        self.threshold = settings.match_threshold if threshold is None else threshold
        self.priority_boost = settings.priority_boost if priority_boost is None else priority_boost
        self.max_occupations = settings.max_occupations if max_occupations is None else max_occupations
        self.early_exit_score = settings.early_exit_score if early_exit_score is None else early_exit_score
        self.priority_occupations = frozenset(
            PRIORITY_OCCUPATIONS if priority_occupations is None else priority_occupations
        )
        self.soft_skill_fallbacks = soft_skill_fallbacks

    def score(self, candidate: str, taxonomy_name: str, *, priority: bool = False) -> float:
        """Fuzzy score, boosted for priority occupations and clamped to 1.0."""
        score = fuzzy_score(candidate, taxonomy_name)
        if priority:
            score = min(1.0, score * self.priority_boost)
        return score

    def order_occupations(self, occupations: list[Occupation]) -> list[Occupation]:
        """Priority occupations first (search order kept within each group), capped."""
        priority = [o for o in occupations if o.code in self.priority_occupations]
        others = [o for o in occupations if o.code not in self.priority_occupations]
        return (priority + others)[: self.max_occupations]

    async def _search(self, candidate: str, remote: RemoteLookup) -> list[Occupation]:
        try:
            result = await remote.search(candidate)
            if not result.occupations and candidate.lower() in self.soft_skill_fallbacks:
                result = await remote.search(f"{candidate} skills")
        except RemoteAuthError:
            raise
        except RemoteLookupError as e:
            logger.warning("Occupation search failed for %r: %s", candidate, e)
            return []
        return result.occupations

    async def match(self, candidate: str, remote: RemoteLookup) -> TaxonomyEntry | None:
        """Best taxonomy entry for *candidate*, or None.

        Per-occupation failures are skipped; only RemoteAuthError escapes.
        """
        occupations = await self._search(candidate, remote)
        if not occupations:
            return None

        best: TaxonomyEntry | None = None
        best_score = self.threshold

        for occ in self.order_occupations(occupations):
            is_priority = occ.code in self.priority_occupations
            try:
                result = await remote.skills_for(occ.code)
            except RemoteAuthError:
                raise
            except RemoteLookupError as e:
                logger.warning("Skills lookup failed for occupation %s: %s", occ.code, e)
                continue

            for skill in result.skills:
                if not is_valid(skill.name):
                    continue
                score = self.score(candidate, skill.name, priority=is_priority)
                if score > best_score:
                    best_score = score
                    best = TaxonomyEntry(
                        id=skill.id,
                        name=skill.name,
                        description=skill.description,
                        occupation=OccupationRef(code=occ.code, title=occ.title),
                    )

            if is_priority and best_score > self.early_exit_score:
                break

        if best is not None:
            logger.debug("Matched %r -> %r (%.2f)", candidate, best.name, best_score)
        return best
