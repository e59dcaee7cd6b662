"""Build the O*NET skill cache from the skills found in the jobs file.

Every unique candidate skill across all jobs is matched against O*NET once;
the result is written to the skill cache file read by the API and by
``clean_job_skills.py``.

Usage:
    python backend/scripts/build_skills_cache.py [--jobs data/jobs.json]
        [--output data/onet-skills-cache.json] [--incremental] [--limit N]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import settings  # noqa: E402
from services.job_store import load_jobs  # noqa: E402
from services.kv_cache import FileCache  # noqa: E402
from services.onet_client import OnetClient  # noqa: E402
from services.remote_lookup import RemoteAuthError  # noqa: E402
from services.skill_pipeline import SkillPipeline  # noqa: E402
from services.taxonomy_cache import CacheCorruptError, TaxonomyCache  # noqa: E402

logger = logging.getLogger(__name__)


async def build(
    jobs_path: str,
    output_path: str,
    *,
    incremental: bool = False,
    limit: int | None = None,
    client: OnetClient | None = None,
) -> int:
    jobs = load_jobs(jobs_path)
    candidates = SkillPipeline().collect_candidates(jobs)
    logger.info("Found %d unique candidate skills in %d jobs", len(candidates), len(jobs))
    if limit is not None:
        candidates = candidates[:limit]

    if incremental:
        cache = TaxonomyCache.load(output_path, missing_ok=True)
        logger.info("Incremental build: %d skills already cached", len(cache))
    else:
        cache = TaxonomyCache()

    client = client or OnetClient()
    if not client.configured:
        logger.error("ONET_API_KEY is not set; cannot build the skill cache")
        return 1

    async with client:
        snapshot = await cache.build(candidates, client)
    cache.save(output_path)

    logger.info("Total skills: %d | matched: %d | unmatched: %d | match rate: %s",
                snapshot.stats.total_skills, snapshot.stats.onet_matched,
                snapshot.stats.unmatched, snapshot.stats.match_rate)

    response_cache = getattr(client, "cache", None)
    if isinstance(response_cache, FileCache):
        stats = response_cache.stats()
        logger.info("O*NET response cache: %d entries | %d KB | oldest %.1f days",
                    stats["entries"], stats["size_bytes"] // 1024, stats["oldest_age"] / 86400)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build the O*NET skill cache")
    parser.add_argument("--jobs", default=settings.jobs_path, help="Jobs JSON file")
    parser.add_argument("--output", default=settings.skills_cache_path, help="Skill cache file to write")
    parser.add_argument("--incremental", action="store_true",
                        help="Keep existing cache entries and only look up new skills")
    parser.add_argument("--limit", type=int, default=None, help="Look up at most N candidates")
    args = parser.parse_args(argv)

    try:
        return asyncio.run(build(args.jobs, args.output,
                                 incremental=args.incremental, limit=args.limit))
    except RemoteAuthError as e:
        logger.error("O*NET authentication failed: %s", e)
    except CacheCorruptError as e:
        logger.error("%s. Delete it or run without --incremental.", e)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
    return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(main())
