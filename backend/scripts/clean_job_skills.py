"""Replace every job's raw skills with validated, standardized skill names.

Uses the skill cache only (no network). The original jobs file is copied to
``<name>.backup.json`` before it is overwritten.

Usage:
    python backend/scripts/clean_job_skills.py [--jobs data/jobs.json]
        [--cache data/onet-skills-cache.json] [--dry-run]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import settings  # noqa: E402
from models.schemas.jobs import CleanReport  # noqa: E402
from services.job_store import backup_path, load_jobs, save_jobs  # noqa: E402
from services.skill_pipeline import SkillPipeline  # noqa: E402
from services.taxonomy_cache import CacheCorruptError, TaxonomyCache  # noqa: E402

logger = logging.getLogger(__name__)


def clean(jobs_path: str, cache_path: str, *, dry_run: bool = False) -> CleanReport:
    jobs = load_jobs(jobs_path)
    cache = TaxonomyCache.load(cache_path, missing_ok=True)
    pipeline = SkillPipeline(cache=cache)

    cleaned, report = pipeline.clean_jobs(jobs)

    logger.info("Total jobs: %d", report.total_jobs)
    logger.info("Jobs with valid skills: %d", report.jobs_with_skills)
    logger.info("Jobs with no valid skills: %d", report.jobs_without_skills)
    logger.info("Raw skills before: %d | after: %d | filtered out: %d (%.1f%%)",
                report.skills_before, report.skills_after,
                report.filtered_out, report.filtered_percent)

    if dry_run:
        logger.info("Dry run: %s not modified", jobs_path)
    else:
        save_jobs(cleaned, jobs_path, backup=True)
        logger.info("Updated %s (backup: %s)", jobs_path, backup_path(jobs_path).name)
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Clean job skills against the skill cache")
    parser.add_argument("--jobs", default=settings.jobs_path, help="Jobs JSON file")
    parser.add_argument("--cache", default=settings.skills_cache_path, help="Skill cache file")
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args(argv)

    try:
        clean(args.jobs, args.cache, dry_run=args.dry_run)
    except CacheCorruptError as e:
        logger.error("%s. Rebuild it with build_skills_cache.py.", e)
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(main())
