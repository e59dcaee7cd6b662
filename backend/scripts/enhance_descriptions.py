"""Add an LLM-restructured ``structuredDescription`` to every job.

Progress is saved every ``SAVE_EVERY`` jobs so an interrupted run can resume
with ``--skip-processed``.

Usage:
    python backend/scripts/enhance_descriptions.py [--jobs data/jobs.json]
        [--limit N] [--skip-processed] [--dry-run]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import settings  # noqa: E402
from services.description_enhancer import DescriptionEnhancer, GeminiDescriptionEnhancer  # noqa: E402
from services.job_store import load_jobs, save_jobs  # noqa: E402
from services.rate_limiter import RateLimiter  # noqa: E402

logger = logging.getLogger(__name__)

SAVE_EVERY = 10
REQUEST_INTERVAL_MS = 500
FIELD = "structuredDescription"


async def enhance_jobs(
    jobs_path: str,
    enhancer: DescriptionEnhancer,
    *,
    limit: int | None = None,
    skip_processed: bool = False,
    dry_run: bool = False,
    rate_limiter: RateLimiter | None = None,
) -> dict[str, int]:
    jobs = load_jobs(jobs_path)
    rate_limiter = rate_limiter or RateLimiter.from_millis(REQUEST_INTERVAL_MS)
    counts = {"processed": 0, "skipped": 0, "failed": 0}

    todo = []
    for i, job in enumerate(jobs):
        extra = job.model_extra or {}
        if not str(extra.get("description") or "").strip():
            counts["skipped"] += 1
        elif skip_processed and extra.get(FIELD):
            counts["skipped"] += 1
        else:
            todo.append(i)
    if limit is not None:
        todo = todo[:limit]
    logger.info("%d jobs to process, %d skipped", len(todo), counts["skipped"])

    for n, i in enumerate(todo, start=1):
        job = jobs[i]
        await rate_limiter.acquire()
        structured = await enhancer.enhance(job.model_extra["description"])
        if structured is None or not structured.sections:
            counts["failed"] += 1
            logger.warning("[%d/%d] %s: restructuring failed", n, len(todo),
                           str((job.model_extra or {}).get("title", "?"))[:50])
        else:
            jobs[i] = job.model_copy(update={FIELD: structured.model_dump()})
            counts["processed"] += 1
            logger.info("[%d/%d] %s: %d sections", n, len(todo),
                        str((job.model_extra or {}).get("title", "?"))[:50],
                        len(structured.sections))

        if not dry_run and n % SAVE_EVERY == 0:
            save_jobs(jobs, jobs_path)
            logger.info("Progress saved (%d/%d)", n, len(todo))

    if dry_run:
        logger.info("Dry run: %s not modified", jobs_path)
    else:
        save_jobs(jobs, jobs_path)

    logger.info("Processed: %d | failed: %d | skipped: %d",
                counts["processed"], counts["failed"], counts["skipped"])
    return counts


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Restructure job descriptions with Gemini")
    parser.add_argument("--jobs", default=settings.jobs_path, help="Jobs JSON file")
    parser.add_argument("--limit", type=int, default=None, help="Process at most N jobs")
    parser.add_argument("--skip-processed", action="store_true",
                        help=f"Skip jobs that already have {FIELD}")
    parser.add_argument("--dry-run", action="store_true", help="Process without writing")
    args = parser.parse_args(argv)

    enhancer = GeminiDescriptionEnhancer()
    if not enhancer.available:
        logger.error("GEMINI_API_KEY is not set; cannot restructure descriptions")
        return 1

    try:
        asyncio.run(enhance_jobs(args.jobs, enhancer, limit=args.limit,
                                 skip_processed=args.skip_processed, dry_run=args.dry_run))
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(main())
