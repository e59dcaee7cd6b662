"""Read and write the exported jobs file (a JSON array of job objects)."""

import json
import logging
import os
import shutil
from pathlib import Path

from models.schemas.jobs import JobRecord

logger = logging.getLogger(__name__)


def backup_path(path: str | Path) -> Path:
    filepath = Path(path)
    return filepath.with_name(f"{filepath.stem}.backup{filepath.suffix}")


def load_jobs(path: str | Path) -> list[JobRecord]:
    filepath = Path(path)
    if not filepath.exists():
        raise FileNotFoundError(f"Jobs file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of jobs in {filepath}, got {type(data).__name__}")

    jobs = [JobRecord.model_validate(item) for item in data if isinstance(item, dict)]
    logger.info("Loaded %d jobs from %s", len(jobs), filepath)
    return jobs


def save_jobs(jobs: list[JobRecord], path: str | Path, *, backup: bool = False) -> Path:
    """Write *jobs* back to *path*, optionally copying the old file first."""
    filepath = Path(path)
    if backup and filepath.exists():
        shutil.copyfile(filepath, backup_path(filepath))
        logger.info("Backup created: %s", backup_path(filepath).name)

    filepath.parent.mkdir(parents=True, exist_ok=True)
    tmp = filepath.with_suffix(filepath.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as fh:
        json.dump([job.model_dump(mode="json") for job in jobs], fh, indent=2, ensure_ascii=False)
    os.replace(tmp, filepath)
    return filepath
