"""Persistent mapping from normalized skill text to its O*NET entry.

The cache is built offline (``scripts/build_skills_cache.py``) and read at
request time. Lookups are case-insensitive. Records are never mutated; a
build replaces the record mapping wholesale and a rebuild is an explicit
operator action, so entries do not expire.

A matched record is also reachable through its canonical name, so feeding
a resolved skill back through the pipeline returns the same name.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from models.schemas.skill_cache import (
    CACHE_FORMAT_VERSION,
    CacheRecord,
    CacheSnapshot,
    CacheStats,
)
from services.fuzzy_matcher import FuzzyMatcher
from services.remote_lookup import RemoteAuthError, RemoteLookup
from services.text_normalizer import normalize

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 25


class CacheCorruptError(ValueError):
    """The persisted cache file cannot be trusted. Rebuild it."""


def cache_key(text: str) -> str:
    return text.strip().lower()


class TaxonomyCache:
    def __init__(
        self,
        records: dict[str, CacheRecord] | None = None,
        *,
        version: str = CACHE_FORMAT_VERSION,
        generated_at: datetime | None = None,
    ) -> None:
        self._set_records({cache_key(k): v for k, v in (records or {}).items()})
        self.version = version
        self.generated_at = generated_at

    def _set_records(self, records: dict[str, CacheRecord]) -> None:
        self._records = records
        by_name: dict[str, CacheRecord] = {}
        for record in records.values():
            if record.onet is not None:
                name_key = normalize(record.onet.name) or cache_key(record.onet.name)
                by_name.setdefault(name_key, record)
        self._by_canonical_name = by_name

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: str) -> bool:
        return cache_key(key) in self._records

    def get(self, key: str) -> CacheRecord | None:
        """Record cached under *key*, else the record whose canonical name is *key*."""
        if not isinstance(key, str):
            return None
        key = cache_key(key)
        record = self._records.get(key)
        if record is None:
            record = self._by_canonical_name.get(key)
        return record

    def canonical_name(self, key: str) -> str | None:
        """Taxonomy name for *key* if it was matched, else None."""
        record = self.get(key)
        if record is not None and record.onet is not None:
            return record.onet.canonical_name
        return None

    @property
    def stats(self) -> CacheStats:
        return CacheStats.from_records(self._records)

    def snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(
            version=self.version,
            generated_at=self.generated_at or datetime.now(timezone.utc),
            stats=self.stats,
            cache=dict(self._records),
        )

    # -- build ---------------------------------------------------------------

    async def build(
        self,
        candidates: list[str],
        remote: RemoteLookup,
        matcher: FuzzyMatcher | None = None,
    ) -> CacheSnapshot:
        """Look up every unique uncached candidate and return the new snapshot.

        Unmatched candidates are stored with an explicit ``None`` entry.
        RemoteAuthError aborts the build; any other failure for a candidate
        is recorded as unmatched.
        """
        matcher = matcher or FuzzyMatcher()
        records = dict(self._records)

        pending: list[str] = []
        seen: set[str] = set()
        for candidate in candidates:
            key = normalize(candidate)
            if key is None or key in records or key in seen:
                continue
            seen.add(key)
            pending.append(key)

        logger.info("Building skill cache: %d cached, %d to look up", len(records), len(pending))
        started = time.monotonic()
        matched = 0

        for i, candidate in enumerate(pending, start=1):
            try:
                entry = await matcher.match(candidate, remote)
            except RemoteAuthError:
                logger.error("O*NET authentication failed; aborting cache build")
                raise
            except Exception as e:
                logger.warning("Lookup failed for %r, caching as unmatched: %s", candidate, e)
                entry = None

            records[candidate] = CacheRecord(normalized=candidate, onet=entry)
            if entry is not None:
                matched += 1

            if i % PROGRESS_EVERY == 0 or i == len(pending):
                elapsed = time.monotonic() - started
                rate = i / elapsed if elapsed > 0 else 0.0
                eta = (len(pending) - i) / rate if rate else 0.0
                logger.info("Progress: %d/%d | matched %d | elapsed %.0fs | eta %.0fs",
                            i, len(pending), matched, elapsed, eta)

        self._set_records(records)
        self.generated_at = datetime.now(timezone.utc)
        snapshot = self.snapshot()
        logger.info("Skill cache built: %d skills, %d matched (%s)",
                    snapshot.stats.total_skills, snapshot.stats.onet_matched,
                    snapshot.stats.match_rate)
        return snapshot

    # -- persistence ---------------------------------------------------------

    @classmethod
    def from_snapshot(cls, snapshot: CacheSnapshot) -> "TaxonomyCache":
        return cls(snapshot.cache, version=snapshot.version, generated_at=snapshot.generated_at)

    @classmethod
    def load(cls, path: str | Path, *, missing_ok: bool = False) -> "TaxonomyCache":
        """Load a cache file.

        Raises CacheCorruptError if the file is not a valid cache document.
        A missing file raises FileNotFoundError unless *missing_ok*.
        """
        filepath = Path(path)
        if not filepath.exists():
            if missing_ok:
                logger.warning("Skill cache %s not found; starting empty", filepath)
                return cls()
            raise FileNotFoundError(f"Skill cache not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as fh:
                data = json.load(fh)
            snapshot = CacheSnapshot.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise CacheCorruptError(f"Skill cache {filepath} is malformed: {e}") from e

        cache = cls.from_snapshot(snapshot)
        logger.info("Loaded skill cache: %d skills from %s", len(cache), filepath)
        return cache

    def save(self, path: str | Path) -> Path:
        """Write the snapshot atomically (temp file + replace)."""
        filepath = Path(path)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        payload = self.snapshot().model_dump(mode="json", by_alias=True)

        tmp = filepath.with_suffix(filepath.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
        os.replace(tmp, filepath)

        logger.info("Saved skill cache to %s (%d KB)", filepath, filepath.stat().st_size // 1024)
        return filepath
