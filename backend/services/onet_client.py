"""O*NET Web Services client.

Implements :class:`RemoteLookup` over HTTPS with:

* raw-response memoization in a :class:`Cache` (30-day TTL by default),
* a shared :class:`RateLimiter` awaited before every HTTP attempt,
* a per-call timeout and bounded retries with exponential backoff.

API reference: https://services.onetcenter.org/reference/
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import urlencode

import aiohttp
from pydantic import ValidationError

from config import settings
from models.schemas.taxonomy import (
    Occupation,
    OccupationMatch,
    OccupationSkill,
    SearchResult,
    SkillsResult,
)
from services.kv_cache import Cache, FileCache
from services.rate_limiter import RateLimiter
from services.remote_lookup import RemoteAuthError, RemoteLookup, RemoteLookupError

logger = logging.getLogger(__name__)

USER_AGENT = "jobskills/1.0"
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def default_response_cache() -> FileCache:
    return FileCache(
        settings.onet_response_cache_dir,
        ttl_seconds=settings.onet_response_cache_ttl_days * 24 * 60 * 60,
    )


class OnetClient(RemoteLookup):
    """Async O*NET client. Use as ``async with OnetClient() as client: ...``."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        cache: Cache | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float | None = None,
        retries: int | None = None,
        backoff: float | None = None,
        session: aiohttp.ClientSession | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.api_key = settings.onet_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.onet_base_url).rstrip("/")
        self.cache = cache if cache is not None else default_response_cache()
        self.rate_limiter = rate_limiter or RateLimiter.from_millis(settings.onet_rate_limit_ms)
        self.timeout = settings.onet_timeout_seconds if timeout is None else timeout
        self.retries = settings.onet_retries if retries is None else retries
        self.backoff = settings.onet_backoff_seconds if backoff is None else backoff
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def __aenter__(self) -> "OnetClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "X-API-Key": self.api_key,
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
            )
            self._owns_session = True
        return self._session

    async def _fetch(self, url: str, params: dict[str, str] | None) -> tuple[int, Any]:
        """One HTTP GET. Returns (status, parsed JSON or None)."""
        session = self._get_session()
        async with session.get(
            url,
            params=params,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as resp:
            if resp.status != 200:
                return resp.status, None
            return resp.status, await resp.json(content_type=None)

    async def _request(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        *,
        use_cache: bool = True,
    ) -> Any | None:
        """GET *endpoint*; ``None`` on 404. Raises RemoteLookupError on failure."""
        cache_key = endpoint + (f"?{urlencode(sorted(params.items()))}" if params else "")
        if use_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        if not self.api_key:
            raise RemoteAuthError("O*NET API key not configured. Set ONET_API_KEY in .env")

        url = f"{self.base_url}{endpoint}"
        last_error: RemoteLookupError | None = None

        for attempt in range(self.retries + 1):
            await self.rate_limiter.acquire()
            try:
                status, data = await self._fetch(url, params)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                last_error = RemoteLookupError(f"O*NET request to {endpoint} failed: {e!r}")
            else:
                if status == 200:
                    if use_cache:
                        self.cache.set(cache_key, data)
                    return data
                if status == 404:
                    return None
                if status in (401, 403):
                    raise RemoteAuthError(f"O*NET rejected credentials ({status}) for {endpoint}")
                last_error = RemoteLookupError(f"O*NET API error {status} for {endpoint}")
                if status not in _RETRYABLE_STATUS:
                    raise last_error

            if attempt < self.retries:
                delay = self.backoff * 2 ** attempt
                logger.warning("%s; retrying in %.1fs (attempt %d/%d)",
                               last_error, delay, attempt + 1, self.retries)
                await self._sleep(delay)

        raise last_error or RemoteLookupError(f"O*NET request to {endpoint} failed after retries")

    # -- RemoteLookup -----------------------------------------------------

    async def search(self, keyword: str) -> SearchResult:
        keyword = (keyword or "").strip().lower()
        if not keyword:
            return SearchResult()

        data = await self._request("/online/search", {"keyword": keyword})
        if not data:
            return SearchResult()

        occupations = []
        for raw in data.get("occupation") or []:
            try:
                occupations.append(Occupation.model_validate(raw))
            except ValidationError:
                logger.debug("Skipping malformed occupation in search result: %r", raw)
        return SearchResult(occupations=occupations, total=data.get("total") or len(occupations))

    async def skills_for(self, occupation_code: str) -> SkillsResult:
        if not occupation_code:
            return SkillsResult()

        data = await self._request(f"/online/occupations/{occupation_code}/summary/skills")
        if not data:
            return SkillsResult()

        skills = []
        for raw in data.get("element") or []:
            try:
                skills.append(OccupationSkill.model_validate(raw))
            except ValidationError:
                logger.debug("Skipping malformed skill element for %s: %r", occupation_code, raw)
        return SkillsResult(skills=skills)

    # -- occupation helpers -----------------------------------------------

    async def get_occupation(self, occupation_code: str) -> dict | None:
        """Raw occupation details, or None if the code is unknown."""
        if not occupation_code:
            return None
        return await self._request(f"/online/occupations/{occupation_code}")

    async def find_occupation(self, job_title: str) -> OccupationMatch | None:
        """Best matching occupation for a job title.

        Confidence is ``high`` for a single search hit, ``medium`` for up to
        five and ``low`` otherwise.
        """
        if not job_title or not job_title.strip():
            return None

        result = await self.search(job_title)
        if not result.occupations:
            return None

        top = result.occupations[0]
        total = result.total or len(result.occupations)
        if total == 1:
            confidence = "high"
        elif total <= 5:
            confidence = "medium"
        else:
            confidence = "low"

        return OccupationMatch(
            code=top.code,
            title=top.title,
            confidence=confidence,
            alternates=result.occupations[1:5],
        )
