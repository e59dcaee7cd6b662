"""Capability interface for the remote skills taxonomy."""

from abc import ABC, abstractmethod

from models.schemas.taxonomy import SearchResult, SkillsResult


class RemoteLookupError(Exception):
    """A taxonomy request failed (timeout, connection error, 5xx, retries exhausted)."""


class RemoteAuthError(RemoteLookupError):
    """The taxonomy service rejected our credentials. Needs a human."""


class RemoteLookup(ABC):
    """Keyword search over occupations plus per-occupation skill lists.

    Implementations raise :class:`RemoteLookupError` on failure; callers
    decide whether a failure is per-item (skip) or fatal.
    """

    @abstractmethod
    async def search(self, keyword: str) -> SearchResult:
        """Return occupations relevant to *keyword*."""

    @abstractmethod
    async def skills_for(self, occupation_code: str) -> SkillsResult:
        """Return the skills listed for an occupation."""
