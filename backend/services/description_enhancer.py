"""Description restructuring strategies.

A :class:`DescriptionEnhancer` turns a raw job description into a
:class:`StructuredDescription`. The API and the batch script receive one by
injection; ``GeminiDescriptionEnhancer`` is the production implementation.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from models.schemas.description import StructuredDescription
from services import gemini_client
from services.prompt_builder import build_restructure_prompt

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_CHARS = 20000


class DescriptionEnhancer(ABC):
    @abstractmethod
    async def enhance(self, description: str) -> StructuredDescription | None:
        """Restructured description, or None if the enhancer is unavailable."""

    @property
    def available(self) -> bool:
        return True


class NullDescriptionEnhancer(DescriptionEnhancer):
    async def enhance(self, description: str) -> StructuredDescription | None:
        return None

    @property
    def available(self) -> bool:
        return False


class GeminiDescriptionEnhancer(DescriptionEnhancer):
    @property
    def available(self) -> bool:
        return gemini_client.is_configured()

    async def enhance(self, description: str) -> StructuredDescription | None:
        if not description or not description.strip():
            return StructuredDescription()

        prompt = build_restructure_prompt(description.strip()[:MAX_DESCRIPTION_CHARS])
        data = await gemini_client.generate_json(prompt)
        if data is None:
            return None

        try:
            structured = StructuredDescription.model_validate(data)
        except ValidationError as e:
            logger.error("LLM returned an invalid description structure: %s", e)
            return None

        # Drop sections the model left empty.
        structured.sections = [s for s in structured.sections if s.content]
        return structured
