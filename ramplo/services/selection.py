"""
Selection port shared by the roadmap and template selectors.

Each selector has an advisory implementation (LLM-backed, may fail) and a
rule-based one (pure, never fails). ``FallbackSelector`` wraps the two so
callers always receive a result.
"""
import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

SOURCE_ADVISORY = "advisory"
SOURCE_FALLBACK = "fallback"


class Selector(Protocol):
    async def select(self, profile, **options) -> Any:
        ...


class FallbackSelector:
    """Delegates to ``primary`` and answers from ``fallback`` when it raises."""

    name = "selection"

    def __init__(self, primary: Selector, fallback: Selector):
        self.primary = primary
        self.fallback = fallback

    async def select(self, profile, **options):
        try:
            return await self.primary.select(profile, **options)
        except Exception as e:
            logger.warning(f"Advisory {self.name} failed ({type(e).__name__}: {e}). Using rule-based fallback.")
        return await self.fallback.select(profile, **options)
