import asyncio
import json
import logging
from typing import Any, Iterable, Optional

import openai

from ramplo.core.config import settings
from ramplo.core.exceptions import AdvisoryUnavailable

logger = logging.getLogger(__name__)


class AdvisoryClient:
    """
    Thin wrapper around the OpenAI chat API used for best-effort guidance.

    Every failure mode (no API key, quota, timeout, unparseable or
    incomplete JSON) surfaces as ``AdvisoryUnavailable`` so callers can
    switch to their rule-based path. Calls are single-attempt.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = None,
        fallback_model: str = None,
        timeout: float = None,
        max_tokens: int = None,
    ):
        self.model = model or settings.OPENAI_MODEL
        self.fallback_model = fallback_model or settings.OPENAI_FALLBACK_MODEL
        self.timeout = timeout or settings.ADVISORY_TIMEOUT_SECONDS
        self.max_tokens = max_tokens or settings.ADVISORY_MAX_TOKENS

        if api_key:
            self.async_client = openai.AsyncOpenAI(api_key=api_key, timeout=self.timeout, max_retries=0)
        else:
            self.async_client = None

    @property
    def available(self) -> bool:
        return self.async_client is not None

    async def advise(self, prompt: str, required_keys: Iterable[str] = ()) -> dict:
        """Asks for a JSON object and checks the keys the caller depends on."""
        raw = await self._complete(prompt, json_mode=True)
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise AdvisoryUnavailable(f"response is not valid JSON: {e}")

        if not isinstance(parsed, dict):
            raise AdvisoryUnavailable("response is not a JSON object")

        missing = [key for key in required_keys if key not in parsed]
        if missing:
            raise AdvisoryUnavailable(f"response is missing keys: {', '.join(missing)}")
        return parsed

    async def advise_text(self, prompt: str) -> str:
        text = await self._complete(prompt, json_mode=False)
        if not text or not text.strip():
            raise AdvisoryUnavailable("empty response")
        return text.strip()

    async def _complete(self, prompt: str, json_mode: bool) -> str:
        if not self.available:
            raise AdvisoryUnavailable("advisory service not configured")

        params: dict[str, Any] = {
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        try:
            return await self._create(self.model, params)
        except (openai.NotFoundError, openai.BadRequestError) as e:
            logger.warning(f"Primary model {self.model} rejected the request ({e}). Switching to fallback: {self.fallback_model}.")
            try:
                return await self._create(self.fallback_model, params)
            except Exception as e_fallback:
                raise AdvisoryUnavailable(f"fallback model {self.fallback_model} failed: {e_fallback}") from e_fallback
        except asyncio.TimeoutError as e:
            raise AdvisoryUnavailable(f"advisory call timed out after {self.timeout}s") from e
        except Exception as e:
            raise AdvisoryUnavailable(f"advisory call failed: {e}") from e

    async def _create(self, model: str, params: dict) -> str:
        response = await asyncio.wait_for(
            self.async_client.chat.completions.create(model=model, **params),
            timeout=self.timeout,
        )
        return response.choices[0].message.content


def build_advisory_client() -> AdvisoryClient:
    return AdvisoryClient(api_key=settings.OPENAI_API_KEY)
