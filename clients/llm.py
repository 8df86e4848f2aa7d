import json
import logging
import re
from typing import Any, Protocol

from openai import AsyncOpenAI

import config

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Single-shot JSON completion against a hosted model."""

    @property
    def is_configured(self) -> bool: ...

    async def complete_json(self, system: str, user: str, temperature: float | None = None) -> dict[str, Any]: ...


class GroqCompletionClient:
    """
    Adapter for an OpenAI-compatible chat completions endpoint (Groq by default).

    Raises on transport errors and unparseable output; callers own the
    degradation policy.
    """

    def __init__(self,
                 api_key: str | None = None,
                 base_url: str | None = None,
                 model: str | None = None,
                 temperature: float = 0.2):
        self.api_key = api_key if api_key is not None else config.AI_API_KEY
        self.model = model or config.AI_MODEL
        self.temperature = temperature
        self._client = None
        if self.api_key:
            self._client = AsyncOpenAI(
                base_url=base_url or config.AI_BASE_URL,
                api_key=self.api_key,
                timeout=config.AI_TIMEOUT_SECONDS,
                max_retries=0,
            )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def complete_json(self, system: str, user: str, temperature: float | None = None) -> dict[str, Any]:
        if self._client is None:
            raise RuntimeError("AI_API_KEY is not configured")
        resp = await self._client.chat.completions.create(
            model=self.model,
            temperature=self.temperature if temperature is None else temperature,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        )
        content = resp.choices[0].message.content or ""
        logger.debug(f"Completion received from {self.model}: {len(content)} chars")
        return extract_json(content)


def extract_json(raw: str) -> dict[str, Any]:
    """Parse the first JSON object within the raw model output."""
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", raw, flags=re.DOTALL)
        if not match:
            raise ValueError(f"No JSON object found in model output: {raw[:200]}")
        parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("Model output is not a JSON object")
    return parsed
