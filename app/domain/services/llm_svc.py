# app/domain/services/llm_svc.py
from __future__ import annotations

import logging
from time import monotonic as _now
from typing import List, Optional

from openai import AsyncOpenAI

from app.core.config import Settings
from app.core.errors import ConfigurationError, InferenceError
from app.domain.services.prompts import system_prompt

logger = logging.getLogger(__name__)


class OpenAIInferenceClient:
    """
    Thin transport to the chat model: request text in, raw reply text out.
    Single attempt, no retry: the engine falls back on any failure.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str,
        timeout_s: float = 30,
        max_tokens: int = 800,
        client: Optional[AsyncOpenAI] = None,
    ):
        if not api_key:
            raise ConfigurationError(
                "OpenAI API key is not configured",
                ["Please add OPENAI_API_KEY to your environment variables"],
            )
        self.model = model
        self.timeout_s = timeout_s
        self.max_tokens = max_tokens
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIInferenceClient":
        return cls(
            settings.OPENAI_API_KEY,
            model=settings.OPENAI_RECO_MODEL,
            timeout_s=settings.openai_timeout_s,
            max_tokens=settings.reco_max_tokens,
        )

    async def infer(self, request_text: str) -> str:
        messages: List[dict] = [
            {"role": "system", "content": system_prompt()},
            {"role": "user", "content": request_text},
        ]
        logger.info(f"LLM request size={(len(request_text)/1024):.1f}KB model={self.model}")
        t0 = _now()
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=0.0,
            timeout=self.timeout_s,
        )
        dt = _now() - t0
        u = getattr(resp, "usage", None)
        logger.info(
            f"LLM call model={getattr(resp, 'model', self.model)} duration={dt:.3f}s "
            f"tokens(prompt={getattr(u, 'prompt_tokens', None)}, completion={getattr(u, 'completion_tokens', None)})"
        )
        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise InferenceError(
                "Invalid response from AI service",
                ["The AI service returned an empty or invalid response"],
            )
        return content
