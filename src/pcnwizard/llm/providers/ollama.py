"""Ollama provider: vision models such as llava over the /api/generate route."""

from __future__ import annotations

from typing import Any

import httpx

from pcnwizard.core.config import LLMConfig
from pcnwizard.llm.client import ImageInput, LLMClient
from pcnwizard.llm.transport import post_json

# Notice photos plus the drafting templates overflow Ollama's 2048 default.
_CONTEXT_WINDOW = 8192


class OllamaClient(LLMClient):
    """Talks to a local Ollama instance; images travel as bare base64."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.1,
        images: list[ImageInput] | None = None,
        json_output: bool = False,
    ) -> str:
        options: dict[str, Any] = {
            "temperature": temperature,
            "num_ctx": _CONTEXT_WINDOW,
            "num_predict": self.config.max_tokens,
        }
        if self.config.top_p is not None:
            options["top_p"] = self.config.top_p
        payload: dict[str, Any] = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        if system_prompt is not None:
            payload["system"] = system_prompt
        if images:
            payload["images"] = [image.b64() for image in images]
        if json_output:
            payload["format"] = "json"

        body = await post_json(
            self._http, "/api/generate", payload, max_retries=self.config.max_retries
        )
        return body["response"]

    async def close(self) -> None:
        await self._http.aclose()
