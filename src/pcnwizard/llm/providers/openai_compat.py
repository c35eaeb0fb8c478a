"""OpenAI-compatible provider (OpenAI, vLLM, llama-cpp-python servers)."""

from __future__ import annotations

from typing import Any

import httpx

from pcnwizard.core.config import LLMConfig
from pcnwizard.llm.client import ImageInput, LLMClient
from pcnwizard.llm.transport import post_json


def _user_message(prompt: str, images: list[ImageInput] | None) -> dict[str, Any]:
    if not images:
        return {"role": "user", "content": prompt}
    parts: list[dict[str, Any]] = [
        {"type": "image_url", "image_url": {"url": image.data_uri()}} for image in images
    ]
    parts.append({"type": "text", "text": prompt})
    return {"role": "user", "content": parts}


class OpenAICompatClient(LLMClient):
    """Sends prompts to /v1/chat/completions; images travel as data URIs."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        headers: dict[str, str] = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            headers=headers,
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
        messages: list[dict[str, Any]] = []
        if system_prompt is not None:
            messages.append({"role": "system", "content": system_prompt})
        messages.append(_user_message(prompt, images))

        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": self.config.max_tokens,
            "stream": False,
        }
        if self.config.top_p is not None:
            payload["top_p"] = self.config.top_p
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        body = await post_json(
            self._http, "/v1/chat/completions", payload, max_retries=self.config.max_retries
        )
        return body["choices"][0]["message"]["content"]

    async def close(self) -> None:
        await self._http.aclose()
