"""Provider registry for LLM backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pcnwizard.llm.client import LLMClient

from pcnwizard.llm.providers.ollama import OllamaClient
from pcnwizard.llm.providers.openai_compat import OpenAICompatClient

PROVIDER_REGISTRY: dict[str, type[LLMClient]] = {
    "ollama": OllamaClient,
    "openai": OpenAICompatClient,
    "vllm": OpenAICompatClient,
}

# Hosted providers refuse anonymous requests.
REQUIRES_API_KEY = frozenset({"openai"})

__all__ = ["PROVIDER_REGISTRY", "REQUIRES_API_KEY", "OllamaClient", "OpenAICompatClient"]
