"""LLM client interface, image attachments and the provider factory."""

from __future__ import annotations

import abc
import base64
from dataclasses import dataclass

from pcnwizard.core.config import LLMConfig


@dataclass(frozen=True)
class ImageInput:
    """A photographed notice attached to a prompt."""

    data: bytes
    mime_type: str

    def b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64()}"


class LLMClient(abc.ABC):
    """A vision-capable completion endpoint."""

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abc.abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.1,
        images: list[ImageInput] | None = None,
        json_output: bool = False,
    ) -> str:
        """Complete ``prompt``; with ``json_output`` the model is asked for JSON."""

    async def close(self) -> None:
        """Release pooled connections, if any."""


def create_llm_client(config: LLMConfig) -> LLMClient:
    """Instantiate the provider named by ``config.provider``.

    Raises:
        ValueError: If the provider is unknown or its credentials are missing.
    """
    from pcnwizard.llm.providers import PROVIDER_REGISTRY, REQUIRES_API_KEY

    provider = config.provider.lower()
    if provider not in PROVIDER_REGISTRY:
        available = ", ".join(sorted(PROVIDER_REGISTRY))
        raise ValueError(f"Unknown LLM provider {config.provider!r}. Available: {available}")
    if provider in REQUIRES_API_KEY and not config.api_key:
        raise ValueError(f"LLM provider {config.provider!r} requires an API key")
    return PROVIDER_REGISTRY[provider](config)
