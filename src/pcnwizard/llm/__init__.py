"""LLM provider abstraction layer."""

from pcnwizard.llm.client import ImageInput, LLMClient, create_llm_client

__all__ = ["ImageInput", "LLMClient", "create_llm_client"]
