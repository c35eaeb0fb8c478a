"""Unit tests for the LLM client abstraction layer."""

from __future__ import annotations

import json

import httpx
import pytest

from pcnwizard.core.config import LLMConfig
from pcnwizard.llm.client import ImageInput, create_llm_client
from pcnwizard.llm.providers.ollama import OllamaClient
from pcnwizard.llm.providers.openai_compat import OpenAICompatClient
from pcnwizard.llm.transport import post_json


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ollama_config(**overrides) -> LLMConfig:
    defaults = {"provider": "ollama", "base_url": "http://localhost:11434", "model": "llava:13b"}
    defaults.update(overrides)
    return LLMConfig(**defaults)


def _openai_config(**overrides) -> LLMConfig:
    defaults = {
        "provider": "vllm",
        "base_url": "http://localhost:8000",
        "model": "qwen2-vl",
    }
    defaults.update(overrides)
    return LLMConfig(**defaults)


IMAGE = ImageInput(data=b"\x89PNG", mime_type="image/png")


@pytest.fixture
def no_sleep(monkeypatch):
    async def _sleep(_delay):
        return None

    monkeypatch.setattr("asyncio.sleep", _sleep)


# ---------------------------------------------------------------------------
# Factory tests
# ---------------------------------------------------------------------------

class TestFactory:
    def test_creates_ollama_client(self):
        client = create_llm_client(_ollama_config())
        assert isinstance(client, OllamaClient)

    def test_creates_vllm_client(self):
        client = create_llm_client(_openai_config())
        assert isinstance(client, OpenAICompatClient)

    def test_openai_with_key(self):
        client = create_llm_client(_openai_config(provider="openai", api_key="sk-test"))
        assert isinstance(client, OpenAICompatClient)

    def test_openai_without_key_raises(self):
        with pytest.raises(ValueError, match="requires an API key"):
            create_llm_client(_openai_config(provider="openai", api_key=None))

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm_client(_ollama_config(provider="nope"))


class TestImageInput:
    def test_encodings(self):
        assert IMAGE.b64() == "iVBORw=="
        assert IMAGE.data_uri() == "data:image/png;base64,iVBORw=="


# ---------------------------------------------------------------------------
# Ollama provider tests
# ---------------------------------------------------------------------------

class TestOllamaClient:
    @pytest.mark.asyncio
    async def test_generate(self, httpx_mock):
        httpx_mock.add_response(
            url="http://localhost:11434/api/generate",
            method="POST",
            json={"response": "Hello from Ollama"},
        )
        client = OllamaClient(_ollama_config())
        try:
            result = await client.generate("Say hello")
            assert result == "Hello from Ollama"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_generate_with_image_and_json(self, httpx_mock):
        httpx_mock.add_response(
            url="http://localhost:11434/api/generate",
            method="POST",
            json={"response": "{}"},
        )
        client = OllamaClient(_ollama_config())
        try:
            await client.generate(
                "Read this", system_prompt="Be terse", images=[IMAGE], json_output=True
            )
        finally:
            await client.close()
        body = json.loads(httpx_mock.get_request().content)
        assert body["images"] == ["iVBORw=="]
        assert body["format"] == "json"
        assert body["system"] == "Be terse"
        assert body["stream"] is False

    @pytest.mark.asyncio
    async def test_retries_server_error(self, httpx_mock, no_sleep):
        httpx_mock.add_response(url="http://localhost:11434/api/generate", status_code=503)
        httpx_mock.add_response(
            url="http://localhost:11434/api/generate",
            json={"response": "recovered"},
        )
        client = OllamaClient(_ollama_config(max_retries=1))
        try:
            assert await client.generate("again") == "recovered"
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_client_error_raises(self, httpx_mock):
        httpx_mock.add_response(url="http://localhost:11434/api/generate", status_code=404)
        client = OllamaClient(_ollama_config())
        try:
            with pytest.raises(httpx.HTTPStatusError):
                await client.generate("missing model")
        finally:
            await client.close()


# ---------------------------------------------------------------------------
# OpenAI-compatible provider tests
# ---------------------------------------------------------------------------

class TestOpenAICompatClient:
    @pytest.mark.asyncio
    async def test_generate_with_image(self, httpx_mock):
        httpx_mock.add_response(
            url="http://localhost:8000/v1/chat/completions",
            method="POST",
            json={"choices": [{"message": {"role": "assistant", "content": "{\"ok\": true}"}}]},
        )
        client = OpenAICompatClient(_openai_config())
        try:
            result = await client.generate("Read this", images=[IMAGE], json_output=True)
            assert result == "{\"ok\": true}"
        finally:
            await client.close()
        body = json.loads(httpx_mock.get_request().content)
        content = body["messages"][-1]["content"]
        assert content[0] == {
            "type": "image_url",
            "image_url": {"url": "data:image/png;base64,iVBORw=="},
        }
        assert content[-1] == {"type": "text", "text": "Read this"}
        assert body["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, httpx_mock):
        httpx_mock.add_response(
            url="http://localhost:8000/v1/chat/completions",
            json={"choices": [{"message": {"content": "hi"}}]},
        )
        client = OpenAICompatClient(_openai_config(provider="openai", api_key="sk-test"))
        try:
            await client.generate("hello")
        finally:
            await client.close()
        assert httpx_mock.get_request().headers["Authorization"] == "Bearer sk-test"

    @pytest.mark.asyncio
    async def test_server_error_after_retries(self, httpx_mock, no_sleep):
        httpx_mock.add_response(url="http://localhost:8000/v1/chat/completions", status_code=500)
        httpx_mock.add_response(url="http://localhost:8000/v1/chat/completions", status_code=502)
        client = OpenAICompatClient(_openai_config(max_retries=1))
        try:
            with pytest.raises(httpx.HTTPStatusError):
                await client.generate("fail")
        finally:
            await client.close()


# ---------------------------------------------------------------------------
# Transport tests
# ---------------------------------------------------------------------------

class TestPostJson:
    @pytest.mark.asyncio
    async def test_retries_transport_error(self, httpx_mock, no_sleep):
        httpx_mock.add_exception(httpx.ConnectError("refused"))
        httpx_mock.add_response(url="http://llm.test/x", json={"ok": True})
        async with httpx.AsyncClient(base_url="http://llm.test") as http:
            assert await post_json(http, "/x", {}, max_retries=1) == {"ok": True}

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, httpx_mock, no_sleep):
        httpx_mock.add_exception(httpx.ConnectError("refused"))
        async with httpx.AsyncClient(base_url="http://llm.test") as http:
            with pytest.raises(httpx.ConnectError):
                await post_json(http, "/x", {}, max_retries=0)

    @pytest.mark.asyncio
    async def test_no_retry_on_client_error(self, httpx_mock):
        httpx_mock.add_response(url="http://llm.test/x", status_code=400)
        async with httpx.AsyncClient(base_url="http://llm.test") as http:
            with pytest.raises(httpx.HTTPStatusError):
                await post_json(http, "/x", {}, max_retries=3)
