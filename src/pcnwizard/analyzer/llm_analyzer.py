"""Analyzer backed by a vision-capable LLM.

Each pass assembles a prompt, asks the model for JSON and validates the reply
against the wizard models. Anything that goes wrong on the way surfaces as an
:class:`AnalyzerError` so the engine can reroute instead of crashing.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Awaitable, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pcnwizard.analyzer import prompts
from pcnwizard.analyzer.base import Analyzer
from pcnwizard.core.config import LLMConfig
from pcnwizard.core.errors import AnalyzerConfigError, AnalyzerError
from pcnwizard.core.types import DraftType, NoticeType
from pcnwizard.llm.client import ImageInput, LLMClient, create_llm_client
from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.catalog import GroundsCatalog, load_catalog
from pcnwizard.wizard.models import LetterBundle, NoticeFacts, Strategy
from pcnwizard.wizard.routing import effective_facts, is_debt_path

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s+")
_FENCE_CLOSE = re.compile(r"\s+```$")

M = TypeVar("M", bound=BaseModel)


def clean_json(text: str | None) -> str:
    """Strip markdown code fences the model sometimes wraps JSON in."""
    if not text:
        return "{}"
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned)
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned


class LLMAnalyzer(Analyzer):
    """Runs extraction, strategy and drafting passes against an LLM provider.

    Args:
        config: LLM provider settings. The client is created lazily so a
            missing credential only fails when a pass actually runs.
        client: Pre-built client, mainly for tests.
        catalog: Grounds catalogue used for keyword hints and sources.
    """

    def __init__(
        self,
        config: LLMConfig | None = None,
        *,
        client: LLMClient | None = None,
        catalog: GroundsCatalog | None = None,
    ) -> None:
        self._config = config or LLMConfig()
        self._client = client
        self._catalog = catalog or load_catalog()

    def _get_client(self) -> LLMClient:
        if self._client is None:
            try:
                self._client = create_llm_client(self._config)
            except ValueError as exc:
                raise AnalyzerConfigError(str(exc)) from exc
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

    # -- passes --------------------------------------------------------------

    async def extract(self, image: bytes, mime_type: str) -> NoticeFacts:
        client = self._get_client()
        raw = await self._call(
            "extraction",
            client.generate(
                prompts.extraction_prompt(self._catalog),
                system_prompt=prompts.EXTRACTION_SYSTEM_PROMPT,
                temperature=self._config.temperature,
                images=[ImageInput(data=image, mime_type=mime_type)],
                json_output=True,
            ),
        )
        return self._validate("extraction", NoticeFacts, self._parse("extraction", raw))

    async def strategize(self, facts: NoticeFacts, answers: Answers) -> Strategy:
        client = self._get_client()
        raw = await self._call(
            "strategy",
            client.generate(
                prompts.strategy_prompt(facts, answers.to_wire()),
                temperature=self._config.temperature,
                json_output=True,
            ),
        )
        return self._validate("strategy", Strategy, self._parse("strategy", raw))

    async def draft(self, facts: NoticeFacts, answers: Answers) -> LetterBundle:
        client = self._get_client()
        effective = effective_facts(facts, answers)
        debt_path = is_debt_path(effective)
        prompt = prompts.draft_prompt(
            facts,
            answers.to_wire(),
            debt_path=debt_path,
            council=effective.notice_type is NoticeType.COUNCIL,
            catalog=self._catalog,
        )
        raw = await self._call(
            "draft",
            client.generate(prompt, temperature=self._config.temperature, json_output=True),
        )
        payload = self._parse("draft", raw)
        payload["draftType"] = (
            DraftType.PRIVATE_PRE_ACTION_SAR_PACK if debt_path else DraftType.PCN_REPRESENTATION
        )
        return self._validate("draft", LetterBundle, payload)

    # -- internal ------------------------------------------------------------

    async def _call(self, stage: str, pending: Awaitable[str]) -> str:
        try:
            return await pending
        except httpx.HTTPError as exc:
            logger.warning("Analyzer %s request failed: %s", stage, exc)
            raise AnalyzerError(f"{stage} request failed") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("Analyzer %s returned an unexpected envelope: %r", stage, exc)
            raise AnalyzerError(f"{stage} response malformed") from exc

    @staticmethod
    def _parse(stage: str, raw: str) -> dict[str, Any]:
        try:
            payload = json.loads(clean_json(raw))
        except json.JSONDecodeError as exc:
            raise AnalyzerError(f"{stage} response is not JSON") from exc
        if not isinstance(payload, dict):
            raise AnalyzerError(f"{stage} response is not a JSON object")
        return payload

    @staticmethod
    def _validate(stage: str, model: type[M], payload: dict[str, Any]) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Analyzer %s response violated schema: %s", stage, exc)
            raise AnalyzerError(f"{stage} response violated schema") from exc
