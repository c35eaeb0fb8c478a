"""Tests for the LLM-backed analyzer and its prompts."""

from __future__ import annotations

import json

import httpx
import pytest
from conftest import make_notice

from pcnwizard.analyzer import prompts
from pcnwizard.analyzer.llm_analyzer import LLMAnalyzer, clean_json
from pcnwizard.core.config import LLMConfig
from pcnwizard.core.errors import AnalyzerConfigError, AnalyzerError
from pcnwizard.core.types import DraftType, NoticeType
from pcnwizard.llm.client import LLMClient
from pcnwizard.wizard import questions as q
from pcnwizard.wizard.answers import Answers


class ScriptedClient(LLMClient):
    """LLM client returning queued replies and recording prompts."""

    def __init__(self, *replies: str | Exception) -> None:
        super().__init__(LLMConfig())
        self.replies = list(replies)
        self.prompts: list[str] = []
        self.images: list = []

    async def generate(
        self,
        prompt,
        *,
        system_prompt=None,
        temperature=0.1,
        images=None,
        json_output=False,
    ):
        self.prompts.append(prompt)
        self.images.append(images)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


EXTRACTED = {
    "pcnNumber": "AB12345678",
    "noticeType": "council",
    "classifiedStage": "standard",
    "jurisdiction": "England_Wales",
    "extractionConfidence": 0.92,
}


def _analyzer(client, catalog) -> LLMAnalyzer:
    return LLMAnalyzer(client=client, catalog=catalog)


class TestCleanJson:
    def test_strips_fences(self):
        assert clean_json("```json\n{\"a\": 1}\n```") == "{\"a\": 1}"
        assert clean_json("```\n{}\n```") == "{}"

    def test_empty(self):
        assert clean_json("") == "{}"
        assert clean_json(None) == "{}"


class TestExtract:
    @pytest.mark.asyncio
    async def test_parses_fenced_reply(self, catalog):
        client = ScriptedClient(f"```json\n{json.dumps(EXTRACTED)}\n```")
        notice = await _analyzer(client, catalog).extract(b"img", "image/jpeg")
        assert notice.pcn_number == "AB12345678"
        assert notice.notice_type is NoticeType.COUNCIL
        assert client.images[0][0].mime_type == "image/jpeg"
        assert "County Court Business Centre" in client.prompts[0]

    @pytest.mark.asyncio
    async def test_non_json_reply(self, catalog):
        client = ScriptedClient("I cannot read this image")
        with pytest.raises(AnalyzerError, match="not JSON"):
            await _analyzer(client, catalog).extract(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_non_object_reply(self, catalog):
        client = ScriptedClient("[1, 2]")
        with pytest.raises(AnalyzerError, match="not a JSON object"):
            await _analyzer(client, catalog).extract(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_schema_violation(self, catalog):
        client = ScriptedClient(json.dumps({**EXTRACTED, "extractionConfidence": 3}))
        with pytest.raises(AnalyzerError, match="violated schema"):
            await _analyzer(client, catalog).extract(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_transport_error(self, catalog):
        client = ScriptedClient(httpx.ConnectError("refused"))
        with pytest.raises(AnalyzerError, match="request failed"):
            await _analyzer(client, catalog).extract(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_missing_credentials(self, catalog):
        analyzer = LLMAnalyzer(LLMConfig(provider="openai", api_key=None), catalog=catalog)
        with pytest.raises(AnalyzerConfigError):
            await analyzer.extract(b"img", "image/png")


class TestStrategyAndDraft:
    @pytest.mark.asyncio
    async def test_strategize(self, catalog):
        client = ScriptedClient(json.dumps({"summary": "S", "overview": "O", "rationale": "R"}))
        answers = Answers()
        answers.set_selection(q.COUNCIL_GROUNDS, ["SIGNAGE", "PROC"])
        strategy = await _analyzer(client, catalog).strategize(make_notice(), answers)
        assert strategy.summary == "S"
        assert '"council_grounds": "SIGNAGE,PROC"' in client.prompts[0]

    @pytest.mark.asyncio
    async def test_draft_representation(self, catalog):
        client = ScriptedClient(json.dumps({"letter": "Dear Sir", "draftType": "WRONG"}))
        bundle = await _analyzer(client, catalog).draft(make_notice(), Answers())
        assert bundle.draft_type is DraftType.PCN_REPRESENTATION
        assert "Traffic Management Act 2004" in client.prompts[0]
        assert "Reference: AB12345678" in client.prompts[0]

    @pytest.mark.asyncio
    async def test_draft_debt_pack(self, catalog):
        client = ScriptedClient(json.dumps({"letter": "Pre-action", "sarLetter": "SAR"}))
        notice = make_notice(noticeType="private", classifiedStage="debt_recovery")
        bundle = await _analyzer(client, catalog).draft(notice, Answers())
        assert bundle.draft_type is DraftType.PRIVATE_PRE_ACTION_SAR_PACK
        assert bundle.sar_letter == "SAR"
        assert "SUBJECT ACCESS" in client.prompts[0]

    @pytest.mark.asyncio
    async def test_draft_missing_letter(self, catalog):
        client = ScriptedClient(json.dumps({"rationale": "no letter"}))
        with pytest.raises(AnalyzerError):
            await _analyzer(client, catalog).draft(make_notice(), Answers())


class TestPrompts:
    def test_header_falls_back(self):
        header = prompts.letter_header(make_notice(authorityName=None, vehicleReg=None))
        assert "Recipient: As per ticket" in header
        assert "Vehicle: As per ticket" in header

    def test_extraction_prompt_lists_keywords(self, catalog):
        text = prompts.extraction_prompt(catalog)
        for keyword in catalog.formal_signal_keywords:
            assert keyword in text
