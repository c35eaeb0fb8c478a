"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest

from pcnwizard.analyzer.base import Analyzer
from pcnwizard.core.config import PaymentConfig, Settings, StorageConfig
from pcnwizard.core.types import DraftType
from pcnwizard.persistence.store import InMemoryCaseStore
from pcnwizard.wizard import questions as q
from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.catalog import load_catalog
from pcnwizard.wizard.engine import WizardEngine
from pcnwizard.wizard.models import LetterBundle, NoticeFacts, Strategy
from pcnwizard.wizard.screens import ScreenId

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-body"

LETTER_TEXT = "\n".join(
    [
        "Parking Services",
        "Town Hall",
        "Reference: AB12345678",
        "",
        "Dear Sir or Madam,",
        "I am writing to contest this notice.",
        "The signs at the bay were obscured.",
        "Yours faithfully,",
    ]
)


def make_notice(**overrides: Any) -> NoticeFacts:
    """A confidently read council notice from England, unless overridden."""
    data: dict[str, Any] = {
        "pcnNumber": "AB12345678",
        "vehicleReg": "AB12 CDE",
        "dateOfIssue": "2024-03-01",
        "authorityName": "Camden Council",
        "noticeType": "council",
        "classifiedStage": "standard",
        "jurisdiction": "England_Wales",
        "extractionConfidence": 0.9,
    }
    data.update(overrides)
    return NoticeFacts.model_validate(data)


class FakeAnalyzer(Analyzer):
    """Scripted analyzer that records every call it receives."""

    def __init__(
        self,
        notice: NoticeFacts | None = None,
        strategy: Strategy | None = None,
        letter: LetterBundle | None = None,
    ) -> None:
        self.notice = notice or make_notice()
        self.strategy = strategy or Strategy(
            summary="The signs were not clear.",
            rationale="A short letter sets out the facts.",
        )
        self.letter = letter or LetterBundle(letter=LETTER_TEXT)
        self.extract_error: Exception | None = None
        self.strategy_error: Exception | None = None
        self.draft_error: Exception | None = None
        self.calls: list[str] = []
        self.drafted_with: dict[str, str] | None = None

    async def extract(self, image: bytes, mime_type: str) -> NoticeFacts:
        self.calls.append("extract")
        if self.extract_error is not None:
            raise self.extract_error
        return self.notice

    async def strategize(self, facts: NoticeFacts, answers: Answers) -> Strategy:
        self.calls.append("strategize")
        if self.strategy_error is not None:
            raise self.strategy_error
        return self.strategy

    async def draft(self, facts: NoticeFacts, answers: Answers) -> LetterBundle:
        self.calls.append("draft")
        self.drafted_with = answers.to_wire()
        if self.draft_error is not None:
            raise self.draft_error
        return self.letter


def debt_letter_bundle() -> LetterBundle:
    return LetterBundle(
        letter="Pre-action response\nline two",
        sar_letter="Subject access request\nline two",
        draft_type=DraftType.PRIVATE_PRE_ACTION_SAR_PACK,
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(storage=StorageConfig(data_dir=str(tmp_path / "cases")))


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def store():
    return InMemoryCaseStore()


@pytest.fixture
def engine(analyzer, store, settings, catalog):
    return WizardEngine(analyzer, store=store, settings=settings, catalog=catalog)


def free_settings(tmp_path) -> Settings:
    """Settings with the paywall switched off."""
    return Settings(
        storage=StorageConfig(data_dir=str(tmp_path / "cases")),
        payment=PaymentConfig(require_payment=False),
    )


def accept_disclaimer(engine: WizardEngine) -> None:
    engine.set_bool(q.ACK_NOT_ADVICE, True)
    engine.set_bool(q.ACK_RESPONSIBILITY, True)


async def scan(engine: WizardEngine) -> ScreenId:
    """Accept the disclaimer and upload a photo."""
    accept_disclaimer(engine)
    await engine.continue_()
    return await engine.upload(PNG_BYTES, "image/png")
