"""Shared models for the contest wizard: notice facts, case record and state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pcnwizard.core.types import (
    NOT_FOUND,
    DraftType,
    Jurisdiction,
    NoticeStage,
    NoticeType,
    VerificationStatus,
)
from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.screens import START_SCREEN, ScreenId

_NOTICE_TYPE_ALIASES = {
    "council_pcn": NoticeType.COUNCIL,
    "private_parking_charge": NoticeType.PRIVATE,
}

_STAGE_ALIASES = {
    "standard_pcn": NoticeStage.STANDARD,
    "private_parking_pcn": NoticeStage.STANDARD,
    "private_parking_debt": NoticeStage.DEBT_RECOVERY,
}

_JURISDICTION_ALIASES = {j.value.lower(): j for j in Jurisdiction}


class _WireModel(BaseModel):
    """Base for models exchanged with the analyzer in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ClarificationQuestion(_WireModel):
    id: str
    question: str
    options: list[str] = Field(default_factory=list)


class NoticeFacts(_WireModel):
    """Fields extracted from a scanned parking notice."""

    pcn_number: str = NOT_FOUND
    vehicle_reg: str | None = None
    date_of_issue: str | None = None
    location: str | None = None
    contravention_code: str | None = None
    contravention_description: str | None = None
    authority_name: str | None = None
    authority_address: str | None = None
    notice_type: NoticeType = NoticeType.UNKNOWN
    classified_stage: NoticeStage = NoticeStage.UNKNOWN
    jurisdiction: Jurisdiction = Jurisdiction.UNKNOWN
    extraction_confidence: float = Field(ge=0.0, le=1.0)
    contains_formal_signals: bool = False
    contains_hard_court_artefacts: bool = False
    formal_signal_reason: str | None = None
    clarification_questions: list[ClarificationQuestion] = Field(default_factory=list)

    @field_validator("pcn_number", mode="before")
    @classmethod
    def _normalise_reference(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return NOT_FOUND
        return value.strip() if isinstance(value, str) else value

    @field_validator("notice_type", mode="before")
    @classmethod
    def _normalise_notice_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower()
            return _NOTICE_TYPE_ALIASES.get(key, key)
        return value

    @field_validator("classified_stage", mode="before")
    @classmethod
    def _normalise_stage(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower()
            return _STAGE_ALIASES.get(key, key)
        return value

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def _normalise_jurisdiction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _JURISDICTION_ALIASES.get(value.strip().lower(), value)
        return value

    @property
    def reference_found(self) -> bool:
        return self.pcn_number != NOT_FOUND


class Strategy(_WireModel):
    """Plain-language plan returned by the analyzer's strategize step."""

    summary: str
    rationale: str
    overview: str = ""


class LetterBundle(_WireModel):
    """Letters returned by the analyzer's draft step."""

    letter: str
    sar_letter: str | None = None
    pac_letter: str | None = None
    draft_type: DraftType = DraftType.PCN_REPRESENTATION
    verification_status: VerificationStatus = VerificationStatus.VERIFIED
    source_citations: list[str] = Field(default_factory=list)
    evidence_checklist: list[str] = Field(default_factory=list)
    rationale: str = ""


class CaseRecord(BaseModel):
    """Everything collected for one notice. Pure data."""

    notice: NoticeFacts | None = None
    answers: Answers = Field(default_factory=Answers)
    strategy: Strategy | None = None
    letter: LetterBundle | None = None
    unlocked: bool = False


class WizardState(BaseModel):
    """Current screen plus the back-navigation history."""

    model_config = ConfigDict(frozen=True)

    current: ScreenId = START_SCREEN
    history: tuple[ScreenId, ...] = ()
