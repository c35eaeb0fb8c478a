"""Branch predicates that pick the next screen from the case facts.

Intake answers never rewrite the extracted notice. They are layered on top
of it as overrides, and every predicate reads the combined view.
"""

from __future__ import annotations

from dataclasses import dataclass

from pcnwizard.core.types import Jurisdiction, NoticeStage, NoticeType, RedFlagReason
from pcnwizard.wizard import questions as q
from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.catalog import OTHER_CATEGORY
from pcnwizard.wizard.models import CaseRecord, NoticeFacts
from pcnwizard.wizard.screens import ScreenId

_OUT_OF_SCOPE_JURISDICTIONS = frozenset({Jurisdiction.SCOTLAND, Jurisdiction.NI})


@dataclass(frozen=True)
class EffectiveFacts:
    """Extracted facts with intake answers applied."""

    notice_type: NoticeType
    stage: NoticeStage
    jurisdiction: Jurisdiction
    formal_signals: bool
    court_artefacts: bool


def effective_facts(notice: NoticeFacts, answers: Answers) -> EffectiveFacts:
    notice_type = notice.notice_type
    council = answers.get_bool(q.ISSUER_IS_COUNCIL)
    if council is not None:
        notice_type = NoticeType.COUNCIL if council else NoticeType.PRIVATE

    jurisdiction = notice.jurisdiction
    if answers.is_true(q.IN_ENGLAND_WALES):
        jurisdiction = Jurisdiction.ENGLAND_WALES

    stage = notice.classified_stage
    if answers.is_true(q.COURT_PAPERS_RECEIVED):
        stage = NoticeStage.COURT_CLAIM
    elif stage is NoticeStage.UNKNOWN:
        debt_letter = answers.get_bool(q.DEBT_LETTER_RECEIVED)
        if debt_letter is not None:
            stage = NoticeStage.DEBT_RECOVERY if debt_letter else NoticeStage.STANDARD

    return EffectiveFacts(
        notice_type=notice_type,
        stage=stage,
        jurisdiction=jurisdiction,
        formal_signals=notice.contains_formal_signals,
        court_artefacts=notice.contains_hard_court_artefacts,
    )


def is_extraction_incomplete(notice: NoticeFacts, threshold: float) -> bool:
    return notice.extraction_confidence < threshold or not notice.reference_found


def is_court_case(facts: EffectiveFacts) -> bool:
    return facts.stage is NoticeStage.COURT_CLAIM or facts.court_artefacts


def is_outside_jurisdiction(facts: EffectiveFacts, answers: Answers) -> bool:
    return (
        facts.jurisdiction in _OUT_OF_SCOPE_JURISDICTIONS
        or answers.get_bool(q.IN_ENGLAND_WALES) is False
    )


def is_debt_path(facts: EffectiveFacts) -> bool:
    return facts.stage is NoticeStage.DEBT_RECOVERY or (
        facts.formal_signals and facts.notice_type is NoticeType.PRIVATE
    )


def case_is_debt_path(case: CaseRecord) -> bool:
    if case.notice is None:
        return False
    return is_debt_path(effective_facts(case.notice, case.answers))


def classify(notice: NoticeFacts, answers: Answers) -> ScreenId:
    """Route a confidently extracted notice to the first screen it needs.

    Order matters: court signals beat everything, then jurisdiction, then the
    debt path, then any classification the scan left unknown.
    """
    facts = effective_facts(notice, answers)

    if is_court_case(facts):
        return ScreenId.RED_FLAG_PAUSE
    if is_outside_jurisdiction(facts, answers):
        return ScreenId.RED_FLAG_PAUSE
    if facts.jurisdiction is Jurisdiction.UNKNOWN:
        return ScreenId.INTAKE_JURISDICTION
    if is_debt_path(facts):
        return ScreenId.DEBT_DISPUTE_CHECK
    if facts.notice_type is NoticeType.UNKNOWN:
        return ScreenId.INTAKE_TYPE
    if facts.stage is NoticeStage.UNKNOWN:
        if answers.get_bool(q.COURT_PAPERS_RECEIVED) is None:
            return ScreenId.COURT_CHECK
        return ScreenId.DEBT_STAGE_CHECK
    if facts.notice_type is NoticeType.COUNCIL:
        return ScreenId.CONTRAVENTION_SELECT
    return ScreenId.PRIVATE_GROUNDS_SELECT


def route_after_extraction(notice: NoticeFacts, answers: Answers, threshold: float) -> ScreenId:
    if is_extraction_incomplete(notice, threshold):
        return ScreenId.DATA_INCOMPLETE
    return classify(notice, answers)


def route_binary_choice(screen: ScreenId, choice: bool, case: CaseRecord) -> ScreenId:
    """Next screen after a yes/no answer has been recorded in ``case.answers``."""
    if screen in (ScreenId.INTAKE_JURISDICTION, ScreenId.INTAKE_TYPE, ScreenId.DEBT_STAGE_CHECK):
        if case.notice is None:
            raise ValueError(f"Screen {screen} needs extracted notice facts")
        return classify(case.notice, case.answers)
    if screen is ScreenId.COURT_CHECK:
        return ScreenId.RED_FLAG_PAUSE if choice else ScreenId.DEBT_STAGE_CHECK
    if screen is ScreenId.DEBT_DISPUTE_CHECK:
        return ScreenId.PRIVATE_GROUNDS_SELECT if choice else ScreenId.RED_FLAG_PAUSE
    if screen is ScreenId.APPEAL_WINDOW_CHECK:
        return ScreenId.EXPLANATION_INPUT if choice else ScreenId.RED_FLAG_PAUSE
    if screen is ScreenId.EVIDENCE_REVIEW:
        if not choice:
            return ScreenId.EVIDENCE_REVIEW
        return ScreenId.DRAFTING if case_is_debt_path(case) else ScreenId.ANALYZING
    raise ValueError(f"Screen {screen} is not a yes/no question")


def red_flag_reason(source: ScreenId, case: CaseRecord) -> RedFlagReason:
    """Explain a stop on the red-flag screen reached from ``source``."""
    if source is ScreenId.COURT_CHECK:
        return RedFlagReason.COURT
    if source is ScreenId.DEBT_DISPUTE_CHECK:
        return RedFlagReason.UNDISPUTED_DEBT
    if source is ScreenId.APPEAL_WINDOW_CHECK:
        return RedFlagReason.WINDOW_EXPIRED
    if case.notice is not None and is_court_case(effective_facts(case.notice, case.answers)):
        return RedFlagReason.COURT
    return RedFlagReason.JURISDICTION


def route_category(category: str) -> ScreenId:
    if category == OTHER_CATEGORY:
        return ScreenId.CANNOT_HELP
    return ScreenId.DEFENCE_SELECT


def route_after_grounds(case: CaseRecord) -> ScreenId:
    """Private grounds lead to the window check, except on the debt path."""
    if case_is_debt_path(case):
        return ScreenId.EXPLANATION_INPUT
    return ScreenId.APPEAL_WINDOW_CHECK


def route_continue(screen: ScreenId, case: CaseRecord) -> ScreenId:
    """Static forward target of a gated input screen."""
    if screen is ScreenId.DISCLAIMER:
        return ScreenId.UPLOAD
    if screen is ScreenId.DEFENCE_SELECT:
        return ScreenId.APPEAL_WINDOW_CHECK
    if screen is ScreenId.PRIVATE_GROUNDS_SELECT:
        return route_after_grounds(case)
    if screen is ScreenId.EXPLANATION_INPUT:
        return ScreenId.EVIDENCE_REVIEW
    if screen is ScreenId.STRATEGY_PROPOSAL:
        return ScreenId.DRAFTING
    raise ValueError(f"Screen {screen} has no continue action")
