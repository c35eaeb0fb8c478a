"""Question ids used as keys in the answer store, and the binary prompts."""

from __future__ import annotations

from pcnwizard.wizard.screens import ScreenId

ACK_NOT_ADVICE = "ack_not_advice"
ACK_RESPONSIBILITY = "ack_responsibility"
IN_ENGLAND_WALES = "in_england_wales"
ISSUER_IS_COUNCIL = "issuer_is_council"
COURT_PAPERS_RECEIVED = "court_papers_received"
DEBT_LETTER_RECEIVED = "debt_letter_received"
DISPUTES_DEBT = "disputes_debt"
CONTRAVENTION_CATEGORY = "contravention_category"
COUNCIL_GROUNDS = "council_grounds"
MITIGATION = "mitigation"
PRIVATE_GROUNDS = "private_grounds"
WITHIN_APPEAL_WINDOW = "within_appeal_window"
USER_EXPLANATION = "user_explanation"
EVIDENCE_REVIEWED = "evidence_reviewed"
STRATEGY_AGREED = "strategy_agreed"

# Answers stored as selections; needed to decode the flat wire shape.
SELECTION_QUESTIONS = frozenset({COUNCIL_GROUNDS, PRIVATE_GROUNDS})

# Yes/no screens and the question each one records.
BINARY_QUESTIONS: dict[ScreenId, str] = {
    ScreenId.INTAKE_JURISDICTION: IN_ENGLAND_WALES,
    ScreenId.INTAKE_TYPE: ISSUER_IS_COUNCIL,
    ScreenId.COURT_CHECK: COURT_PAPERS_RECEIVED,
    ScreenId.DEBT_STAGE_CHECK: DEBT_LETTER_RECEIVED,
    ScreenId.DEBT_DISPUTE_CHECK: DISPUTES_DEBT,
    ScreenId.APPEAL_WINDOW_CHECK: WITHIN_APPEAL_WINDOW,
    ScreenId.EVIDENCE_REVIEW: EVIDENCE_REVIEWED,
}

PROMPTS: dict[ScreenId, str] = {
    ScreenId.INTAKE_JURISDICTION: "Was this notice issued in England or Wales?",
    ScreenId.INTAKE_TYPE: (
        "Is this a Council or TfL issued notice? (NOT a private parking charge)"
    ),
    ScreenId.COURT_CHECK: (
        "Have you received official County Court claim papers (N1 Form) "
        "for this specific reference?"
    ),
    ScreenId.DEBT_STAGE_CHECK: (
        "Does the letter mention a debt recovery company, debt collection, "
        "or added fees?"
    ),
    ScreenId.DEBT_DISPUTE_CHECK: "Do you dispute this parking charge debt?",
    ScreenId.APPEAL_WINDOW_CHECK: (
        "Are you within the valid time frame to challenge or appeal this notice?"
    ),
    ScreenId.EVIDENCE_REVIEW: (
        "Have you reviewed the photos, signage and any evidence supplied "
        "with the notice?"
    ),
}

EVIDENCE_FORCED_STOP_MESSAGE = (
    "Stop here. Review every photo and document supplied with the notice "
    "before a letter is drafted."
)
