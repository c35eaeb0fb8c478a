"""Prompt templates for the analyzer passes."""

from __future__ import annotations

import json

from pcnwizard.wizard.catalog import GroundsCatalog
from pcnwizard.wizard.models import NoticeFacts

EXTRACTION_SYSTEM_PROMPT = (
    "You read photographs of UK parking notices and return only JSON."
)

_EXTRACTION_TEMPLATE = """Extract the UK parking notice details from the image.

Identify the STAGE of the notice (classifiedStage):
- court_claim: look for {court_keywords}.
- debt_recovery: look for {formal_keywords}.
- standard: a standard notice to owner or parking charge notice.
- unknown: none of the above can be determined.

Identify the jurisdiction: England_Wales, Scotland, NI or Unknown.

Classify noticeType as:
- council: Local Authority / TfL.
- private: private firm / operator.
- unknown.

Set containsFormalSignals when any debt or pre-action wording appears and
containsHardCourtArtefacts when any court document marker appears.
Set extractionConfidence between 0 and 1. Use null for any field you cannot read.

Return a JSON object with the keys: pcnNumber, vehicleReg, dateOfIssue,
location, authorityName, authorityAddress, contraventionCode,
contraventionDescription, noticeType, classifiedStage, jurisdiction,
containsFormalSignals, containsHardCourtArtefacts, formalSignalReason,
extractionConfidence."""

_STRATEGY_TEMPLATE = """Based on:
DATA: {facts}
USER_ANSWERS: {answers}

Provide:
1. summary: a short, high-impact headline explaining why we are challenging this.
2. overview: the action plan in 2 lines max.
3. rationale: why this plan is best delivered using our drafting service.

STRICT LANGUAGE CONTROL:
- Use ONLY plain, everyday language.
- BANNED WORDS: legal, law, appeal, defence, legislation, regulation, statute,
  comply, evidence, witness, representation, liable, liability.
- Max 120 words total.

Return a JSON object with the keys: summary, overview, rationale."""

_HEADER_TEMPLATE = """HEADER:
- Recipient: {recipient}
- Address: {address}
- Reference: {reference}
- Vehicle: {vehicle}
- Date: {date}"""

_DEBT_TEMPLATE = """You are drafting a formal PRE-LITIGATION DISCLOSURE and SUBJECT ACCESS
REQUEST (SAR) letter for a UK private parking debt case.
{header}
Facts: {answers}

The letter MUST:
1. Demand full pre-litigation disclosure including a copy of the contract,
   signage maps, and proof of assignment.
2. Include a formal Subject Access Request under the Data Protection Act 2018,
   returned separately as sarLetter.
3. State that proceedings should be stayed until this data is provided.

You MAY use formal terms (SAR, pre-litigation disclosure, DPA 2018, POFA 2012)."""

_REPRESENTATION_TEMPLATE = """You are drafting a professional representation letter to a UK parking authority.
{header}
Facts: {answers}

Rely only on these sources where relevant: {sources}.
You MAY use formal terms as appropriate; this letter is the ONLY place such
terms are allowed."""

_DRAFT_SUFFIX = """

Return a JSON object with the keys: draftType, letter, sarLetter,
verificationStatus (VERIFIED or BLOCKED_PREVIEW_ONLY), sourceCitations (list),
evidenceChecklist (list), rationale."""

_AS_PER_TICKET = "As per ticket"


def extraction_prompt(catalog: GroundsCatalog) -> str:
    return _EXTRACTION_TEMPLATE.format(
        court_keywords=", ".join(f'"{k}"' for k in catalog.court_artefact_keywords),
        formal_keywords=", ".join(f'"{k}"' for k in catalog.formal_signal_keywords),
    )


def strategy_prompt(facts: NoticeFacts, wire_answers: dict[str, str]) -> str:
    return _STRATEGY_TEMPLATE.format(
        facts=facts.model_dump_json(by_alias=True, exclude_none=True),
        answers=json.dumps(wire_answers),
    )


def letter_header(facts: NoticeFacts) -> str:
    return _HEADER_TEMPLATE.format(
        recipient=facts.authority_name or _AS_PER_TICKET,
        address=facts.authority_address or _AS_PER_TICKET,
        reference=facts.pcn_number,
        vehicle=facts.vehicle_reg or _AS_PER_TICKET,
        date=facts.date_of_issue or _AS_PER_TICKET,
    )


def draft_prompt(
    facts: NoticeFacts,
    wire_answers: dict[str, str],
    *,
    debt_path: bool,
    council: bool,
    catalog: GroundsCatalog,
) -> str:
    header = letter_header(facts)
    answers = json.dumps(wire_answers)
    if debt_path:
        body = _DEBT_TEMPLATE.format(header=header, answers=answers)
    else:
        kind = "council" if council else "private"
        sources = "; ".join(ref.title for ref in catalog.sources.get(kind, []))
        body = _REPRESENTATION_TEMPLATE.format(header=header, answers=answers, sources=sources)
    return body + _DRAFT_SUFFIX
