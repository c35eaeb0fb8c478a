"""Core type definitions shared across pcnwizard modules."""

from __future__ import annotations

from enum import StrEnum

NOT_FOUND = "NOT_FOUND"


class NoticeType(StrEnum):
    """Who issued the notice."""

    COUNCIL = "council"
    PRIVATE = "private"
    UNKNOWN = "unknown"


class NoticeStage(StrEnum):
    """Procedural phase the notice has reached."""

    STANDARD = "standard"
    DEBT_RECOVERY = "debt_recovery"
    COURT_CLAIM = "court_claim"
    UNKNOWN = "unknown"


class Jurisdiction(StrEnum):
    ENGLAND_WALES = "England_Wales"
    SCOTLAND = "Scotland"
    NI = "NI"
    UNKNOWN = "Unknown"


class DraftType(StrEnum):
    """Kind of letter pack produced by the drafting step."""

    PCN_REPRESENTATION = "PCN_REPRESENTATION"
    PRIVATE_PRE_ACTION_SAR_PACK = "PRIVATE_PRE_ACTION_SAR_PACK"


class VerificationStatus(StrEnum):
    VERIFIED = "VERIFIED"
    BLOCKED_PREVIEW_ONLY = "BLOCKED_PREVIEW_ONLY"


class LetterDocument(StrEnum):
    """Exportable documents on the result screen."""

    LETTER = "letter"
    SAR = "sar"


class RedFlagReason(StrEnum):
    """Why the wizard stopped on the red-flag screen."""

    COURT = "court"
    JURISDICTION = "jurisdiction"
    WINDOW_EXPIRED = "window_expired"
    UNDISPUTED_DEBT = "undisputed_debt"
