"""Screen catalogue and transition table for the contest wizard."""

from __future__ import annotations

from enum import StrEnum


class ScreenId(StrEnum):
    """Every screen the wizard can show."""

    DISCLAIMER = "DISCLAIMER"
    UPLOAD = "UPLOAD"
    ANALYZING = "ANALYZING"
    DATA_INCOMPLETE = "DATA_INCOMPLETE"
    INTAKE_JURISDICTION = "INTAKE_JURISDICTION"
    INTAKE_TYPE = "INTAKE_TYPE"
    COURT_CHECK = "COURT_CHECK"
    DEBT_STAGE_CHECK = "DEBT_STAGE_CHECK"
    DEBT_DISPUTE_CHECK = "DEBT_DISPUTE_CHECK"
    CONTRAVENTION_SELECT = "CONTRAVENTION_SELECT"
    DEFENCE_SELECT = "DEFENCE_SELECT"
    PRIVATE_GROUNDS_SELECT = "PRIVATE_GROUNDS_SELECT"
    APPEAL_WINDOW_CHECK = "APPEAL_WINDOW_CHECK"
    EXPLANATION_INPUT = "EXPLANATION_INPUT"
    EVIDENCE_REVIEW = "EVIDENCE_REVIEW"
    STRATEGY_PROPOSAL = "STRATEGY_PROPOSAL"
    DRAFTING = "DRAFTING"
    RESULT = "RESULT"
    RED_FLAG_PAUSE = "RED_FLAG_PAUSE"
    CANNOT_HELP = "CANNOT_HELP"
    CONFIG_ERROR = "CONFIG_ERROR"


class ScreenRole(StrEnum):
    GATED_INPUT = "gated_input"
    BINARY_CHOICE = "binary_choice"
    COMPUTED = "computed"
    TERMINAL = "terminal"


START_SCREEN = ScreenId.DISCLAIMER

SCREEN_ROLES: dict[ScreenId, ScreenRole] = {
    ScreenId.DISCLAIMER: ScreenRole.GATED_INPUT,
    ScreenId.UPLOAD: ScreenRole.GATED_INPUT,
    ScreenId.ANALYZING: ScreenRole.COMPUTED,
    ScreenId.DATA_INCOMPLETE: ScreenRole.TERMINAL,
    ScreenId.INTAKE_JURISDICTION: ScreenRole.BINARY_CHOICE,
    ScreenId.INTAKE_TYPE: ScreenRole.BINARY_CHOICE,
    ScreenId.COURT_CHECK: ScreenRole.BINARY_CHOICE,
    ScreenId.DEBT_STAGE_CHECK: ScreenRole.BINARY_CHOICE,
    ScreenId.DEBT_DISPUTE_CHECK: ScreenRole.BINARY_CHOICE,
    ScreenId.CONTRAVENTION_SELECT: ScreenRole.GATED_INPUT,
    ScreenId.DEFENCE_SELECT: ScreenRole.GATED_INPUT,
    ScreenId.PRIVATE_GROUNDS_SELECT: ScreenRole.GATED_INPUT,
    ScreenId.APPEAL_WINDOW_CHECK: ScreenRole.BINARY_CHOICE,
    ScreenId.EXPLANATION_INPUT: ScreenRole.GATED_INPUT,
    ScreenId.EVIDENCE_REVIEW: ScreenRole.BINARY_CHOICE,
    ScreenId.STRATEGY_PROPOSAL: ScreenRole.GATED_INPUT,
    ScreenId.DRAFTING: ScreenRole.COMPUTED,
    ScreenId.RESULT: ScreenRole.TERMINAL,
    ScreenId.RED_FLAG_PAUSE: ScreenRole.TERMINAL,
    ScreenId.CANNOT_HELP: ScreenRole.TERMINAL,
    ScreenId.CONFIG_ERROR: ScreenRole.TERMINAL,
}

BACK_SUPPRESSED: frozenset[ScreenId] = frozenset(
    screen
    for screen, role in SCREEN_ROLES.items()
    if role in (ScreenRole.COMPUTED, ScreenRole.TERMINAL)
)

# Screens reachable once the notice has been classified (or an intake
# question has resolved one of its unknowns).
_CLASSIFICATION_TARGETS = frozenset({
    ScreenId.RED_FLAG_PAUSE,
    ScreenId.INTAKE_JURISDICTION,
    ScreenId.INTAKE_TYPE,
    ScreenId.COURT_CHECK,
    ScreenId.DEBT_STAGE_CHECK,
    ScreenId.DEBT_DISPUTE_CHECK,
    ScreenId.CONTRAVENTION_SELECT,
    ScreenId.PRIVATE_GROUNDS_SELECT,
})

TRANSITIONS: dict[ScreenId, frozenset[ScreenId]] = {
    ScreenId.DISCLAIMER: frozenset({ScreenId.UPLOAD}),
    ScreenId.UPLOAD: frozenset({ScreenId.ANALYZING}),
    ScreenId.ANALYZING: _CLASSIFICATION_TARGETS | {
        ScreenId.DATA_INCOMPLETE,
        ScreenId.STRATEGY_PROPOSAL,
        ScreenId.UPLOAD,
        ScreenId.CONFIG_ERROR,
    },
    ScreenId.DATA_INCOMPLETE: frozenset({ScreenId.UPLOAD}),
    ScreenId.INTAKE_JURISDICTION: _CLASSIFICATION_TARGETS,
    ScreenId.INTAKE_TYPE: _CLASSIFICATION_TARGETS,
    ScreenId.COURT_CHECK: frozenset({ScreenId.RED_FLAG_PAUSE, ScreenId.DEBT_STAGE_CHECK}),
    ScreenId.DEBT_STAGE_CHECK: frozenset({
        ScreenId.DEBT_DISPUTE_CHECK,
        ScreenId.CONTRAVENTION_SELECT,
        ScreenId.PRIVATE_GROUNDS_SELECT,
    }),
    ScreenId.DEBT_DISPUTE_CHECK: frozenset({
        ScreenId.PRIVATE_GROUNDS_SELECT,
        ScreenId.RED_FLAG_PAUSE,
    }),
    ScreenId.CONTRAVENTION_SELECT: frozenset({ScreenId.DEFENCE_SELECT, ScreenId.CANNOT_HELP}),
    ScreenId.DEFENCE_SELECT: frozenset({ScreenId.APPEAL_WINDOW_CHECK}),
    ScreenId.PRIVATE_GROUNDS_SELECT: frozenset({
        ScreenId.APPEAL_WINDOW_CHECK,
        ScreenId.EXPLANATION_INPUT,
    }),
    ScreenId.APPEAL_WINDOW_CHECK: frozenset({
        ScreenId.EXPLANATION_INPUT,
        ScreenId.RED_FLAG_PAUSE,
    }),
    ScreenId.EXPLANATION_INPUT: frozenset({ScreenId.EVIDENCE_REVIEW}),
    ScreenId.EVIDENCE_REVIEW: frozenset({ScreenId.ANALYZING, ScreenId.DRAFTING}),
    ScreenId.STRATEGY_PROPOSAL: frozenset({ScreenId.DRAFTING}),
    ScreenId.DRAFTING: frozenset({
        ScreenId.RESULT,
        ScreenId.UPLOAD,
        ScreenId.CONFIG_ERROR,
    }),
    ScreenId.RESULT: frozenset(),
    ScreenId.RED_FLAG_PAUSE: frozenset(),
    ScreenId.CANNOT_HELP: frozenset(),
    ScreenId.CONFIG_ERROR: frozenset(),
}


# Gated input screens advanced through a single "continue" affordance.
CONTINUE_SCREENS: frozenset[ScreenId] = frozenset({
    ScreenId.DISCLAIMER,
    ScreenId.DEFENCE_SELECT,
    ScreenId.PRIVATE_GROUNDS_SELECT,
    ScreenId.EXPLANATION_INPUT,
    ScreenId.STRATEGY_PROPOSAL,
})


def is_allowed(source: ScreenId, target: ScreenId) -> bool:
    return target in TRANSITIONS.get(source, frozenset())


def can_go_back_from(screen: ScreenId) -> bool:
    return screen not in BACK_SUPPRESSED
