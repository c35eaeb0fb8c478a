"""Tests for the navigation reducer and the transition table."""

from __future__ import annotations

import pytest

from pcnwizard.wizard.models import WizardState
from pcnwizard.wizard.navigation import (
    Back,
    Navigate,
    Reset,
    Restore,
    go_back,
    navigate_to,
    reduce,
)
from pcnwizard.wizard.screens import (
    BACK_SUPPRESSED,
    SCREEN_ROLES,
    START_SCREEN,
    TRANSITIONS,
    ScreenId,
    ScreenRole,
    is_allowed,
)


class TestReducer:
    def test_navigate_pushes_current(self):
        state = navigate_to(WizardState(), ScreenId.UPLOAD)
        assert state.current is ScreenId.UPLOAD
        assert state.history == (ScreenId.DISCLAIMER,)

    def test_navigate_unknown_screen_raises(self):
        with pytest.raises(ValueError, match="Unknown screen"):
            navigate_to(WizardState(), "NOT_A_SCREEN")

    def test_back_pops(self):
        state = reduce(WizardState(), Navigate(ScreenId.UPLOAD))
        state = reduce(state, Back())
        assert state == WizardState()

    def test_back_on_empty_history_is_idempotent(self):
        state = WizardState()
        assert go_back(state) == state
        assert go_back(go_back(state)) == state

    def test_back_suppressed_on_terminal(self):
        state = WizardState(
            current=ScreenId.RED_FLAG_PAUSE,
            history=(ScreenId.UPLOAD,),
        )
        assert go_back(state) == state

    def test_back_discards_the_left_screen(self):
        state = WizardState()
        state = reduce(state, Navigate(ScreenId.UPLOAD))
        state = reduce(state, Navigate(ScreenId.ANALYZING))
        state = reduce(state, Back())
        assert state.current is ScreenId.UPLOAD
        assert ScreenId.ANALYZING not in state.history

    def test_history_only_holds_visited_screens(self):
        path = [ScreenId.UPLOAD, ScreenId.ANALYZING, ScreenId.CONTRAVENTION_SELECT]
        state = WizardState()
        visited = [state.current]
        for screen in path:
            state = reduce(state, Navigate(screen))
            visited.append(screen)
        assert set(state.history) <= set(visited)
        assert list(state.history) == visited[:-1]

    def test_reset(self):
        state = WizardState(current=ScreenId.RESULT, history=(ScreenId.UPLOAD,))
        assert reduce(state, Reset()) == WizardState(current=START_SCREEN, history=())

    def test_restore_clears_history(self):
        state = WizardState(current=ScreenId.UPLOAD, history=(ScreenId.DISCLAIMER,))
        restored = reduce(state, Restore(ScreenId.RESULT))
        assert restored.current is ScreenId.RESULT
        assert restored.history == ()

    def test_state_is_immutable(self):
        state = WizardState()
        with pytest.raises(Exception):
            state.current = ScreenId.UPLOAD  # type: ignore[misc]


class TestTransitionTable:
    def test_every_screen_has_a_role_and_row(self):
        assert set(SCREEN_ROLES) == set(ScreenId)
        assert set(TRANSITIONS) == set(ScreenId)

    def test_terminals_have_no_outgoing_edges_except_rescan(self):
        for screen, role in SCREEN_ROLES.items():
            if role is ScreenRole.TERMINAL and screen is not ScreenId.DATA_INCOMPLETE:
                assert TRANSITIONS[screen] == frozenset()

    @pytest.mark.parametrize(
        "source", [ScreenId.ANALYZING, ScreenId.INTAKE_JURISDICTION, ScreenId.INTAKE_TYPE]
    )
    def test_classification_sources_reach_debt_stage_check(self, source):
        assert is_allowed(source, ScreenId.DEBT_STAGE_CHECK)

    def test_back_suppressed_screens(self):
        assert ScreenId.ANALYZING in BACK_SUPPRESSED
        assert ScreenId.DRAFTING in BACK_SUPPRESSED
        assert ScreenId.RESULT in BACK_SUPPRESSED
        assert ScreenId.UPLOAD not in BACK_SUPPRESSED

    def test_is_allowed(self):
        assert is_allowed(ScreenId.DISCLAIMER, ScreenId.UPLOAD)
        assert not is_allowed(ScreenId.DISCLAIMER, ScreenId.RESULT)
        assert is_allowed(ScreenId.EVIDENCE_REVIEW, ScreenId.DRAFTING)
