"""Pure navigation reducer: ``(state, event) -> state``.

Nothing here touches the view. Scrolling back to the top is a reaction the
engine issues after it observes that ``current`` changed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pcnwizard.wizard.models import WizardState
from pcnwizard.wizard.screens import START_SCREEN, ScreenId, can_go_back_from


@dataclass(frozen=True)
class Navigate:
    target: ScreenId


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Restore:
    """Jump straight to ``target`` with an empty history (payment return)."""

    target: ScreenId


NavigationEvent = Union[Navigate, Back, Reset, Restore]


def _screen(value: ScreenId | str) -> ScreenId:
    try:
        return ScreenId(value)
    except ValueError:
        raise ValueError(f"Unknown screen: {value!r}") from None


def navigate_to(state: WizardState, target: ScreenId | str) -> WizardState:
    """Push ``current`` onto the history and move to ``target``."""
    return WizardState(
        current=_screen(target),
        history=(*state.history, state.current),
    )


def go_back(state: WizardState) -> WizardState:
    """Pop the last visited screen; a no-op on empty history or locked screens.

    The screen being left is discarded, there is no redo stack.
    """
    if not state.history or not can_go_back_from(state.current):
        return state
    return WizardState(current=state.history[-1], history=state.history[:-1])


def reset_state() -> WizardState:
    return WizardState(current=START_SCREEN, history=())


def reduce(state: WizardState, event: NavigationEvent) -> WizardState:
    if isinstance(event, Navigate):
        return navigate_to(state, event.target)
    if isinstance(event, Back):
        return go_back(state)
    if isinstance(event, Reset):
        return reset_state()
    if isinstance(event, Restore):
        return WizardState(current=_screen(event.target), history=())
    raise TypeError(f"Unsupported navigation event: {event!r}")
