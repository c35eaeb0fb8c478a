"""Gate predicates that must hold before a screen allows forward progress.

Each gate is registered against the screen it guards. A gate returns None
when it holds and an error message otherwise, the same shape the field
validators use. Gates are pure and never cached: callers re-evaluate them on
every input change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from pcnwizard.core.config import WizardConfig
from pcnwizard.wizard import questions as q
from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.catalog import GroundsCatalog, load_catalog
from pcnwizard.wizard.screens import ScreenId


@dataclass(frozen=True)
class GateContext:
    """Static inputs a gate may need beyond the answers themselves."""

    config: WizardConfig = field(default_factory=WizardConfig)
    catalog: GroundsCatalog = field(default_factory=load_catalog)


GateFn = Callable[[Answers, GateContext], str | None]

# Registry of gate functions: screen -> callable(answers, ctx) -> str | None
GATES: dict[ScreenId, GateFn] = {}


def register(screen: ScreenId):
    """Decorator to register a gate for a screen."""
    def decorator(fn: GateFn) -> GateFn:
        GATES[screen] = fn
        return fn
    return decorator


# -- gate shapes ---------------------------------------------------------------


class WordCountState(StrEnum):
    EMPTY = "empty"
    OK = "ok"
    TOO_LONG = "too_long"


def count_words(text: str) -> int:
    return len([token for token in text.strip().split() if token])


def word_count_state(text: str, maximum: int) -> WordCountState:
    count = count_words(text)
    if count == 0:
        return WordCountState.EMPTY
    if count > maximum:
        return WordCountState.TOO_LONG
    return WordCountState.OK


def dual_attestation(first: bool | None, second: bool | None) -> bool:
    return first is True and second is True


def selection_within_bounds(selection: list[str], minimum: int, maximum: int) -> bool:
    return minimum <= len(set(selection)) <= maximum


def at_least_one_of(selection: list[str], options: set[str], opt_in: bool = False) -> bool:
    return opt_in or any(item in options for item in selection)


# -- registered gates ----------------------------------------------------------


@register(ScreenId.DISCLAIMER)
def disclaimer_gate(answers: Answers, ctx: GateContext) -> str | None:
    if not dual_attestation(
        answers.get_bool(q.ACK_NOT_ADVICE), answers.get_bool(q.ACK_RESPONSIBILITY)
    ):
        return "Both statements must be accepted before scanning."
    return None


@register(ScreenId.DEFENCE_SELECT)
def defence_gate(answers: Answers, ctx: GateContext) -> str | None:
    category = answers.get_text(q.CONTRAVENTION_CATEGORY)
    options = ctx.catalog.council_ground_ids(category) if category in ctx.catalog.council else set()
    if not at_least_one_of(
        answers.get_selection(q.COUNCIL_GROUNDS), options, answers.is_true(q.MITIGATION)
    ):
        return "Select at least one basis or request discretion."
    return None


@register(ScreenId.PRIVATE_GROUNDS_SELECT)
def private_grounds_gate(answers: Answers, ctx: GateContext) -> str | None:
    cfg = ctx.config
    selection = answers.get_selection(q.PRIVATE_GROUNDS)
    if not selection_within_bounds(selection, cfg.min_grounds, cfg.max_grounds):
        return f"Select between {cfg.min_grounds} and {cfg.max_grounds} reasons."
    return None


@register(ScreenId.EXPLANATION_INPUT)
def explanation_gate(answers: Answers, ctx: GateContext) -> str | None:
    limit = ctx.config.max_explanation_words
    text = answers.get_text(q.USER_EXPLANATION)
    state = word_count_state(text, limit)
    if state is WordCountState.EMPTY:
        return "An explanation is required."
    if state is WordCountState.TOO_LONG:
        return f"Explanation is {count_words(text)} words; the limit is {limit}."
    return None


@register(ScreenId.STRATEGY_PROPOSAL)
def strategy_gate(answers: Answers, ctx: GateContext) -> str | None:
    if not answers.is_true(q.STRATEGY_AGREED):
        return "Confirm you have reviewed the strategy before drafting."
    return None


def evaluate_gate(screen: ScreenId, answers: Answers, ctx: GateContext) -> str | None:
    """Run the gate registered for ``screen``; screens without one always pass."""
    fn = GATES.get(screen)
    if fn is None:
        return None
    return fn(answers, ctx)


def validate_image(data: bytes | None, mime_type: str | None) -> str | None:
    """Gate for the upload screen: a non-empty image must be selected."""
    if not data:
        return "Select a photo of the notice."
    if not mime_type or not mime_type.startswith("image/"):
        return f"Unsupported file type: {mime_type!r}."
    return None
