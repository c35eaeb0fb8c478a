"""Wizard engine: owns the case record and navigation state.

The engine is the only writer of the :class:`CaseRecord`. Every handler
either commits its answer and moves on, or leaves the record untouched and
reroutes. The two analyzer calls are the only suspension points; while one
is running the engine sits on a computed screen that accepts no input.
"""

from __future__ import annotations

import logging
from typing import Callable

from pcnwizard.analyzer.base import Analyzer
from pcnwizard.core.config import Settings
from pcnwizard.core.errors import (
    AnalyzerConfigError,
    ExportUnavailableError,
    ScanInProgressError,
)
from pcnwizard.core.types import LetterDocument, RedFlagReason
from pcnwizard.export.renderer import (
    ExportedDocument,
    LetterRenderer,
    document_text,
    preview_text,
)
from pcnwizard.payment import checkout_url, is_payment_success, strip_payment_param
from pcnwizard.persistence.store import CaseStore, InMemoryCaseStore
from pcnwizard.wizard import questions as q
from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.catalog import GroundsCatalog, load_catalog
from pcnwizard.wizard.gates import GateContext, evaluate_gate, validate_image
from pcnwizard.wizard.models import CaseRecord, LetterBundle, NoticeFacts, WizardState
from pcnwizard.wizard.navigation import Back, Navigate, NavigationEvent, Reset, Restore, reduce
from pcnwizard.wizard.routing import (
    red_flag_reason,
    route_after_extraction,
    route_binary_choice,
    route_category,
    route_continue,
)
from pcnwizard.wizard.screens import (
    CONTINUE_SCREENS,
    SCREEN_ROLES,
    ScreenId,
    ScreenRole,
    can_go_back_from,
    is_allowed,
)

logger = logging.getLogger(__name__)

ScreenListener = Callable[[WizardState], None]

SCAN_FAILED_MESSAGE = "We could not read that notice. Please try another photo."
DRAFT_FAILED_MESSAGE = "Something went wrong preparing your documents. Please scan again."
CONFIG_FAILED_MESSAGE = "The service is not configured. Reload the page to try again."

_ACKNOWLEDGEMENTS = (q.ACK_NOT_ADVICE, q.ACK_RESPONSIBILITY)


class WizardEngine:
    """Controller for one user's pass through the wizard.

    Args:
        analyzer: Extraction, strategy and drafting service.
        store: Persistence bridge for the payment round-trip. Defaults to an
            in-memory store.
        settings: Application settings. Defaults to Settings().
        catalog: Grounds catalogue. Defaults to the packaged YAML.
        renderer: PDF renderer for the export actions.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        store: CaseStore | None = None,
        settings: Settings | None = None,
        catalog: GroundsCatalog | None = None,
        renderer: LetterRenderer | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._analyzer = analyzer
        self._store = store if store is not None else InMemoryCaseStore()
        self._catalog = catalog or load_catalog(self._settings.wizard.grounds_path)
        self._renderer = renderer or LetterRenderer()
        self._gate_ctx = GateContext(config=self._settings.wizard, catalog=self._catalog)
        self._listeners: list[ScreenListener] = []

        self.case = CaseRecord()
        self.state = WizardState()
        self.last_error: str | None = None
        self.red_flag: RedFlagReason | None = None
        self.forced_stop = False

    # -- read side -----------------------------------------------------------

    @property
    def current(self) -> ScreenId:
        return self.state.current

    @property
    def history(self) -> tuple[ScreenId, ...]:
        return self.state.history

    @property
    def catalog(self) -> GroundsCatalog:
        return self._catalog

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def can_go_back(self) -> bool:
        return bool(self.state.history) and can_go_back_from(self.state.current)

    def gate_error(self) -> str | None:
        """Current screen's gate message, re-evaluated on every call."""
        return evaluate_gate(self.state.current, self.case.answers, self._gate_ctx)

    def can_continue(self) -> bool:
        return self.state.current in CONTINUE_SCREENS and self.gate_error() is None

    def subscribe(self, listener: ScreenListener) -> None:
        """Register a reaction to screen changes (e.g. scroll to top)."""
        self._listeners.append(listener)

    # -- navigation ----------------------------------------------------------

    def navigate_to(self, target: ScreenId | str) -> WizardState:
        """Push the current screen onto the history and show ``target``."""
        return self._apply(Navigate(ScreenId(target)))

    def go_back(self) -> WizardState:
        return self._apply(Back())

    def reset(self) -> WizardState:
        """Start over: empty case, cleared storage, back to the disclaimer."""
        self._store.clear()
        self.case = CaseRecord()
        self.last_error = None
        self.red_flag = None
        self.forced_stop = False
        return self._apply(Reset())

    def reload(self) -> WizardState:
        """The only action offered on the configuration error screen."""
        return self.reset()

    def _apply(self, event: NavigationEvent) -> WizardState:
        previous = self.state.current
        self.state = reduce(self.state, event)
        if self.state.current is not previous:
            logger.info("Screen %s -> %s", previous, self.state.current)
            for listener in self._listeners:
                listener(self.state)
        return self.state

    def _move(self, target: ScreenId) -> None:
        """Follow an edge of the transition table.

        Leaving a computed or terminal screen seals the history so the user
        cannot rewind back through it.
        """
        source = self.state.current
        if not is_allowed(source, target):
            raise ValueError(f"Transition {source} -> {target} is not allowed")
        if target is ScreenId.RED_FLAG_PAUSE:
            self.red_flag = red_flag_reason(source, self.case)
        if can_go_back_from(source):
            self._apply(Navigate(target))
        else:
            self._apply(Restore(target))
        if target is ScreenId.RESULT:
            self._on_result()

    def _require(self, *screens: ScreenId) -> None:
        current = self.state.current
        if current in screens:
            return
        if SCREEN_ROLES[current] is ScreenRole.COMPUTED:
            raise ScanInProgressError(f"Waiting on {current}; no input accepted")
        expected = ", ".join(s.value for s in screens)
        raise ValueError(f"Expected screen {expected}, current is {current}")

    def _require_input_screen(self) -> None:
        role = SCREEN_ROLES[self.state.current]
        if role is ScreenRole.COMPUTED:
            raise ScanInProgressError(f"Waiting on {self.state.current}; no input accepted")
        if role is ScreenRole.TERMINAL:
            raise ValueError(f"Screen {self.state.current} accepts no answers")

    # -- answers -------------------------------------------------------------

    def set_bool(self, question_id: str, value: bool) -> None:
        self._require_input_screen()
        self.case.answers.set_bool(question_id, value)

    def set_text(self, question_id: str, value: str) -> None:
        self._require_input_screen()
        self.case.answers.set_text(question_id, value)

    def toggle_option(self, question_id: str, option: str) -> bool:
        """Toggle a multi-select option; returns True if the selection changed."""
        self._require_input_screen()
        if question_id == q.PRIVATE_GROUNDS:
            allowed = self._catalog.private_ground_ids()
            maximum: int | None = self._settings.wizard.max_grounds
        elif question_id == q.COUNCIL_GROUNDS:
            category = self.case.answers.get_text(q.CONTRAVENTION_CATEGORY)
            allowed = self._catalog.council_ground_ids(category)
            maximum = None
        else:
            raise ValueError(f"{question_id!r} is not a multi-select question")
        if option not in allowed:
            raise ValueError(f"Unknown option {option!r} for {question_id!r}")
        return self.case.answers.toggle(question_id, option, maximum)

    # -- transitions ---------------------------------------------------------

    async def continue_(self) -> ScreenId:
        """Advance a gated input screen if, and only if, its gate holds."""
        self._require_input_screen()
        screen = self.state.current
        if screen not in CONTINUE_SCREENS:
            raise ValueError(f"Screen {screen} has no continue action")
        error = self.gate_error()
        if error is not None:
            logger.debug("Gate on %s blocked: %s", screen, error)
            return screen
        target = route_continue(screen, self.case)
        if target is ScreenId.DRAFTING:
            await self._draft()
        else:
            self._move(target)
        return self.state.current

    async def choose(self, choice: bool) -> ScreenId:
        """Answer the yes/no question on the current screen."""
        screen = self.state.current
        question_id = q.BINARY_QUESTIONS.get(screen)
        if question_id is None:
            self._require_input_screen()
            raise ValueError(f"Screen {screen} is not a yes/no question")

        previous = self.case.answers.get_bool(question_id)
        self.case.answers.set_bool(question_id, choice)
        try:
            target = route_binary_choice(screen, choice, self.case)
            if target is not screen and not is_allowed(screen, target):
                raise ValueError(f"Transition {screen} -> {target} is not allowed")
        except ValueError:
            if previous is None:
                self.case.answers.discard(question_id)
            else:
                self.case.answers.set_bool(question_id, previous)
            raise

        if target is screen:
            # Evidence not reviewed: hold here until it is.
            self.forced_stop = True
            return screen
        self.forced_stop = False
        if target is ScreenId.ANALYZING:
            await self._strategize()
        elif target is ScreenId.DRAFTING:
            await self._draft()
        else:
            self._move(target)
        return self.state.current

    def select_category(self, category: str) -> ScreenId:
        self._require(ScreenId.CONTRAVENTION_SELECT)
        if category not in self._catalog.council:
            raise ValueError(f"Unknown contravention category: {category!r}")
        if self.case.answers.get_text(q.CONTRAVENTION_CATEGORY) != category:
            self.case.answers.discard(q.COUNCIL_GROUNDS)
        self.case.answers.set_text(q.CONTRAVENTION_CATEGORY, category)
        self._move(route_category(category))
        return self.state.current

    def retry_scan(self) -> ScreenId:
        self._require(ScreenId.DATA_INCOMPLETE)
        self._move(ScreenId.UPLOAD)
        return self.state.current

    # -- analyzer calls ------------------------------------------------------

    async def upload(self, image: bytes, mime_type: str) -> ScreenId:
        """Scan a photographed notice and route on what it says."""
        self._require(ScreenId.UPLOAD)
        error = validate_image(image, mime_type)
        if error is not None:
            self.last_error = error
            return self.state.current

        self.last_error = None
        self._move(ScreenId.ANALYZING)
        try:
            notice = await self._analyzer.extract(image, mime_type)
        except AnalyzerConfigError as exc:
            self._config_failure(exc)
            return self.state.current
        except Exception:
            logger.exception("Notice extraction failed")
            self._recover(SCAN_FAILED_MESSAGE)
            return self.state.current

        # A fresh scan restarts the questionnaire; only the disclaimer stands.
        answers = Answers()
        for key in _ACKNOWLEDGEMENTS:
            value = self.case.answers.get_bool(key)
            if value is not None:
                answers.set_bool(key, value)
        self.case = CaseRecord(notice=notice, answers=answers)

        threshold = self._settings.wizard.confidence_threshold
        self._move(route_after_extraction(notice, self.case.answers, threshold))
        return self.state.current

    async def _strategize(self) -> None:
        notice = self._notice_or_raise()
        self._move(ScreenId.ANALYZING)
        try:
            strategy = await self._analyzer.strategize(notice, self.case.answers)
        except AnalyzerConfigError as exc:
            self._config_failure(exc)
            return
        except Exception:
            logger.exception("Strategy generation failed")
            self._recover(DRAFT_FAILED_MESSAGE)
            return
        self.case.strategy = strategy
        self.case.answers.set_bool(q.STRATEGY_AGREED, False)
        self._move(ScreenId.STRATEGY_PROPOSAL)

    async def _draft(self) -> None:
        notice = self._notice_or_raise()
        self._move(ScreenId.DRAFTING)
        try:
            letter = await self._analyzer.draft(notice, self.case.answers)
        except AnalyzerConfigError as exc:
            self._config_failure(exc)
            return
        except Exception:
            logger.exception("Letter drafting failed")
            self._recover(DRAFT_FAILED_MESSAGE)
            return
        self.case.letter = letter
        self._move(ScreenId.RESULT)

    def _notice_or_raise(self) -> NoticeFacts:
        if self.case.notice is None:
            raise ValueError("No scanned notice on this case")
        return self.case.notice

    def _recover(self, message: str) -> None:
        self.last_error = message
        self._move(ScreenId.UPLOAD)

    def _config_failure(self, exc: AnalyzerConfigError) -> None:
        logger.error("Analyzer configuration error: %s", exc)
        self.last_error = CONFIG_FAILED_MESSAGE
        self._move(ScreenId.CONFIG_ERROR)

    # -- result, payment and export -------------------------------------------

    def _on_result(self) -> None:
        if not self._settings.payment.require_payment:
            self.case.unlocked = True
        if not self.case.unlocked:
            self._store.save(self.case)

    def checkout_url(self) -> str:
        self._require(ScreenId.RESULT)
        return checkout_url(self.case, self._settings.payment)

    def handle_payment_return(self, url: str) -> str | None:
        """Restore the saved case after a successful checkout.

        Returns the URL with the payment parameter removed, or None when the
        URL carries no success signal (nothing to do).

        Raises:
            ScanInProgressError: If an analyzer call is still pending.
        """
        payment = self._settings.payment
        if not is_payment_success(url, payment):
            return None
        if SCREEN_ROLES[self.state.current] is ScreenRole.COMPUTED:
            raise ScanInProgressError(
                f"Waiting on {self.state.current}; retry the payment return shortly"
            )
        saved = self._store.load()
        if saved is None:
            logger.warning("Payment confirmed but no saved case to restore")
            saved = CaseRecord()
        saved.unlocked = True
        self.case = saved
        self.last_error = None
        self.red_flag = None
        self.forced_stop = False
        self._apply(Restore(ScreenId.RESULT))
        return strip_payment_param(url, payment)

    def preview_letter(self, document: LetterDocument = LetterDocument.LETTER) -> str | None:
        """Letter text as shown on the result screen; truncated while locked."""
        if self.state.current is not ScreenId.RESULT or self.case.letter is None:
            return None
        try:
            text = document_text(self.case.letter, document)
        except KeyError:
            return None
        if self.case.unlocked:
            return text
        return preview_text(text, self._settings.wizard.preview_lines)

    def _unlocked_letter(self) -> LetterBundle:
        if self.state.current is not ScreenId.RESULT:
            raise ExportUnavailableError("Export is only available on the result screen")
        if not self.case.unlocked:
            raise ExportUnavailableError("Unlock the letter before exporting it")
        if self.case.letter is None:
            raise ExportUnavailableError("No letter has been drafted")
        return self.case.letter

    def export(self, document: LetterDocument = LetterDocument.LETTER) -> ExportedDocument:
        """Render a document to PDF. Does not change wizard state."""
        letter = self._unlocked_letter()
        try:
            return self._renderer.export(letter, document)
        except KeyError as exc:
            raise ExportUnavailableError(str(exc)) from exc

    def copy(
        self,
        clipboard: Callable[[str], None],
        document: LetterDocument = LetterDocument.LETTER,
    ) -> None:
        """Hand a document's text to the clipboard. Does not change wizard state."""
        letter = self._unlocked_letter()
        try:
            clipboard(document_text(letter, document))
        except KeyError as exc:
            raise ExportUnavailableError(str(exc)) from exc
