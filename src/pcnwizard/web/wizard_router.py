"""FastAPI router exposing the contest wizard, one engine per session."""

from __future__ import annotations

import base64
import binascii
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from pcnwizard.core.errors import ExportUnavailableError, ScanInProgressError
from pcnwizard.core.types import LetterDocument, RedFlagReason
from pcnwizard.wizard import questions as q
from pcnwizard.wizard.engine import WizardEngine
from pcnwizard.wizard.gates import count_words
from pcnwizard.wizard.screens import ScreenId

router = APIRouter()


# --- Request/Response models ---


class BoolAnswerRequest(BaseModel):
    question_id: str
    value: bool


class TextAnswerRequest(BaseModel):
    question_id: str
    value: str


class ToggleRequest(BaseModel):
    question_id: str
    option: str


class ChoiceRequest(BaseModel):
    choice: bool


class CategoryRequest(BaseModel):
    category: str


class UploadRequest(BaseModel):
    image_base64: str
    mime_type: str


class WizardView(BaseModel):
    session_id: str
    screen: str
    history: list[str]
    can_go_back: bool
    can_continue: bool
    gate_error: str | None = None
    last_error: str | None = None
    forced_stop_message: str | None = None
    red_flag_reason: str | None = None
    support_email: str | None = None
    prompt: str | None = None
    options: list[dict[str, Any]] = Field(default_factory=list)
    answers: dict[str, str] = Field(default_factory=dict)
    notice: dict[str, Any] | None = None
    strategy: dict[str, Any] | None = None
    word_count: int | None = None
    word_limit: int | None = None
    unlocked: bool = False


class ToggleResponse(BaseModel):
    changed: bool
    view: WizardView


class LetterPreview(BaseModel):
    document: str
    text: str | None
    unlocked: bool


class CheckoutResponse(BaseModel):
    url: str


# --- Helpers ---


def _engine(request: Request, session_id: str) -> WizardEngine:
    manager = request.app.state.wizard_sessions
    try:
        return manager.get_session(session_id).engine
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@contextmanager
def _engine_errors() -> Iterator[None]:
    try:
        yield
    except ScanInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ExportUnavailableError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _options(engine: WizardEngine) -> list[dict[str, Any]]:
    catalog = engine.catalog
    screen = engine.current
    if screen is ScreenId.CONTRAVENTION_SELECT:
        return [{"id": category, "label": category} for category in catalog.categories]
    if screen is ScreenId.DEFENCE_SELECT:
        category = engine.case.answers.get_text(q.CONTRAVENTION_CATEGORY)
        if category not in catalog.council:
            return []
        return [g.model_dump() for g in catalog.council_grounds(category)]
    if screen is ScreenId.PRIVATE_GROUNDS_SELECT:
        return [g.model_dump() for g in catalog.private]
    return []


def _view(session_id: str, engine: WizardEngine) -> WizardView:
    case = engine.case
    screen = engine.current
    view = WizardView(
        session_id=session_id,
        screen=screen.value,
        history=[s.value for s in engine.history],
        can_go_back=engine.can_go_back,
        can_continue=engine.can_continue(),
        gate_error=engine.gate_error(),
        last_error=engine.last_error,
        prompt=q.PROMPTS.get(screen),
        options=_options(engine),
        answers=case.answers.to_wire(),
        notice=case.notice.model_dump(mode="json", by_alias=True) if case.notice else None,
        strategy=case.strategy.model_dump(by_alias=True) if case.strategy else None,
        unlocked=case.unlocked,
    )
    if engine.forced_stop:
        view.forced_stop_message = q.EVIDENCE_FORCED_STOP_MESSAGE
    if screen is ScreenId.RED_FLAG_PAUSE and engine.red_flag is not None:
        view.red_flag_reason = engine.red_flag.value
        # No support contact at the court stage.
        if engine.red_flag is not RedFlagReason.COURT:
            view.support_email = engine.settings.wizard.support_email
    if screen is ScreenId.EXPLANATION_INPUT:
        view.word_count = count_words(case.answers.get_text(q.USER_EXPLANATION))
        view.word_limit = engine.settings.wizard.max_explanation_words
    return view


# --- Session endpoints ---


@router.post("/api/wizard/sessions")
async def start_session(request: Request) -> WizardView:
    session = request.app.state.wizard_sessions.create_session()
    return _view(session.session_id, session.engine)


@router.get("/api/wizard/sessions/{session_id}")
async def get_state(session_id: str, request: Request) -> WizardView:
    return _view(session_id, _engine(request, session_id))


@router.delete("/api/wizard/sessions/{session_id}", status_code=204)
async def end_session(session_id: str, request: Request) -> Response:
    if not request.app.state.wizard_sessions.end_session(session_id):
        raise HTTPException(status_code=404, detail=f"Wizard session {session_id!r} not found")
    return Response(status_code=204)


@router.get("/wizard/{session_id}", response_model=None)
async def payment_return(session_id: str, request: Request) -> WizardView | RedirectResponse:
    """Landing URL after checkout.

    With the success parameter the saved case is restored on the result
    screen and the browser is redirected to the same URL without it.
    """
    engine = _engine(request, session_id)
    with _engine_errors():
        stripped = engine.handle_payment_return(str(request.url))
    if stripped is not None:
        return RedirectResponse(url=stripped, status_code=303)
    return _view(session_id, engine)


# --- Answer endpoints ---


@router.post("/api/wizard/sessions/{session_id}/answers/bool")
async def answer_bool(session_id: str, body: BoolAnswerRequest, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    with _engine_errors():
        engine.set_bool(body.question_id, body.value)
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/answers/text")
async def answer_text(session_id: str, body: TextAnswerRequest, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    with _engine_errors():
        engine.set_text(body.question_id, body.value)
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/answers/toggle")
async def toggle_option(session_id: str, body: ToggleRequest, request: Request) -> ToggleResponse:
    engine = _engine(request, session_id)
    with _engine_errors():
        changed = engine.toggle_option(body.question_id, body.option)
    return ToggleResponse(changed=changed, view=_view(session_id, engine))


# --- Transition endpoints ---


@router.post("/api/wizard/sessions/{session_id}/continue")
async def continue_screen(session_id: str, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    with _engine_errors():
        await engine.continue_()
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/choose")
async def choose(session_id: str, body: ChoiceRequest, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    with _engine_errors():
        await engine.choose(body.choice)
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/category")
async def select_category(session_id: str, body: CategoryRequest, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    with _engine_errors():
        engine.select_category(body.category)
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/back")
async def go_back(session_id: str, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    engine.go_back()
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/reset")
async def reset(session_id: str, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    engine.reset()
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/retry")
async def retry_scan(session_id: str, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    with _engine_errors():
        engine.retry_scan()
    return _view(session_id, engine)


@router.post("/api/wizard/sessions/{session_id}/upload")
async def upload(session_id: str, body: UploadRequest, request: Request) -> WizardView:
    engine = _engine(request, session_id)
    try:
        image = base64.b64decode(body.image_base64, validate=True)
    except binascii.Error as e:
        raise HTTPException(status_code=400, detail=f"Invalid image encoding: {e}")
    with _engine_errors():
        await engine.upload(image, body.mime_type)
    return _view(session_id, engine)


# --- Result endpoints ---


@router.get("/api/wizard/sessions/{session_id}/letter")
async def preview_letter(
    session_id: str,
    request: Request,
    document: LetterDocument = LetterDocument.LETTER,
) -> LetterPreview:
    engine = _engine(request, session_id)
    return LetterPreview(
        document=document.value,
        text=engine.preview_letter(document),
        unlocked=engine.case.unlocked,
    )


@router.get("/api/wizard/sessions/{session_id}/letter/pdf")
async def export_letter(
    session_id: str,
    request: Request,
    document: LetterDocument = LetterDocument.LETTER,
) -> Response:
    """Download a drafted document as PDF."""
    engine = _engine(request, session_id)
    with _engine_errors():
        exported = engine.export(document)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f"attachment; filename={exported.filename}"},
    )


@router.get("/api/wizard/sessions/{session_id}/checkout")
async def checkout(session_id: str, request: Request) -> CheckoutResponse:
    engine = _engine(request, session_id)
    with _engine_errors():
        url = engine.checkout_url()
    return CheckoutResponse(url=url)
