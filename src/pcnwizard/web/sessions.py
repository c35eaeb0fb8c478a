"""In-memory registry of wizard sessions.

Each browser session owns one :class:`WizardEngine` and its own saved-case
slot, so concurrent users never share a record across the payment redirect.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from pcnwizard.analyzer.base import Analyzer
from pcnwizard.core.config import Settings
from pcnwizard.persistence.store import CaseStore, JsonFileCaseStore
from pcnwizard.wizard.catalog import GroundsCatalog
from pcnwizard.wizard.engine import WizardEngine

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], CaseStore]


class WizardSession(BaseModel):
    """A wizard engine bound to a session id."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    engine: WizardEngine
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_active: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WizardSessionManager:
    """Creates and looks up wizard sessions.

    Args:
        analyzer: Shared analyzer handed to every engine.
        settings: Application settings.
        catalog: Shared grounds catalogue.
        store_factory: Builds the case store for a session id. Defaults to a
            JSON file per session under ``settings.storage.data_dir``.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        settings: Settings,
        catalog: GroundsCatalog,
        store_factory: StoreFactory | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._settings = settings
        self._catalog = catalog
        self._store_factory = store_factory or self._file_store
        self._sessions: dict[str, WizardSession] = {}

    def _file_store(self, session_id: str) -> CaseStore:
        key = f"{self._settings.storage.state_key}-{session_id}"
        return JsonFileCaseStore(self._settings.storage, key=key)

    def create_session(self) -> WizardSession:
        self._evict_idle()
        session_id = str(uuid.uuid4())
        engine = WizardEngine(
            self._analyzer,
            store=self._store_factory(session_id),
            settings=self._settings,
            catalog=self._catalog,
        )
        session = WizardSession(session_id=session_id, engine=engine)
        self._sessions[session_id] = session
        logger.info("Started wizard session %s", session_id)
        return session

    def get_session(self, session_id: str) -> WizardSession:
        """Look up a session and mark it active.

        Raises:
            KeyError: If no session has that id.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Wizard session {session_id!r} not found")
        session.last_active = datetime.now(timezone.utc)
        return session

    def end_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def _evict_idle(self) -> None:
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=self._settings.session_idle_minutes)
        idle = [sid for sid, s in self._sessions.items() if s.last_active < cutoff]
        for session_id in idle:
            del self._sessions[session_id]
        if idle:
            logger.info("Evicted %d idle wizard sessions", len(idle))

    def __len__(self) -> int:
        return len(self._sessions)
