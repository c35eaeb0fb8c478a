"""Case stores: one saved record under a fixed key.

Only ``notice``, ``answers``, ``strategy`` and ``letter`` are persisted. The
unlock flag is never written; it is re-derived from the payment return.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from pcnwizard.core.config import StorageConfig
from pcnwizard.wizard.models import CaseRecord

logger = logging.getLogger(__name__)

_PERSISTED_FIELDS = {"notice", "answers", "strategy", "letter"}


@runtime_checkable
class CaseStore(Protocol):
    """Protocol for saving one case across the payment round-trip."""

    def save(self, case: CaseRecord) -> None: ...

    def load(self) -> CaseRecord | None: ...

    def clear(self) -> None: ...


def dump_case(case: CaseRecord) -> str:
    return case.model_dump_json(include=_PERSISTED_FIELDS, by_alias=True)


def load_case(raw: str) -> CaseRecord | None:
    """Decode a saved record; unreadable records are treated as absent."""
    try:
        data: Any = json.loads(raw)
        return CaseRecord.model_validate(
            {k: v for k, v in data.items() if k in _PERSISTED_FIELDS}
        )
    except (json.JSONDecodeError, AttributeError, ValidationError) as exc:
        logger.warning("Discarding unreadable saved case: %s", exc)
        return None


class InMemoryCaseStore:
    """In-memory store, suitable for tests and single-process sessions."""

    def __init__(self) -> None:
        self._raw: str | None = None

    def save(self, case: CaseRecord) -> None:
        self._raw = dump_case(case)

    def load(self) -> CaseRecord | None:
        if self._raw is None:
            return None
        return load_case(self._raw)

    def clear(self) -> None:
        self._raw = None


class JsonFileCaseStore:
    """Writes the case as JSON to ``<data_dir>/<key>.json``.

    Args:
        config: StorageConfig instance. Defaults to StorageConfig() which
            reads from environment variables.
        key: Override the record key (default: ``config.state_key``).
    """

    def __init__(self, config: StorageConfig | None = None, key: str | None = None) -> None:
        self._config = config or StorageConfig()
        self._dir = Path(self._config.data_dir)
        self._path = self._dir / f"{key or self._config.state_key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def save(self, case: CaseRecord) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        self._path.write_text(dump_case(case), encoding="utf-8")

    def load(self) -> CaseRecord | None:
        if not self._path.exists():
            return None
        return load_case(self._path.read_text(encoding="utf-8"))

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
