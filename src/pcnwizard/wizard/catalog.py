"""Grounds catalogue loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

_DEFAULT_GROUNDS_PATH = Path(__file__).resolve().parents[1] / "data" / "grounds.yml"

OTHER_CATEGORY = "OTHER"


class Ground(BaseModel):
    """A single selectable basis for contesting a notice."""

    id: str
    label: str
    plain: str = ""


class SourceReference(BaseModel):
    id: str
    title: str


class GroundsCatalog(BaseModel):
    """Everything the selection screens and prompts draw options from."""

    council: dict[str, list[Ground]] = Field(default_factory=dict)
    private: list[Ground] = Field(default_factory=list)
    sources: dict[str, list[SourceReference]] = Field(default_factory=dict)
    formal_signal_keywords: list[str] = Field(default_factory=list)
    court_artefact_keywords: list[str] = Field(default_factory=list)

    @property
    def categories(self) -> list[str]:
        return list(self.council)

    def council_grounds(self, category: str) -> list[Ground]:
        if category not in self.council:
            raise KeyError(f"Unknown contravention category: {category!r}")
        return self.council[category]

    def council_ground_ids(self, category: str) -> set[str]:
        return {g.id for g in self.council_grounds(category)}

    def private_ground_ids(self) -> set[str]:
        return {g.id for g in self.private}


def _parse_grounds(items: list[dict[str, Any]] | None) -> list[Ground]:
    return [Ground(**item) for item in items or []]


def load_catalog(path: str | Path | None = None) -> GroundsCatalog:
    """Load the grounds catalogue, defaulting to the packaged YAML file."""
    grounds_path = Path(path) if path else _DEFAULT_GROUNDS_PATH
    with open(grounds_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    return GroundsCatalog(
        council={
            category: _parse_grounds(items)
            for category, items in (data.get("council") or {}).items()
        },
        private=_parse_grounds(data.get("private")),
        sources={
            kind: [SourceReference(**ref) for ref in refs or []]
            for kind, refs in (data.get("sources") or {}).items()
        },
        formal_signal_keywords=data.get("formal_signal_keywords", []),
        court_artefact_keywords=data.get("court_artefact_keywords", []),
    )
