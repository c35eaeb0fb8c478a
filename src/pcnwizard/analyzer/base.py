"""Analyzer contract consumed by the wizard engine."""

from __future__ import annotations

import abc

from pcnwizard.wizard.answers import Answers
from pcnwizard.wizard.models import LetterBundle, NoticeFacts, Strategy


class Analyzer(abc.ABC):
    """Black-box service behind the two suspending wizard screens.

    Implementations raise :class:`pcnwizard.core.errors.AnalyzerError` on
    transport failure or a response outside the schema, and
    :class:`pcnwizard.core.errors.AnalyzerConfigError` when they cannot run.
    """

    @abc.abstractmethod
    async def extract(self, image: bytes, mime_type: str) -> NoticeFacts:
        """Read the fields of a photographed notice."""

    @abc.abstractmethod
    async def strategize(self, facts: NoticeFacts, answers: Answers) -> Strategy:
        """Summarise the plan for contesting the notice."""

    @abc.abstractmethod
    async def draft(self, facts: NoticeFacts, answers: Answers) -> LetterBundle:
        """Draft the letter (and SAR where applicable)."""
