"""Letter renderer for PDF download and clipboard text."""

from __future__ import annotations

from pydantic import BaseModel

from pcnwizard.core.types import DraftType, LetterDocument
from pcnwizard.wizard.models import LetterBundle

_FILENAMES: dict[tuple[DraftType, LetterDocument], str] = {
    (DraftType.PCN_REPRESENTATION, LetterDocument.LETTER): "Appeal",
    (DraftType.PRIVATE_PRE_ACTION_SAR_PACK, LetterDocument.LETTER): "Pre_Action_Response",
    (DraftType.PRIVATE_PRE_ACTION_SAR_PACK, LetterDocument.SAR): "SAR",
    (DraftType.PCN_REPRESENTATION, LetterDocument.SAR): "SAR",
}

# The core PDF fonts only cover latin-1.
_PUNCTUATION = str.maketrans({
    "\u2013": "-",
    "\u2014": "-",
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": "\"",
    "\u201d": "\"",
    "\u2026": "...",
})


class ExportedDocument(BaseModel):
    filename: str
    media_type: str
    content: bytes


def document_text(bundle: LetterBundle, document: LetterDocument) -> str:
    """Text of one document in the bundle.

    Raises:
        KeyError: If the bundle has no such document.
    """
    if document is LetterDocument.LETTER:
        return bundle.letter
    if bundle.sar_letter:
        return bundle.sar_letter
    raise KeyError(f"No {document.value} document in this letter pack")


def preview_text(text: str, visible_lines: int) -> str:
    """First ``visible_lines`` lines of a locked letter."""
    return "\n".join(text.split("\n")[:visible_lines])


def _pdf_safe(text: str) -> str:
    return text.translate(_PUNCTUATION).encode("latin-1", "replace").decode("latin-1")


class LetterRenderer:
    """Renders drafted letters as PDF documents."""

    margin_mm = 20

    def render_pdf(self, text: str) -> bytes:
        """Render letter text as a PDF document using fpdf2."""
        from fpdf import FPDF

        pdf = FPDF()
        pdf.set_margins(self.margin_mm, self.margin_mm, self.margin_mm)
        pdf.set_auto_page_break(auto=True, margin=self.margin_mm)
        pdf.add_page()
        pdf.set_font("Helvetica", "", 11)
        pdf.multi_cell(0, 6, _pdf_safe(text))
        return bytes(pdf.output())

    def export(self, bundle: LetterBundle, document: LetterDocument) -> ExportedDocument:
        text = document_text(bundle, document)
        name = _FILENAMES[(bundle.draft_type, document)]
        return ExportedDocument(
            filename=f"{name}.pdf",
            media_type="application/pdf",
            content=self.render_pdf(text),
        )
