"""Submission state models."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from parsers.document_model import DocumentModel


class SubmissionState(str, Enum):
    """Overall state of a submission, exactly one per run.

    - UNSUBMITTED: almost no text and no block elements (short-circuits scoring)
    - DRAFT: substantial prose but no markup elements
    - SYNTAX_BROKEN: placement defect or critical diagnostics
    - NORMAL: none of the above
    """
    UNSUBMITTED = "unsubmitted"
    DRAFT = "draft"
    SYNTAX_BROKEN = "syntax_broken"
    NORMAL = "normal"


class Submission(BaseModel):
    """A loaded submission. Never mutated after load."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raw_text: str
    document: DocumentModel
    visible_text_length: int

    @classmethod
    def from_markup(cls, raw_text: str) -> Submission:
        document = DocumentModel(raw_text)
        return cls(
            raw_text=raw_text,
            document=document,
            visible_text_length=len(document.visible_text()),
        )
