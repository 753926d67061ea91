"""Submission state classification."""
from __future__ import annotations

import structlog

from models.diagnostics import Diagnostic
from models.submission import Submission, SubmissionState

logger = structlog.get_logger(__name__)

# Visible text strictly shorter than this, with no block element, is unsubmitted.
UNSUBMITTED_MAX_CHARS = 40
# Visible text strictly longer than this, with no block element, is a draft.
DRAFT_MIN_CHARS = 60


def classify_submission(
    submission: Submission,
    placement_defect: bool,
    critical: list[Diagnostic],
) -> SubmissionState:
    """
    Assign exactly one state. First match wins:

    UNSUBMITTED, DRAFT, SYNTAX_BROKEN, NORMAL.

    A non-blank submission whose tree was rejected has no measurable text,
    so it goes straight to SYNTAX_BROKEN.
    """
    length = submission.visible_text_length
    has_block = submission.document.has_block_element()
    unparsed = submission.document.rejected and bool(submission.raw_text.strip())

    if unparsed:
        state = SubmissionState.SYNTAX_BROKEN
    elif length < UNSUBMITTED_MAX_CHARS and not has_block:
        state = SubmissionState.UNSUBMITTED
    elif length > DRAFT_MIN_CHARS and not has_block:
        state = SubmissionState.DRAFT
    elif placement_defect or critical:
        state = SubmissionState.SYNTAX_BROKEN
    else:
        state = SubmissionState.NORMAL

    logger.info(
        "state_classified",
        state=state.value,
        visible_chars=length,
        has_block=has_block,
        placement_defect=placement_defect,
        critical=len(critical),
    )
    return state
