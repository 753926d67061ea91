"""Informational bonus for a custom page title. Never scored."""
from __future__ import annotations

from typing import Optional

from models.report import BonusNote
from models.submission import Submission, SubmissionState

PLACEHOLDER_TITLES = frozenset({"", "document", "title"})


def detect_bonus(submission: Submission, state: SubmissionState) -> Optional[BonusNote]:
    if state in (SubmissionState.DRAFT, SubmissionState.UNSUBMITTED):
        return None
    title = submission.document.title()
    if title.lower() in PLACEHOLDER_TITLES:
        return None
    return BonusNote(title=title, message=f'Custom page title set: "{title}". Nice touch!')
