"""Data models for the HTML grader."""
from models.diagnostics import Diagnostic, Severity, critical_only
from models.submission import Submission, SubmissionState
from models.report import (
    BonusNote,
    CategoryScore,
    Report,
    CATEGORY_MAX,
    MAX_SCORE,
    PASS_THRESHOLD,
)

__all__ = [
    "Diagnostic",
    "Severity",
    "critical_only",
    "Submission",
    "SubmissionState",
    "BonusNote",
    "CategoryScore",
    "Report",
    "CATEGORY_MAX",
    "MAX_SCORE",
    "PASS_THRESHOLD",
]
