"""Report aggregation: totals and row ordering."""
from __future__ import annotations

from typing import Optional

import structlog

from models.report import BonusNote, CategoryScore, Report
from models.submission import SubmissionState

logger = structlog.get_logger(__name__)

UNSUBMITTED_MESSAGE = (
    "No submission detected: the page has almost no text and no HTML elements. "
    "Add your content and push again."
)


def build_report(
    state: SubmissionState,
    rows: list[CategoryScore],
    bonus: Optional[BonusNote] = None,
) -> Report:
    """Sum earned points and freeze the report. Rows keep insertion order."""
    total = sum(row.earned for row in rows)
    report = Report(state=state, rows=list(rows), bonus=bonus, total=total)
    logger.info("report_built", **report.to_summary())
    return report


def build_unsubmitted_report() -> Report:
    """Short-circuit report: no scorers ran, total is 0."""
    report = Report(
        state=SubmissionState.UNSUBMITTED,
        total=0,
        short_circuit_message=UNSUBMITTED_MESSAGE,
    )
    logger.info("report_built", **report.to_summary())
    return report
