"""Grading engine: one pass from raw markup to a Report.

Pure function of its input. The order of steps is fixed:
parse and check, classify, score Syntax, then the remaining categories,
then aggregate.
"""
from __future__ import annotations

from typing import Optional

import structlog

from checks.conformance import check_conformance, rejected_markup_diagnostic, resolve_rules
from checks.placement import check_placement
from models.diagnostics import Severity, critical_only
from models.report import Report
from models.submission import Submission, SubmissionState
from report.aggregator import build_report, build_unsubmitted_report
from scoring.bonus import detect_bonus
from scoring.classifier import classify_submission
from scoring.scorers import (
    ScoringContext,
    score_content,
    score_hygiene,
    score_structure,
    score_syntax,
)

logger = structlog.get_logger(__name__)


def grade_markup(
    raw_text: str,
    rules: Optional[dict[str, Severity]] = None,
    comment_detection: str = "lexical",
) -> Report:
    """Grade one HTML submission.

    Args:
        raw_text: Full submission text
        rules: Conformance rule severities (defaults to the fixed rule set)
        comment_detection: "lexical" or "token" comment scan for Hygiene

    Returns:
        Frozen Report with rows in Structure, Hygiene, Content, Syntax order
    """
    submission = Submission.from_markup(raw_text)
    rules = rules if rules is not None else resolve_rules()
    diagnostics = check_conformance(raw_text, rules)
    if submission.document.rejected:
        diagnostics.append(rejected_markup_diagnostic(submission.document.rejection_reason))
    critical = critical_only(diagnostics)
    placement_defect = check_placement(submission.document)

    logger.info(
        "submission_checked",
        raw_chars=len(raw_text),
        visible_chars=submission.visible_text_length,
        diagnostics=len(diagnostics),
        critical=len(critical),
        placement_defect=placement_defect,
    )
    for diagnostic in critical:
        logger.debug("critical_diagnostic", rule=diagnostic.rule, message=diagnostic.message, line=diagnostic.line)

    state = classify_submission(submission, placement_defect, critical)
    if state == SubmissionState.UNSUBMITTED:
        return build_unsubmitted_report()

    ctx = ScoringContext(
        submission=submission,
        state=state,
        critical=critical,
        placement_defect=placement_defect,
        comment_detection=comment_detection,
    )
    syntax = score_syntax(ctx)
    ctx = ctx.with_syntax(syntax)

    structure = score_structure(ctx)
    hygiene = score_hygiene(ctx)
    content = score_content(ctx)

    return build_report(
        state=state,
        rows=[structure, hygiene, content, syntax],
        bonus=detect_bonus(submission, state),
    )
