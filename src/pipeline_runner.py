"""Pipeline runner for a single grading run.

Loads the submission, grades it, and publishes the report, logging each
step the way the CLI reports progress.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from models.diagnostics import Severity
from models.report import Report
from report.renderer import render_markdown
from report.sinks import DEFAULT_SUMMARY_ENV_VAR, publish
from scoring.engine import grade_markup
from utils.error_handler import SubmissionNotFoundError, SubmissionReadError

logger = logging.getLogger(__name__)


class PipelineRunner:
    """Grading pipeline orchestration."""

    def __init__(
        self,
        input_path: str,
        feedback_path: str = "grading-feedback.md",
        summary_env_var: str = DEFAULT_SUMMARY_ENV_VAR,
        report_title: str = "HTML Fan Page",
        rules: Optional[dict[str, Severity]] = None,
        comment_detection: str = "lexical",
    ):
        self.input_path = Path(input_path)
        self.feedback_path = Path(feedback_path)
        self.summary_env_var = summary_env_var
        self.report_title = report_title
        self.rules = rules
        self.comment_detection = comment_detection

    def log_plan(self, steps: list[str]) -> None:
        """Log the pipeline plan."""
        logger.info("[plan] %s", steps[0] if steps else "Pipeline")
        for step in steps[1:]:
            logger.info("[plan] - %s", step)

    def log_run(self, **kwargs) -> None:
        """Log run parameters."""
        params = " ".join(f"{k}={v}" for k, v in kwargs.items())
        logger.info("[run] input=%s output=%s %s", str(self.input_path), str(self.feedback_path), params)

    def log_step(self, step_name: str, **kwargs) -> None:
        """Log a pipeline step with optional metrics."""
        if kwargs:
            metrics = " ".join(f"{k}={v}" for k, v in kwargs.items())
            logger.info("[%s] %s", step_name, metrics)
        else:
            logger.info("[%s] started", step_name)

    def load_submission(self) -> str:
        """Whole-file UTF-8 read of the submission.

        Raises:
            SubmissionNotFoundError: file is missing
            SubmissionReadError: file is not valid UTF-8 or unreadable
        """
        if not self.input_path.is_file():
            raise SubmissionNotFoundError(self.input_path)
        try:
            return self.input_path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise SubmissionReadError(self.input_path, str(e)) from e

    def grade(self, raw_text: str) -> Report:
        return grade_markup(
            raw_text,
            rules=self.rules,
            comment_detection=self.comment_detection,
        )

    def run(self) -> tuple[Report, int]:
        """Run load -> grade -> publish.

        Returns:
            (report, exit_code) where exit_code is 0 only for a passing score
        """
        self.log_plan([
            "HTML Grading Run",
            "Load submission",
            "Check conformance and placement",
            "Classify submission and score rubric",
            "Publish report",
        ])
        self.log_run(summary_env=self.summary_env_var, comments=self.comment_detection)

        raw_text = self.load_submission()
        self.log_step("load", chars=len(raw_text))

        report = self.grade(raw_text)
        self.log_step("grade", state=report.state.value, total=report.total, passed=report.passed)

        markdown = render_markdown(report, title=self.report_title)
        publish(markdown, self.feedback_path, self.summary_env_var)
        self.log_step("publish", feedback=str(self.feedback_path))

        return report, 0 if report.passed else 1


def create_runner(
    input_path: str,
    feedback_path: str = "grading-feedback.md",
    summary_env_var: str = DEFAULT_SUMMARY_ENV_VAR,
    report_title: str = "HTML Fan Page",
    rules: Optional[dict[str, Severity]] = None,
    comment_detection: str = "lexical",
) -> PipelineRunner:
    """Factory function to create a PipelineRunner."""
    return PipelineRunner(
        input_path=input_path,
        feedback_path=feedback_path,
        summary_env_var=summary_env_var,
        report_title=report_title,
        rules=rules,
        comment_detection=comment_detection,
    )
