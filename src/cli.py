from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

import structlog
from dotenv import load_dotenv

from checks.conformance import resolve_rules
from config.loader import (
    get_comment_detection,
    get_conformance_rules,
    get_feedback_path,
    get_input_path,
    get_report_title,
    get_summary_env_var,
)
from pipeline_runner import create_runner
from report.sinks import publish_missing_submission
from utils.error_handler import (
    GradingError,
    SubmissionNotFoundError,
    UnexpectedGradingError,
    exit_with_error,
)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="html-grader",
        description="Grade an HTML submission against the fixed four-category rubric",
    )

    parser.add_argument(
        "--input",
        dest="input_path",
        default="",
        help="Path to the submission (default: GRADER_INPUT_PATH or index.html)",
    )
    parser.add_argument(
        "--output",
        dest="feedback_path",
        default="",
        help="Markdown feedback file (default: GRADER_FEEDBACK_PATH or grading-feedback.md)",
    )
    parser.add_argument(
        "--title",
        dest="report_title",
        default="",
        help="Assignment name shown in the report header",
    )
    parser.add_argument(
        "--comment-detection",
        dest="comment_detection",
        choices=["lexical", "token"],
        default="",
        help="How Code Hygiene finds comments: raw-source regex or parsed comment nodes",
    )
    parser.add_argument(
        "--dotenv",
        dest="dotenv_path",
        default=".env",
        help="Path to .env file to load (default: .env in the working directory)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=os.getenv("GRADER_LOG_LEVEL", "WARNING"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    return parser


def configure_logging(level_name: str) -> None:
    """Send stdlib and structlog output to stderr; stdout carries the report."""
    level = getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(level=level, stream=sys.stderr, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def run(
    input_path: str,
    feedback_path: str,
    report_title: str,
    comment_detection: str,
    summary_env_var: str = "GITHUB_STEP_SUMMARY",
) -> int:
    """Grade one submission. Never raises: every failure becomes exit code 1."""
    try:
        runner = create_runner(
            input_path=input_path,
            feedback_path=feedback_path,
            summary_env_var=summary_env_var,
            report_title=report_title,
            rules=resolve_rules(get_conformance_rules()),
            comment_detection=comment_detection,
        )
        _report, code = runner.run()
        return code
    except SubmissionNotFoundError as e:
        try:
            publish_missing_submission(e.path, summary_env_var)
        except OSError as write_error:
            logger.warning("[fatal] could not write step summary: %s", write_error)
        return exit_with_error(e, context="load")
    except GradingError as e:
        return exit_with_error(e, context="grade")
    except Exception as e:
        logger.exception("[fatal] unexpected error")
        return exit_with_error(UnexpectedGradingError(e), context="grade")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    load_dotenv(args.dotenv_path)

    return run(
        input_path=args.input_path or get_input_path(),
        feedback_path=args.feedback_path or get_feedback_path(),
        report_title=args.report_title or get_report_title(),
        comment_detection=args.comment_detection or get_comment_detection(),
        summary_env_var=get_summary_env_var(),
    )


if __name__ == "__main__":
    raise SystemExit(main())
