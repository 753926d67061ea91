"""Output sinks for the rendered report.

Three sinks are written on every non-fatal run: the CI step summary (only
when its environment variable is set), the feedback markdown file, and
stdout.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, TextIO

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_SUMMARY_ENV_VAR = "GITHUB_STEP_SUMMARY"

FATAL_MISSING_TEMPLATE = (
    "## ❌ FATAL ERROR\n\n"
    "Could not find `{name}`. Did you name your file correctly?"
)


def summary_path(env_var: str = DEFAULT_SUMMARY_ENV_VAR) -> Optional[Path]:
    value = os.getenv(env_var)
    return Path(value) if value else None


def append_step_summary(markdown: str, env_var: str = DEFAULT_SUMMARY_ENV_VAR) -> bool:
    """Append to the CI summary file. Returns False when the variable is unset."""
    path = summary_path(env_var)
    if path is None:
        logger.debug("step_summary_skipped", env_var=env_var)
        return False
    with open(path, "a", encoding="utf-8") as f:
        f.write(markdown)
    logger.info("step_summary_written", path=str(path))
    return True


def write_feedback_file(markdown: str, path: str | Path) -> Path:
    output_file = Path(path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(markdown, encoding="utf-8")
    logger.info("report_written", path=str(output_file))
    return output_file


def echo(markdown: str, stream: Optional[TextIO] = None) -> None:
    print(markdown, file=stream or sys.stdout)


def publish(markdown: str, feedback_path: str | Path, env_var: str = DEFAULT_SUMMARY_ENV_VAR) -> None:
    """Write the report to every sink."""
    append_step_summary(markdown, env_var)
    write_feedback_file(markdown, feedback_path)
    echo(markdown)


def publish_missing_submission(input_path: str | Path, env_var: str = DEFAULT_SUMMARY_ENV_VAR) -> None:
    """Fatal path: only the step summary gets a note."""
    append_step_summary(FATAL_MISSING_TEMPLATE.format(name=Path(input_path).name), env_var)
