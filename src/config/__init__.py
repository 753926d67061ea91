"""Grader configuration."""
from config.loader import (
    ConfigLoader,
    get_config,
    get_input_path,
    get_feedback_path,
    get_summary_env_var,
    get_report_title,
    get_conformance_rules,
    get_comment_detection,
)

__all__ = [
    "ConfigLoader",
    "get_config",
    "get_input_path",
    "get_feedback_path",
    "get_summary_env_var",
    "get_report_title",
    "get_conformance_rules",
    "get_comment_detection",
]
