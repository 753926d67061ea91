"""Report aggregation, rendering and output sinks."""
from report.aggregator import build_report, build_unsubmitted_report
from report.renderer import render_markdown
from report.sinks import publish, publish_missing_submission

__all__ = [
    "build_report",
    "build_unsubmitted_report",
    "render_markdown",
    "publish",
    "publish_missing_submission",
]
