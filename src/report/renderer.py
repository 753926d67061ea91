"""Markdown rendering for grading reports."""
from __future__ import annotations

from models.report import MAX_SCORE, Report

TABLE_HEADER = (
    "| Status | Category | Score | Feedback |\n"
    "| :---: | :--- | :--- | :--- |"
)


def _cell(text: str) -> str:
    # Pipes and newlines would break the table row.
    return text.replace("|", "\\|").replace("\n", " ")


def render_rows(report: Report) -> list[str]:
    if report.short_circuit_message:
        return [f"| ❌ | **Submission** | 0/{MAX_SCORE} pts | {_cell(report.short_circuit_message)} |"]

    rows = [
        f"| {row.icon} | **{row.name}** | {row.earned}/{row.max} pts | {_cell(row.message)} |"
        for row in report.rows
    ]
    if report.bonus is not None:
        rows.append(f"| 🌟 | **Bonus** | - | {_cell(report.bonus.message)} |")
    return rows


def render_markdown(report: Report, title: str = "HTML Fan Page") -> str:
    """Render the report as the markdown summary posted to CI."""
    rows = "\n".join(render_rows(report))
    return (
        f"\n# 📝 Grading Report: {title}\n\n"
        f"{TABLE_HEADER}\n"
        f"{rows}\n\n"
        f"### 🏆 Total Score: {report.total} / {report.max_score}\n"
    )
