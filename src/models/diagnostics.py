"""Diagnostic models produced by the conformance checker."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """Severity of a conformance rule.

    - OFF: rule disabled, never emitted
    - WARNING: advisory finding, ignored for scoring
    - ERROR: critical finding, read by the scoring engine
    """
    OFF = "off"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """One finding from the structural-validity pass."""
    model_config = ConfigDict(frozen=True)

    rule: str
    message: str
    severity: Severity
    offset: int | None = None
    line: int | None = None
    column: int | None = None

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.ERROR


def critical_only(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    """Return the ERROR subset, preserving order."""
    return [d for d in diagnostics if d.is_critical]
