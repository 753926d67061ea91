"""Pydantic models for rubric scores and the final report."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.submission import SubmissionState

PASS_THRESHOLD = 8
MAX_SCORE = 12
CATEGORY_MAX = 3


class CategoryScore(BaseModel):
    """Score for one rubric category."""
    model_config = ConfigDict(frozen=True)

    name: str
    earned: int = Field(ge=0)
    max: int = CATEGORY_MAX
    message: str

    @model_validator(mode="after")
    def _earned_within_max(self) -> CategoryScore:
        if self.earned > self.max:
            raise ValueError(f"{self.name}: earned {self.earned} exceeds max {self.max}")
        return self

    @property
    def icon(self) -> str:
        if self.earned == self.max:
            return "✅"
        return "⚠️" if self.earned > 0 else "❌"


class BonusNote(BaseModel):
    """Unscored informational row."""
    model_config = ConfigDict(frozen=True)

    title: str
    message: str


class Report(BaseModel):
    """Final grading report. Built once by the aggregator."""
    model_config = ConfigDict(frozen=True)

    state: SubmissionState
    rows: list[CategoryScore] = Field(default_factory=list)
    bonus: Optional[BonusNote] = None
    total: int = 0
    max_score: int = MAX_SCORE
    pass_threshold: int = PASS_THRESHOLD
    # Set only for the UNSUBMITTED short-circuit row
    short_circuit_message: str = ""

    @property
    def passed(self) -> bool:
        return self.total >= self.pass_threshold

    def to_summary(self) -> dict:
        """Flat summary used for logging."""
        return {
            "state": self.state.value,
            "total": self.total,
            "max_score": self.max_score,
            "passed": self.passed,
            "categories": {row.name: row.earned for row in self.rows},
        }
