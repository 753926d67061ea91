"""Scoring engine for HTML submissions.

This package contains:
- classifier.py: Submission state classification
- scorers.py: The four rubric category scorers
- bonus.py: Unscored custom-title note
- engine.py: Fixed-order orchestration from markup to Report
"""
from scoring.classifier import (
    DRAFT_MIN_CHARS,
    UNSUBMITTED_MAX_CHARS,
    classify_submission,
)
from scoring.scorers import (
    ScoringContext,
    has_comment,
    score_content,
    score_hygiene,
    score_structure,
    score_syntax,
    structural_elements,
)
from scoring.bonus import detect_bonus
from scoring.engine import grade_markup

__all__ = [
    # Classification
    "DRAFT_MIN_CHARS",
    "UNSUBMITTED_MAX_CHARS",
    "classify_submission",
    # Scorers
    "ScoringContext",
    "has_comment",
    "score_content",
    "score_hygiene",
    "score_structure",
    "score_syntax",
    "structural_elements",
    # Bonus
    "detect_bonus",
    # Engine
    "grade_markup",
]
