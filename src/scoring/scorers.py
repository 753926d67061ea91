"""Rubric scorers for the four fixed categories.

Each category is an ordered rule list evaluated top to bottom; the first
rule that applies decides the score and message:

- Syntax & Bugs: draft > placement defect > list content > other critical errors > clean
- Structure & Semantics: draft > syntax gate > element variety tiers
- Content & Planning: draft > title/paragraph/list tiers
- Code Hygiene: comment present or not

Syntax must be scored before Structure, because the Structure gate reads
the Syntax result.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

import structlog

from checks.conformance import find_list_content_defect
from models.diagnostics import Diagnostic
from models.report import CATEGORY_MAX, CategoryScore
from models.submission import Submission, SubmissionState

logger = structlog.get_logger(__name__)

SYNTAX = "Syntax & Bugs"
STRUCTURE = "Structure & Semantics"
CONTENT = "Content & Planning"
HYGIENE = "Code Hygiene"

SYNTAX_MIN = 1

COMMENT_PATTERN = re.compile(r"<!--[\s\S]*?-->")


@dataclass(frozen=True)
class ScoringContext:
    """Everything a scorer may read. Built once per run."""
    submission: Submission
    state: SubmissionState
    critical: list[Diagnostic] = field(default_factory=list)
    placement_defect: bool = False
    comment_detection: str = "lexical"
    syntax: Optional[CategoryScore] = None

    @property
    def is_draft(self) -> bool:
        return self.state == SubmissionState.DRAFT

    def with_syntax(self, syntax: CategoryScore) -> ScoringContext:
        return replace(self, syntax=syntax)


Outcome = tuple[int, str]


@dataclass(frozen=True)
class ScoringRule:
    name: str
    applies: Callable[[ScoringContext], bool]
    outcome: Callable[[ScoringContext], Outcome]


def _always(ctx: ScoringContext) -> bool:
    return True


def evaluate(category: str, rules: list[ScoringRule], ctx: ScoringContext, max_points: int = CATEGORY_MAX) -> CategoryScore:
    """Return the score from the first applicable rule."""
    for rule in rules:
        if rule.applies(ctx):
            earned, message = rule.outcome(ctx)
            logger.debug("category_scored", category=category, rule=rule.name, earned=earned)
            return CategoryScore(name=category, earned=earned, max=max_points, message=message)
    raise LookupError(f"No scoring rule applied for {category}")


# -- Syntax & Bugs ------------------------------------------------------------

def _syntax_generic(ctx: ScoringContext) -> Outcome:
    first = ctx.critical[0]
    count = len(ctx.critical)
    noun = "error" if count == 1 else "errors"
    return SYNTAX_MIN, f"Found {count} critical {noun} (first: `{first.message}`). Check your tags open and close in order."


SYNTAX_RULES = [
    ScoringRule(
        "draft",
        lambda ctx: ctx.is_draft,
        lambda ctx: (SYNTAX_MIN, "Draft detected: your page is plain text with no HTML tags yet."),
    ),
    ScoringRule(
        "placement",
        lambda ctx: ctx.placement_defect,
        lambda ctx: (
            SYNTAX_MIN,
            "Your `<h1>` starts before `<body>`. Move your headings and content inside `<body>`.",
        ),
    ),
    ScoringRule(
        "list_content",
        lambda ctx: find_list_content_defect(ctx.critical) is not None,
        lambda ctx: (
            SYNTAX_MIN,
            "Text found directly inside a list. Every list entry must be wrapped in `<li>` tags.",
        ),
    ),
    ScoringRule("critical", lambda ctx: bool(ctx.critical), _syntax_generic),
    ScoringRule(
        "clean",
        _always,
        lambda ctx: (3, "No critical syntax errors. Code renders content to the screen correctly."),
    ),
]


def score_syntax(ctx: ScoringContext) -> CategoryScore:
    return evaluate(SYNTAX, SYNTAX_RULES, ctx)


# -- Structure & Semantics ----------------------------------------------------

def structural_elements(submission: Submission) -> list[str]:
    """Distinct present and non-empty structural elements, in rubric order."""
    doc = submission.document
    found: list[str] = []
    if doc.has_nonempty("h1"):
        found.append("h1")
    if doc.has_nonempty("h2") or doc.has_nonempty("h3"):
        found.append("h2/h3")
    if doc.has_nonempty("p"):
        found.append("p")
    if doc.list_has_items():
        found.append("list")
    return found


def _structure_tiers(ctx: ScoringContext) -> Outcome:
    found = structural_elements(ctx.submission)
    count = len(found)
    h1_count = ctx.submission.document.count("h1")

    if count >= 3 and h1_count == 1:
        return 3, f"Excellent! Used {count} kinds of structural elements and exactly one Main Title (H1)."
    if count >= 2:
        if h1_count != 1:
            return 2, f"Good tag variety ({count} kinds), but hierarchy needs work (found {h1_count} H1 tags)."
        return 2, f"Good start, but try using more tag types (only found {count})."
    return 1, "Used fewer than 2 structural elements. Add a heading, paragraphs and a list."


STRUCTURE_RULES = [
    ScoringRule(
        "draft",
        lambda ctx: ctx.is_draft,
        lambda ctx: (1, "Pick tags that match your content: a heading, paragraphs and a list."),
    ),
    ScoringRule(
        "syntax_gate",
        lambda ctx: ctx.syntax is not None and ctx.syntax.earned == SYNTAX_MIN,
        lambda ctx: (1, "Cannot rate structure while syntax is broken. Fix syntax first."),
    ),
    ScoringRule("tiers", _always, _structure_tiers),
]


def score_structure(ctx: ScoringContext) -> CategoryScore:
    if ctx.syntax is None:
        raise ValueError("Structure is gated by Syntax; score Syntax first")
    return evaluate(STRUCTURE, STRUCTURE_RULES, ctx)


# -- Content & Planning -------------------------------------------------------

def _content_tiers(ctx: ScoringContext) -> Outcome:
    doc = ctx.submission.document
    has_h1 = doc.has_nonempty("h1")
    has_p = doc.has_nonempty("p")
    has_list = doc.list_has_items()

    if has_h1 and has_p and has_list:
        return 3, "Page is substantial! Includes Title, Paragraphs, and a List."
    if has_h1 and (has_p or has_list):
        missing = "Paragraph" if not has_p else "List"
        return 2, f"Good start, but missing a {missing}."
    return 1, "Page is missing major requirements (Title, List, or Paragraphs)."


CONTENT_RULES = [
    ScoringRule(
        "draft",
        lambda ctx: ctx.is_draft,
        lambda ctx: (2, "Content found! Now add markup: headings, paragraphs and lists."),
    ),
    ScoringRule("tiers", _always, _content_tiers),
]


def score_content(ctx: ScoringContext) -> CategoryScore:
    return evaluate(CONTENT, CONTENT_RULES, ctx)


# -- Code Hygiene -------------------------------------------------------------

def has_comment(submission: Submission, mode: str = "lexical") -> bool:
    """
    Detect a comment in the submission.

    lexical scans the raw source and can match inside script or pre text;
    token only counts comment nodes of the parsed tree.
    """
    if mode == "token":
        return bool(submission.document.comments())
    return COMMENT_PATTERN.search(submission.raw_text) is not None


HYGIENE_RULES = [
    ScoringRule(
        "comment",
        lambda ctx: has_comment(ctx.submission, ctx.comment_detection),
        lambda ctx: (3, "Comments found! Good job documenting your code."),
    ),
    ScoringRule(
        "no_comment",
        _always,
        lambda ctx: (0, "No comments found. Use `<!-- Note -->` to label sections."),
    ),
]


def score_hygiene(ctx: ScoringContext) -> CategoryScore:
    return evaluate(HYGIENE, HYGIENE_RULES, ctx)
