"""Tests for the four rubric category scorers."""
from __future__ import annotations

import pytest

from models.diagnostics import Diagnostic, Severity
from models.report import CategoryScore
from models.submission import Submission, SubmissionState
from scoring.scorers import (
    SYNTAX,
    ScoringContext,
    has_comment,
    score_content,
    score_hygiene,
    score_structure,
    score_syntax,
    structural_elements,
)

LIST_DEFECT = Diagnostic(
    rule="element-permitted-content",
    message="Text content is not permitted as content under <ul>",
    severity=Severity.ERROR,
)
MISMATCH = Diagnostic(
    rule="close-order",
    message="Mismatched close-tag, expected '</span>' but found '</div>'",
    severity=Severity.ERROR,
)
CLEAN_SYNTAX = CategoryScore(name=SYNTAX, earned=3, message="clean")
BROKEN_SYNTAX = CategoryScore(name=SYNTAX, earned=1, message="broken")


def _ctx(raw: str, state: SubmissionState = SubmissionState.NORMAL, **kwargs) -> ScoringContext:
    return ScoringContext(submission=Submission.from_markup(raw), state=state, **kwargs)


class TestSyntax:

    def test_clean(self, well_formed_html):
        score = score_syntax(_ctx(well_formed_html))

        assert score.earned == 3
        assert score.max == 3

    def test_draft_message_wins(self):
        ctx = _ctx("a" * 80, SubmissionState.DRAFT, placement_defect=True, critical=[MISMATCH])

        score = score_syntax(ctx)

        assert score.earned == 1
        assert score.message.startswith("Draft detected")

    def test_placement_before_list_content(self):
        ctx = _ctx("<h1>x</h1>", SubmissionState.SYNTAX_BROKEN, placement_defect=True, critical=[LIST_DEFECT])

        score = score_syntax(ctx)

        assert score.earned == 1
        assert "`<h1>` starts before `<body>`" in score.message

    def test_list_content_before_generic(self):
        ctx = _ctx("<p>x</p>", SubmissionState.SYNTAX_BROKEN, critical=[MISMATCH, LIST_DEFECT])

        score = score_syntax(ctx)

        assert score.message == (
            "Text found directly inside a list. Every list entry must be wrapped in `<li>` tags."
        )

    def test_generic_critical_reports_count_and_first(self):
        ctx = _ctx("<p>x</p>", SubmissionState.SYNTAX_BROKEN, critical=[MISMATCH, MISMATCH])

        score = score_syntax(ctx)

        assert score.earned == 1
        assert "Found 2 critical errors" in score.message
        assert MISMATCH.message in score.message


class TestStructure:

    def test_requires_syntax_first(self, well_formed_html):
        with pytest.raises(ValueError):
            score_structure(_ctx(well_formed_html))

    def test_gated_by_broken_syntax(self, well_formed_html):
        ctx = _ctx(well_formed_html, SubmissionState.SYNTAX_BROKEN, syntax=BROKEN_SYNTAX)

        score = score_structure(ctx)

        assert score.earned == 1
        assert score.message == "Cannot rate structure while syntax is broken. Fix syntax first."

    def test_draft(self):
        ctx = _ctx("a" * 80, SubmissionState.DRAFT, syntax=BROKEN_SYNTAX)

        assert score_structure(ctx).message.startswith("Pick tags")

    def test_excellent(self, well_formed_html):
        score = score_structure(_ctx(well_formed_html, syntax=CLEAN_SYNTAX))

        assert score.earned == 3
        assert "3 kinds" in score.message

    def test_variety_with_bad_hierarchy(self, make_page):
        raw = make_page("<h1>A</h1><h1>B</h1><p>x</p><ul><li>y</li></ul>")

        score = score_structure(_ctx(raw, syntax=CLEAN_SYNTAX))

        assert score.earned == 2
        assert score.message == "Good tag variety (3 kinds), but hierarchy needs work (found 2 H1 tags)."

    def test_two_kinds(self, make_page):
        score = score_structure(_ctx(make_page("<h1>A</h1><p>x</p>"), syntax=CLEAN_SYNTAX))

        assert score.earned == 2
        assert score.message == "Good start, but try using more tag types (only found 2)."

    def test_fewer_than_two_kinds(self, make_page):
        score = score_structure(_ctx(make_page("<p>x</p>"), syntax=CLEAN_SYNTAX))

        assert score.earned == 1

    def test_subheadings_count_once(self, make_page):
        raw = make_page("<h2>a</h2><h3>b</h3><p>x</p>")

        assert structural_elements(Submission.from_markup(raw)) == ["h2/h3", "p"]

    def test_empty_list_does_not_count(self, make_page):
        raw = make_page("<h1>A</h1><p>x</p><ul></ul>")

        assert "list" not in structural_elements(Submission.from_markup(raw))


class TestContent:

    def test_complete(self, well_formed_html):
        assert score_content(_ctx(well_formed_html)).earned == 3

    def test_missing_list(self, make_page):
        score = score_content(_ctx(make_page("<h1>A</h1><p>x</p>")))

        assert score.earned == 2
        assert score.message == "Good start, but missing a List."

    def test_missing_title(self, make_page):
        assert score_content(_ctx(make_page("<p>x</p><ul><li>y</li></ul>"))).earned == 1

    def test_draft_gets_credit_for_prose(self):
        assert score_content(_ctx("a" * 80, SubmissionState.DRAFT)).earned == 2


class TestHygiene:

    def test_comment_found(self, well_formed_html):
        score = score_hygiene(_ctx(well_formed_html))

        assert score.earned == 3
        assert score.icon == "✅"

    def test_no_comment(self, make_page):
        score = score_hygiene(_ctx(make_page("<p>x</p>")))

        assert score.earned == 0
        assert score.icon == "❌"

    def test_comment_inside_script_depends_on_mode(self, make_page):
        submission = Submission.from_markup(
            make_page("<p>x</p><script>var s = '<!-- not a comment -->';</script>")
        )

        assert has_comment(submission, "lexical")
        assert not has_comment(submission, "token")

    def test_token_mode_finds_real_comment(self, well_formed_html):
        assert has_comment(Submission.from_markup(well_formed_html), "token")

    def test_hygiene_ignores_state(self, well_formed_html):
        normal = score_hygiene(_ctx(well_formed_html))
        broken = score_hygiene(_ctx(well_formed_html, SubmissionState.SYNTAX_BROKEN, critical=[MISMATCH]))

        assert normal == broken
