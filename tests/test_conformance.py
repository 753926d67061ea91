"""Tests for the structural conformance check."""
from __future__ import annotations

from checks.conformance import (
    ESCALATED_RULES,
    check_conformance,
    find_list_content_defect,
    is_list_content_defect,
    rejected_markup_diagnostic,
    resolve_rules,
)
from models.diagnostics import Severity, critical_only


def _rules(diagnostics):
    return [d.rule for d in diagnostics]


class TestCleanMarkup:

    def test_well_formed_page_has_no_findings(self, well_formed_html):
        assert check_conformance(well_formed_html) == []

    def test_cosmetic_rules_are_off_by_default(self):
        raw = "<p>line with trailing space   \n<br/>text</p>"

        assert check_conformance(raw) == []


class TestPermittedContent:

    def test_text_directly_in_list(self):
        diagnostics = check_conformance("<ul>Stray text<li>ok</li></ul>")

        assert _rules(diagnostics) == ["element-permitted-content"]
        assert diagnostics[0].severity == Severity.ERROR
        assert "<ul>" in diagnostics[0].message
        assert is_list_content_defect(diagnostics[0])

    def test_element_directly_in_list(self):
        diagnostics = check_conformance("<ol><div>item</div></ol>")

        assert diagnostics[0].message == "<div> element is not permitted as content under <ol>"
        assert find_list_content_defect(diagnostics) is diagnostics[0]

    def test_list_inside_heading_is_not_a_list_content_defect(self):
        diagnostics = check_conformance("<h1><ul><li>x</li></ul></h1>")

        assert diagnostics[0].message == "<ul> element is not permitted as content under <h1>"
        assert diagnostics[0].is_critical
        assert not is_list_content_defect(diagnostics[0])

    def test_flow_content_in_head(self):
        diagnostics = check_conformance("<html><head><h1>Oops</h1></head><body></body></html>")

        assert "<h1> element is not permitted as content under <head>" in [d.message for d in diagnostics]

    def test_title_in_body(self):
        diagnostics = check_conformance("<body><title>x</title></body>")

        assert _rules(diagnostics) == ["element-permitted-content"]


class TestCloseOrder:

    def test_mismatched_close_tag(self):
        diagnostics = check_conformance("<div><span>x</div>")

        assert diagnostics[0].rule == "close-order"
        assert diagnostics[0].message == "Mismatched close-tag, expected '</span>' but found '</div>'"

    def test_stray_end_tag(self):
        diagnostics = check_conformance("<p>x</p></div>")

        assert [d.message for d in diagnostics] == ["Stray end tag '</div>'"]

    def test_unclosed_element_at_end_of_input(self):
        diagnostics = check_conformance("<div>x")

        assert [d.message for d in diagnostics] == ["Unclosed element '<div>'"]
        assert diagnostics[0].line == 1
        assert diagnostics[0].column == 0

    def test_optional_end_tags_are_not_unclosed(self):
        assert check_conformance("<html><body><p>x") == []


class TestImplicitClose:

    def test_list_items_closed_by_sibling_and_parent(self):
        diagnostics = check_conformance("<ul><li>a<li>b</ul>")

        assert [d.message for d in diagnostics] == [
            "Element <li> is implicitly closed by sibling",
            "Element <li> is implicitly closed by parent </ul>",
        ]
        assert all(d.rule == "no-implicit-close" for d in diagnostics)

    def test_paragraph_closed_by_block(self):
        diagnostics = check_conformance("<p>a<div>b</div>")

        assert diagnostics[0].message == "Element <p> is implicitly closed by adjacent <div>"
        assert diagnostics[0].is_critical


class TestOmittedEndTags:

    def test_head_closed_by_body(self):
        raw = "<html><head><title>Fans</title><body><h1>Hi</h1></body></html>"

        assert check_conformance(raw) == []

    def test_head_and_body_closed_by_html(self):
        assert check_conformance("<html><head><title>Fans</title></html>") == []
        assert check_conformance("<html><body><p>x</p></html>") == []

    def test_other_elements_still_mismatch_at_html(self):
        diagnostics = check_conformance("<html><body><div>x</html>")

        assert [d.message for d in diagnostics] == [
            "Mismatched close-tag, expected '</div>' but found '</html>'"
        ]


class TestPermittedOrder:

    def test_head_after_body(self):
        diagnostics = check_conformance("<html><body></body><head></head></html>")

        assert "element-permitted-order" in _rules(diagnostics)


class TestWarnings:

    def test_void_end_tag_is_a_warning(self):
        diagnostics = check_conformance("<p>a</br></p>")

        assert _rules(diagnostics) == ["void-content"]
        assert critical_only(diagnostics) == []

    def test_deprecated_element(self):
        diagnostics = check_conformance("<center>hi</center>")

        assert diagnostics[0].severity == Severity.WARNING

    def test_empty_heading(self):
        diagnostics = check_conformance("<h2></h2>")

        assert _rules(diagnostics) == ["empty-heading"]
        assert not diagnostics[0].is_critical


class TestRuleResolution:

    def test_escalated_rules_cannot_be_downgraded(self):
        rules = resolve_rules({"close-order": "off", "no-implicit-close": "warning"})

        for rule in ESCALATED_RULES:
            assert rules[rule] == Severity.ERROR

    def test_cosmetic_rules_can_be_enabled(self):
        rules = resolve_rules({"void-style": "warning", "missing-doctype": "warning"})
        diagnostics = check_conformance("<p>a<br/></p>", rules)

        assert _rules(diagnostics) == ["void-style", "missing-doctype"]
        assert critical_only(diagnostics) == []


class TestLocations:

    def test_diagnostic_position(self):
        raw = "<html>\n<body>\n<ul>oops</ul>"
        diagnostics = check_conformance(raw)

        assert diagnostics[0].line == 3
        assert diagnostics[0].offset == raw.index("oops")

    def test_malformed_markup_never_raises(self):
        diagnostics = check_conformance("</div></span><li>oops <<< >>")

        assert isinstance(diagnostics, list)
        assert _rules(diagnostics)[:2] == ["close-order", "close-order"]


def test_rejected_markup_finding_is_critical():
    diagnostic = rejected_markup_diagnostic("tokenizer gave up")

    assert diagnostic.rule == "parser-error"
    assert diagnostic.is_critical
    assert diagnostic.message == "Markup could not be parsed: tokenizer gave up"
