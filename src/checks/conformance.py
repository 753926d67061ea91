"""Structural conformance check for HTML submissions.

Walks the raw token stream with an open-element stack and reports rule
violations as Diagnostics. Malformed markup never raises here: every problem
the tokenizer meets becomes a finding instead.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Optional

import structlog

from models.diagnostics import Diagnostic, Severity

logger = structlog.get_logger(__name__)

# Rules escalated to ERROR regardless of configuration.
ESCALATED_RULES = (
    "element-permitted-content",
    "element-permitted-order",
    "close-order",
    "no-implicit-close",
)

DEFAULT_RULES: dict[str, Severity] = {
    "element-permitted-content": Severity.ERROR,
    "element-permitted-order": Severity.ERROR,
    "close-order": Severity.ERROR,
    "no-implicit-close": Severity.ERROR,
    "parser-error": Severity.ERROR,
    "void-content": Severity.WARNING,
    "deprecated": Severity.WARNING,
    "empty-heading": Severity.WARNING,
    "element-required-ancestor": Severity.WARNING,
    "element-permitted-occurrences": Severity.WARNING,
    "void-style": Severity.OFF,
    "no-trailing-whitespace": Severity.OFF,
    "missing-doctype": Severity.OFF,
}

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})
DEPRECATED_ELEMENTS = frozenset({
    "acronym", "applet", "basefont", "big", "blink", "center", "dir",
    "font", "frame", "frameset", "isindex", "marquee", "strike", "tt",
})
METADATA_ELEMENTS = frozenset({
    "base", "link", "meta", "noscript", "script", "style", "template", "title",
})
HEADINGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
LIST_CONTAINERS = frozenset({"ul", "ol", "menu"})
LIST_CHILDREN = frozenset({"li", "script", "template"})
# Opening any of these while a <p> is the current element closes the <p>.
PARAGRAPH_CLOSERS = frozenset({
    "address", "article", "aside", "blockquote", "details", "div", "dl",
    "fieldset", "figcaption", "figure", "footer", "form", "header", "hgroup",
    "hr", "main", "menu", "nav", "ol", "p", "pre", "section", "table", "ul",
}) | HEADINGS
# Flow content that headings may not contain.
BLOCK_ELEMENTS = PARAGRAPH_CLOSERS | {"li"}
# Elements whose end tag may be omitted at end of input.
OPTIONAL_END = frozenset({
    "html", "head", "body", "li", "p", "dt", "dd", "option", "optgroup",
    "tr", "td", "th", "thead", "tbody", "tfoot", "colgroup", "caption",
})
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})
SINGLETONS = frozenset({"html", "head", "body"})
# End tags that may be omitted without any finding.
SILENT_END = frozenset({"head", "body"})

LIST_CONTENT_PATTERN = re.compile(r"under <(ul|ol)>", re.IGNORECASE)


@dataclass
class _OpenElement:
    name: str
    offset: int
    line: int
    column: int
    has_text: bool = False


class _ConformanceParser(HTMLParser):
    """Token-stream walker that records rule violations."""

    def __init__(self, raw_text: str, rules: dict[str, Severity]) -> None:
        super().__init__(convert_charrefs=True)
        self.raw_text = raw_text
        self.rules = rules
        self.diagnostics: list[Diagnostic] = []
        self.stack: list[_OpenElement] = []
        self.seen: set[str] = set()
        self.has_doctype = False
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", raw_text)]

    # -- reporting -------------------------------------------------------

    def _offset(self, line: int, column: int) -> int:
        if 1 <= line <= len(self._line_starts):
            return self._line_starts[line - 1] + column
        return column

    def report(self, rule: str, message: str, position: Optional[tuple[int, int]] = None) -> None:
        severity = self.rules.get(rule, Severity.WARNING)
        if severity == Severity.OFF:
            return
        line, column = position if position is not None else self.getpos()
        self.diagnostics.append(
            Diagnostic(
                rule=rule,
                message=message,
                severity=severity,
                offset=self._offset(line, column),
                line=line,
                column=column,
            )
        )

    @property
    def current(self) -> Optional[_OpenElement]:
        return self.stack[-1] if self.stack else None

    def _push(self, tag: str) -> None:
        line, column = self.getpos()
        self.stack.append(_OpenElement(tag, self._offset(line, column), line, column))

    def _pop(self) -> _OpenElement:
        el = self.stack.pop()
        if el.name in HEADINGS and not el.has_text:
            self.report(
                "empty-heading",
                f"<{el.name}> cannot be empty, must have text content",
                (el.line, el.column),
            )
        return el

    # -- tokenizer callbacks ---------------------------------------------

    def handle_decl(self, decl: str) -> None:
        if decl.lower().startswith("doctype"):
            self.has_doctype = True

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        self._open(tag, self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        self._open(tag, self_closing=True)
        if tag not in VOID_ELEMENTS and self.current is not None and self.current.name == tag:
            self._pop()

    def _open(self, tag: str, self_closing: bool) -> None:
        self._check_order(tag)
        self._close_implied(tag)
        self._check_content(tag)

        if tag in DEPRECATED_ELEMENTS:
            self.report("deprecated", f"<{tag}> is deprecated")

        if tag in SINGLETONS and tag in self.seen:
            parent = "html" if tag != "html" else "document"
            self.report(
                "element-permitted-occurrences",
                f"Element <{tag}> can only appear once under <{parent}>",
            )
        self.seen.add(tag)

        if tag == "img":
            for el in self.stack:
                el.has_text = True

        if tag in VOID_ELEMENTS:
            if self_closing:
                self.report(
                    "void-style",
                    f"Expected omitted end tag <{tag}> instead of self-closing element <{tag}/>",
                )
            return
        self._push(tag)

    def _check_order(self, tag: str) -> None:
        if tag == "head" and "body" in self.seen:
            self.report(
                "element-permitted-order",
                "Element <head> must be used before <body> in this context",
            )

    def _close_implied(self, tag: str) -> None:
        current = self.current
        if current is None:
            return
        if tag == "li" and current.name == "li":
            self.report("no-implicit-close", "Element <li> is implicitly closed by sibling")
            self._pop()
        elif tag in PARAGRAPH_CLOSERS and current.name == "p":
            self.report("no-implicit-close", f"Element <p> is implicitly closed by adjacent <{tag}>")
            self._pop()
        elif tag == "body" and current.name == "head":
            self._pop()

    def _check_content(self, tag: str) -> None:
        names = [el.name for el in self.stack]
        parent = names[-1] if names else None

        if tag == "title" and "body" in names:
            self.report(
                "element-permitted-content",
                "<title> element is not permitted as content under <body>",
            )
        elif parent in LIST_CONTAINERS and tag not in LIST_CHILDREN:
            self.report(
                "element-permitted-content",
                f"<{tag}> element is not permitted as content under <{parent}>",
            )
        elif parent in HEADINGS and tag in BLOCK_ELEMENTS:
            self.report(
                "element-permitted-content",
                f"<{tag}> element is not permitted as content under <{parent}>",
            )
        elif parent == "head" and tag not in METADATA_ELEMENTS:
            self.report(
                "element-permitted-content",
                f"<{tag}> element is not permitted as content under <head>",
            )

        if tag == "li" and not any(n in LIST_CONTAINERS for n in names):
            self.report(
                "element-required-ancestor",
                "<li> element requires a <ul>, <ol> or <menu> ancestor",
            )

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            self.report("void-content", f"End tag for <{tag}> must be omitted")
            return

        names = [el.name for el in self.stack]
        if tag not in names:
            self.report("close-order", f"Stray end tag '</{tag}>'")
            return

        while self.stack:
            el = self.current
            if el.name == tag:
                self._pop()
                break
            if el.name == "li" and tag in LIST_CONTAINERS:
                self.report("no-implicit-close", f"Element <li> is implicitly closed by parent </{tag}>")
            elif el.name == "p":
                self.report("no-implicit-close", f"Element <p> is implicitly closed by parent </{tag}>")
            elif el.name not in SILENT_END:
                self.report(
                    "close-order",
                    f"Mismatched close-tag, expected '</{el.name}>' but found '</{tag}>'",
                )
            self._pop()

    def handle_data(self, data: str) -> None:
        if not data.strip():
            return
        current = self.current
        if current is not None and current.name in RAW_TEXT_ELEMENTS:
            return
        for el in self.stack:
            el.has_text = True
        if current is None:
            return
        if current.name in LIST_CONTAINERS:
            self.report(
                "element-permitted-content",
                f"Text content is not permitted as content under <{current.name}>",
            )
        elif current.name == "head":
            self.report(
                "element-permitted-content",
                "Text content is not permitted as content under <head>",
            )

    # -- end of input ----------------------------------------------------

    def finish(self) -> None:
        self.close()
        while self.stack:
            el = self.stack[-1]
            if el.name not in OPTIONAL_END:
                self.report("close-order", f"Unclosed element '<{el.name}>'", (el.line, el.column))
            self._pop()

        if not self.has_doctype:
            self.report("missing-doctype", "Document is missing doctype", (1, 0))

        for idx, line in enumerate(self.raw_text.split("\n"), start=1):
            stripped = line.rstrip("\r")
            if stripped != stripped.rstrip(" \t"):
                self.report(
                    "no-trailing-whitespace",
                    "Trailing whitespace",
                    (idx, len(stripped.rstrip(" \t"))),
                )


def resolve_rules(overrides: Optional[dict[str, str]] = None) -> dict[str, Severity]:
    """Merge configured severities over the defaults.

    The escalated rules are always ERROR; overrides for them are ignored.
    """
    rules = dict(DEFAULT_RULES)
    for rule, value in (overrides or {}).items():
        if rule in ESCALATED_RULES:
            if Severity(value) != Severity.ERROR:
                logger.warning("rule_override_ignored", rule=rule, severity=str(value))
            continue
        rules[rule] = Severity(value)
    return rules


def check_conformance(
    raw_text: str,
    rules: Optional[dict[str, Severity]] = None,
) -> list[Diagnostic]:
    """
    Run the structural-validity pass over raw markup.

    Returns diagnostics in source order of detection. WARNING findings are
    advisory; ERROR findings are the critical diagnostics used for scoring.
    """
    parser = _ConformanceParser(raw_text, rules if rules is not None else resolve_rules())
    try:
        parser.feed(raw_text)
        parser.finish()
    except AssertionError as e:
        # Older tokenizers assert on some malformed declarations.
        parser.report("parser-error", f"Markup could not be tokenized: {e}")

    logger.debug(
        "conformance_checked",
        total=len(parser.diagnostics),
        critical=sum(1 for d in parser.diagnostics if d.is_critical),
    )
    return parser.diagnostics


def is_list_content_defect(diagnostic: Diagnostic) -> bool:
    """True for a critical finding about stray content under a list container."""
    return (
        diagnostic.is_critical
        and LIST_CONTENT_PATTERN.search(diagnostic.message) is not None
        and "content" in diagnostic.message.lower()
    )


def find_list_content_defect(diagnostics: list[Diagnostic]) -> Optional[Diagnostic]:
    for diagnostic in diagnostics:
        if is_list_content_defect(diagnostic):
            return diagnostic
    return None


def rejected_markup_diagnostic(reason: str) -> Diagnostic:
    """Critical finding for markup the tree builder refused outright.

    Always ERROR: with no tree there is nothing left to score.
    """
    return Diagnostic(
        rule="parser-error",
        message=f"Markup could not be parsed: {reason}" if reason else "Markup could not be parsed",
        severity=Severity.ERROR,
        offset=0,
        line=1,
        column=0,
    )
