"""
Structural linter for SnippetBook documents.

Checks that a hand-edited snippet collection is still navigable:

- every table-of-contents link points at an existing heading
- every entry heading is listed in the table of contents
- every fenced code block is closed
- every reference marker is defined later in the same section
- no two entries in one category share a title

Findings are returned as data; nothing here raises for a bad document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .markdown_parser import ParsedDocument, parse_markdown

ERROR = "error"
WARNING = "warning"


@dataclass
class LintIssue:
    code: str
    severity: str
    message: str
    line: Optional[int] = None

    def format(self, source: str = "") -> str:
        location = f"{source}:{self.line}" if self.line else source
        prefix = f"{location}: " if location else ""
        return f"{prefix}{self.severity}: {self.message} [{self.code}]"

    def to_dict(self) -> Dict:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "line": self.line,
        }


@dataclass
class LintReport:
    source: str
    issues: List[LintIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[LintIssue]:
        return [i for i in self.issues if i.severity == ERROR]

    @property
    def warnings(self) -> List[LintIssue]:
        return [i for i in self.issues if i.severity == WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def passed(self, strict: bool = False) -> bool:
        return not self.issues if strict else self.ok

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]

    def to_dict(self) -> Dict:
        return {
            "source": self.source,
            "ok": self.ok,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


def check_toc(doc: ParsedDocument) -> List[LintIssue]:
    """TOC links must resolve; entry headings should appear in the TOC."""
    if not doc.has_toc:
        return [LintIssue("missing-toc", WARNING, "Document has no table of contents")]

    issues = []
    headings_by_anchor = {h.anchor: h for h in doc.headings}

    for link in doc.toc:
        heading = headings_by_anchor.get(link.anchor)
        if heading is None:
            issues.append(LintIssue(
                "broken-toc-link", ERROR,
                f"TOC link '{link.title}' points to missing anchor #{link.anchor}",
                link.line,
            ))
        elif link.title != heading.text:
            issues.append(LintIssue(
                "toc-title-mismatch", WARNING,
                f"TOC link text '{link.title}' differs from heading '{heading.text}'",
                link.line,
            ))

    listed = {link.anchor for link in doc.toc}
    for section in doc.entry_sections():
        if section.heading.anchor not in listed:
            issues.append(LintIssue(
                "orphan-heading", WARNING,
                f"Heading '{section.title}' is not listed in the table of contents",
                section.heading.line,
            ))
    return issues


def check_fences(doc: ParsedDocument) -> List[LintIssue]:
    return [
        LintIssue(
            "unclosed-fence", ERROR,
            f"Code fence '{fence.marker}' is never closed",
            fence.line,
        )
        for fence in doc.fences
        if not fence.closed
    ]


def check_references(doc: ParsedDocument) -> List[LintIssue]:
    """Each marker needs a definition after it within its own section."""
    issues = []
    for section in doc.sections:
        for use in section.uses:
            defined_later = any(
                d.label == use.label and d.line > use.line for d in section.definitions
            )
            if defined_later:
                continue
            where = f" in '{section.title}'" if section.title else ""
            issues.append(LintIssue(
                "undefined-reference", ERROR,
                f"Reference [{use.label}]{where} has no definition later in the section",
                use.line,
            ))
    return issues


def check_duplicate_titles(doc: ParsedDocument) -> List[LintIssue]:
    issues = []
    seen: Dict[tuple, int] = {}
    for section in doc.entry_sections():
        key = (section.category, section.title)
        if key in seen:
            issues.append(LintIssue(
                "duplicate-title", ERROR,
                f"Entry '{section.title}' already exists in category "
                f"'{section.category}' (line {seen[key]})",
                section.heading.line,
            ))
        else:
            seen[key] = section.heading.line
    return issues


CHECKS = (check_toc, check_fences, check_references, check_duplicate_titles)


def lint_document(doc: ParsedDocument) -> LintReport:
    report = LintReport(source=doc.source)
    for check in CHECKS:
        report.issues.extend(check(doc))
    report.issues.sort(key=lambda issue: issue.line or 0)
    return report


def lint_markdown(content: str, source: str = "unknown") -> LintReport:
    """Parse and lint markdown text.

    Example:
        >>> report = lint_markdown("# T\\n\\n- [A](#a)\\n\\n## C\\n\\n### A\\n")
        >>> report.ok
        True
    """
    return lint_document(parse_markdown(content, source))
