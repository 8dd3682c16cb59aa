"""
Markdown parser for SnippetBook documents.

Reads a snippet collection line by line and records its structure:

    # Document Title             -> title
    ## Table of Contents         -> TOC section (list of in-document links)
    ## Query Language            -> category
    ### Get Single Row or Null   -> entry
    #### Notes                   -> folded into the entry body

Fenced code blocks are tracked so that headings and links inside code are
never treated as structure. Reference markers (``[1]``, ``[text][label]``)
and reference definitions (``[1]: https://...``) are collected per section
so the linter can check them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .slugs import AnchorRegistry, slugify

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
TOC_SLUGS = {"table-of-contents", "contents", "toc"}

HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
FENCE_OPEN_PATTERN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>[^`]*)$")
TOC_LINK_PATTERN = re.compile(
    r"^(?P<indent>\s*)(?:[-*+]|\d+[.)])\s+\[(?P<title>.+?)\]\(#(?P<anchor>[^)\s]*)\)"
)
REFERENCE_DEFINITION_PATTERN = re.compile(
    r"""^ {0,3}\[(?P<label>[^\]]+)\]:\s*<?(?P<url>[^\s>]+)>?(?:\s+(?:"[^"]*"|'[^']*'|\([^)]*\)))?\s*$"""
)
REFERENCE_ITEM_PATTERN = re.compile(
    r"^\s*[-*+]\s+\[(?P<label>\d+)\]:?\s+<?(?P<url>[^\s>]+)>?\s*$"
)
REFERENCE_MARKER_PATTERN = re.compile(
    r"(?<!\\)\[(?P<text>[^\[\]\n]+)\](?:\[(?P<label>[^\[\]\n]*)\])?(?![(:\[])"
)
INLINE_CODE_PATTERN = re.compile(r"(`+).+?\1")
BLANK_RUN_PATTERN = re.compile(r"\n{3,}")


def normalize_label(label: str) -> str:
    """Reference labels match case-insensitively with whitespace collapsed."""
    return " ".join(label.split()).casefold()


@dataclass
class Heading:
    level: int
    text: str
    anchor: str
    line: int


@dataclass
class TocLink:
    title: str
    anchor: str
    line: int
    depth: int = 0


@dataclass
class Fence:
    line: int
    marker: str
    language: Optional[str] = None
    end_line: Optional[int] = None

    @property
    def closed(self) -> bool:
        return self.end_line is not None

    def closes_on(self, stripped: str) -> bool:
        char = self.marker[0]
        return (
            len(stripped) >= len(self.marker)
            and set(stripped) == {char}
        )


@dataclass
class ReferenceUse:
    label: str
    line: int


@dataclass
class ReferenceDefinition:
    label: str
    url: str
    line: int


class Section:
    """A heading scope: the preamble, the title, the TOC, a category or an entry."""

    def __init__(self, kind: str, heading: Optional[Heading] = None, category: Optional[str] = None):
        self.kind = kind
        self.heading = heading
        self.category = category
        self.lines: List[str] = []
        self.snippets: List[tuple] = []
        self.uses: List[ReferenceUse] = []
        self.definitions: List[ReferenceDefinition] = []

    @property
    def title(self) -> str:
        return self.heading.text if self.heading else ""

    def body_text(self) -> Optional[str]:
        """Prose of the section with code blocks and reference definitions removed."""
        text = "\n".join(self.lines).strip()
        if not text:
            return None
        return BLANK_RUN_PATTERN.sub("\n\n", text)

    def __repr__(self) -> str:
        return f"Section(kind={self.kind!r}, title={self.title!r}, category={self.category!r})"


@dataclass
class ParsedDocument:
    """Everything the parser learned about one Markdown document."""
    source: str
    title: Optional[str] = None
    headings: List[Heading] = field(default_factory=list)
    toc: List[TocLink] = field(default_factory=list)
    has_toc_section: bool = False
    fences: List[Fence] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    @property
    def has_toc(self) -> bool:
        return self.has_toc_section or bool(self.toc)

    def category_sections(self) -> List[Section]:
        return [s for s in self.sections if s.kind == "category"]

    def entry_sections(self) -> List[Section]:
        return [s for s in self.sections if s.kind == "entry"]


def find_reference_uses(line: str) -> List[str]:
    """Return the normalized labels of reference markers used on a line.

    ``[text][label]`` and ``[label][]`` always count. A bare ``[text]`` only
    counts when it is numeric (``[1]``), so ordinary bracketed prose is left
    alone.
    """
    scrubbed = INLINE_CODE_PATTERN.sub("", line)
    labels = []
    for match in REFERENCE_MARKER_PATTERN.finditer(scrubbed):
        text = match.group("text")
        label = match.group("label")
        if label is None:
            if not text.strip().isdigit():
                continue
            label = text
        elif not label.strip():
            label = text
        labels.append(normalize_label(label))
    return labels


def _match_definition(line: str) -> Optional[re.Match]:
    return REFERENCE_DEFINITION_PATTERN.match(line) or REFERENCE_ITEM_PATTERN.match(line)


def _strip_fence_indent(line: str, indent: int) -> str:
    removable = len(line) - len(line.lstrip(" "))
    return line[min(indent, removable):]


def parse_markdown(content: str, source: str = "unknown") -> ParsedDocument:
    """Parse a snippet document into a :class:`ParsedDocument`.

    Args:
        content: Full markdown text
        source: Name of the source file (for messages)

    Returns:
        ParsedDocument with headings, TOC links, fences and sections in
        document order
    """
    doc = ParsedDocument(source=source)
    registry = AnchorRegistry()

    current = Section("preamble")
    doc.sections.append(current)
    current_category: Optional[str] = None
    seen_category = False

    open_fence: Optional[Fence] = None
    fence_indent = 0
    fence_lines: List[str] = []

    for number, raw in enumerate(content.splitlines(), start=1):
        line = raw.rstrip("\n")

        # Inside a code block only the closing fence matters
        if open_fence is not None:
            if open_fence.closes_on(line.strip()) and len(line) - len(line.lstrip(" ")) <= 3:
                open_fence.end_line = number
                current.snippets.append((open_fence.language, "\n".join(fence_lines)))
                open_fence = None
            else:
                fence_lines.append(_strip_fence_indent(line, fence_indent))
            continue

        fence_match = FENCE_OPEN_PATTERN.match(line)
        if fence_match:
            info = fence_match.group("info").strip()
            open_fence = Fence(
                line=number,
                marker=fence_match.group("fence"),
                language=info.split()[0] if info else None,
            )
            fence_indent = len(fence_match.group("indent"))
            fence_lines = []
            doc.fences.append(open_fence)
            continue

        heading_match = HEADING_PATTERN.match(line)
        if heading_match:
            level = len(heading_match.group(1))
            text = heading_match.group(2).strip()
            heading = Heading(level=level, text=text, anchor=registry.anchor_for(text), line=number)
            doc.headings.append(heading)

            if level == 1 and doc.title is None and not seen_category:
                doc.title = text
                current = Section("title", heading)
            elif level <= 2:
                if slugify(text) in TOC_SLUGS:
                    doc.has_toc_section = True
                    current = Section("toc", heading)
                else:
                    seen_category = True
                    current_category = text
                    current = Section("category", heading, category=text)
            elif level == 3:
                current = Section("entry", heading, category=current_category or DEFAULT_CATEGORY)
            else:
                # Deeper headings stay part of the enclosing section's body
                current.lines.append(line)
                continue

            doc.sections.append(current)
            continue

        in_toc_scope = current.kind == "toc" or (
            not doc.has_toc_section and current.kind in ("preamble", "title")
        )
        if in_toc_scope:
            toc_match = TOC_LINK_PATTERN.match(line)
            if toc_match:
                doc.toc.append(TocLink(
                    title=toc_match.group("title").strip(),
                    anchor=toc_match.group("anchor"),
                    line=number,
                    depth=len(toc_match.group("indent").expandtabs(4)) // 2,
                ))
                continue

        definition = _match_definition(line)
        if definition:
            current.definitions.append(ReferenceDefinition(
                label=normalize_label(definition.group("label")),
                url=definition.group("url"),
                line=number,
            ))
            continue

        for label in find_reference_uses(line):
            current.uses.append(ReferenceUse(label=label, line=number))
        current.lines.append(line)

    if open_fence is not None:
        logger.warning(
            "%s: code fence opened on line %d is never closed", source, open_fence.line
        )
        current.snippets.append((open_fence.language, "\n".join(fence_lines)))

    return doc
