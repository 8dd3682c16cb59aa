"""
Heading slugs for SnippetBook documents.

Anchors follow the GitHub convention so that table-of-contents links written
by hand for a README keep working:

    ### Get Single Row or Null   ->   #get-single-row-or-null

Repeated headings in one document get a numeric suffix (``-1``, ``-2``, ...)
in document order.
"""

from __future__ import annotations

import re
from typing import Dict

INLINE_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
INLINE_MARKUP_RE = re.compile(r"[`*]")
UNDERSCORE_EMPHASIS_RE = re.compile(r"(?<!\w)(_{1,2})(?=\S)(.+?)(?<=\S)\1(?!\w)")
CODE_SPAN_RE = re.compile(r"(`+[^`]*`+)")
HTML_TAG_RE = re.compile(r"<[^>]+>")
NON_SLUG_RE = re.compile(r"[^\w\- ]", re.UNICODE)


def strip_inline_markup(text: str) -> str:
    """Reduce heading markdown to the text GitHub renders."""
    text = INLINE_LINK_RE.sub(r"\1", text)
    text = HTML_TAG_RE.sub("", text)
    # Underscores inside code spans are literal
    parts = CODE_SPAN_RE.split(text)
    text = "".join(
        part if index % 2 else UNDERSCORE_EMPHASIS_RE.sub(r"\2", part)
        for index, part in enumerate(parts)
    )
    return INLINE_MARKUP_RE.sub("", text).strip()


def slugify(text: str) -> str:
    """Convert heading text into its anchor slug (without the leading ``#``).

    Example:
        >>> slugify("Get Single Row or Null")
        'get-single-row-or-null'
        >>> slugify("Use `QueryBuilder::expr()` in DQL")
        'use-querybuilderexpr-in-dql'
    """
    text = strip_inline_markup(text).lower()
    text = NON_SLUG_RE.sub("", text)
    return text.replace(" ", "-")


class AnchorRegistry:
    """Hands out unique anchors for the headings of a single document."""

    def __init__(self):
        self._counts: Dict[str, int] = {}

    def anchor_for(self, text: str) -> str:
        base = slugify(text)
        count = self._counts.get(base, 0)
        self._counts[base] = count + 1
        if count == 0:
            return base
        return f"{base}-{count}"
