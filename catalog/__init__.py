"""
Catalog module for SnippetBook snippet collections.

This module provides functionality for:
- Parsing heading structure, code fences and references from markdown
- Building an ordered, read-only catalog of entries grouped by category
- Linting document structure (TOC anchors, fences, reference markers)
- Checking external reference links and diffing document variants
- Persisting the catalog as catalog.json plus per-entry files

Document format (in markdown):
    # Doctrine Snippets           <- document title
    ## Table of Contents          <- list of [Title](#anchor) links
    ## Query Language             <- category
    ### Get Single Row or Null    <- entry (anchor #get-single-row-or-null)

Usage:
    from catalog import Catalog, lint_markdown

    catalog = Catalog.from_file(Path("md/README.md"))
    catalog.list_categories()
    catalog.get_entry("Query Language", "Get Single Row or Null")

    report = lint_markdown(Path("md/README.md").read_text())
"""

from .models import CatalogError, Category, Entry, Reference, Snippet, TocItem
from .slugs import AnchorRegistry, slugify
from .markdown_parser import ParsedDocument, parse_markdown
from .catalog import Catalog
from .linter import LintIssue, LintReport, lint_document, lint_markdown
from .variants import VariantDiff, compare_catalogs
from .builder import CatalogBuilder

__all__ = [
    "CatalogError",
    "Category",
    "Entry",
    "Reference",
    "Snippet",
    "TocItem",
    "AnchorRegistry",
    "slugify",
    "ParsedDocument",
    "parse_markdown",
    "Catalog",
    "LintIssue",
    "LintReport",
    "lint_document",
    "lint_markdown",
    "VariantDiff",
    "compare_catalogs",
    "CatalogBuilder",
]

__version__ = "1.0.0"
