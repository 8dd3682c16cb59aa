"""
In-memory snippet catalog.

Holds the categories and entries of one document in document order and
answers lookups. A Catalog is immutable once built, so it can be shared by
any number of readers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .markdown_parser import ParsedDocument, parse_markdown
from .models import Category, CatalogError, Entry, Reference, Snippet, TocItem

CATALOG_VERSION = "1.0"


def _entry_from_section(section) -> Entry:
    return Entry(
        title=section.title,
        category=section.category,
        anchor=section.heading.anchor,
        body=section.body_text(),
        snippets=tuple(Snippet(code=code, language=lang) for lang, code in section.snippets),
        references=tuple(Reference(label=d.label, url=d.url) for d in section.definitions),
        line=section.heading.line,
    )


class Catalog:
    """Ordered, read-only collection of entries grouped by category."""

    def __init__(self, categories: List[Category], title: Optional[str] = None, source: Optional[str] = None):
        self.title = title
        self.source = source
        self._categories = tuple(categories)
        self._by_name: Dict[str, Category] = {}
        for category in self._categories:
            self._by_name.setdefault(category.name, category)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_document(cls, doc: ParsedDocument) -> "Catalog":
        """Group a parsed document's entry sections into categories."""
        order: List[str] = []
        headings: Dict[str, object] = {}
        grouped: Dict[str, List[Entry]] = {}

        for section in doc.sections:
            if section.kind == "category":
                name = section.category
                if name not in grouped:
                    order.append(name)
                    grouped[name] = []
                    headings[name] = section
            elif section.kind == "entry":
                name = section.category
                if name not in grouped:
                    order.append(name)
                    grouped[name] = []
                grouped[name].append(_entry_from_section(section))

        categories = []
        for name in order:
            section = headings.get(name)
            categories.append(Category(
                name=name,
                anchor=section.heading.anchor if section else None,
                description=section.body_text() if section else None,
                entries=tuple(grouped[name]),
            ))
        return cls(categories, title=doc.title, source=doc.source)

    @classmethod
    def from_markdown(cls, content: str, source: str = "unknown") -> "Catalog":
        return cls.from_document(parse_markdown(content, source))

    @classmethod
    def from_file(cls, path: Path) -> "Catalog":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {path}")
        return cls.from_markdown(path.read_text(encoding="utf-8"), str(path))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def list_categories(self) -> List[str]:
        """Category names in document order."""
        return [category.name for category in self._categories]

    def list_entries(self, category: str) -> List[Entry]:
        """Entries of a category in document order, or ``[]`` if unknown."""
        found = self._by_name.get(category)
        return list(found.entries) if found else []

    def get_entry(self, category: str, title: str) -> Optional[Entry]:
        """Return the first entry with this title in the category, or None."""
        for entry in self.list_entries(category):
            if entry.title == title:
                return entry
        return None

    def get_category(self, name: str) -> Optional[Category]:
        return self._by_name.get(name)

    def categories(self) -> List[Category]:
        return list(self._categories)

    def entries(self) -> List[Entry]:
        return [entry for category in self._categories for entry in category.entries]

    def toc(self) -> List[TocItem]:
        """Table-of-contents view: every entry title with its anchor."""
        return [
            TocItem(category=entry.category, title=entry.title, anchor=entry.anchor)
            for entry in self.entries()
        ]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return sum(len(category.entries) for category in self._categories)

    def __repr__(self) -> str:
        return f"Catalog(title={self.title!r}, categories={len(self._categories)}, entries={len(self)})"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict:
        return {
            "version": CATALOG_VERSION,
            "title": self.title,
            "source_file": self.source,
            "total_entries": len(self),
            "categories": [
                {
                    "name": category.name,
                    "anchor": category.anchor,
                    "description": category.description,
                    "entries": [entry.to_dict() for entry in category.entries],
                }
                for category in self._categories
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Catalog":
        if not isinstance(data, dict):
            raise CatalogError(f"Catalog data must be an object, got {type(data).__name__}")
        if data.get("version") != CATALOG_VERSION:
            raise CatalogError(
                f"Unsupported catalog version {data.get('version')!r}, expected {CATALOG_VERSION!r}"
            )
        if not isinstance(data.get("categories"), list):
            raise CatalogError("Catalog data has no 'categories' list")

        categories = []
        for item in data["categories"]:
            if not isinstance(item, dict) or "name" not in item:
                raise CatalogError(f"Category record without a name: {item}")
            entries = item.get("entries", [])
            if not isinstance(entries, list):
                raise CatalogError(f"Category '{item['name']}' has no 'entries' list")
            categories.append(Category(
                name=item["name"],
                anchor=item.get("anchor"),
                description=item.get("description"),
                entries=tuple(Entry.from_dict(e) for e in entries),
            ))
        return cls(categories, title=data.get("title"), source=data.get("source_file"))
