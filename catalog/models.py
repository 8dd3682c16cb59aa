"""
Catalog records.

Entries are authored by hand in the Markdown document and never change at
runtime, so every record here is a frozen dataclass holding tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


class CatalogError(ValueError):
    """Exception raised when a persisted catalog is malformed."""
    pass


@dataclass(frozen=True)
class Snippet:
    """A fenced code block. ``language`` is a display label only."""
    code: str
    language: Optional[str] = None

    def to_dict(self) -> Dict:
        return {"language": self.language, "code": self.code}


@dataclass(frozen=True)
class Reference:
    """An external link attached to an entry, e.g. ``[1]: https://...``."""
    label: str
    url: str

    def to_dict(self) -> Dict:
        return {"label": self.label, "url": self.url}


@dataclass(frozen=True)
class Entry:
    """One documented tip: a ``###`` heading and everything below it."""
    title: str
    category: str
    anchor: str
    body: Optional[str] = None
    snippets: Tuple[Snippet, ...] = ()
    references: Tuple[Reference, ...] = ()
    line: int = 0

    @property
    def key(self) -> Tuple[str, str]:
        return (self.category, self.title)

    def to_markdown(self) -> str:
        """Rebuild a standalone markdown file for this entry."""
        parts = [f"### {self.title}"]
        if self.body:
            parts.append(self.body)
        for snippet in self.snippets:
            parts.append(f"```{snippet.language or ''}\n{snippet.code}\n```")
        if self.references:
            parts.append("\n".join(f"[{ref.label}]: {ref.url}" for ref in self.references))
        return "\n\n".join(parts) + "\n"

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "category": self.category,
            "anchor": self.anchor,
            "body": self.body,
            "snippets": [s.to_dict() for s in self.snippets],
            "references": [r.to_dict() for r in self.references],
            "line": self.line,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Entry":
        try:
            return cls(
                title=data["title"],
                category=data["category"],
                anchor=data["anchor"],
                body=data.get("body"),
                snippets=tuple(
                    Snippet(code=s["code"], language=s.get("language"))
                    for s in data.get("snippets", [])
                ),
                references=tuple(
                    Reference(label=r["label"], url=r["url"])
                    for r in data.get("references", [])
                ),
                line=data.get("line", 0),
            )
        except (KeyError, TypeError) as exc:
            raise CatalogError(f"Invalid entry record: {exc}") from exc


@dataclass(frozen=True)
class Category:
    """A ``##`` section grouping entries in document order."""
    name: str
    anchor: Optional[str] = None
    description: Optional[str] = None
    entries: Tuple[Entry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TocItem:
    """One row of the table-of-contents view."""
    category: str
    title: str
    anchor: str

    @property
    def href(self) -> str:
        return f"#{self.anchor}"
