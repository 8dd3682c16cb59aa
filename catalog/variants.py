"""
Compare near-duplicate variants of the same snippet document.

Snippet collections are often kept in several copies (a main README plus
older or trimmed versions). This reports how a variant differs from a base
catalog, entry by entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .catalog import Catalog
from .models import Entry


@dataclass
class VariantDiff:
    added: List[Tuple[str, str]] = field(default_factory=list)
    removed: List[Tuple[str, str]] = field(default_factory=list)
    moved: List[Tuple[str, str, str]] = field(default_factory=list)  # (title, from, to)
    changed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return not (self.added or self.removed or self.moved or self.changed)

    def to_dict(self) -> Dict:
        return {
            "added": [list(k) for k in self.added],
            "removed": [list(k) for k in self.removed],
            "moved": [list(m) for m in self.moved],
            "changed": [list(k) for k in self.changed],
        }


def _content(entry: Entry) -> tuple:
    return (entry.body, entry.snippets, entry.references)


def compare_catalogs(base: Catalog, other: Catalog) -> VariantDiff:
    """Report entries added, removed, moved or changed in ``other``.

    An entry counts as moved when its title disappears from one category and
    appears in another, and the title is unique on both sides.
    """
    diff = VariantDiff()
    base_entries = {e.key: e for e in reversed(base.entries())}
    other_entries = {e.key: e for e in reversed(other.entries())}

    only_base = [e for e in base.entries() if e.key not in other_entries]
    only_other = [e for e in other.entries() if e.key not in base_entries]

    base_titles: Dict[str, List[Entry]] = {}
    for entry in only_base:
        base_titles.setdefault(entry.title, []).append(entry)
    other_titles: Dict[str, List[Entry]] = {}
    for entry in only_other:
        other_titles.setdefault(entry.title, []).append(entry)

    moved_titles = set()
    for title, entries in base_titles.items():
        targets = other_titles.get(title, [])
        if len(entries) == 1 and len(targets) == 1:
            diff.moved.append((title, entries[0].category, targets[0].category))
            moved_titles.add(title)

    diff.removed = [e.key for e in only_base if e.title not in moved_titles]
    diff.added = [e.key for e in only_other if e.title not in moved_titles]

    for entry in base.entries():
        counterpart = other_entries.get(entry.key)
        if counterpart is not None and _content(counterpart) != _content(entry):
            if entry.key not in diff.changed:
                diff.changed.append(entry.key)
    return diff
