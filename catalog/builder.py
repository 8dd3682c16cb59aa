"""
Catalog builder for SnippetBook.

Persists a catalog built from one markdown document:
- catalog.json for the index (categories and entries in document order)
- entries/<category>/<entry>.md, one standalone markdown file per entry
"""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .catalog import Catalog
from .models import CatalogError, Entry
from .slugs import slugify

logger = logging.getLogger(__name__)


class CatalogBuilder:
    """Builds and loads a file-based snippet catalog."""

    def __init__(self, catalog_dir: Path):
        """Initialize catalog builder.

        Args:
            catalog_dir: Directory to store catalog (e.g., output/catalog/README)
        """
        self.catalog_dir = Path(catalog_dir)
        self.entries_dir = self.catalog_dir / "entries"
        self.catalog_file = self.catalog_dir / "catalog.json"

    def build_from_markdown(self, source_md_path: Path, clean_existing: bool = False) -> Dict:
        """Build catalog from a markdown file.

        Args:
            source_md_path: Path to source markdown file
            clean_existing: If True, remove existing catalog first

        Returns:
            Dictionary with build statistics

        Example:
            >>> builder = CatalogBuilder(Path("output/catalog/README"))
            >>> stats = builder.build_from_markdown(Path("md/README.md"))
            >>> print(f"Extracted {stats['entries_count']} entries")
        """
        source_md_path = Path(source_md_path)
        if not source_md_path.exists():
            raise FileNotFoundError(f"Source file not found: {source_md_path}")

        if clean_existing:
            self._clean_catalog()
        self.entries_dir.mkdir(parents=True, exist_ok=True)

        catalog = Catalog.from_file(source_md_path)

        if len(catalog) == 0:
            # Drop the previous index so the catalog never outlives its source
            self._clean_catalog()
            return {
                "entries_count": 0,
                "message": "No entry headings found in source file",
            }

        for entry in catalog:
            self._save_entry(entry)

        self._save_catalog(self._build_catalog_data(catalog))
        logger.info(f"Saved {len(catalog)} entries to {self.catalog_dir}")

        return {
            "entries_count": len(catalog),
            "source_file": str(source_md_path),
            "catalog_dir": str(self.catalog_dir),
            "timestamp": datetime.now().isoformat(),
            "by_category": {c.name: len(c.entries) for c in catalog.categories()},
        }

    def entry_path(self, entry: Entry) -> Path:
        """Relative path of an entry file inside the catalog directory."""
        category_dir = slugify(entry.category) or "uncategorized"
        return Path("entries") / category_dir / f"{entry.anchor or slugify(entry.title)}.md"

    def _save_entry(self, entry: Entry) -> None:
        filepath = self.catalog_dir / self.entry_path(entry)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(entry.to_markdown(), encoding="utf-8")

    def _build_catalog_data(self, catalog: Catalog) -> Dict:
        data = catalog.to_dict()
        data["created_at"] = datetime.now().isoformat()
        for category in data["categories"]:
            for entry_data, entry in zip(category["entries"], catalog.list_entries(category["name"])):
                entry_data["file"] = self.entry_path(entry).as_posix()
                entry_data["word_count"] = len((entry.body or "").split())
        return data

    def _save_catalog(self, catalog_data: Dict) -> None:
        self.catalog_file.write_text(
            json.dumps(catalog_data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def _clean_catalog(self) -> None:
        """Remove existing catalog files."""
        if self.entries_dir.exists():
            shutil.rmtree(self.entries_dir)
        if self.catalog_file.exists():
            self.catalog_file.unlink()

    def load(self) -> Catalog:
        """Load the persisted catalog.

        Raises:
            FileNotFoundError: If the catalog has not been built
            CatalogError: If catalog.json is malformed
        """
        if not self.catalog_file.exists():
            raise FileNotFoundError("Catalog not found. Build catalog first.")

        try:
            data = json.loads(self.catalog_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Invalid catalog file {self.catalog_file}: {exc}") from exc
        return Catalog.from_dict(data)

    def get_entry(self, category: str, title: str) -> Optional[Dict]:
        """Get entry data plus its standalone markdown file content.

        Returns:
            Entry data dictionary with ``content``, or None if not found
        """
        entry = self.load().get_entry(category, title)
        if entry is None:
            return None

        entry_file = self.catalog_dir / self.entry_path(entry)
        if not entry_file.exists():
            raise FileNotFoundError(f"Entry file not found: {entry_file}")

        return {
            **entry.to_dict(),
            "file": self.entry_path(entry).as_posix(),
            "content": entry_file.read_text(encoding="utf-8"),
        }
