#!/usr/bin/env python3
"""
Build snippet catalog from markdown files.

This script:
1. Reads snippet collections (.md)
2. Extracts categories and entries from the heading structure
3. Saves individual entry files
4. Creates catalog.json index (one catalog directory per source file)

Usage:
    python Ingress/build_catalog.py
    python Ingress/build_catalog.py --input md/README.md
    python Ingress/build_catalog.py --reset
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from catalog.builder import CatalogBuilder
from catalog.models import CatalogError


BASE_DIR = Path(__file__).resolve().parents[1]
load_dotenv(BASE_DIR / ".env")

MD_DIR = Path(os.environ.get("SNIPPETBOOK_MD_DIR", BASE_DIR / "md"))
CATALOG_ROOT = Path(os.environ.get("SNIPPETBOOK_CATALOG_ROOT", BASE_DIR / "output" / "catalog"))


def collect_markdown_files(input_path, md_dir: Path):
    """Return the markdown files to process, or None when none can be found."""
    if input_path:
        return [input_path] if input_path.exists() else None
    if not md_dir.exists():
        return None
    files = sorted(f for f in md_dir.glob("*.md") if not f.name.startswith("~$"))
    return files or None


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Build snippet catalog from markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Build catalogs from all .md files
    python Ingress/build_catalog.py

    # Build from specific file
    python Ingress/build_catalog.py --input md/README.md

    # Reset existing catalogs first
    python Ingress/build_catalog.py --reset
        """
    )

    parser.add_argument(
        "--input",
        type=Path,
        help="Specific markdown file to process (default: all .md files in md/)"
    )

    parser.add_argument(
        "--md-dir",
        type=Path,
        default=MD_DIR,
        help=f"Directory of source markdown files (default: {MD_DIR})"
    )

    parser.add_argument(
        "--catalog-dir",
        type=Path,
        default=CATALOG_ROOT,
        help=f"Output root; each source gets <root>/<file stem>/ (default: {CATALOG_ROOT})"
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Remove existing catalog before building"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed output"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("\n" + "=" * 70)
    print("Snippet Catalog Builder")
    print("=" * 70)

    md_files = collect_markdown_files(args.input, args.md_dir)
    if md_files is None:
        print(f"\n✗ Error: No markdown input found ({args.input or args.md_dir})")
        return 1

    print(f"\nInput: {len(md_files)} markdown file(s)")
    print(f"Output: {args.catalog_dir}")
    print("=" * 70)

    total_entries = 0
    files_processed = 0
    files_failed = 0

    for md_file in md_files:
        print(f"\nProcessing: {md_file.name}")
        builder = CatalogBuilder(args.catalog_dir / md_file.stem)

        try:
            stats = builder.build_from_markdown(md_file, clean_existing=args.reset)

            if stats['entries_count'] == 0:
                print("  ⚠ No entries found")
            else:
                print(f"  ✓ Extracted {stats['entries_count']} entries")
                if args.verbose:
                    for name, count in stats['by_category'].items():
                        print(f"    {name}: {count}")

                total_entries += stats['entries_count']
                files_processed += 1

        except CatalogError as e:
            print(f"  ✗ Catalog error: {e}")
            files_failed += 1

        except OSError as e:
            print(f"  ✗ Error: {e}")
            files_failed += 1

    # Summary
    print("\n" + "=" * 70)
    print("CATALOG BUILD COMPLETE")
    print("=" * 70)
    print(f"  Files processed: {files_processed}")
    print(f"  Files failed: {files_failed}")
    print(f"  Total entries: {total_entries}")
    print(f"\nCatalog location: {args.catalog_dir}")
    print("  • <name>/catalog.json  - Entry index")
    print("  • <name>/entries/      - Individual entry files")
    print("=" * 70 + "\n")

    return 0 if files_failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
