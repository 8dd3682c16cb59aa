#!/usr/bin/env python3
"""
Lint snippet collections.

Checks every markdown file for:
- TOC links pointing at missing headings, and headings missing from the TOC
- Unclosed code fences
- Reference markers ([1]) without a later definition in the same section
- Duplicate entry titles within a category

Optionally checks external reference URLs and diffs a document against a
near-duplicate variant.

Usage:
    python Ingress/lint_catalog.py
    python Ingress/lint_catalog.py md/README.md --strict
    python Ingress/lint_catalog.py md/README.md --check-links
    python Ingress/lint_catalog.py md/README.md --against md/README.old.md
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from catalog.catalog import Catalog
from catalog.linter import lint_markdown
from catalog.variants import compare_catalogs


BASE_DIR = Path(__file__).resolve().parents[1]
load_dotenv(BASE_DIR / ".env")

MD_DIR = Path(os.environ.get("SNIPPETBOOK_MD_DIR", BASE_DIR / "md"))


def lint_file(md_file: Path, strict: bool, verbose: bool) -> bool:
    content = md_file.read_text(encoding="utf-8")
    report = lint_markdown(content, str(md_file))

    for issue in report.issues:
        if issue.severity == "warning" and not (strict or verbose):
            continue
        print(f"  {issue.format(md_file.name)}")

    passed = report.passed(strict=strict)
    status = "✓" if passed else "✗"
    print(f"  {status} {md_file.name}: {len(report.errors)} error(s), {len(report.warnings)} warning(s)")
    return passed


def check_links(md_file: Path) -> bool:
    # Imported here so plain linting works offline without touching requests
    from catalog.link_checker import check_catalog_links

    statuses = check_catalog_links(Catalog.from_file(md_file))
    dead = [s for s in statuses if not s.ok]
    for status in dead:
        detail = status.status_code or status.error
        print(f"  ✗ dead link: {status.url} ({detail})")
    print(f"  {'✓' if not dead else '✗'} {len(statuses)} link(s) checked, {len(dead)} dead")
    return not dead


def print_variant_diff(base_file: Path, other_file: Path) -> None:
    diff = compare_catalogs(Catalog.from_file(base_file), Catalog.from_file(other_file))
    print(f"\nVariant diff: {base_file.name} → {other_file.name}")
    if diff.identical:
        print("  ✓ Same entries and content")
        return
    for category, title in diff.added:
        print(f"  + {category} / {title}")
    for category, title in diff.removed:
        print(f"  - {category} / {title}")
    for title, source, target in diff.moved:
        print(f"  ~ {title}: {source} → {target}")
    for category, title in diff.changed:
        print(f"  * {category} / {title} (content changed)")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Lint snippet collection markdown files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="Markdown files to lint (default: all .md files in md/)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings (orphan headings, TOC text mismatches) as failures",
    )
    parser.add_argument(
        "--check-links",
        action="store_true",
        help="Also request every external reference URL",
    )
    parser.add_argument(
        "--against",
        type=Path,
        metavar="FILE",
        help="Diff each linted file against this variant",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show warnings and debug logging",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    md_files = args.files or sorted(MD_DIR.glob("*.md"))
    if not md_files:
        print(f"✗ No .md files found in {MD_DIR}")
        return 1

    missing = [f for f in md_files if not f.exists()]
    if missing:
        for md_file in missing:
            print(f"✗ File not found: {md_file}")
        return 1
    if args.against and not args.against.exists():
        print(f"✗ File not found: {args.against}")
        return 1

    failed = 0
    for md_file in md_files:
        print(f"\nLinting: {md_file}")
        ok = lint_file(md_file, args.strict, args.verbose)
        if args.check_links:
            ok = check_links(md_file) and ok
        if args.against:
            print_variant_diff(md_file, args.against)
        if not ok:
            failed += 1

    print(f"\n{len(md_files) - failed}/{len(md_files)} file(s) passed")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
