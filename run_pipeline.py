#!/usr/bin/env python3
"""
End-to-end pipeline runner for SnippetBook.

WORKFLOW:
1. Lint every markdown file in md/ (TOC anchors, fences, references, titles)
2. Build the catalog (catalog.json + per-entry files) for each file
3. Optionally check external reference links
4. Optionally start the read-only viewer API

Usage:
    python run_pipeline.py [options]

Options:
    --skip-lint         Skip the structural lint step
    --strict            Fail the lint step on warnings too
    --check-links       Request every external reference URL
    --reset             Remove existing catalogs before building
    --start-server      Start the web server after pipeline completes

Examples:
    # Lint and build
    python run_pipeline.py

    # Full check including dead links, then serve
    python run_pipeline.py --check-links --start-server
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Optional


BASE_DIR = Path(__file__).resolve().parent
INGRESS_DIR = BASE_DIR / "Ingress"
BACKEND_DIR = BASE_DIR / "Backend"
MD_DIR = BASE_DIR / "md"
CATALOG_ROOT = BASE_DIR / "output" / "catalog"


def run_command(cmd: List[str], description: str, cwd: Optional[Path] = None) -> bool:
    """Run a command and return success status."""
    print(f"\n{'='*70}")
    print(f"STEP: {description}")
    print(f"{'='*70}")
    print(f"Running: {' '.join(str(c) for c in cmd)}")
    print()

    try:
        subprocess.run(
            cmd,
            cwd=cwd or BASE_DIR,
            check=True,
            capture_output=False,
            text=True,
        )
        print(f"\n✓ {description} completed successfully")
        return True
    except subprocess.CalledProcessError as exc:
        print(f"\n✗ {description} failed with exit code {exc.returncode}")
        return False
    except FileNotFoundError:
        print(f"\n✗ Command not found: {cmd[0]}")
        print("Make sure Python is in your PATH")
        return False


def check_prerequisites() -> bool:
    """Check if required directories and files exist."""
    print("Checking prerequisites...")

    checks = [
        (INGRESS_DIR.exists(), f"Ingress directory exists: {INGRESS_DIR}"),
        (BACKEND_DIR.exists(), f"Backend directory exists: {BACKEND_DIR}"),
        ((INGRESS_DIR / "lint_catalog.py").exists(), "lint_catalog.py exists"),
        ((INGRESS_DIR / "build_catalog.py").exists(), "build_catalog.py exists"),
        ((BACKEND_DIR / "app.py").exists(), "app.py exists"),
        (count_files(MD_DIR, "*.md") > 0, f"Markdown files exist in {MD_DIR}"),
    ]

    all_passed = True
    for check, message in checks:
        status = "✓" if check else "✗"
        print(f"  {status} {message}")
        if not check:
            all_passed = False

    print()
    return all_passed


def count_files(directory: Path, pattern: str) -> int:
    """Count files matching pattern in directory."""
    if not directory.exists():
        return 0
    return len(list(directory.glob(pattern)))


def build_steps(args) -> List[tuple]:
    """Return (command, description) pairs for the requested pipeline."""
    steps = []
    if not args.skip_lint:
        cmd = [sys.executable, str(INGRESS_DIR / "lint_catalog.py")]
        if args.strict:
            cmd.append("--strict")
        steps.append((cmd, "Lint markdown structure"))

    cmd = [sys.executable, str(INGRESS_DIR / "build_catalog.py"), "--catalog-dir", str(CATALOG_ROOT)]
    if args.reset:
        cmd.append("--reset")
    steps.append((cmd, "Build snippet catalog"))

    if args.check_links:
        steps.append((
            [sys.executable, str(INGRESS_DIR / "lint_catalog.py"), "--check-links"],
            "Check external reference links",
        ))
    return steps


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run the complete SnippetBook pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--skip-lint", action="store_true", help="Skip structural lint step")
    parser.add_argument("--strict", action="store_true", help="Fail lint on warnings too")
    parser.add_argument("--check-links", action="store_true", help="Check external reference links")
    parser.add_argument("--reset", action="store_true", help="Remove existing catalogs before building")
    parser.add_argument(
        "--start-server",
        action="store_true",
        help="Start the web server after pipeline completes",
    )
    args = parser.parse_args(argv)

    print("\n" + "="*70)
    print("SnippetBook Pipeline Runner")
    print("="*70)

    if not check_prerequisites():
        print("\n✗ Prerequisite check failed. Please fix the issues above.")
        return 1

    for cmd, description in build_steps(args):
        if not run_command(cmd, description):
            return 1

    print("\n" + "="*70)
    print("PIPELINE COMPLETE!")
    print("="*70)
    print("\nSummary:")
    print(f"  • MD files: {count_files(MD_DIR, '*.md')}")
    print(f"  • Catalogs: {count_files(CATALOG_ROOT, '*/catalog.json')}")

    if args.start_server:
        print("\n" + "="*70)
        print("Starting Web Server")
        print("="*70)
        print("\nThe server will run at http://localhost:8800")
        print("Press Ctrl+C to stop\n")

        cmd = [sys.executable, str(BACKEND_DIR / "app.py")]
        try:
            subprocess.run(cmd, cwd=BACKEND_DIR, check=True)
        except KeyboardInterrupt:
            print("\n\nServer stopped by user")
        except subprocess.CalledProcessError as exc:
            print(f"\n✗ Server failed with exit code {exc.returncode}")
            return 1
    else:
        print("\nTo start the web server, run:")
        print(f"  cd {BACKEND_DIR}")
        print("  python app.py")
        print("\nOr run this script with --start-server flag")

    return 0


if __name__ == "__main__":
    sys.exit(main())
