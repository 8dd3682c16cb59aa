from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(BASE_DIR / ".env")

# Add parent directory to path for catalog import
sys.path.insert(0, str(BASE_DIR))
from catalog import Catalog, CatalogBuilder, CatalogError, Entry, lint_markdown

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Configuration
CATALOG_DIR = Path(os.environ.get("SNIPPETBOOK_CATALOG_DIR", BASE_DIR / "output" / "catalog" / "README"))
SOURCE_MD = os.environ.get("SNIPPETBOOK_SOURCE_MD")
DEFAULT_PORT = int(os.environ.get("PORT", "8800"))
MAX_LINT_CHARS = 1_000_000


class LintPayload(BaseModel):
    markdown: str = Field(..., min_length=1, description="Markdown document to lint.")
    source: str = Field("request.md", max_length=200)

    @field_validator("markdown")
    @classmethod
    def check_markdown(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Markdown cannot be empty.")
        if len(value) > MAX_LINT_CHARS:
            raise ValueError(f"Markdown is too long (max {MAX_LINT_CHARS} characters).")
        return value


def entry_summary(entry: Entry) -> Dict:
    return {
        "title": entry.title,
        "category": entry.category,
        "anchor": entry.anchor,
        "snippets": len(entry.snippets),
        "references": len(entry.references),
    }


def load_catalog(catalog_dir: Path = CATALOG_DIR, source_md: Optional[str] = SOURCE_MD) -> Catalog:
    """Load the persisted catalog, else parse the source markdown, else serve nothing."""
    if (catalog_dir / "catalog.json").exists():
        try:
            catalog = CatalogBuilder(catalog_dir).load()
            logger.info(f"✓ Loaded catalog from {catalog_dir} ({len(catalog)} entries)")
            return catalog
        except CatalogError as exc:
            logger.warning(f"⚠ Failed to load catalog from {catalog_dir}: {exc}")

    if source_md:
        catalog = Catalog.from_file(Path(source_md))
        logger.info(f"✓ Parsed catalog from {source_md} ({len(catalog)} entries)")
        return catalog

    logger.warning(f"⚠ Catalog not found at {catalog_dir}")
    logger.warning("  Run 'python Ingress/build_catalog.py' or set SNIPPETBOOK_SOURCE_MD")
    return Catalog([])


def create_app(catalog: Catalog) -> FastAPI:
    app = FastAPI(title="SnippetBook", version="1.0.0")

    # For production, set CORS_ORIGINS="https://yourdomain.com,https://app.yourdomain.com"
    cors_origins_str = os.environ.get("CORS_ORIGINS", "*")
    if cors_origins_str == "*":
        allowed_origins = ["*"]
    else:
        allowed_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]
        logger.info(f"CORS allowed origins: {allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> Dict:
        return {
            "status": "ok",
            "title": catalog.title,
            "categories": len(catalog.list_categories()),
            "entries": len(catalog),
        }

    @app.get("/api/categories")
    async def list_categories() -> Dict:
        return {
            "title": catalog.title,
            "categories": [
                {
                    "name": category.name,
                    "anchor": category.anchor,
                    "description": category.description,
                    "entry_count": len(category.entries),
                }
                for category in catalog.categories()
            ],
        }

    @app.get("/api/categories/{category}/entries")
    async def list_entries(category: str) -> Dict:
        return {
            "category": category,
            "entries": [entry_summary(entry) for entry in catalog.list_entries(category)],
        }

    @app.get("/api/entry")
    async def get_entry(
        category: str = Query(..., min_length=1),
        title: str = Query(..., min_length=1),
    ) -> Dict:
        entry = catalog.get_entry(category, title)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Entry '{title}' not found in '{category}'")
        return entry.to_dict()

    @app.get("/api/toc")
    async def toc() -> Dict:
        return {
            "items": [
                {"category": item.category, "title": item.title, "href": item.href}
                for item in catalog.toc()
            ]
        }

    @app.post("/api/lint")
    async def lint(payload: LintPayload) -> Dict:
        report = lint_markdown(payload.markdown, payload.source)
        logger.info(f"Linted {payload.source}: {len(report.errors)} error(s), {len(report.warnings)} warning(s)")
        return report.to_dict()

    return app


app = create_app(load_catalog())


def run_server(host: str = "0.0.0.0", port: int = DEFAULT_PORT, reload: bool = False) -> None:
    import uvicorn

    uvicorn.run(
        "app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    run_server(port=DEFAULT_PORT, reload=False)
