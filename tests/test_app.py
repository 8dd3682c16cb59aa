from fastapi.testclient import TestClient

from app import create_app, load_catalog
from catalog import Catalog, CatalogBuilder


def _client(sample_markdown) -> TestClient:
    return TestClient(create_app(Catalog.from_markdown(sample_markdown, "README.md")))


def test_health(sample_markdown):
    response = _client(sample_markdown).get("/health")
    assert response.status_code == 200
    assert response.json()["entries"] == 5


def test_categories(sample_markdown):
    data = _client(sample_markdown).get("/api/categories").json()
    assert [c["name"] for c in data["categories"]] == ["Query Language", "Performance", "Raw Access"]
    assert data["categories"][1]["entry_count"] == 2


def test_entries_of_category(sample_markdown):
    data = _client(sample_markdown).get("/api/categories/Performance/entries").json()
    assert [e["title"] for e in data["entries"]] == ["Iterate Large Result Sets", "Use Partial Objects"]


def test_unknown_category_returns_empty_list(sample_markdown):
    response = _client(sample_markdown).get("/api/categories/Unknown/entries")
    assert response.status_code == 200
    assert response.json()["entries"] == []


def test_get_entry(sample_markdown):
    response = _client(sample_markdown).get(
        "/api/entry", params={"category": "Query Language", "title": "Get Single Row or Null"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["anchor"] == "get-single-row-or-null"
    assert data["snippets"][0]["language"] == "php"


def test_get_entry_not_found(sample_markdown):
    response = _client(sample_markdown).get(
        "/api/entry", params={"category": "Query Language", "title": "Missing"}
    )
    assert response.status_code == 404


def test_toc(sample_markdown):
    items = _client(sample_markdown).get("/api/toc").json()["items"]
    assert items[0]["href"] == "#get-single-row-or-null"
    assert len(items) == 5


def test_lint_endpoint(sample_markdown):
    client = _client(sample_markdown)
    response = client.post("/api/lint", json={"markdown": "# T\n\n- [A](#b)\n\n## C\n\n### A\n"})
    data = response.json()
    assert response.status_code == 200
    assert data["ok"] is False
    assert "broken-toc-link" in [i["code"] for i in data["issues"]]


def test_lint_endpoint_rejects_blank_markdown(sample_markdown):
    response = _client(sample_markdown).post("/api/lint", json={"markdown": "   "})
    assert response.status_code == 422


def test_load_catalog_prefers_built_catalog(tmp_path, sample_path):
    CatalogBuilder(tmp_path).build_from_markdown(sample_path)
    assert len(load_catalog(tmp_path, None)) == 5


def test_load_catalog_falls_back_to_source(tmp_path, sample_path):
    assert len(load_catalog(tmp_path, str(sample_path))) == 5
    assert len(load_catalog(tmp_path, None)) == 0


def test_load_catalog_falls_back_when_catalog_json_is_corrupt(tmp_path, sample_path):
    (tmp_path / "catalog.json").write_text('{"version": "1.0", "categories": null}', encoding="utf-8")
    assert len(load_catalog(tmp_path, str(sample_path))) == 5
