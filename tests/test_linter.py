from catalog.linter import lint_markdown


def _doc(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def test_sample_document_is_clean(sample_markdown):
    report = lint_markdown(sample_markdown, "README.md")
    assert report.issues == []
    assert report.passed(strict=True)


def test_toc_link_resolves_to_slugged_heading():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [Get Single Row or Null](#get-single-row-or-null)",
        "",
        "## DQL",
        "",
        "### Get Single Row or Null",
    ))
    assert report.issues == []


def test_broken_toc_link():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [Get Single Row](#get-single-row)",
        "",
        "## DQL",
        "",
        "### Get Single Row or Null",
    ))
    assert "broken-toc-link" in report.codes()
    broken = [i for i in report.issues if i.code == "broken-toc-link"][0]
    assert broken.line == 3
    assert not report.ok


def test_orphan_heading_is_a_warning():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [Listed](#listed)",
        "",
        "## DQL",
        "",
        "### Listed",
        "",
        "### Forgotten",
    ))
    assert report.codes() == ["orphan-heading"]
    assert report.ok
    assert not report.passed(strict=True)


def test_toc_title_mismatch():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [Single row](#get-single-row-or-null)",
        "",
        "## DQL",
        "",
        "### Get Single Row or Null",
    ))
    assert report.codes() == ["toc-title-mismatch"]


def test_missing_toc():
    report = lint_markdown(_doc("# Snippets", "", "## DQL", "", "### Tip"))
    assert report.codes() == ["missing-toc"]


def test_unclosed_fence():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [Tip](#tip)",
        "",
        "## DQL",
        "",
        "### Tip",
        "",
        "```php",
        "$x = 1;",
    ))
    assert report.codes() == ["unclosed-fence"]
    assert report.errors[0].line == 9


def test_reference_must_be_defined_later_in_same_section():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [One](#one)",
        "- [Two](#two)",
        "",
        "## DQL",
        "",
        "### One",
        "",
        "See [1].",
        "",
        "### Two",
        "",
        "[1]: https://example.com",
    ))
    assert report.codes() == ["undefined-reference"]
    assert report.issues[0].line == 10


def test_reference_defined_before_use_is_reported():
    report = lint_markdown(_doc(
        "# Snippets",
        "",
        "- [One](#one)",
        "",
        "## DQL",
        "",
        "### One",
        "",
        "[1]: https://example.com",
        "",
        "See [1].",
    ))
    assert report.codes() == ["undefined-reference"]


def test_duplicate_title_within_category():
    report = lint_markdown(_doc(
        "# T",
        "",
        "- [Tips](#tips)",
        "- [Tips](#tips-1)",
        "",
        "## A",
        "",
        "### Tips",
        "",
        "### Tips",
    ))
    assert report.codes() == ["duplicate-title"]
    assert report.issues[0].line == 10


def test_same_title_in_different_categories_is_allowed():
    report = lint_markdown(_doc(
        "# T",
        "",
        "- [Tips](#tips)",
        "- [Tips](#tips-1)",
        "",
        "## A",
        "",
        "### Tips",
        "",
        "## B",
        "",
        "### Tips",
    ))
    assert report.issues == []


def test_issue_format_and_dict():
    report = lint_markdown(_doc("# T", "", "## A", "", "### Tip"), "doc.md")
    issue = report.issues[0]
    assert issue.format("doc.md") == "doc.md: warning: Document has no table of contents [missing-toc]"
    assert report.to_dict()["warnings"] == 1
