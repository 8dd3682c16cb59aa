from catalog.slugs import AnchorRegistry, slugify, strip_inline_markup


def test_slugify_plain_heading():
    """Heading text becomes a lowercase hyphenated anchor"""
    assert slugify("Get Single Row or Null") == "get-single-row-or-null"


def test_slugify_strips_punctuation_and_code_markup():
    assert slugify("Use `QueryBuilder::expr()` in DQL") == "use-querybuilderexpr-in-dql"
    assert slugify("What's new?") == "whats-new"


def test_slugify_keeps_one_hyphen_per_space():
    """Removed punctuation between spaces leaves consecutive hyphens, like GitHub"""
    assert slugify("C# & .NET") == "c--net"


def test_slugify_uses_link_text():
    assert strip_inline_markup("[Batch Processing](https://example.com) **tips**") == "Batch Processing tips"
    assert slugify("[Batch Processing](https://example.com)") == "batch-processing"


def test_anchor_registry_suffixes_repeats():
    registry = AnchorRegistry()
    anchors = [registry.anchor_for(text) for text in ("Tips", "Tips", "Other", "Tips")]
    assert anchors == ["tips", "tips-1", "other", "tips-2"]


def test_slugify_drops_underscore_emphasis():
    """Underscore emphasis renders as plain text; snake_case stays intact"""
    assert slugify("Use _partial_ hydration") == "use-partial-hydration"
    assert slugify("Use __strict__ mode") == "use-strict-mode"
    assert slugify("Set fetch_mode on joins") == "set-fetch_mode-on-joins"
    assert slugify("Call `_load_` hook") == "call-_load_-hook"
