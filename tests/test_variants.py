from catalog import Catalog, compare_catalogs

BASE = """# Snippets

## A

### x

Original body.

### y

## B

### z
"""

VARIANT = """# Snippets

## A

### x

Edited body.

## B

### z

### y

### w
"""


def test_identical_variants():
    catalog = Catalog.from_markdown(BASE)
    diff = compare_catalogs(catalog, Catalog.from_markdown(BASE))
    assert diff.identical


def test_variant_diff():
    diff = compare_catalogs(Catalog.from_markdown(BASE), Catalog.from_markdown(VARIANT))

    assert diff.moved == [("y", "A", "B")]
    assert diff.added == [("B", "w")]
    assert diff.removed == []
    assert diff.changed == [("A", "x")]
    assert not diff.identical


def test_removed_entry():
    diff = compare_catalogs(Catalog.from_markdown(VARIANT), Catalog.from_markdown(BASE))
    assert diff.removed == [("B", "w")]
    assert diff.to_dict()["moved"] == [["y", "B", "A"]]
