"""Unit tests for the Document model in core/models.py"""

import pytest
from pydantic import ValidationError

from mdxld.core.models import Document, Mode, coerce_mode
from mdxld.core.parse import parse
from mdxld.core.stringify import stringify
from mdxld.core.tree.nodes import Root


def test_document_equality_is_structural():
    """Equal fields mean equal documents, regardless of mode or tree."""
    a = Document(identifier="x", metadata={"k": [1, {"n": 2}]}, body="b", mode=Mode.flat)
    b = Document(identifier="x", metadata={"k": [1, {"n": 2}]}, body="b", tree=Root())
    assert a == b


@pytest.mark.parametrize("change", [
    {"identifier": "y"},
    {"type": ["T"]},
    {"context": "c"},
    {"metadata": {"k": 2}},
    {"body": "other"},
])
def test_document_inequality(change):
    base = {"identifier": "x", "type": "T", "metadata": {"k": 1}, "body": "b"}
    assert Document(**base) != Document(**{**base, **change})


def test_document_is_frozen():
    doc = Document(body="b")
    with pytest.raises(ValidationError):
        doc.body = "changed"


def test_document_not_hashable():
    with pytest.raises(TypeError):
        hash(Document())


def test_with_data_returns_new_document():
    """with_data never mutates the original."""
    doc = parse("---\ntitle: A\n---\nbody")
    updated = doc.with_data({"title": "B", "tags": ["x"]})
    assert doc.metadata == {"title": "A"}
    assert updated.metadata == {"title": "B", "tags": ["x"]}
    assert updated.body == "body"


def test_with_data_reserved_keys_expanded():
    """In expanded mode $-keys in the patch update the top-level fields."""
    doc = parse("---\ntitle: A\n---\n")
    updated = doc.with_data({"$id": "https://x/a", "$type": "Article"})
    assert updated.identifier == "https://x/a"
    assert updated.type == "Article"
    assert "$id" not in updated.metadata


@pytest.mark.parametrize("patch", [
    {"$id": 5},
    {"$id": None},
    {"$type": {"a": 1}},
    {"$type": ["A", 2]},
    {"$context": 3},
])
def test_with_data_misshaped_reserved_value_stays_in_metadata(patch):
    """A reserved value parse would not lift stays in metadata and survives a round trip."""
    doc = parse("---\n$id: https://x/a\n$type: T\n$context: c\ntitle: T\n---\nB")
    updated = doc.with_data(patch)
    key, value = next(iter(patch.items()))
    assert updated.metadata[key] == value
    assert updated.get(key) == value
    assert parse(stringify(updated)) == updated


def test_with_data_round_trip():
    doc = parse("---\ntitle: T\n---\nB").with_data({"$id": "https://x/a", "$type": ["A", "B"], "n": 1})
    assert parse(stringify(doc)) == doc


def test_with_data_reserved_keys_flat():
    """In flat mode $-keys in the patch stay in metadata."""
    doc = parse("---\ntitle: A\n---\n", "flat")
    updated = doc.with_data({"$id": "https://x/a"})
    assert updated.identifier is None
    assert updated.metadata["$id"] == "https://x/a"


def test_with_body_drops_tree():
    doc = Document(body="# a", tree=Root())
    updated = doc.with_body("# b")
    assert updated.body == "# b"
    assert updated.tree is None
    assert doc.tree is not None


def test_data_property_folds_reserved_fields(sample_doc):
    data = sample_doc.data
    assert list(data)[:3] == ["$id", "$type", "$context"]
    assert data["title"] == "Intro"


def test_get_reads_metadata_and_reserved(sample_doc):
    assert sample_doc.get("title") == "Intro"
    assert sample_doc.get("$id") == "https://example.com/docs/intro"
    assert sample_doc.get("missing", "default") == "default"


def test_coerce_mode():
    assert coerce_mode("flat") is Mode.flat
    assert coerce_mode(None) is Mode.expanded
    assert coerce_mode(None, default=Mode.flat) is Mode.flat
    with pytest.raises(ValueError):
        coerce_mode("sideways")
