"""Unit tests for core/linked_data.py"""

import pytest

from mdxld.core.linked_data import denormalize, normalize
from mdxld.core.models import Document, Mode


def test_normalize_expanded():
    doc = normalize({"$id": "x", "$context": {"@vocab": "https://schema.org/"}, "a": 1})
    assert doc.identifier == "x"
    assert doc.context == {"@vocab": "https://schema.org/"}
    assert doc.metadata == {"a": 1}


def test_normalize_flat_copies_metadata():
    """flat metadata is a copy; the input mapping is not shared."""
    source = {"$id": "x", "a": 1}
    doc = normalize(source, Mode.flat)
    assert doc.metadata == source
    assert doc.metadata is not source


def test_normalize_does_not_mutate_input():
    source = {"$id": "x", "a": 1}
    normalize(source)
    assert source == {"$id": "x", "a": 1}


@pytest.mark.parametrize("value", [5, None, ["a", 1], {1: "x"}])
def test_normalize_keeps_misshaped_values(value):
    """Reserved values that cannot be lifted stay in metadata."""
    key = "$context" if isinstance(value, dict) else "$type" if isinstance(value, list) else "$id"
    doc = normalize({key: value})
    assert doc.metadata == {key: value}


def test_normalize_rejects_non_mapping():
    with pytest.raises(TypeError):
        normalize(["not", "a", "mapping"])


def test_denormalize_reserved_first():
    """Reserved keys are written first, in $id, $type, $context order."""
    doc = Document(identifier="i", type="T", context="c", metadata={"z": 1, "a": 2})
    assert list(denormalize(doc)) == ["$id", "$type", "$context", "z", "a"]


def test_denormalize_flat_folds_lifted_fields():
    """Asking for flat output of an expanded document loses nothing."""
    doc = normalize({"$id": "i", "$type": ["A", "B"], "k": "v"})
    assert denormalize(doc, "flat") == {"$id": "i", "$type": ["A", "B"], "k": "v"}


def test_denormalize_top_level_wins_over_metadata():
    """A top-level field takes precedence over a same-named metadata key."""
    doc = Document(identifier="top", metadata={"$id": "bag", "k": 1})
    data = denormalize(doc)
    assert data["$id"] == "top"
    assert data == {"$id": "top", "k": 1}


def test_denormalize_inverts_normalize():
    for mode in (Mode.expanded, Mode.flat):
        source = {"$type": "T", "title": "x"}
        assert denormalize(normalize(source, mode)) == source
