"""Linked-data normalization: move $id / $type / $context between metadata and Document fields"""

from typing import Any

from loguru import logger

from mdxld.core.models import FIELD_SHAPES, RESERVED_KEYS, Document, Mode, coerce_mode


def normalize(metadata: dict[str, Any], mode: Mode | str = Mode.expanded, body: str = "") -> Document:
    """Build a Document from decoded metadata.

    expanded: $id, $type and $context are removed from the metadata and set
    as identifier, type and context. flat: metadata is kept as-is.
    """
    if not isinstance(metadata, dict):
        raise TypeError(f"Expected a mapping, got {type(metadata).__name__}")
    mode = coerce_mode(mode)
    if mode is Mode.flat:
        return Document(metadata=dict(metadata), body=body, mode=mode)

    fields: dict[str, Any] = {}
    rest = dict(metadata)
    for field, key in RESERVED_KEYS.items():
        if key not in rest:
            continue
        if FIELD_SHAPES[field](rest[key]):
            fields[field] = rest.pop(key)
        else:
            logger.debug("Keeping {} in metadata: unsupported value {!r}", key, rest[key])
    return Document(**fields, metadata=rest, body=body, mode=mode)


def denormalize(doc: Document, mode: Mode | str | None = None) -> dict[str, Any]:
    """Return the metadata mapping to write for doc, reserved keys first.

    Top-level identifier/type/context are folded back whatever the requested
    mode, so a flat stringify of an expanded Document loses nothing.
    """
    mode = coerce_mode(mode, default=doc.mode)
    lifted = {field for field in RESERVED_KEYS if getattr(doc, field) is not None}
    if mode is Mode.flat and lifted:
        logger.debug("Folding {} into flat metadata", sorted(lifted))

    data: dict[str, Any] = {}
    for field, key in RESERVED_KEYS.items():
        if field in lifted:
            data[key] = getattr(doc, field)
        elif key in doc.metadata:
            data[key] = doc.metadata[key]
    data.update({k: v for k, v in doc.metadata.items() if k not in data})
    return data
