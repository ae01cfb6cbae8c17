"""Document and relationship data models shared by parse, stringify and extract"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mdxld.core.tree.nodes import Root


class Mode(str, Enum):
    """Where the linked-data keys live: lifted to the top level, or left in metadata."""
    expanded = "expanded"
    flat = "flat"


# Document field -> frontmatter key, in the order they are written back out.
RESERVED_KEYS: dict[str, str] = {
    "identifier": "$id",
    "type":       "$type",
    "context":    "$context",
}
RESERVED_FIELDS: dict[str, str] = {key: field for field, key in RESERVED_KEYS.items()}


def _is_type(value: Any) -> bool:
    return isinstance(value, str) or (
        isinstance(value, list) and all(isinstance(v, str) for v in value)
    )


# A reserved value of any other shape stays in the metadata bag.
FIELD_SHAPES: dict[str, Callable[[Any], bool]] = {
    "identifier": lambda v: isinstance(v, str),
    "type":       _is_type,
    "context":    lambda v: isinstance(v, (str, list)) or (
        isinstance(v, dict) and all(isinstance(k, str) for k in v)
    ),
}


def coerce_mode(mode: Union[Mode, str, None], default: Mode = Mode.expanded) -> Mode:
    """Return mode as a Mode; None selects default. Raises ValueError for unknown names."""
    if mode is None:
        return default
    try:
        return Mode(mode)
    except ValueError:
        raise ValueError(f"Unknown mode {mode!r}: expected 'expanded' or 'flat'") from None


class Document(BaseModel):
    """A parsed MDXLD document: linked-data fields, metadata bag, and body text.

    Documents are immutable; use with_data / with_body to derive new ones.
    Equality covers identifier, type, context, metadata and body only. The
    producing mode and the derived tree / compiled slots are ignored.
    """
    model_config = ConfigDict(frozen=True)

    identifier: Optional[str] = None
    type:       Optional[Union[str, list[str]]] = None
    context:    Optional[Union[str, dict[str, Any], list[Any]]] = None
    metadata:   dict[str, Any] = Field(default_factory=dict)
    body:       str = ""
    mode:       Mode = Mode.expanded
    tree:       Optional[Root] = Field(default=None, exclude=True)
    compiled:   Any = Field(default=None, exclude=True)

    def _key(self) -> tuple:
        return (self.identifier, self.type, self.context, self.metadata, self.body)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None

    @property
    def data(self) -> dict[str, Any]:
        """Metadata with any top-level linked-data fields folded back under their $ keys."""
        data = {
            key: getattr(self, field)
            for field, key in RESERVED_KEYS.items()
            if getattr(self, field) is not None
        }
        data.update({k: v for k, v in self.metadata.items() if k not in data})
        return data

    def get(self, key: str, default: Any = None) -> Any:
        if key in RESERVED_FIELDS and getattr(self, RESERVED_FIELDS[key]) is not None:
            return getattr(self, RESERVED_FIELDS[key])
        return self.metadata.get(key, default)

    def with_data(self, patch: dict[str, Any]) -> "Document":
        """Return a copy with patch merged into the metadata.

        In expanded mode, $id / $type / $context in the patch update the
        matching top-level field instead of the metadata bag. A value of the
        wrong shape clears that field and is kept in metadata, as parse does.
        """
        metadata = dict(self.metadata)
        updates: dict[str, Any] = {}
        for key, value in patch.items():
            if self.mode is Mode.expanded and key in RESERVED_FIELDS:
                field = RESERVED_FIELDS[key]
                if FIELD_SHAPES[field](value):
                    updates[field] = value
                    metadata.pop(key, None)
                else:
                    updates[field] = None
                    metadata[key] = value
            else:
                metadata[key] = value
        return self.model_copy(update={**updates, "metadata": metadata})

    def with_body(self, body: str) -> "Document":
        """Return a copy with a new body; derived views are dropped."""
        return self.model_copy(update={"body": body, "tree": None, "compiled": None})

    def with_tree(self, tree: Root) -> "Document":
        return self.model_copy(update={"tree": tree})


class RelationshipType(str, Enum):
    """How an outbound reference appears in the body."""
    link = "link"               # [text](url)
    image = "image"             # ![alt](url)
    embed = "embed"             # <Component src="url" />
    import_ = "import"          # import X from './x.mdx'
    mention = "mention"         # @handle or [[wiki link]]
    reference = "reference"     # [text][ref]


class ExtractedLink(BaseModel):
    """An outbound reference found in a document body, before it becomes a relationship."""
    url:        str
    type:       RelationshipType
    text:       Optional[str] = None
    title:      Optional[str] = None
    label:      Optional[str] = None
    line:       Optional[int] = None
    column:     Optional[int] = None
    attributes: Optional[dict[str, Any]] = None


class Relationship(BaseModel):
    """A directed, typed edge from a source document to a target URL."""
    model_config = ConfigDict(populate_by_name=True)

    id:         str
    type:       RelationshipType
    from_:      str = Field(alias="from")
    to:         str
    created_at: datetime = Field(alias="createdAt")
    data:       dict[str, Any] = Field(default_factory=dict)
