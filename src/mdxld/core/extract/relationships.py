"""Relationship extraction: outbound links as typed graph edges with stable ids"""

from datetime import datetime, timezone

from pydantic import Field

from mdxld.core.extract.links import extract_links
from mdxld.core.models import Document, ExtractedLink, Relationship, RelationshipType
from mdxld.core.utils.hashing import short_digest


class DocumentWithRelationships(Document):
    """A Document carrying the relationships extracted from its body."""
    relationships: list[Relationship] = Field(default_factory=list)


def relationship_id(from_: str, rel_type: RelationshipType | str, to: str) -> str:
    """Deterministic id for a (from, type, to) triple."""
    rel_type = RelationshipType(rel_type).value
    return "rel_" + short_digest(from_, rel_type, to)


def _data(link: ExtractedLink) -> dict:
    data = {'text': link.text, 'line': link.line, 'column': link.column}
    if link.title:
        data['title'] = link.title
    if link.label is not None:
        data['label'] = link.label
    if link.attributes is not None:
        data['attributes'] = link.attributes
    return data


def extract_relationships(
    doc: Document,
    source_id: str,
    *,
    base_url: str | None = None,
    include_images: bool = True,
    include_imports: bool = True,
    include_embeds: bool = True,
    include_mentions: bool = True,
    internal_only: bool = False,
    preset: str = 'gfm-like',
) -> list[Relationship]:
    """Turn every outbound link of doc into a Relationship from source_id.

    All relationships of one call share a created_at timestamp. Duplicate
    (from, type, to) triples are kept and share an id.
    """
    if not isinstance(source_id, str):
        raise TypeError(f"source_id must be str, got {type(source_id).__name__}")
    links = extract_links(
        doc,
        base_url=base_url,
        include_images=include_images,
        include_imports=include_imports,
        include_embeds=include_embeds,
        include_mentions=include_mentions,
        internal_only=internal_only,
        preset=preset,
    )
    now = datetime.now(timezone.utc)
    return [
        Relationship(
            id=relationship_id(source_id, link.type, link.url),
            type=link.type,
            from_=source_id,
            to=link.url,
            created_at=now,
            data=_data(link),
        )
        for link in links
    ]


def relationships(doc: Document, source_id: str, **options) -> list[Relationship]:
    """Outbound relationships of doc; same as extract_relationships."""
    return extract_relationships(doc, source_id, **options)


def with_relationships(doc: Document, source_id: str, **options) -> DocumentWithRelationships:
    """Return doc with its extracted relationships attached."""
    rels = extract_relationships(doc, source_id, **options)
    return DocumentWithRelationships(**dict(doc), relationships=rels)
