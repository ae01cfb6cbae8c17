from dataclasses import dataclass, field

from mdxld.core.models import Document, Relationship
from mdxld.crud.store import DocumentStore, SaveResult, content_hash


@dataclass
class MemoryStore(DocumentStore):
    _docs: dict[str, tuple[str, Document]] = field(default_factory=dict)
    _relationships: list[Relationship] = field(default_factory=list)

    def save(self, id: str, doc: Document) -> SaveResult:
        digest = content_hash(doc)
        existing = self._docs.get(id)
        if existing and existing[0] == digest:
            return SaveResult(id=id, status="unchanged", hash=digest)
        self._docs[id] = (digest, doc)
        return SaveResult(id=id, status="updated" if existing else "created", hash=digest)

    def get(self, id: str) -> Document | None:
        entry = self._docs.get(id)
        return entry[1] if entry else None

    def ingest(self, relationships: list[Relationship]) -> None:
        self._relationships.extend(relationships)

    def relationships_from(self, from_id: str) -> list[Relationship]:
        return [r for r in self._relationships if r.from_ == from_id]

    def delete_relationships(self, from_id: str) -> int:
        kept = [r for r in self._relationships if r.from_ != from_id]
        removed = len(self._relationships) - len(kept)
        self._relationships = kept
        return removed
