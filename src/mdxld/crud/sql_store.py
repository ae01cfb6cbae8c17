"""SQLModel-backed DocumentStore"""

from datetime import datetime

from loguru import logger
from sqlmodel import Session, select

from mdxld.core.models import Document, Relationship
from mdxld.core.parse import parse
from mdxld.core.stringify import stringify
from mdxld.core.utils.hashing import sha256
from mdxld.crud.models import DocumentRecord, RelationshipRecord
from mdxld.crud.store import DocumentStore, SaveResult


def _record_to_relationship(r: RelationshipRecord) -> Relationship:
    return Relationship(
        id=r.rel_id,
        type=r.type,
        from_=r.from_id,
        to=r.to,
        created_at=r.created_at,
        data=dict(r.data or {}),
    )


def _relationship_to_record(r: Relationship) -> RelationshipRecord:
    return RelationshipRecord(
        rel_id=r.id,
        type=r.type.value,
        from_id=r.from_,
        to=r.to,
        created_at=r.created_at,
        data=r.data,
    )


class SQLStore(DocumentStore):
    def __init__(self, session: Session):
        self.session = session

    def _record(self, id: str) -> DocumentRecord | None:
        return self.session.get(DocumentRecord, id)

    def save(self, id: str, doc: Document) -> SaveResult:
        source = stringify(doc)
        digest = sha256(source)
        record = self._record(id)
        if record and record.hash == digest:
            return SaveResult(id=id, status="unchanged", hash=digest)

        status = "updated" if record else "created"
        record = record or DocumentRecord(id=id, source=source, hash=digest)
        record.identifier = doc.identifier
        record.type = doc.type
        record.mode = doc.mode.value
        record.source = source
        record.hash = digest
        record.updated_at = datetime.now()
        self.session.add(record)
        self.session.commit()
        logger.debug("{} document {}", status, id)
        return SaveResult(id=id, status=status, hash=digest)

    def get(self, id: str) -> Document | None:
        record = self._record(id)
        return parse(record.source, record.mode) if record else None

    def ingest(self, relationships: list[Relationship]) -> None:
        self.session.add_all([_relationship_to_record(r) for r in relationships])
        self.session.commit()

    def relationships_from(self, from_id: str) -> list[Relationship]:
        rows = self.session.exec(
            select(RelationshipRecord)
            .where(RelationshipRecord.from_id == from_id)
            .order_by(RelationshipRecord.pk)
        ).all()
        return [_record_to_relationship(r) for r in rows]

    def delete_relationships(self, from_id: str) -> int:
        rows = self.session.exec(select(RelationshipRecord).where(RelationshipRecord.from_id == from_id)).all()
        for row in rows:
            self.session.delete(row)
        self.session.commit()
        return len(rows)
