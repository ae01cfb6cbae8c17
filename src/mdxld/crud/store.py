"""Storage boundary: persist Documents and the relationships extracted from them"""

from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel

from mdxld.core.models import Document, Relationship
from mdxld.core.stringify import stringify
from mdxld.core.utils.hashing import sha256


SaveStatus = Literal["created", "updated", "unchanged"]


class SaveResult(BaseModel):
    id:     str
    status: SaveStatus
    hash:   str


def content_hash(doc: Document) -> str:
    """Hash of the stringified document; equal Documents hash equal."""
    return sha256(stringify(doc))


class DocumentStore(ABC):
    @abstractmethod
    def save(self, id: str, doc: Document) -> SaveResult:
        """Insert or replace the document stored under id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, id: str) -> Document | None:
        raise NotImplementedError

    @abstractmethod
    def ingest(self, relationships: list[Relationship]) -> None:
        """Append relationships; duplicates are stored as given."""
        raise NotImplementedError

    @abstractmethod
    def relationships_from(self, from_id: str) -> list[Relationship]:
        """Relationships whose source is from_id, in ingest order."""
        raise NotImplementedError

    @abstractmethod
    def delete_relationships(self, from_id: str) -> int:
        """Drop every relationship from from_id; returns how many were removed."""
        raise NotImplementedError
