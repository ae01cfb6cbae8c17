"""Database table definitions for stored documents and their outbound relationships"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Column, DateTime, JSON, String, Text
from sqlmodel import Field, SQLModel


class DocumentRecord(SQLModel, table=True):
    """A stored document. source is the stringified document, the source of truth on read."""
    __tablename__ = "documents"
    id: str = Field(primary_key=True)
    identifier: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True, index=True))
    type: Optional[Any] = Field(default=None, sa_column=Column(JSON, nullable=True))
    mode: str = Field(default="expanded", sa_column=Column(String(16), nullable=False))
    source: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class RelationshipRecord(SQLModel, table=True):
    """One extracted edge. rel_id repeats for duplicate (from, type, to) triples."""
    __tablename__ = "relationships"
    pk: Optional[int] = Field(default=None, primary_key=True)
    rel_id: str = Field(..., sa_column=Column(String(64), nullable=False, index=True))
    type: str = Field(..., sa_column=Column(String(16), nullable=False))
    from_id: str = Field(..., sa_column=Column(Text, nullable=False, index=True))
    to: str = Field(..., sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(..., sa_column=Column(DateTime(timezone=True), nullable=False))
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
