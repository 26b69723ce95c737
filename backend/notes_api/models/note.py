"""
Notes API — Note SQLAlchemy Model
===================================

What:  ORM model for the `notes` table, the single collection of the service.
How:   Inherits from the shared DeclarativeBase; the table is created by
       `Database.connect()` when it does not exist.
Who:   Used by NoteService for every CRUD operation.

Column notes:
    - id: UUID primary key assigned in Python on creation, never updated
    - title / content: the note body; title is required
    - created_at / updated_at: UTC timestamps maintained by NoteService
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, TypeDecorator, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware DateTime that always loads as UTC.

    SQLite drops tzinfo on storage; values read back are tagged as UTC so
    comparisons with `datetime.now(timezone.utc)` stay valid on every backend.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Note(Base):
    """
    A persisted note.

    Lifecycle:
        1. Created by POST /api/notes (created_at == updated_at)
        2. Mutated only by PUT /api/notes/{id} (updated_at refreshed)
        3. Removed only by DELETE /api/notes/{id}
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Listing returns notes in creation order
    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', updated_at='{self.updated_at}')>"
