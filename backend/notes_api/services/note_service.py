"""
Notes API — Note Service (Storage Accessor)
=============================================

What:  Performs the five persistence operations on the notes table.
How:   Each call opens its own session from the injected Database handle,
       issues at most one write, commits, and returns a response schema.
Who:   Constructed once in the application factory; called by route handlers.

Error translation:
    malformed id                 → BadRequestError
    no matching row              → NotFoundError
    connection refused / dropped → StoreUnavailableError
    any other SQLAlchemy failure → InternalError
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import Database
from notes_api.exceptions import (
    BadRequestError,
    InternalError,
    NotesError,
    NotFoundError,
    StoreUnavailableError,
)
from notes_api.models.note import Note
from notes_api.schemas.note import NoteCreate, NoteDeleted, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)

_CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, DisconnectionError, OSError)


def parse_note_id(note_id: str) -> uuid.UUID:
    """Parse a path identifier, raising BadRequestError when it is not a UUID."""
    try:
        return uuid.UUID(str(note_id))
    except (ValueError, AttributeError, TypeError):
        raise BadRequestError(
            message=f"'{note_id}' is not a valid note id",
            field="id",
        ) from None


class NoteService:
    """
    Storage accessor for notes.

    Responsibilities:
        - list_notes(): full scan in creation order
        - get_note(): single note by id
        - create_note(): insert with generated id and timestamps
        - update_note(): partial update, refreshes updated_at
        - delete_note(): remove by id
    """

    def __init__(self, database: Database):
        self.database = database

    @asynccontextmanager
    async def _session(self, action: str, note_id: Optional[str] = None) -> AsyncIterator[AsyncSession]:
        """Open a session and translate driver failures into NotesError subclasses."""
        ctx = {"action": action}
        if note_id is not None:
            ctx["note_id"] = note_id

        try:
            async with self.database.session() as session:
                yield session
        except NotesError:
            raise
        except _CONNECTIVITY_ERRORS as e:
            logger.error("Store unavailable during %s: %s", action, str(e))
            raise StoreUnavailableError(context={**ctx, "error_type": type(e).__name__}) from e
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", action, str(e), exc_info=True)
            raise InternalError(context={**ctx, "error_type": type(e).__name__}) from e

    async def list_notes(self) -> List[NoteResponse]:
        """Return every stored note, oldest first. An empty store yields []."""
        async with self._session("list") as session:
            result = await session.execute(select(Note).order_by(Note.created_at, Note.id))
            notes = result.scalars().all()
            return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, note_id: str) -> NoteResponse:
        """
        Retrieve a single note.

        Raises:
            BadRequestError: note_id is not a UUID (→ 400)
            NotFoundError: no note with that id (→ 404)
        """
        uid = parse_note_id(note_id)
        async with self._session("get", note_id) as session:
            note = await session.get(Note, uid)
            if note is None:
                raise NotFoundError(resource="note", resource_id=str(uid))
            return NoteResponse.model_validate(note)

    async def create_note(self, data: NoteCreate) -> NoteResponse:
        """Persist a new note; created_at and updated_at share one instant."""
        now = datetime.now(timezone.utc)
        note = Note(
            id=uuid.uuid4(),
            title=data.title,
            content=data.content,
            created_at=now,
            updated_at=now,
        )
        async with self._session("create") as session:
            session.add(note)
            await session.commit()
        logger.info("Note created: %s", note.id)
        return NoteResponse.model_validate(note)

    async def update_note(self, note_id: str, data: NoteUpdate) -> NoteResponse:
        """
        Merge the supplied fields into an existing note.

        Fields absent from the request body are left untouched. updated_at
        always moves forward, even when the clock has not ticked since the
        previous write.

        Raises:
            BadRequestError: note_id is not a UUID
            NotFoundError: no note with that id
        """
        uid = parse_note_id(note_id)
        changes = data.model_dump(exclude_unset=True)

        async with self._session("update", note_id) as session:
            note = await session.get(Note, uid)
            if note is None:
                raise NotFoundError(resource="note", resource_id=str(uid))

            for field, value in changes.items():
                setattr(note, field, value)

            now = datetime.now(timezone.utc)
            if now <= note.updated_at:
                now = note.updated_at + timedelta(microseconds=1)
            note.updated_at = now

            await session.commit()

        logger.info("Note updated: %s (fields=%s)", uid, sorted(changes))
        return NoteResponse.model_validate(note)

    async def delete_note(self, note_id: str) -> NoteDeleted:
        """
        Remove a note with a single DELETE statement.

        Raises:
            BadRequestError: note_id is not a UUID
            NotFoundError: no row was deleted
        """
        uid = parse_note_id(note_id)
        async with self._session("delete", note_id) as session:
            result = await session.execute(
                delete(Note)
                .where(Note.id == uid)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(resource="note", resource_id=str(uid))
            await session.commit()

        logger.info("Note deleted: %s", uid)
        return NoteDeleted(id=uid)
