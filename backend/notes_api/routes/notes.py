"""
Notes API — Notes Route Handlers
==================================

What:  The five CRUD endpoints under /api/notes.
How:   Parses path/body, delegates to NoteService, returns JSON.
       Errors raised by the service are turned into responses by the
       exception handlers registered in main.py, so handlers stay linear.

Endpoints:
    GET    /api/notes        → 200 list
    GET    /api/notes/{id}   → 200 note
    POST   /api/notes        → 201 created note
    PUT    /api/notes/{id}   → 200 updated note
    DELETE /api/notes/{id}   → 200 confirmation
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status

from notes_api.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteDeleted,
    NoteResponse,
    NoteUpdate,
)
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

_ID_ERRORS = {
    400: {"description": "Malformed note id or body", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
    500: {"description": "Store error", "model": ErrorResponse},
}


def get_note_service(request: Request) -> NoteService:
    """Return the NoteService built for this application at startup."""
    return request.app.state.note_service


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all notes",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    return await service.list_notes()


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_ID_ERRORS,
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.get_note(note_id)


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.create_note(payload)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_ID_ERRORS,
    summary="Update a note",
    description="Applies any subset of title/content and refreshes updatedAt.",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.update_note(note_id, payload)


@router.delete(
    "/{note_id}",
    response_model=NoteDeleted,
    responses=_ID_ERRORS,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteDeleted:
    return await service.delete_note(note_id)
