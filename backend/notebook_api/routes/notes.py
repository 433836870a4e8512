"""
Notebook API - Notes Route Handlers
===================================

What:  POST/GET /notes and GET/PUT/DELETE /notes/{note_id}.
How:   Each handler authenticates through `authorize`, then delegates to the
       owner-scoped `note_service`. Handlers only choose status codes and
       response bodies.

Dependency order matters: `authorize` is declared first, so a request with
a missing or invalid credential is rejected before the body is read and
before the store is touched.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from notebook_api.database import DocumentStore
from notebook_api.dependencies import document_body, get_store
from notebook_api.schemas.document import ErrorResponse, InsertResponse, MessageResponse
from notebook_api.services.access import authorize
from notebook_api.services.resource_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])

_AUTH_RESPONSES = {
    401: {"description": "Missing or malformed bearer credential", "model": ErrorResponse},
    403: {"description": "Invalid token", "model": ErrorResponse},
    500: {"description": "Store failure", "model": ErrorResponse},
}

_ID_RESPONSES = {
    **_AUTH_RESPONSES,
    400: {"description": "Malformed note ID", "model": ErrorResponse},
    404: {"description": "Note not found (or not owned by the caller)", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=InsertResponse,
    responses={**_AUTH_RESPONSES, 400: {"description": "Body is not a JSON object", "model": ErrorResponse}},
    summary="Create a note owned by the caller",
)
async def create_note(
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
    body: Dict[str, Any] = Depends(document_body),
) -> InsertResponse:
    note_id = await note_service.create(store, subject_id, body)
    return InsertResponse(acknowledged=True, inserted_id=str(note_id))


@router.get(
    "",
    response_model=List[Dict[str, Any]],
    responses=_AUTH_RESPONSES,
    summary="List the caller's notes",
)
async def list_notes(
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    return await note_service.list(store, subject_id)


@router.get(
    "/{note_id}",
    response_model=Dict[str, Any],
    responses=_ID_RESPONSES,
    summary="Get one of the caller's notes",
)
async def get_note(
    note_id: str,
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    return await note_service.get(store, subject_id, note_id)


@router.put(
    "/{note_id}",
    response_model=MessageResponse,
    responses=_ID_RESPONSES,
    summary="Merge fields into one of the caller's notes",
)
async def update_note(
    note_id: str,
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
    body: Dict[str, Any] = Depends(document_body),
) -> MessageResponse:
    """
    Shallow update: top-level fields in the body replace the stored ones,
    omitted fields are kept, and `owner`/`id` in the body are ignored.
    """
    await note_service.update(store, subject_id, note_id, body)
    return MessageResponse(message="Note updated successfully")


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses=_ID_RESPONSES,
    summary="Delete one of the caller's notes",
)
async def delete_note(
    note_id: str,
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    await note_service.delete(store, subject_id, note_id)
    return MessageResponse(message="Note deleted")
