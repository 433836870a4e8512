"""
Notebook API - Folders Route Handlers
=====================================

What:  POST/GET /folders and GET/DELETE /folders/{folder_id}.
How:   Mirrors the notes contract through `folder_service`. Folders have no
       update route; PUT /folders/{folder_id} answers 405.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from notebook_api.database import DocumentStore
from notebook_api.dependencies import document_body, get_store
from notebook_api.schemas.document import ErrorResponse, InsertResponse, MessageResponse
from notebook_api.services.access import authorize
from notebook_api.services.resource_service import folder_service

router = APIRouter(prefix="/folders", tags=["Folders"])

_AUTH_RESPONSES = {
    401: {"description": "Missing or malformed bearer credential", "model": ErrorResponse},
    403: {"description": "Invalid token", "model": ErrorResponse},
    500: {"description": "Store failure", "model": ErrorResponse},
}

_ID_RESPONSES = {
    **_AUTH_RESPONSES,
    400: {"description": "Malformed folder ID", "model": ErrorResponse},
    404: {"description": "Folder not found (or not owned by the caller)", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=InsertResponse,
    responses={**_AUTH_RESPONSES, 400: {"description": "Body is not a JSON object", "model": ErrorResponse}},
    summary="Create a folder owned by the caller",
)
async def create_folder(
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
    body: Dict[str, Any] = Depends(document_body),
) -> InsertResponse:
    folder_id = await folder_service.create(store, subject_id, body)
    return InsertResponse(acknowledged=True, inserted_id=str(folder_id))


@router.get(
    "",
    response_model=List[Dict[str, Any]],
    responses=_AUTH_RESPONSES,
    summary="List the caller's folders",
)
async def list_folders(
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    return await folder_service.list(store, subject_id)


@router.get(
    "/{folder_id}",
    response_model=Dict[str, Any],
    responses=_ID_RESPONSES,
    summary="Get one of the caller's folders",
)
async def get_folder(
    folder_id: str,
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
) -> Dict[str, Any]:
    return await folder_service.get(store, subject_id, folder_id)


@router.delete(
    "/{folder_id}",
    response_model=MessageResponse,
    responses=_ID_RESPONSES,
    summary="Delete one of the caller's folders",
)
async def delete_folder(
    folder_id: str,
    subject_id: str = Depends(authorize),
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    await folder_service.delete(store, subject_id, folder_id)
    return MessageResponse(message="Folder deleted")
