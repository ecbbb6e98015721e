"""
API Routes - FastAPI endpoints for members, photo uploads and pings.

- GET /ping: plain-text acknowledgement, never touches the store
- GET /health: service health, including database connectivity
- POST /upload: forwards one file to the media host
- GET/POST /members, PUT/DELETE /members/{member_id}: member CRUD

A missing JSON body is treated as an empty object.

Each handler catches the collaborators' tagged errors itself and maps
them to the status code of its route. Error bodies are rendered as
{"message": ...} by the HTTPException handler in main.py.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse

from ..core.config import Settings
from ..core.errors import (
    MemberNotFoundError,
    MemberValidationError,
    MissingFileError,
    StoreError,
    UploadError,
)
from ..core.utils import get_timestamp
from ..media.uploader import MediaUploader
from ..models.schemas import (
    ErrorResponse,
    HealthResponse,
    Member,
    MessageResponse,
    UploadResponse,
)
from ..storage.members import MemberStore
from .dependencies import get_media_uploader, get_member_store, get_settings

# Configure logging
logger = logging.getLogger(__name__)

# Create the router
router = APIRouter()


# ============================================================
# Utility Endpoints
# ============================================================

@router.get(
    "/ping",
    response_class=PlainTextResponse,
    summary="Keep-alive ping",
    description="Always answers 200, whatever the state of the database."
)
async def ping() -> str:
    return "pong"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the API and its database connection."
)
async def health_check(
    store: MemberStore = Depends(get_member_store),
    settings: Settings = Depends(get_settings)
) -> HealthResponse:
    database_connected = await store.ping()

    return HealthResponse(
        status="healthy" if database_connected else "degraded",
        service="members-api",
        version=settings.api_version,
        database_connected=database_connected,
        timestamp=get_timestamp()
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a photo",
    description="""
    Upload one file (multipart field `file`) to the media host.

    Returns the public `secure_url` to store in a member's `foto`
    field. The member itself is saved by a separate request; the two
    steps are independent.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "No file sent"},
        500: {"model": ErrorResponse, "description": "Media host failure"}
    }
)
async def upload_photo(
    file: Optional[UploadFile] = File(default=None),
    uploader: MediaUploader = Depends(get_media_uploader)
) -> UploadResponse:
    buffer = await file.read() if file is not None else None

    try:
        secure_url = await uploader.upload(
            buffer,
            filename=file.filename if file is not None else None,
            content_type=file.content_type if file is not None else None
        )
    except MissingFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    return UploadResponse(secure_url=secure_url)


# ============================================================
# Member Endpoints
# ============================================================

@router.get(
    "/members",
    response_model=list[Member],
    summary="List members",
    description="All members, sorted by nome ascending.",
    responses={500: {"model": ErrorResponse, "description": "Store failure"}}
)
async def list_members(store: MemberStore = Depends(get_member_store)) -> list[Member]:
    try:
        return await store.list_members()
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.post(
    "/members",
    response_model=Member,
    status_code=status.HTTP_201_CREATED,
    summary="Create a member",
    description="nome, dataNascimento and cargo are required.",
    responses={400: {"model": ErrorResponse, "description": "Invalid member or store failure"}}
)
async def create_member(
    fields: Any = Body(default=None),
    store: MemberStore = Depends(get_member_store)
) -> Member:
    try:
        return await store.create_member(fields if fields is not None else {})
    except (MemberValidationError, StoreError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.put(
    "/members/{member_id}",
    response_model=Member,
    summary="Update a member",
    description="Partial update: only the fields sent are changed.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid field or store failure"},
        404: {"model": ErrorResponse, "description": "Member not found"}
    }
)
async def update_member(
    member_id: str,
    fields: Any = Body(default=None),
    store: MemberStore = Depends(get_member_store)
) -> Member:
    try:
        return await store.update_member(member_id, fields if fields is not None else {})
    except MemberNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except (MemberValidationError, StoreError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.delete(
    "/members/{member_id}",
    response_model=MessageResponse,
    summary="Delete a member",
    responses={
        404: {"model": ErrorResponse, "description": "Member not found"},
        500: {"model": ErrorResponse, "description": "Store failure"}
    }
)
async def delete_member(
    member_id: str,
    store: MemberStore = Depends(get_member_store)
) -> MessageResponse:
    try:
        await store.delete_member(member_id)
    except MemberNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    return MessageResponse(message="Membro deletado com sucesso")
