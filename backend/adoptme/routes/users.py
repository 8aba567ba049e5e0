"""
AdoptMe Backend - User Route Handlers
======================================

What:  Profile CRUD under /api/users and multipart document uploads.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from adoptme.dependencies import get_user_service, parse_id
from adoptme.schemas.common import (
    ErrorResponse,
    MessagePayloadResponse,
    MessageResponse,
    PayloadResponse,
)
from adoptme.schemas.user import DocumentRef, UserRead, UserUpdate
from adoptme.services import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.get("", response_model=PayloadResponse[List[UserRead]], summary="List users")
async def list_users(service: UserService = Depends(get_user_service)):
    return PayloadResponse[List[UserRead]](payload=await service.list_users())


@router.get(
    "/{uid}",
    response_model=PayloadResponse[UserRead],
    responses=NOT_FOUND,
    summary="Get a user",
)
async def get_user(uid: str, service: UserService = Depends(get_user_service)):
    return PayloadResponse[UserRead](payload=await service.get_user(parse_id(uid, "user")))


@router.put(
    "/{uid}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, 400: {"description": "Email already used", "model": ErrorResponse}},
    summary="Update a user's profile",
)
async def update_user(
    uid: str,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await service.update_user(parse_id(uid, "user"), body)
    return MessageResponse(message="User updated")


@router.delete(
    "/{uid}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, 400: {"description": "User owns pets", "model": ErrorResponse}},
    summary="Delete a user",
)
async def delete_user(uid: str, service: UserService = Depends(get_user_service)) -> MessageResponse:
    await service.delete_user(parse_id(uid, "user"))
    return MessageResponse(message="User deleted")


@router.post(
    "/{uid}/documents",
    response_model=MessagePayloadResponse[List[DocumentRef]],
    responses={**NOT_FOUND, 400: {"description": "No files uploaded", "model": ErrorResponse}},
    summary="Upload documents for a user",
)
async def upload_documents(
    uid: str,
    documents: Optional[List[UploadFile]] = File(default=None),
    service: UserService = Depends(get_user_service),
):
    user_id = parse_id(uid, "user")
    files = []
    for upload in documents or []:
        files.append((upload.filename, await upload.read()))
    stored = await service.upload_documents(user_id, files)
    return MessagePayloadResponse[List[DocumentRef]](
        message="Documents uploaded successfully",
        payload=stored,
    )
