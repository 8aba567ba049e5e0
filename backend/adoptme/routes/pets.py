"""
AdoptMe Backend - Pet Route Handlers
=====================================

What:  Pet CRUD under /api/pets, plus multipart creation with an image.
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from adoptme.dependencies import get_pet_service, parse_id
from adoptme.schemas.common import ErrorResponse, MessageResponse, PayloadResponse
from adoptme.schemas.pet import PetCreate, PetRead, PetUpdate
from adoptme.services import PetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pets", tags=["Pets"])

NOT_FOUND = {404: {"description": "Pet not found", "model": ErrorResponse}}
INCOMPLETE = {400: {"description": "Incomplete values", "model": ErrorResponse}}


@router.get("", response_model=PayloadResponse[List[PetRead]], summary="List pets")
async def list_pets(service: PetService = Depends(get_pet_service)):
    return PayloadResponse[List[PetRead]](payload=await service.list_pets())


@router.post(
    "",
    response_model=PayloadResponse[PetRead],
    responses=INCOMPLETE,
    summary="Create a pet",
)
async def create_pet(body: PetCreate, service: PetService = Depends(get_pet_service)):
    return PayloadResponse[PetRead](payload=await service.create_pet(body))


@router.post(
    "/withimage",
    response_model=PayloadResponse[PetRead],
    responses=INCOMPLETE,
    summary="Create a pet with an uploaded image",
)
async def create_pet_with_image(
    name: Optional[str] = Form(default=None),
    specie: Optional[str] = Form(default=None),
    birth_date: Optional[date] = Form(default=None),
    image: Optional[UploadFile] = File(default=None),
    service: PetService = Depends(get_pet_service),
):
    content = await image.read() if image is not None else None
    pet = await service.create_pet_with_image(
        name=name,
        specie=specie,
        birth_date=birth_date,
        filename=image.filename if image is not None else None,
        content=content,
    )
    return PayloadResponse[PetRead](payload=pet)


@router.get(
    "/{pid}",
    response_model=PayloadResponse[PetRead],
    responses=NOT_FOUND,
    summary="Get a pet",
)
async def get_pet(pid: str, service: PetService = Depends(get_pet_service)):
    return PayloadResponse[PetRead](payload=await service.get_pet(parse_id(pid, "pet")))


@router.put("/{pid}", response_model=MessageResponse, responses=NOT_FOUND, summary="Update a pet")
async def update_pet(
    pid: str,
    body: PetUpdate,
    service: PetService = Depends(get_pet_service),
) -> MessageResponse:
    await service.update_pet(parse_id(pid, "pet"), body)
    return MessageResponse(message="pet updated")


@router.delete(
    "/{pid}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, 400: {"description": "Pet is already adopted", "model": ErrorResponse}},
    summary="Delete an available pet",
)
async def delete_pet(pid: str, service: PetService = Depends(get_pet_service)) -> MessageResponse:
    await service.delete_pet(parse_id(pid, "pet"))
    return MessageResponse(message="pet deleted")
