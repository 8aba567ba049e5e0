"""
AdoptMe Backend - Adoption Route Handlers
==========================================

What:  POST /api/adoptions/{uid}/{pid}, GET /api/adoptions,
       GET /api/adoptions/{aid}.
How:   Parses path ids, delegates to AdoptionService, wraps the result in the
       success envelope. Failures propagate to the global handlers.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from adoptme.dependencies import get_adoption_service, parse_id
from adoptme.schemas.adoption import AdoptionRead
from adoptme.schemas.common import ErrorResponse, MessageResponse, PayloadResponse
from adoptme.services import AdoptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/adoptions", tags=["Adoptions"])


@router.get(
    "",
    response_model=PayloadResponse[List[AdoptionRead]],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all adoptions",
)
async def list_adoptions(
    service: AdoptionService = Depends(get_adoption_service),
):
    return PayloadResponse[List[AdoptionRead]](payload=await service.list_adoptions())


@router.get(
    "/{aid}",
    response_model=PayloadResponse[AdoptionRead],
    responses={
        400: {"description": "Malformed adoption id", "model": ErrorResponse},
        404: {"description": "Adoption not found", "model": ErrorResponse},
    },
    summary="Get one adoption record",
)
async def get_adoption(
    aid: str,
    service: AdoptionService = Depends(get_adoption_service),
):
    adoption = await service.get_adoption(parse_id(aid, "adoption"))
    return PayloadResponse[AdoptionRead](payload=adoption)


@router.post(
    "/{uid}/{pid}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Pet is already adopted, or malformed id", "model": ErrorResponse},
        404: {"description": "User or pet not found", "model": ErrorResponse},
    },
    summary="Adopt a pet",
    description=(
        "Marks the pet adopted by the user, adds it to the user's pets and "
        "records the adoption, all in one transaction. The user is checked "
        "before the pet."
    ),
)
async def adopt_pet(
    uid: str,
    pid: str,
    service: AdoptionService = Depends(get_adoption_service),
) -> MessageResponse:
    user_id = parse_id(uid, "user")
    pet_id = parse_id(pid, "pet")
    await service.adopt_pet(user_id, pet_id)
    return MessageResponse(message="Pet adopted")
