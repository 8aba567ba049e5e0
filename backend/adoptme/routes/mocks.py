"""
AdoptMe Backend - Mock Data Route Handlers
===========================================

What:  Fake data for demos and load tests under /api/mocks.
    GET  /mockingpets    100 generated pets (not stored)
    GET  /mockingusers   50 generated users (not stored)
    POST /generateData   generate and store {users, pets} records
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from adoptme.dependencies import get_mock_service
from adoptme.schemas.common import ErrorResponse, MessagePayloadResponse, PayloadResponse
from adoptme.schemas.mock import GenerateDataRequest, GeneratedData
from adoptme.schemas.pet import MockPet
from adoptme.schemas.user import MockUser
from adoptme.services import MockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mocks", tags=["Mocks"])

MOCK_PET_COUNT = 100
MOCK_USER_COUNT = 50


@router.get("/mockingpets", response_model=PayloadResponse[List[MockPet]], summary="Generate 100 pets")
async def mocking_pets(service: MockService = Depends(get_mock_service)):
    return PayloadResponse[List[MockPet]](payload=service.generate_pets(MOCK_PET_COUNT))


@router.get("/mockingusers", response_model=PayloadResponse[List[MockUser]], summary="Generate 50 users")
async def mocking_users(service: MockService = Depends(get_mock_service)):
    return PayloadResponse[List[MockUser]](payload=await service.generate_users(MOCK_USER_COUNT))


@router.post(
    "/generateData",
    response_model=MessagePayloadResponse[GeneratedData],
    responses={400: {"description": "Missing or invalid counts", "model": ErrorResponse}},
    summary="Generate and store users and pets",
)
async def generate_data(
    body: Optional[GenerateDataRequest] = None,
    service: MockService = Depends(get_mock_service),
):
    body = body or GenerateDataRequest()
    data, message = await service.generate_data(body.users, body.pets)
    return MessagePayloadResponse[GeneratedData](message=message, payload=data)
