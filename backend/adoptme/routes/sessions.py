"""
AdoptMe Backend - Session Route Handlers
=========================================

What:  Registration, cookie login, current session and logout under
       /api/sessions.
How:   SessionService does the work; these handlers only move the session
       token in and out of the HTTP-only session cookie.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Request, Response

from adoptme.config import Settings
from adoptme.dependencies import get_session_service, get_settings
from adoptme.schemas.common import ErrorResponse, MessageResponse, PayloadResponse
from adoptme.schemas.session import LoginRequest, RegisterRequest, SessionUser
from adoptme.services import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


@router.post(
    "/register",
    response_model=PayloadResponse[uuid.UUID],
    responses={400: {"description": "Incomplete values or user exists", "model": ErrorResponse}},
    summary="Register a new user",
)
async def register(body: RegisterRequest, service: SessionService = Depends(get_session_service)):
    user_id = await service.register(body)
    return PayloadResponse[uuid.UUID](payload=user_id)


@router.post(
    "/login",
    response_model=MessageResponse,
    responses={
        400: {"description": "Incomplete values or incorrect password", "model": ErrorResponse},
        404: {"description": "User doesn't exist", "model": ErrorResponse},
    },
    summary="Log in and receive the session cookie",
)
async def login(
    body: LoginRequest,
    response: Response,
    service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    _, token = await service.login(body)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return MessageResponse(message="Logged in")


@router.get(
    "/current",
    response_model=PayloadResponse[SessionUser],
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="Return the user of the current session",
)
async def current(
    request: Request,
    service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings),
):
    user = service.current(request.cookies.get(settings.session_cookie_name))
    return PayloadResponse[SessionUser](payload=user)


@router.post("/logout", response_model=MessageResponse, summary="End the current session")
async def logout(
    request: Request,
    response: Response,
    service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    await service.logout(request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out")
