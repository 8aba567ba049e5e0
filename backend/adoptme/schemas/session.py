"""
AdoptMe Backend - Session Schemas
==================================

Register/login bodies declare every field optional: the required-fields
guard lives in SessionService so a missing field answers with the
"Incomplete values" contract error.
"""

import uuid
from typing import Optional

from pydantic import BaseModel

from adoptme.models.user import UserRole


class RegisterRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SessionUser(BaseModel):
    """Public user data carried inside the session token."""

    id: uuid.UUID
    name: str
    email: str
    role: UserRole
