"""
AdoptMe Backend - User Schemas
===============================

API contracts for user profiles. The password hash is stored on the model
but never part of UserRead; owned pets are exposed as a list of pet ids.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from adoptme.models.user import UserRole


class DocumentRef(BaseModel):
    name: str = Field(description="Original filename of the uploaded document")
    reference: str = Field(description="Storage reference relative to the upload root")


class UserRead(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    role: UserRole
    pets: List[uuid.UUID] = Field(default_factory=list, description="Ids of owned pets")
    documents: List[DocumentRef] = Field(default_factory=list)
    last_connection: Optional[datetime] = None


class UserUpdate(BaseModel):
    """Profile fields writable through PUT /api/users/{uid}; all optional."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    role: Optional[UserRole] = None


class MockUser(BaseModel):
    """A generated, not yet persisted, user (password already hashed)."""

    first_name: str
    last_name: str
    email: str
    password: str
    role: UserRole
    pets: List[uuid.UUID] = Field(default_factory=list)
