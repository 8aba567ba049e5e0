"""
AdoptMe Backend - Pet Schemas
==============================

`adopted` and `owner` are read-only from the API's point of view: they are
changed exclusively by the adoption workflow, so PetCreate and PetUpdate
do not declare them.
"""

import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class PetRead(BaseModel):
    id: uuid.UUID
    name: str
    specie: str
    birth_date: Optional[date] = None
    adopted: bool = False
    owner: Optional[uuid.UUID] = Field(default=None, description="Owning user id when adopted")
    image: Optional[str] = None


class PetCreate(BaseModel):
    # Optional at the schema level so that missing fields surface as the
    # "Incomplete values" contract error rather than a schema error.
    name: Optional[str] = Field(default=None, max_length=100)
    specie: Optional[str] = Field(default=None, max_length=50)
    birth_date: Optional[date] = None


class PetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    specie: Optional[str] = Field(default=None, min_length=1, max_length=50)
    birth_date: Optional[date] = None
    image: Optional[str] = Field(default=None, max_length=500)


class MockPet(BaseModel):
    """A generated, not yet persisted, pet."""

    name: str
    specie: str
    birth_date: date
    adopted: bool = False
    image: str = ""
