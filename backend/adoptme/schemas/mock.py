"""AdoptMe Backend - Mock Data Schemas"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from adoptme.schemas.pet import PetRead
from adoptme.schemas.user import UserRead


class GenerateDataRequest(BaseModel):
    # Accepts numbers or numeric strings ("10"); parsed by MockService
    users: Optional[Union[int, str]] = Field(default=None, description="Users to generate")
    pets: Optional[Union[int, str]] = Field(default=None, description="Pets to generate")


class GeneratedData(BaseModel):
    users: List[UserRead]
    pets: List[PetRead]
