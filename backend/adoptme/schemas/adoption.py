"""AdoptMe Backend - Adoption Schemas"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class AdoptionRead(BaseModel):
    id: uuid.UUID = Field(description="Adoption record id")
    owner: uuid.UUID = Field(description="Id of the adopting user")
    pet: uuid.UUID = Field(description="Id of the adopted pet")
    created_at: datetime = Field(description="When the adoption was recorded (UTC)")
