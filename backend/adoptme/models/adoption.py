"""
AdoptMe Backend - Adoption SQLAlchemy Model
============================================

What:  ORM model for the `adoptions` table: one immutable row per completed
       adoption, linking the adopting user to the adopted pet.

Table Design:
    - Written only by AdoptionService.adopt_pet, never updated or deleted
    - pet_id is unique: a second adoption of the same pet cannot be stored,
      even if two requests slipped past the conditional pet update
    - created_at indexed for newest-first listings
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from adoptme.database import Base


class Adoption(Base):
    __tablename__ = "adoptions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    pet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("pets.id"),
        nullable=False,
        unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_adoptions_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Adoption(id={self.id}, owner_id={self.owner_id}, pet_id={self.pet_id})>"
