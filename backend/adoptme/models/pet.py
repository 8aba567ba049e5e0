"""
AdoptMe Backend - Pet SQLAlchemy Model
=======================================

What:  ORM model for the `pets` table.

Invariant:
    adopted is true if and only if owner_id references a User. Only the
    adoption workflow flips `adopted`, and it does so with a conditional
    UPDATE that also sets owner_id (see PetRepository.try_mark_adopted).
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from adoptme.database import Base


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    specie: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    adopted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )
    # Relative reference under the upload root (e.g. "pets/1700000000-rex.png")
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', adopted={self.adopted})>"
