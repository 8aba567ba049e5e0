"""
AdoptMe Backend - User SQLAlchemy Model
========================================

What:  ORM model for the `users` table plus the `user_pets` ownership
       association table.
How:   `User.pets` is a read-only, eagerly (selectin) loaded view over
       `user_pets`; the adoption workflow appends ownership by inserting
       into `user_pets` inside its transaction.

Table Design:
    - email carries a unique constraint (one account per address)
    - password stores the bcrypt hash, never the plain text
    - documents is a JSON list of {"name", "reference"} upload records
    - user_pets.pet_id is unique: a pet has at most one owner
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from adoptme.database import Base

if TYPE_CHECKING:
    from adoptme.models.pet import Pet


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


user_pets = Table(
    "user_pets",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("pet_id", Uuid, ForeignKey("pets.id"), primary_key=True, unique=True),
    Column("added_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)


class User(Base):
    """
    A registered person who can log in and adopt pets.

    Lifecycle:
        1. Created by registration, admin tooling or mock generation
        2. Mutated by profile CRUD, document uploads and logins
        3. Gains owned pets only through the adoption workflow
        4. Deletable only while owning no pets
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.USER.value,
    )
    documents: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )
    last_connection: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    pets: Mapped[List["Pet"]] = relationship(
        secondary=user_pets,
        lazy="selectin",
        viewonly=True,
        order_by=user_pets.c.added_at,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
