"""Create users, pets, user_pets and adoptions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial AdoptMe schema.
How:   Portable column types (sa.Uuid, sa.JSON) so the same migration runs on
       PostgreSQL and SQLite. Constraint names follow the naming convention
       declared on adoptme.database.Base.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        # bcrypt hash, never the plain password
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("documents", sa.JSON(), nullable=False),
        sa.Column("last_connection", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "pets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("specie", sa.String(50), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("adopted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("owner_id", sa.Uuid(), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_pets"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], name="fk_pets_owner_id_users"),
    )
    op.create_index("ix_pets_owner_id", "pets", ["owner_id"])

    op.create_table(
        "user_pets",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("pet_id", sa.Uuid(), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "pet_id", name="pk_user_pets"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_user_pets_user_id_users", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["pet_id"], ["pets.id"], name="fk_user_pets_pet_id_pets"),
        # A pet has at most one owner
        sa.UniqueConstraint("pet_id", name="uq_user_pets_pet_id"),
    )

    op.create_table(
        "adoptions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("pet_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_adoptions"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], name="fk_adoptions_owner_id_users"),
        sa.ForeignKeyConstraint(["pet_id"], ["pets.id"], name="fk_adoptions_pet_id_pets"),
        # Storage-level guard: one adoption per pet
        sa.UniqueConstraint("pet_id", name="uq_adoptions_pet_id"),
    )
    op.create_index("ix_adoptions_owner_id", "adoptions", ["owner_id"])
    op.create_index("idx_adoptions_created_at", "adoptions", [sa.text("created_at DESC")])


def downgrade() -> None:
    op.drop_index("idx_adoptions_created_at", table_name="adoptions")
    op.drop_index("ix_adoptions_owner_id", table_name="adoptions")
    op.drop_table("adoptions")
    op.drop_table("user_pets")
    op.drop_index("ix_pets_owner_id", table_name="pets")
    op.drop_table("pets")
    op.drop_table("users")
