# Models package init
"""
AdoptMe Backend - ORM Models
=============================

Importing this package registers every table on `Base.metadata`
(used by `create_all()` and Alembic).

    users      ← User
    user_pets  ← ownership association (User.pets)
    pets       ← Pet
    adoptions  ← Adoption
"""

from adoptme.models.adoption import Adoption
from adoptme.models.pet import Pet
from adoptme.models.user import User, UserRole, user_pets

__all__ = ["Adoption", "Pet", "User", "UserRole", "user_pets"]
