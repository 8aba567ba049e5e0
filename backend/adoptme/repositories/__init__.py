# Repositories package init
"""
AdoptMe Backend - Persistence Stores
=====================================

    UserRepository      Identity store (users + owned pets)
    PetRepository       Pet store (+ try_mark_adopted compare-and-set)
    AdoptionRepository  Adoption record store (create/read only)

Repositories are constructed over the session of the current unit of work
and never commit on their own.
"""

from adoptme.repositories.adoption_repository import AdoptionRepository
from adoptme.repositories.pet_repository import PetRepository
from adoptme.repositories.user_repository import UserRepository

__all__ = ["AdoptionRepository", "PetRepository", "UserRepository"]
