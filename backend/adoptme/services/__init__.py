# Services package init
"""
AdoptMe Backend - Business Logic Services
==========================================

Each service receives the async session factory (and, where needed, the
settings or the FileService) through its constructor and opens one unit of
work per operation. Route handlers obtain instances from
`adoptme.dependencies`.
"""

from adoptme.services.adoption_service import AdoptionService
from adoptme.services.file_service import FileService
from adoptme.services.mock_service import MockService
from adoptme.services.pet_service import PetService
from adoptme.services.session_service import SessionService
from adoptme.services.user_service import UserService

__all__ = [
    "AdoptionService",
    "FileService",
    "MockService",
    "PetService",
    "SessionService",
    "UserService",
]
