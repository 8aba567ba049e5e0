"""
AdoptMe Backend - Application Package
======================================

Layered pet-adoption API:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← workflows, one transaction each
    ├─────────────────────────────────────┤
    │   Repositories / Models / Schemas   │  ← stores, ORM tables, API contracts
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy engine & sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
