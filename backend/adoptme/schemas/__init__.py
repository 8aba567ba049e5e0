# Schemas package init
"""
AdoptMe Backend - Pydantic API Schemas
=======================================

Request bodies, response payloads and the success/error envelopes. Schemas
are kept apart from the ORM models so the API never leaks storage-only
fields (password hashes, association rows).
"""
