# Routes package init
"""
AdoptMe Backend - API Route Handlers
=====================================

    adoptions   /api/adoptions
    users       /api/users
    pets        /api/pets
    sessions    /api/sessions
    mocks       /api/mocks
    health      /health
    home        /

Handlers stay thin: parse ids, call one service method, wrap the result in
the success envelope.
"""
