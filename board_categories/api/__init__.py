"""API Layer — FastAPI routers, dependencies and error handlers.

Invariants:
    - The API layer maps error kinds to HTTP status; services never see HTTP
"""
