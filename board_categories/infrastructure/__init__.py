"""Infrastructure Layer — database, websocket and logging adapters.

Invariants:
    - Infrastructure implements the Protocols in core/repository_protocols.py
    - All SQLAlchemy exceptions are mapped to DatabaseError before leaving this layer
"""
