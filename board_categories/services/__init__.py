"""Service Layer — orchestrates store calls around the pure core rules.

Invariants:
    - Services depend on CategoryStore and ChangeNotifier only, never on SQLAlchemy
    - Every operation re-reads from the store; nothing is cached across calls
"""
