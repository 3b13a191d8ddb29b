"""Board Categories Package — category lifecycle and ordering for board workspaces.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
