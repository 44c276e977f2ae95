"""Infrastructure Layer — database, storage and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - SQLAlchemy and filesystem errors are logged and mapped at this boundary

Design Decisions:
    - Thin wrappers over raw clients: services depend on protocols, not paths
"""
