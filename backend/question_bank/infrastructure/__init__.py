"""Infrastructure Layer - record store implementation, DB sessions, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every SQLAlchemy exception is mapped to StoreError at this boundary
"""
