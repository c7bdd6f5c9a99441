"""Infrastructure Layer — database sessions, logging, identity boundary.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Store failures surface as DatabaseError, never as raw driver exceptions
"""
