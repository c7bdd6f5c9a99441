"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are pure and deterministic; violations raise CodeReviewError

Design Decisions:
    - Functional core (guard, lifecycle rules, comment rules) separated from the
      imperative shell (services/) that does the IO around it
"""
