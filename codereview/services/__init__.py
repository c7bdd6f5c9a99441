"""Services Layer — the imperative shell around core/ rules.

Invariants:
    - Every public operation: validate input -> look up (404) -> authorize (403) -> write
    - One class per component, constructed per request with the request's AsyncSession
    - Multi-row writes (decision + status, cascading deletes) commit once or roll back
"""
