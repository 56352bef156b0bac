"""Core Layer: pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (clock and id source are injected)

Design Decisions:
    - Functional core separated from imperative shell: the generation store
      awaits IO and calls these functions around it
"""
