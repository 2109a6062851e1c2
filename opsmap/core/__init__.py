"""Core Layer — pure board logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, schemas/, infrastructure/, db/ or models/
    - Every function is pure: (state, input) -> new state, or state -> placement data
    - Snapshots are never mutated in place

Design Decisions:
    - Functional core separated from imperative shell (services/ + infrastructure/)
"""
