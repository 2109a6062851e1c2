"""Pydantic Schemas — validation of payloads crossing the system boundary.

Invariants:
    - Schemas validate at the import boundary only; core/ never imports them
    - Deep entity normalization stays in core.board_snapshot

Design Decisions:
    - Separate from models: schemas are transfer contracts, models are persistence
"""
