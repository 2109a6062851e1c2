"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services call core functions, never re-implement board rules
    - IO and asyncio scheduling live here or in infrastructure/, never in core/

Design Decisions:
    - Functional core, imperative shell: the controller holds the only mutable reference
"""
