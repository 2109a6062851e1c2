"""Infrastructure Layer — persistence and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core board rules (only error types and protocols)
    - All SQLAlchemy failures are mapped to SnapshotStoreError

Design Decisions:
    - Resilient wrappers over raw clients: rollback and error mapping in one place
"""
