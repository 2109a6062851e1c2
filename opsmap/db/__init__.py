"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)

Design Decisions:
    - aiosqlite driver: the board is persisted locally, no server required
"""
