"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Persistence exchanges opaque JSON snapshots (dict), never BoardState
    - Everything a store returns is passed through normalize_state before use

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the core functions that consume
      their results are never async; the controller orchestrates around them
"""

from collections.abc import Callable
from typing import Protocol


SnapshotListener = Callable[[dict | None], None]
Unsubscribe = Callable[[], None]


class SnapshotRepository(Protocol):
    """Contract for board snapshot persistence, implemented by the shell."""
    async def load(self) -> dict | None: ...
    async def save(self, snapshot: dict) -> None: ...
    def subscribe(self, on_change: SnapshotListener) -> Unsubscribe: ...
