"""Board Summary — entity counts and capability flags for the sidebar."""

from dataclasses import dataclass

from opsmap.core.board_state import BoardState
from opsmap.core.domain_types import MAX_CAMPAIGNS


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


@dataclass(frozen=True)
class BoardSummary:
    campaign_count: int
    project_count: int
    active_mission_count: int

    @property
    def at_campaign_limit(self) -> bool:
        return self.campaign_count >= MAX_CAMPAIGNS

    @property
    def can_add_project(self) -> bool:
        return self.campaign_count > 0

    @property
    def compact_text(self) -> str:
        return f"{self.campaign_count}c · {self.project_count}p · {self.active_mission_count}m"

    @property
    def verbose_text(self) -> str:
        return " · ".join((
            _plural(self.campaign_count, "campaign"),
            _plural(self.project_count, "project"),
            _plural(self.active_mission_count, "active mission"),
        ))


def summarize_board(state: BoardState) -> BoardSummary:
    return BoardSummary(
        campaign_count=len(state.campaigns),
        project_count=len(state.projects),
        active_mission_count=sum(1 for c in state.campaigns if c.current_mission),
    )
