"""Board summary tests — counts, capability flags and display text."""

from opsmap.core.board_state import BoardState
from opsmap.core.board_summary import BoardSummary, summarize_board
from opsmap.core.campaign_ops import add_campaign, update_campaign_mission
from opsmap.core.domain_types import MAX_CAMPAIGNS
from opsmap.core.project_ops import add_project


def test_empty_board_summary():
    summary = summarize_board(BoardState())
    assert summary == BoardSummary(0, 0, 0)
    assert not summary.can_add_project
    assert not summary.at_campaign_limit
    assert summary.compact_text == "0c · 0p · 0m"


def test_summary_counts_active_missions():
    state = add_campaign(add_campaign(BoardState(), {"name": "A"}), {"name": "B"})
    a = state.campaigns[0].id
    state = update_campaign_mission(state, a, "Ship")
    state = add_project(state, {"name": "P", "mode": "physical", "campaignIds": [a]})

    summary = summarize_board(state)
    assert (summary.campaign_count, summary.project_count, summary.active_mission_count) == (2, 1, 1)
    assert summary.can_add_project
    assert summary.compact_text == "2c · 1p · 1m"
    assert summary.verbose_text == "2 campaigns · 1 project · 1 active mission"


def test_at_campaign_limit():
    assert BoardSummary(MAX_CAMPAIGNS, 0, 0).at_campaign_limit
    assert not BoardSummary(MAX_CAMPAIGNS - 1, 0, 0).at_campaign_limit
