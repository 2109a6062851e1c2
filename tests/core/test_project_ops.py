"""Project operations tests — validation on add, merge-and-revalidate on update.

Tests cover:
    - add_project preconditions: name, existing campaigns, link for launchable
    - Physical projects always store an empty link
    - Helper-style links are normalized per link type
    - update_project: merge, no-op detection, delete on empty membership,
      rejection of a launchable result without a link
"""

import pytest

from opsmap.core.board_state import BoardState
from opsmap.core.campaign_ops import add_campaign
from opsmap.core.domain_types import LinkType, ProjectMode
from opsmap.core.project_ops import add_project, delete_project, update_project


def _board(*names: str) -> BoardState:
    state = BoardState()
    for name in names:
        state = add_campaign(state, {"name": name})
    return state


def _with_project(state: BoardState, **draft) -> BoardState:
    draft.setdefault("name", "Novella")
    draft.setdefault("campaignIds", [state.campaigns[0].id])
    draft.setdefault("link", "https://example.com")
    return add_project(state, draft)


# -- add_project ---------------------------------------------------------------

def test_shared_project_across_two_campaigns():
    state = _board("Writing", "Building")
    writing, building = (c.id for c in state.campaigns)
    state = add_project(state, {
        "name": "Novella", "mode": "launchable", "linkType": "web",
        "link": "docs.new", "campaignIds": [writing, building],
    })
    assert len(state.campaigns) == 2
    assert len(state.projects) == 1
    project = state.projects[0]
    assert project.link.startswith("https://")
    assert project.campaign_ids == (writing, building)
    assert project.id.startswith("project-")


def test_launchable_without_link_is_rejected():
    state = _board("Writing")
    assert _with_project(state, link="") is state
    assert _with_project(state, link="   ") is state


def test_physical_project_link_is_forced_empty():
    state = _with_project(_board("Garden"), mode="physical", link="https://ignored.example")
    project = state.projects[0]
    assert project.mode is ProjectMode.PHYSICAL
    assert project.link == ""


@pytest.mark.parametrize("draft", [
    {"name": "  ", "campaignIds": ["x"]},
    {"name": "No campaigns", "campaignIds": []},
    {"name": "Ghost", "campaignIds": ["campaign-missing"]},
    {"name": "Bad ids", "campaignIds": "campaign-1"},
])
def test_add_project_rejections(draft):
    state = _board("Writing")
    draft = {"link": "https://example.com", **draft}
    assert add_project(state, draft) is state


def test_duplicate_and_unknown_memberships_are_filtered():
    state = _board("A", "B")
    a, b = (c.id for c in state.campaigns)
    state = _with_project(state, campaignIds=[a, "gone", a, b])
    assert state.projects[0].campaign_ids == (a, b)


def test_link_type_inferred_from_link():
    state = _with_project(_board("Notes"), link="obsidian://open?vault=Main")
    assert state.projects[0].link_type is LinkType.OBSIDIAN


def test_helper_path_built_for_editor_link_type():
    state = _with_project(_board("Code"), linkType="vscode", link="/Users/me/app/main.py")
    assert state.projects[0].link == "vscode://file/Users/me/app/main.py"
    assert state.projects[0].link_type is LinkType.VSCODE


# -- update_project ------------------------------------------------------------

def test_update_project_renames_and_restamps():
    state = _with_project(_board("Writing"))
    pid = state.projects[0].id
    updated = update_project(state, pid, {"name": "Short stories"})
    assert updated.projects[0].name == "Short stories"
    assert updated.projects[0].id == pid
    assert updated.updated_at > state.updated_at


def test_update_project_noops_return_same_state():
    state = _board("A", "B")
    a, b = (c.id for c in state.campaigns)
    state = _with_project(state, campaignIds=[a, b])
    pid = state.projects[0].id
    assert update_project(state, pid, {}) is state
    assert update_project(state, pid, {"name": "   "}) is state
    assert update_project(state, pid, {"campaignIds": [b, a]}) is state
    assert update_project(state, pid, {"link": None}) is state
    assert update_project(state, "project-missing", {"name": "x"}) is state


def test_removing_last_membership_deletes_project():
    state = _board("A")
    state = _with_project(state)
    pid = state.projects[0].id
    updated = update_project(state, pid, {"campaignIds": []})
    assert updated.projects == ()
    assert updated is not state


def test_update_to_unknown_campaigns_deletes_project():
    state = _with_project(_board("A"))
    updated = update_project(state, state.projects[0].id, {"campaignIds": ["gone"]})
    assert updated.projects == ()


def test_update_launchable_to_blank_link_is_rejected():
    state = _with_project(_board("A"))
    pid = state.projects[0].id
    assert update_project(state, pid, {"link": ""}) is state
    assert update_project(state, pid, {"link": "   "}) is state


def test_update_to_physical_clears_link():
    state = _with_project(_board("A"))
    updated = update_project(state, state.projects[0].id, {"mode": "physical"})
    assert updated.projects[0].mode is ProjectMode.PHYSICAL
    assert updated.projects[0].link == ""


def test_update_physical_back_to_launchable_needs_link():
    state = _with_project(_board("A"), mode="physical")
    pid = state.projects[0].id
    assert update_project(state, pid, {"mode": "launchable"}) is state
    relaunched = update_project(state, pid, {"mode": "launchable", "link": "docs.new"})
    assert relaunched.projects[0].link == "https://docs.new"


def test_update_membership_change_keeps_order_of_patch():
    state = _board("A", "B")
    a, b = (c.id for c in state.campaigns)
    state = _with_project(state, campaignIds=[a])
    updated = update_project(state, state.projects[0].id, {"campaignIds": [b, a]})
    assert updated.projects[0].campaign_ids == (b, a)


# -- delete_project ------------------------------------------------------------

def test_delete_project():
    state = _with_project(_board("A"))
    pid = state.projects[0].id
    assert delete_project(state, pid).projects == ()
    assert delete_project(state, "project-missing") is state
