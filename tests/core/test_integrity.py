"""Membership integrity tests — the single enforcement pass."""

from opsmap.core.board_state import Project
from opsmap.core.domain_types import LinkType, ProjectMode
from opsmap.core.integrity import enforce_membership_integrity, memberships_equal


def _project(pid: str, *campaign_ids: str) -> Project:
    return Project(
        id=pid, name=pid, mode=ProjectMode.PHYSICAL,
        link_type=LinkType.WEB, link="", campaign_ids=campaign_ids,
    )


def test_valid_projects_are_returned_as_same_objects():
    project = _project("p", "a", "b")
    assert enforce_membership_integrity((project,), {"a", "b"})[0] is project


def test_unknown_memberships_are_stripped():
    kept = enforce_membership_integrity((_project("p", "a", "gone", "b"),), {"a", "b"})
    assert kept[0].campaign_ids == ("a", "b")


def test_projects_without_memberships_are_dropped():
    projects = (_project("p1", "gone"), _project("p2", "a"), _project("p3"))
    assert [p.id for p in enforce_membership_integrity(projects, {"a"})] == ["p2"]


def test_memberships_equal_ignores_order():
    assert memberships_equal(("a", "b"), ("b", "a"))
    assert not memberships_equal(("a",), ("a", "b"))
