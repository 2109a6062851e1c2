"""Membership Integrity — the one place that enforces project membership rules.

Invariants:
    - After enforce_membership_integrity, every project references only existing campaigns
    - No project with an empty membership survives (it is deleted, never orphaned)
    - Projects whose membership is already valid are returned as the same objects

Design Decisions:
    - Invoked after every structural mutation (campaign deletion, membership shrink)
      and by snapshot normalization, instead of per-call-site filters
"""

from dataclasses import replace

from opsmap.core.board_state import Project


def enforce_membership_integrity(
    projects: tuple[Project, ...], valid_campaign_ids: set[str],
) -> tuple[Project, ...]:
    """Strip unknown memberships and drop projects left with none."""
    kept: list[Project] = []
    for project in projects:
        memberships = tuple(
            cid for cid in project.campaign_ids if cid in valid_campaign_ids
        )
        if not memberships:
            continue
        if memberships != project.campaign_ids:
            project = replace(project, campaign_ids=memberships)
        kept.append(project)
    return tuple(kept)


def memberships_equal(a: tuple[str, ...], b: tuple[str, ...]) -> bool:
    """Membership sets are order-independent."""
    return set(a) == set(b)
