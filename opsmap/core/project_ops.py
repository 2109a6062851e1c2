"""Project Operations — pure mutations over BoardState projects.

Invariants:
    - Rejected or no-op operations return the SAME BoardState object
    - A stored project always has a non-empty name and >= 1 existing campaign id
    - mode == launchable  =>  link is non-empty
    - mode == physical    =>  link == "" (whatever the input was)
    - update_project deletes a project whose merged membership is empty
    - update_project rejects (keeps unchanged) a launchable result with an empty link

Design Decisions:
    - add_project and update_project share _resolve_fields so both apply the same rules
      to post-merge values
    - Patches use snapshot (camelCase) keys, like drafts, so editor payloads pass through as-is
"""

from collections.abc import Mapping
from dataclasses import dataclass

from opsmap.core.board_state import (
    BoardState, Project, clean_text, create_id, unique_ids, with_updated_stamp,
)
from opsmap.core.domain_types import (
    LinkType, ProjectId, ProjectMode, sanitize_link_type, sanitize_project_mode,
)
from opsmap.core.integrity import enforce_membership_integrity, memberships_equal
from opsmap.core.project_links import infer_link_type, normalize_project_link


@dataclass(frozen=True)
class _ResolvedFields:
    name: str
    mode: ProjectMode
    link_type: LinkType
    link: str
    campaign_ids: tuple[str, ...]

    @property
    def missing_link(self) -> bool:
        return self.mode is ProjectMode.LAUNCHABLE and not self.link


def _resolve_fields(state: BoardState, values: Mapping) -> _ResolvedFields:
    raw_link = values.get("link")
    link_type = sanitize_link_type(values.get("linkType") or infer_link_type(raw_link))
    mode = sanitize_project_mode(values.get("mode"))
    link = "" if mode is ProjectMode.PHYSICAL else normalize_project_link(raw_link, link_type)
    valid_ids = state.campaign_ids
    return _ResolvedFields(
        name=clean_text(values.get("name")),
        mode=mode,
        link_type=link_type,
        link=link,
        campaign_ids=tuple(cid for cid in unique_ids(values.get("campaignIds")) if cid in valid_ids),
    )


def add_project(state: BoardState, draft: Mapping | None) -> BoardState:
    """Append a validated project. Any failed precondition is a silent no-op."""
    fields = _resolve_fields(state, draft or {})
    if not fields.name or not fields.campaign_ids or fields.missing_link:
        return state

    project = Project(
        id=ProjectId(create_id("project")),
        name=fields.name,
        mode=fields.mode,
        link_type=fields.link_type,
        link=fields.link,
        campaign_ids=fields.campaign_ids,
    )
    return with_updated_stamp(state, projects=state.projects + (project,))


def _merge_patch(project: Project, patch: Mapping) -> dict:
    """Overlay patch keys onto the project's current snapshot values."""
    merged = {
        "name": project.name,
        "mode": project.mode.value,
        "linkType": project.link_type.value,
        "link": project.link,
        "campaignIds": list(project.campaign_ids),
    }
    for key in merged:
        if patch.get(key) is not None:
            merged[key] = patch[key]
    return merged


def update_project(state: BoardState, project_id: str, patch: Mapping | None) -> BoardState:
    """Merge a patch onto a project and re-validate the result."""
    project = state.find_project(project_id)
    if project is None:
        return state

    fields = _resolve_fields(state, _merge_patch(project, patch or {}))

    if not fields.campaign_ids:
        # Losing the last membership deletes the project, like a campaign cascade.
        remaining = tuple(p for p in state.projects if p.id != project_id)
        return with_updated_stamp(state, projects=remaining)

    if fields.missing_link:
        return state

    name = fields.name or project.name
    if (
        name == project.name
        and fields.mode is project.mode
        and fields.link_type is project.link_type
        and fields.link == project.link
        and memberships_equal(fields.campaign_ids, project.campaign_ids)
    ):
        return state

    updated = Project(
        id=project.id,
        name=name,
        mode=fields.mode,
        link_type=fields.link_type,
        link=fields.link,
        campaign_ids=fields.campaign_ids,
    )
    projects = tuple(updated if p.id == project_id else p for p in state.projects)
    return with_updated_stamp(
        state, projects=enforce_membership_integrity(projects, state.campaign_ids),
    )


def delete_project(state: BoardState, project_id: str) -> BoardState:
    projects = tuple(p for p in state.projects if p.id != project_id)
    if len(projects) == len(state.projects):
        return state
    return with_updated_stamp(state, projects=projects)
