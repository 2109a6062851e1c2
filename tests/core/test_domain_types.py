"""Domain types tests — enum sanitizing and palette cycling.

Tests cover:
    - Unknown or missing modes collapse to launchable
    - Unknown or missing link types collapse to web
    - palette_color wraps around the default palette
"""

from opsmap.core.domain_types import (
    DEFAULT_CAMPAIGN_COLORS,
    MAX_CAMPAIGNS,
    LinkType,
    ProjectMode,
    palette_color,
    sanitize_link_type,
    sanitize_project_mode,
)


def test_known_mode_is_kept():
    assert sanitize_project_mode("physical") is ProjectMode.PHYSICAL
    assert sanitize_project_mode(ProjectMode.LAUNCHABLE) is ProjectMode.LAUNCHABLE


def test_unknown_mode_defaults_to_launchable():
    assert sanitize_project_mode("digital") is ProjectMode.LAUNCHABLE
    assert sanitize_project_mode(None) is ProjectMode.LAUNCHABLE
    assert sanitize_project_mode(3) is ProjectMode.LAUNCHABLE


def test_unknown_link_type_defaults_to_web():
    assert sanitize_link_type("cursor") is LinkType.CURSOR
    assert sanitize_link_type("ftp") is LinkType.WEB
    assert sanitize_link_type(None) is LinkType.WEB


def test_palette_color_wraps():
    assert palette_color(0) == DEFAULT_CAMPAIGN_COLORS[0]
    assert palette_color(len(DEFAULT_CAMPAIGN_COLORS)) == DEFAULT_CAMPAIGN_COLORS[0]
    assert palette_color(MAX_CAMPAIGNS - 1) == DEFAULT_CAMPAIGN_COLORS[MAX_CAMPAIGNS - 1]


def test_enums_serialize_as_plain_strings():
    assert ProjectMode.PHYSICAL.value == "physical"
    assert LinkType.ANTIGRAVITY == "antigravity"
