"""Project Links — type inference, helper-built deep links, and link normalization.

Invariants:
    - normalize_project_link is idempotent for every link type
    - Web links always carry a scheme ("https://" prefixed when none is present)
    - Editor/vault links that already carry their own scheme pass through unchanged
    - strip_volatile_reader_params only touches play.google.com/books/reader links

Design Decisions:
    - One builder per link type in a dispatch dict, mirroring LINK_TYPE_HELP
    - The reader-position rewrite is a standalone rule applied after type-specific
      normalization, so it can be tested without any other link behavior
"""

import re
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from opsmap.core.board_state import clean_text
from opsmap.core.domain_types import LinkType, sanitize_link_type


URL_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][\w+.-]*://")

READER_HOST = "play.google.com"
READER_PATH = "/books/reader"
READER_VOLATILE_PARAM = "pg"

# Characters left unescaped in vault paths (matches encodeURIComponent).
_URI_COMPONENT_SAFE = "-_.!~*'()"

# Editor deep links share the "<scheme>://file/<absolute path>" shape.
_FILE_URI_SCHEMES: dict[LinkType, str] = {
    LinkType.VSCODE: "vscode",
    LinkType.CURSOR: "cursor",
    LinkType.ANTIGRAVITY: "antigravity",
}

LINK_TYPE_HELP: dict[LinkType, dict[str, str]] = {
    LinkType.WEB: {
        "label": "Web URL",
        "helper_label": "Domain or URL",
        "hint": "Use a domain or full URL. We auto-prefix https:// when needed.",
    },
    LinkType.OBSIDIAN: {
        "label": "Obsidian",
        "helper_label": "Vault path or full URI",
        "hint": "Input can be a path. We convert it to obsidian://open?path=...",
    },
    LinkType.VSCODE: {
        "label": "VS Code",
        "helper_label": "Absolute file path",
        "hint": "We convert paths to vscode://file/... so one click opens your editor.",
    },
    LinkType.CURSOR: {
        "label": "Cursor",
        "helper_label": "Absolute file path",
        "hint": "We convert paths to cursor://file/... for Cursor deep links.",
    },
    LinkType.ANTIGRAVITY: {
        "label": "Google Antigravity",
        "helper_label": "Absolute file path",
        "hint": "We convert paths to antigravity://file/... for Antigravity deep links.",
    },
    LinkType.CUSTOM: {
        "label": "Custom URI",
        "helper_label": "Full URI",
        "hint": "Use any URI your machine knows how to open.",
    },
}


# --- Inference ----------------------------------------------------------------

def infer_link_type(link: object) -> LinkType:
    """Classify a raw link by its scheme prefix."""
    cleaned = clean_text(link).lower()
    for link_type in (LinkType.OBSIDIAN, *_FILE_URI_SCHEMES):
        if cleaned.startswith(f"{link_type.value}://"):
            return link_type
    if cleaned.startswith(("http://", "https://")):
        return LinkType.WEB
    if "://" in cleaned:
        return LinkType.CUSTOM
    return LinkType.WEB


# --- Builders -----------------------------------------------------------------

def _build_web(cleaned: str) -> str:
    if URL_SCHEME_PATTERN.match(cleaned):
        return cleaned
    return f"https://{cleaned}"


def _build_obsidian(cleaned: str) -> str:
    if cleaned.startswith("obsidian://"):
        return cleaned
    return f"obsidian://open?path={quote(cleaned, safe=_URI_COMPONENT_SAFE)}"


def _build_file_uri(link_type: LinkType, cleaned: str) -> str:
    scheme = _FILE_URI_SCHEMES[link_type]
    if cleaned.startswith(f"{scheme}://"):
        return cleaned
    return f"{scheme}://file/{cleaned.lstrip('/')}"


def build_link_from_helper(link_type: object, helper_input: object) -> str:
    """Turn editor helper input (domain, path, or full URI) into a launchable link."""
    cleaned = clean_text(helper_input)
    if not cleaned:
        return ""

    resolved = sanitize_link_type(link_type)
    if resolved is LinkType.WEB:
        return _build_web(cleaned)
    if resolved is LinkType.OBSIDIAN:
        return _build_obsidian(cleaned)
    if resolved in _FILE_URI_SCHEMES:
        return _build_file_uri(resolved, cleaned)
    return cleaned


def normalize_project_link(link: object, link_type: object) -> str:
    """Normalize a stored project link for its type. Empty input stays empty."""
    built = build_link_from_helper(link_type, link)
    if not built:
        return ""
    return strip_volatile_reader_params(built)


# --- Reader position rewrite --------------------------------------------------

def strip_volatile_reader_params(link: str) -> str:
    """Drop the `pg` page anchor from Google Play Books reader links.

    The reader tracks the last read page itself; a captured `pg` pins the
    link to a stale page. Any other link is returned unchanged.
    """
    candidate = link if URL_SCHEME_PATTERN.match(link) else f"https://{link}"
    try:
        parts = urlsplit(candidate)
        host = (parts.hostname or "").lower()
    except ValueError:
        return link

    path = parts.path.rstrip("/") or "/"
    if host != READER_HOST or path != READER_PATH:
        return link

    query = parse_qsl(parts.query, keep_blank_values=True)
    if not any(key == READER_VOLATILE_PARAM for key, _ in query):
        return link

    kept = [(key, value) for key, value in query if key != READER_VOLATILE_PARAM]
    return urlunsplit(parts._replace(query=urlencode(kept)))
