"""Transfer Codec — export envelope building and validated import parsing.

Invariants:
    - wrap() always embeds a normalized snapshot dict
    - unwrap() either returns a normalized BoardState or raises TransferFormatError;
      there is no partial result
    - unwrap(serialize_envelope(wrap(s))).snapshot == normalize_state(s)

Design Decisions:
    - JSON parsing and the object check happen before pydantic so their reasons stay distinct
    - The first envelope error (field order: format, version, exportedAt, state) is reported
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime

from pydantic import ValidationError

from opsmap.core.board_snapshot import board_state_to_snapshot, normalize_state
from opsmap.core.board_state import BoardState, utc_now_iso
from opsmap.core.board_summary import BoardSummary, summarize_board
from opsmap.core.errors import TransferFormatError
from opsmap.schemas.transfer import EXPORT_FORMAT, EXPORT_VERSION, ExportEnvelope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """A validated, normalized import that has NOT been applied yet."""
    snapshot: BoardState
    summary: BoardSummary
    exported_at: str


def wrap(state: object) -> dict:
    """Build the export envelope for a board snapshot."""
    return {
        "format": EXPORT_FORMAT,
        "version": EXPORT_VERSION,
        "exportedAt": utc_now_iso(),
        "state": board_state_to_snapshot(normalize_state(state)),
    }


def serialize_envelope(envelope: dict) -> str:
    return json.dumps(envelope, indent=2, ensure_ascii=False) + "\n"


def suggest_export_filename(timestamp: datetime | None = None) -> str:
    moment = timestamp or datetime.now()
    return f"ops-map-export-{moment:%Y-%m-%d_%H-%M-%S}.json"


def _first_reason(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Import file is invalid."
    error = errors[0].get("ctx", {}).get("error")
    return str(error) if error is not None else errors[0]["msg"]


def unwrap(raw_text: str | bytes) -> ImportResult:
    """Parse and validate an export file, returning the normalized snapshot."""
    try:
        parsed = json.loads(raw_text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
        raise TransferFormatError("This file is not valid JSON.")

    if not isinstance(parsed, dict):
        raise TransferFormatError("Import file must be a JSON object.")

    try:
        envelope = ExportEnvelope.model_validate(parsed)
    except ValidationError as e:
        reason = _first_reason(e)
        logger.warning(f"Import rejected: {reason}", extra={"error_code": "TRANSFER_FORMAT_ERROR"})
        raise TransferFormatError(reason)

    snapshot = normalize_state(envelope.state)
    summary = summarize_board(snapshot)
    logger.info(
        "Import parsed",
        extra={
            "campaign_count": summary.campaign_count,
            "project_count": summary.project_count,
        },
    )
    return ImportResult(snapshot=snapshot, summary=summary, exported_at=envelope.exported_at)
