"""Transfer Schemas — export envelope validated field by field, in a fixed order.

Invariants:
    - format must equal EXPORT_FORMAT, version must equal EXPORT_VERSION (bools rejected)
    - exportedAt must be a parseable ISO-8601 timestamp string
    - state must be an object whose campaigns and projects are both lists
    - Each validator raises ValueError with the user-facing reason

Design Decisions:
    - Fields default to None with validate_default=True so a MISSING field reports the
      same reason as an invalid one
    - Only the top-level shape is checked here; entity-level cleanup is normalize_state's job
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


EXPORT_FORMAT = "ops-map-export"
EXPORT_VERSION = 1


def parse_iso_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


class ExportEnvelope(BaseModel):
    """Versioned wrapper around a whole-board snapshot."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    format: str = Field(default=None, validate_default=True)
    version: int = Field(default=None, validate_default=True)
    exported_at: str = Field(default=None, alias="exportedAt", validate_default=True)
    state: dict[str, Any] = Field(default=None, validate_default=True)

    @field_validator("format", mode="before")
    @classmethod
    def check_format(cls, v: Any) -> Any:
        if v != EXPORT_FORMAT:
            raise ValueError(f'Unsupported import format. Expected "{EXPORT_FORMAT}".')
        return v

    @field_validator("version", mode="before")
    @classmethod
    def check_version(cls, v: Any) -> Any:
        if isinstance(v, bool) or v != EXPORT_VERSION:
            raise ValueError(f'Unsupported export version "{v}".')
        return v

    @field_validator("exported_at", mode="before")
    @classmethod
    def check_exported_at(cls, v: Any) -> Any:
        if parse_iso_timestamp(v) is None:
            raise ValueError("Import file is missing a valid exported timestamp.")
        return v

    @field_validator("state", mode="before")
    @classmethod
    def check_state_shape(cls, v: Any) -> Any:
        if (
            not isinstance(v, dict)
            or not isinstance(v.get("campaigns"), list)
            or not isinstance(v.get("projects"), list)
        ):
            raise ValueError("Import file state payload is malformed.")
        return v
