"""Error hierarchy tests — codes, categories and the error envelope."""

from opsmap.core.errors import (
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    SnapshotStoreError,
    TransferFormatError,
    UnknownLayoutStrategyError,
)


def test_transfer_format_error_carries_reason():
    error = TransferFormatError("This file is not valid JSON.")
    assert error.reason == "This file is not valid JSON."
    assert error.code == "TRANSFER_FORMAT_ERROR"
    assert error.category is ErrorCategory.VALIDATION
    assert error.recoverable


def test_to_dict_prefers_user_message():
    error = TransferFormatError(
        "raw reason", context=ErrorContext(user_message="Pick another file", entity_id="f1"),
    )
    envelope = error.to_dict()["error"]
    assert envelope["message"] == "Pick another file"
    assert envelope["context"]["entity_id"] == "f1"
    assert envelope["severity"] == "error"


def test_snapshot_store_error_is_critical_and_not_recoverable():
    error = SnapshotStoreError("disk full", "commit")
    assert error.severity is ErrorSeverity.CRITICAL
    assert error.category is ErrorCategory.STORAGE
    assert error.context.operation == "commit"
    assert "commit failed: disk full" in error.message
    assert not error.recoverable


def test_unknown_layout_strategy_lists_known_names():
    error = UnknownLayoutStrategyError("grid", ["ring", "slots"])
    assert error.name == "grid"
    assert "ring, slots" in str(error)
    assert error.category is ErrorCategory.CONFIGURATION
