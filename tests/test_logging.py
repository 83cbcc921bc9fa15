"""Tests for logging configuration."""

import json
import logging

from treesnap.logging import JSONFormatter, get_logger, set_level


def test_get_logger_configures_package_logger():
    """Test module loggers hang off the configured treesnap logger."""
    logger = get_logger("treesnap.snapshot")

    package_logger = logging.getLogger("treesnap")
    assert logger.name == "treesnap.snapshot"
    assert package_logger.handlers
    assert package_logger.propagate is False


def test_set_level():
    """Test the package level can be raised for verbose output."""
    package_logger = logging.getLogger("treesnap")
    previous = package_logger.level
    try:
        set_level("INFO")
        assert package_logger.level == logging.INFO
    finally:
        set_level(previous)


def test_json_formatter_includes_snapshot_fields():
    """Test command and reference extras are emitted."""
    record = logging.LogRecord(
        name="treesnap.snapshot",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="Failed to restore working tree",
        args=(),
        exc_info=None,
    )
    record.command = "git stash apply stash@{0}"
    record.reference = "refs/treesnap/snapshot/wtree/20240101-000000"

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "ERROR"
    assert data["logger"] == "treesnap.snapshot"
    assert data["message"] == "Failed to restore working tree"
    assert data["command"] == "git stash apply stash@{0}"
    assert data["reference"].endswith("/wtree/20240101-000000")
    assert data["timestamp"].endswith("Z")
