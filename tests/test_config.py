"""Tests for configuration settings and snapshot options."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from treesnap.config import TreesnapSettings, get_settings, reload_settings
from treesnap.models.snapshot import SnapshotConfig


def test_default_settings():
    """Test default settings values."""
    settings = TreesnapSettings()

    assert settings.ref_prefix == "refs/treesnap/snapshot"
    assert settings.include_working_tree is True
    assert settings.include_untracked is True
    assert settings.lock_timeout_seconds == 10.0


@patch.dict(os.environ, {"TREESNAP_REF_PREFIX": "refs/ci/snapshot"})
def test_settings_from_env():
    """Test loading settings from environment variables."""
    settings = TreesnapSettings()

    assert settings.ref_prefix == "refs/ci/snapshot"


@patch.dict(os.environ, {"TREESNAP_INCLUDE_UNTRACKED": "false"})
def test_settings_untracked_from_env():
    """Test include_untracked from environment."""
    assert TreesnapSettings().include_untracked is False


def test_get_settings_singleton():
    """Test get_settings returns singleton instance."""
    assert get_settings() is get_settings()


def test_reload_settings():
    """Test reload_settings creates new instance."""
    settings1 = get_settings()
    settings2 = reload_settings()

    assert settings1 is not settings2


def test_snapshot_config_defaults():
    """Test SnapshotConfig defaults and derived namespaces."""
    config = SnapshotConfig()

    assert config.message == ""
    assert config.include_working_tree is True
    assert config.include_untracked is True
    assert config.index_base == "refs/treesnap/snapshot/index"
    assert config.wtree_base == "refs/treesnap/snapshot/wtree"


def test_snapshot_config_normalizes_prefix():
    """Test a trailing slash is stripped from the prefix."""
    assert SnapshotConfig(ref_prefix="refs/x/snap/").ref_prefix == "refs/x/snap"


@pytest.mark.parametrize("prefix", ["heads/main", "refs", "refs/", "refs/with space"])
def test_snapshot_config_rejects_bad_prefix(prefix):
    """Test prefixes outside refs/ are rejected."""
    with pytest.raises(ValidationError, match="Invalid reference prefix"):
        SnapshotConfig(ref_prefix=prefix)


def test_snapshot_config_is_frozen():
    """Test SnapshotConfig cannot be mutated."""
    config = SnapshotConfig()

    with pytest.raises(ValidationError):
        config.message = "changed"


def test_snapshot_config_from_settings():
    """Test settings supply defaults and non-None overrides win."""
    settings = TreesnapSettings(ref_prefix="refs/a/b", include_untracked=False)

    config = SnapshotConfig.from_settings(settings, message="m", include_untracked=None)

    assert config.ref_prefix == "refs/a/b"
    assert config.include_untracked is False
    assert config.message == "m"
