"""Tests for data models."""

import pytest
from pydantic import ValidationError

from treesnap.models import CommitInfo, ReferenceInfo, SnapshotResult


def test_commit_info_defaults():
    """Test CommitInfo defaults for a detached HEAD."""
    info = CommitInfo(hash="a" * 40)

    assert info.message == ""
    assert info.branch is None


def test_commit_info_is_frozen():
    """Test CommitInfo cannot be mutated."""
    info = CommitInfo(hash="a" * 40, message="msg", branch="main")

    with pytest.raises(ValidationError):
        info.branch = "other"


def test_reference_info():
    """Test ReferenceInfo fields."""
    ref = ReferenceInfo(name="refs/heads/main", hash="b" * 40, is_branch=True)

    assert ref.is_branch is True
    assert ref.name == "refs/heads/main"


def test_snapshot_result_without_working_tree():
    """Test SnapshotResult with no working-tree reference."""
    result = SnapshotResult(
        index_ref="refs/treesnap/snapshot/index/main/20240101-000000",
        head=CommitInfo(hash="c" * 40, branch="main"),
    )

    assert result.wtree_ref is None
    assert result.head.branch == "main"
