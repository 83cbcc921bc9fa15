"""Tests for the repository facade."""

import pytest
from git import Repo

from treesnap.config import TreesnapSettings
from treesnap.exceptions import GitReferenceError, RepositoryError
from treesnap.repository import Repository


@pytest.fixture
def repository(git_repo, event_logger):
    """Repository facade with default settings."""
    return Repository(git_repo, settings=TreesnapSettings(), logger=event_logger)


def test_snapshot(repository, git_repo):
    """Test snapshot with a message creates index and working tree refs."""
    (git_repo / "tracked.txt").write_text("modified\n")

    result = repository.snapshot("work in progress")

    repo = Repo(git_repo)
    assert repo.commit(result.index_ref).message.strip() == "work in progress"
    assert result.wtree_ref is not None
    assert (git_repo / "tracked.txt").read_text() == "modified\n"


def test_snapshot_options_override_settings(git_repo):
    """Test explicit options win over settings."""
    settings = TreesnapSettings(ref_prefix="refs/team/snap", include_working_tree=True)
    repository = Repository(git_repo, settings=settings)
    (git_repo / "tracked.txt").write_text("modified\n")

    result = repository.snapshot(include_working_tree=False)

    assert result.index_ref.startswith("refs/team/snap/index/")
    assert result.wtree_ref is None


def test_snapshot_not_a_repository(not_a_repo):
    """Test the facade surfaces precondition failures."""
    with pytest.raises(RepositoryError):
        Repository(not_a_repo).snapshot()


def test_is_clean(repository, git_repo):
    """Test is_clean tracks modifications but not untracked files."""
    assert repository.is_clean() is True

    (git_repo / "untracked.txt").write_text("new\n")
    assert repository.is_clean() is True

    (git_repo / "tracked.txt").write_text("modified\n")
    assert repository.is_clean() is False
    assert repository.is_clean() is False


def test_current_branch(repository, git_repo):
    """Test current_branch on a branch and detached."""
    repo = Repo(git_repo)
    assert repository.current_branch() == repo.active_branch.name
    assert repository.current_branch() == repository.current_branch()

    repo.git.checkout(repo.head.commit.hexsha)
    assert repository.current_branch() is None


def test_subcomponents_share_executor(repository):
    """Test advanced callers reach the state and reference components."""
    assert repository.state.executor is repository.executor
    assert repository.references.executor is repository.executor


def test_list_and_delete_snapshots(repository):
    """Test listing and deleting snapshots under the configured prefix."""
    result = repository.snapshot()

    names = [ref.name for ref in repository.list_snapshots()]
    assert names == [result.index_ref]

    repository.delete_snapshot(result.index_ref)
    assert repository.list_snapshots() == []


def test_delete_snapshot_outside_prefix(repository, git_repo):
    """Test branches cannot be deleted through the snapshot API."""
    branch = Repo(git_repo).active_branch.name

    with pytest.raises(GitReferenceError):
        repository.delete_snapshot(f"refs/heads/{branch}")


def test_missing_path_leaves_cwd_repository_alone(git_repo, tmp_path, monkeypatch):
    """Test a facade on a missing directory does not act on the repository in cwd."""
    result = Repository(git_repo).snapshot()
    monkeypatch.chdir(git_repo)

    repository = Repository(tmp_path / "does-not-exist", settings=TreesnapSettings())

    assert repository.list_snapshots() == []
    assert repository.current_branch() is None
    repository.delete_snapshot(result.index_ref)
    with pytest.raises(RepositoryError):
        repository.snapshot()

    assert Repo(git_repo).git.rev_parse("--verify", result.index_ref)
    assert [ref.name for ref in Repository(git_repo).list_snapshots()] == [result.index_ref]
