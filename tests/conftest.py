"""Pytest configuration for treesnap tests."""

import logging

import pytest
from git import Repo

from treesnap.executor import CommandExecutor
from treesnap.snapshot import SnapshotManager


def configure_identity(repo: Repo) -> None:
    """Give a test repository a local identity so git can create commits."""
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", "test@example.com")
        cw.set_value("commit", "gpgsign", "false")


@pytest.fixture(autouse=True)
def isolate_git(tmp_path, monkeypatch):
    """Keep git from discovering repositories above the test directory."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    for var in ("TREESNAP_REF_PREFIX", "TREESNAP_INCLUDE_WORKING_TREE", "TREESNAP_INCLUDE_UNTRACKED"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def git_repo(tmp_path):
    """Create a temporary git repository with one commit."""
    repo_path = tmp_path / "work"
    repo_path.mkdir()
    repo = Repo.init(repo_path)
    configure_identity(repo)

    (repo_path / "tracked.txt").write_text("initial\n")
    (repo_path / "other.txt").write_text("other\n")
    repo.index.add(["tracked.txt", "other.txt"])
    repo.index.commit("Initial commit")

    return repo_path


@pytest.fixture
def empty_repo(tmp_path):
    """Create a temporary git repository without commits."""
    repo_path = tmp_path / "empty"
    repo_path.mkdir()
    configure_identity(Repo.init(repo_path))
    return repo_path


@pytest.fixture
def not_a_repo(tmp_path):
    """A plain directory outside any repository."""
    path = tmp_path / "plain"
    path.mkdir()
    return path


@pytest.fixture
def event_logger():
    """Logger injected into components so caplog can see their events."""
    logger = logging.getLogger("tests.treesnap.events")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def executor(git_repo, event_logger):
    """Executor bound to the test repository."""
    return CommandExecutor(git_repo, logger=event_logger)


@pytest.fixture
def manager(executor, event_logger):
    """SnapshotManager bound to the test repository."""
    return SnapshotManager(executor, lock_timeout=1.0, logger=event_logger)
