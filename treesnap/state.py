"""Read-only repository state queries."""

import logging
from pathlib import Path

from treesnap.exceptions import RepositoryError
from treesnap.executor import CommandExecutor, CommandStatus
from treesnap.logging import get_logger
from treesnap.models.repository import CommitInfo, ReferenceInfo

BRANCH_PREFIX = "refs/heads/"
UNTRACKED_MARKER = "??"


def strip_branch_prefix(ref: str) -> str:
    """Strip refs/heads/ from a reference name.

    Args:
        ref: Fully-qualified reference name

    Returns:
        Short branch name, or ``ref`` unchanged if it is not under refs/heads/
    """
    if ref.startswith(BRANCH_PREFIX):
        return ref[len(BRANCH_PREFIX):]
    return ref


def parse_untracked(status_output: str) -> bool:
    """Check porcelain status output for untracked entries.

    Args:
        status_output: Output of ``git status --porcelain``

    Returns:
        True if any line starts with the "??" marker
    """
    return any(line[:2] == UNTRACKED_MARKER for line in status_output.splitlines())


def parse_reference_lines(output: str) -> list[ReferenceInfo]:
    """Parse "<name> <hash>" lines from for-each-ref.

    Lines without a separator are skipped.

    Args:
        output: Output of ``git for-each-ref --format='%(refname) %(objectname)'``

    Returns:
        Parsed references in output order
    """
    refs = []
    for line in output.splitlines():
        if not line:
            continue
        name, sep, ref_hash = line.partition(" ")
        if not sep:
            continue
        refs.append(
            ReferenceInfo(
                name=name,
                hash=ref_hash.strip(),
                is_branch=name.startswith(BRANCH_PREFIX),
            )
        )
    return refs


class RepositoryState:
    """Read-only queries over a repository, answered by git.

    Nothing is cached: every call asks git again.
    """

    def __init__(self, executor: CommandExecutor, logger: logging.Logger | None = None):
        """Initialize the state inspector.

        Args:
            executor: Executor bound to the repository working directory
            logger: Logger receiving query traces
        """
        self.executor = executor
        self.logger = logger or get_logger(__name__)

    def is_git_repository(self) -> bool:
        """Check whether the working directory is inside a git repository."""
        if not self.executor.working_dir.is_dir():
            return False
        return self.executor.try_execute(["rev-parse", "--git-dir"])

    def validate_repository(self) -> None:
        """Require the working directory to be a git repository.

        Raises:
            RepositoryError: If it is not a repository
        """
        if not self.is_git_repository():
            raise RepositoryError(f"not a git repository: {self.executor.working_dir}")
        self.logger.debug("Repository validation passed")

    def git_dir(self) -> Path | None:
        """Get the absolute path of the repository metadata directory.

        Returns:
            Path to the git directory, or None if not a repository
        """
        if not self.executor.working_dir.is_dir():
            return None
        output = self.executor.execute_optional(["rev-parse", "--absolute-git-dir"])
        return Path(output) if output else None

    def current_head(self) -> CommitInfo | None:
        """Resolve HEAD.

        Returns:
            CommitInfo for HEAD, or None if the repository has no commits
        """
        result = self.executor.run(["rev-parse", "--verify", "HEAD"])
        if not result.ok:
            if result.status is CommandStatus.UNAVAILABLE:
                self.logger.warning(f"Could not run git to resolve HEAD: {result.detail}")
            else:
                self.logger.debug("No HEAD found")
            return None

        head_hash = result.output.strip()
        branch = self.current_branch()

        # Missing subject is tolerated
        message = self.executor.execute_optional(["log", "-1", "--format=%s", head_hash])

        self.logger.debug(f"HEAD: {head_hash} on branch: {branch or 'detached'}")
        return CommitInfo(hash=head_hash, message=(message or "").strip(), branch=branch)

    def has_uncommitted_changes(self) -> bool:
        """Check for staged or unstaged modifications to tracked files."""
        status = self.executor.execute_optional(
            ["status", "--porcelain", "--untracked-files=no"]
        )
        return bool(status)

    def has_untracked_files(self) -> bool:
        """Check for untracked (not ignored) files."""
        status = self.executor.execute_optional(
            ["status", "--porcelain", "--untracked-files=normal"]
        )
        if status is None:
            return False
        return parse_untracked(status)

    def is_clean_working_tree(self) -> bool:
        """Check whether tracked files are unmodified.

        Untracked files do not make the tree dirty here; use
        has_untracked_files() for that.
        """
        return not self.has_uncommitted_changes()

    def current_branch(self) -> str | None:
        """Get the branch HEAD points to.

        Returns:
            Branch name, or None if HEAD is detached
        """
        ref = self.executor.execute_optional(["symbolic-ref", "-q", "HEAD"])
        if not ref:
            return None
        return strip_branch_prefix(ref.strip())

    def is_detached_head(self) -> bool:
        """Check whether HEAD points directly at a commit."""
        return self.current_branch() is None

    def list_references(self, pattern: str = "") -> list[ReferenceInfo]:
        """List references, optionally filtered by a for-each-ref pattern.

        Args:
            pattern: Glob or prefix pattern (empty for all references)

        Returns:
            References found; empty if git fails
        """
        args = ["for-each-ref", "--format=%(refname) %(objectname)"]
        if pattern:
            args.append(pattern)

        output = self.executor.execute_optional(args)
        if output is None:
            return []

        refs = parse_reference_lines(output)
        self.logger.debug(f"Found {len(refs)} references")
        return refs
