"""Snapshot capture of the index and working tree.

A snapshot is taken in two phases:

1. Index snapshot: the staged index is written as a tree and committed on
   top of HEAD, without touching HEAD, the branch or the index. The commit is
   recorded under ``<prefix>/index/[<branch>/]<timestamp>``.
2. Working-tree snapshot (optional): uncommitted changes are stashed, the
   stash commit is recorded under ``<prefix>/wtree/<timestamp>``, the stash is
   re-applied and the transient stash entry dropped.

Only references under the configured prefix are ever written.
"""

import logging

from treesnap.exceptions import CommandError, RepositoryError, RestoreError
from treesnap.executor import CommandExecutor
from treesnap.lock import repository_lock
from treesnap.logging import get_logger
from treesnap.models.repository import CommitInfo
from treesnap.models.snapshot import SnapshotConfig, SnapshotResult
from treesnap.references import ReferenceManager, utc_timestamp
from treesnap.state import RepositoryState

TOOL_NAME = "treesnap"
STASH_REF = "refs/stash"
STASH_TOP = "stash@{0}"
NO_CHANGES_MESSAGE = "No local changes to save"


class SnapshotManager:
    """Drives the snapshot capture protocol against one repository.

    Snapshots of the same repository must not run concurrently; when
    ``lock_timeout`` is set, create_snapshot() enforces this with an advisory
    lock in the git directory.

    Attributes:
        executor: Command executor bound to the repository
        state: Repository state inspector
        references: Reference manager
        lock_timeout: Seconds to wait for the snapshot lock (None disables it)
    """

    def __init__(
        self,
        executor: CommandExecutor,
        lock_timeout: float | None = 10.0,
        logger: logging.Logger | None = None,
    ):
        """Initialize the snapshot manager.

        Args:
            executor: Executor bound to the repository working directory
            lock_timeout: Seconds to wait for the snapshot lock, None to skip locking
            logger: Logger receiving snapshot events (shared with sub-components)
        """
        self.logger = logger or get_logger(__name__)
        self.executor = executor
        self.state = RepositoryState(executor, logger=logger)
        self.references = ReferenceManager(executor, logger=logger)
        self.lock_timeout = lock_timeout

    def create_snapshot(self, config: SnapshotConfig | None = None) -> SnapshotResult:
        """Create a complete snapshot of the repository state.

        Args:
            config: Snapshot options (defaults to SnapshotConfig())

        Returns:
            SnapshotResult naming the references created

        Raises:
            RepositoryError: If preconditions fail
            CommandError: If a required git command fails
            GitReferenceError: If a snapshot reference cannot be written
            RestoreError: If the working tree could not be restored
            SnapshotLockError: If another snapshot holds the lock
        """
        if config is None:
            config = SnapshotConfig()

        self.logger.info(f"Creating snapshot with message: '{config.message}'")
        head = self.validate_snapshot_preconditions()

        git_dir = self.state.git_dir()
        if self.lock_timeout is None or git_dir is None:
            result = self._capture(config, head)
        else:
            with repository_lock(git_dir, timeout=self.lock_timeout, logger=self.logger):
                result = self._capture(config, head)

        self.logger.info("Snapshot created successfully")
        return result

    def _capture(self, config: SnapshotConfig, head: CommitInfo) -> SnapshotResult:
        index_ref = self.create_index_snapshot(config)
        self.logger.info(f"Index snapshot created: {index_ref}", extra={"reference": index_ref})

        wtree_ref = None
        if config.include_working_tree:
            wtree_ref = self.create_working_tree_snapshot(config)
            if wtree_ref:
                self.logger.info(
                    f"Working tree snapshot created: {wtree_ref}", extra={"reference": wtree_ref}
                )
            else:
                self.logger.info("No working tree changes to snapshot")

        return SnapshotResult(index_ref=index_ref, wtree_ref=wtree_ref, head=head)

    def validate_snapshot_preconditions(self) -> CommitInfo:
        """Require a repository with at least one commit.

        Returns:
            CommitInfo for the current HEAD

        Raises:
            RepositoryError: If not a repository or HEAD cannot be resolved
        """
        self.state.validate_repository()

        head = self.state.current_head()
        if head is None:
            raise RepositoryError("cannot create snapshot: no HEAD commit found")

        self.logger.debug("Snapshot preconditions validated")
        return head

    def create_index_snapshot(self, config: SnapshotConfig) -> str:
        """Commit the staged index on top of HEAD under the index namespace.

        Args:
            config: Snapshot options

        Returns:
            Name of the created reference

        Raises:
            RepositoryError: If HEAD cannot be resolved
            CommandError: If writing the tree or commit fails
            GitReferenceError: If the reference cannot be written
        """
        # HEAD may have moved since the precondition check
        head = self.state.current_head()
        if head is None:
            raise RepositoryError("cannot create snapshot without HEAD commit")

        tree_hash = self.executor.execute(["write-tree"]).strip()
        self.logger.debug(f"Tree hash: {tree_hash}")

        timestamp = utc_timestamp()
        message = self.generate_snapshot_message(config, timestamp)
        commit_hash = self._create_commit_tree(tree_hash, head.hash, message)

        if head.branch:
            ref_name = self.references.generate_branch_ref(
                config.index_base, head.branch, timestamp
            )
        else:
            ref_name = self.references.generate_timestamped_ref(config.index_base, timestamp)

        ref_name = self.references.unique_ref(ref_name)
        self.references.update_reference(ref_name, commit_hash)
        return ref_name

    def create_working_tree_snapshot(self, config: SnapshotConfig) -> str | None:
        """Capture uncommitted changes under the wtree namespace.

        The changes are stashed, recorded under a permanent reference and
        re-applied, leaving the working tree and index as they were.

        Args:
            config: Snapshot options

        Returns:
            Name of the created reference, or None if there was nothing to capture

        Raises:
            CommandError: If stashing fails or the new stash entry cannot be resolved
            GitReferenceError: If the reference cannot be written
            RestoreError: If the stash cannot be re-applied
        """
        if self.state.is_clean_working_tree() and (
            not config.include_untracked or not self.state.has_untracked_files()
        ):
            self.logger.debug("Working tree is clean, no snapshot needed")
            return None

        timestamp = utc_timestamp()
        stash_args = ["stash", "push"]
        if config.include_untracked:
            stash_args.append("--include-untracked")
        stash_args.extend(["-m", f"snapshot {timestamp}"])

        previous_top = self.references.resolve_reference(STASH_REF)
        push_output = self.executor.execute(stash_args)

        resolve_args = ["rev-parse", "--verify", "--quiet", STASH_REF]
        resolved = self.executor.run(resolve_args)
        stash_hash = resolved.output.strip() if resolved.ok else None
        if NO_CHANGES_MESSAGE in push_output or (
            stash_hash is not None and stash_hash == previous_top
        ):
            self.logger.info("Stash created no entry, nothing to snapshot")
            return None
        if stash_hash is None:
            # Changes are stashed but cannot be located; put them back first
            self._restore_working_tree(None)
            raise CommandError(
                self.executor.format_command(resolve_args),
                resolved.detail or "stash entry could not be resolved",
            )
        self.logger.debug(f"Stash hash: {stash_hash}")

        try:
            ref_name = self.references.unique_ref(
                self.references.generate_timestamped_ref(config.wtree_base, timestamp)
            )
            self.references.update_reference(ref_name, stash_hash)
        except Exception:
            # The stash entry stays: it is the only record besides the restored tree
            self._restore_working_tree(None)
            raise

        self._restore_working_tree(ref_name)
        self._drop_stash(stash_hash)
        return ref_name

    def _restore_working_tree(self, reference: str | None) -> None:
        """Re-apply the top stash entry.

        Raises:
            RestoreError: If neither an index-preserving nor a plain apply succeeds
        """
        args = ["stash", "apply", "--index", STASH_TOP]
        result = self.executor.run(args)
        if result.ok:
            self.logger.debug("Working tree restored from stash")
            return

        self.logger.warning(
            f"'{self.executor.format_command(args)}' failed ({result.detail}), "
            f"retrying without restoring the index"
        )
        args = ["stash", "apply", STASH_TOP]
        result = self.executor.run(args)
        if result.ok:
            self.logger.warning("Working tree restored, staged changes are now unstaged")
            return

        command = self.executor.format_command(args)
        recovery = f"'git stash apply {reference}'" if reference else f"'git stash apply {STASH_TOP}'"
        self.logger.error(
            f"Failed to restore working tree: {result.detail}. "
            f"Your changes are stashed; recover them with {recovery}",
            extra={"command": command, "reference": reference},
        )
        raise RestoreError(command, result.detail or "command failed", reference=reference)

    def _drop_stash(self, stash_hash: str) -> None:
        """Drop the transient stash entry; failures are only logged."""
        if self.references.resolve_reference(STASH_TOP) != stash_hash:
            self.logger.warning("Stash top changed during snapshot, not dropping it")
            return

        result = self.executor.run(["stash", "drop", STASH_TOP])
        if not result.ok:
            self.logger.warning(f"Failed to drop stash, continuing with snapshot: {result.detail}")

    def _create_commit_tree(self, tree_hash: str, parent_hash: str, message: str) -> str:
        commit_hash = self.executor.execute(
            ["commit-tree", tree_hash, "-p", parent_hash, "-m", message]
        ).strip()
        self.logger.debug(f"Created commit: {commit_hash}")
        return commit_hash

    def generate_snapshot_message(self, config: SnapshotConfig, timestamp: str | None = None) -> str:
        """Get the commit message for an index snapshot.

        Args:
            config: Snapshot options
            timestamp: Timestamp for the generated message (defaults to now)

        Returns:
            ``config.message`` if set, else "treesnap snapshot <timestamp>"
        """
        if config.message:
            return config.message
        return f"{TOOL_NAME} snapshot {timestamp or utc_timestamp()}"
