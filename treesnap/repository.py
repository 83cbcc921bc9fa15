"""Main repository API for snapshots."""

import logging
from pathlib import Path

from treesnap.config import TreesnapSettings, get_settings
from treesnap.executor import CommandExecutor
from treesnap.models.repository import ReferenceInfo
from treesnap.models.snapshot import SnapshotConfig, SnapshotResult
from treesnap.references import ReferenceManager
from treesnap.snapshot import SnapshotManager
from treesnap.state import RepositoryState


class Repository:
    """Main entry point for snapshotting a repository.

    Attributes:
        path: Repository working directory
        settings: Settings supplying snapshot defaults
        executor: CommandExecutor bound to ``path``
        snapshots: SnapshotManager driving the capture protocol
    """

    def __init__(
        self,
        path: Path | str | None = None,
        settings: TreesnapSettings | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the repository facade.

        Args:
            path: Repository working directory (defaults to the current directory)
            settings: Settings to use (defaults to the global settings)
            logger: Logger shared by all components
        """
        self.path = Path(path) if path is not None else Path.cwd()
        self.settings = settings or get_settings()
        self.executor = CommandExecutor(self.path, logger=logger)
        self.snapshots = SnapshotManager(
            self.executor,
            lock_timeout=self.settings.lock_timeout_seconds,
            logger=logger,
        )

    @property
    def state(self) -> RepositoryState:
        """Repository state inspector."""
        return self.snapshots.state

    @property
    def references(self) -> ReferenceManager:
        """Reference manager."""
        return self.snapshots.references

    def config(self, **overrides) -> SnapshotConfig:
        """Build a SnapshotConfig from settings plus explicit overrides."""
        return SnapshotConfig.from_settings(self.settings, **overrides)

    def snapshot(self, message: str = "", **options) -> SnapshotResult:
        """Snapshot the index and, by default, the working tree.

        Args:
            message: Index snapshot commit message (empty = auto-generated)
            **options: Other SnapshotConfig fields (include_working_tree, ...)

        Returns:
            SnapshotResult naming the references created
        """
        return self.snapshots.create_snapshot(self.config(message=message, **options))

    def is_clean(self) -> bool:
        """Check whether tracked files are unmodified."""
        return self.state.is_clean_working_tree()

    def current_branch(self) -> str | None:
        """Get the current branch, None when HEAD is detached."""
        return self.state.current_branch()

    def list_snapshots(self) -> list[ReferenceInfo]:
        """List snapshot references under the configured prefix."""
        return self.references.list_snapshot_refs(self.config().ref_prefix)

    def delete_snapshot(self, name: str) -> None:
        """Delete a snapshot reference under the configured prefix.

        Args:
            name: Fully-qualified reference name

        Raises:
            GitReferenceError: If the name is outside the prefix or deletion fails
        """
        self.references.delete_snapshot_ref(name, self.config().ref_prefix)
