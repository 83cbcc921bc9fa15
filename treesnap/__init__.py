"""Treesnap - restorable snapshots of a git index and working tree.

Treesnap records the staged index and the uncommitted working tree of a git
repository under a dedicated reference namespace, without moving HEAD,
touching branches or leaving the working tree changed. All mutation is done
by git itself.

Quick Start:
    >>> from treesnap import Repository
    >>>
    >>> repo = Repository("/path/to/checkout")
    >>> result = repo.snapshot("before refactoring")
    >>> result.index_ref
    'refs/treesnap/snapshot/index/main/20240101-120000'
    >>> result.wtree_ref  # None if there was nothing uncommitted
    'refs/treesnap/snapshot/wtree/20240101-120000'

Main Components:
    - Repository: Facade exposing snapshot(), is_clean(), current_branch()
    - SnapshotManager: Two-phase capture protocol
    - RepositoryState: Read-only repository queries
    - ReferenceManager: Snapshot reference naming and updates
    - CommandExecutor: Git subprocess invocation
"""

from treesnap.executor import CommandExecutor, CommandResult, CommandStatus
from treesnap.logging import get_logger
from treesnap.models.repository import CommitInfo, ReferenceInfo
from treesnap.models.snapshot import SnapshotConfig, SnapshotResult
from treesnap.references import ReferenceManager
from treesnap.repository import Repository
from treesnap.snapshot import SnapshotManager
from treesnap.state import RepositoryState

__all__ = [
    "Repository",
    "SnapshotManager",
    "RepositoryState",
    "ReferenceManager",
    "CommandExecutor",
    "CommandResult",
    "CommandStatus",
    "CommitInfo",
    "ReferenceInfo",
    "SnapshotConfig",
    "SnapshotResult",
    "get_logger",
]

__version__ = "0.1.0"
