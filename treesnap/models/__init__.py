"""Repository state and snapshot models."""

from treesnap.models.repository import CommitInfo, ReferenceInfo
from treesnap.models.snapshot import SnapshotConfig, SnapshotResult

__all__ = [
    "CommitInfo",
    "ReferenceInfo",
    "SnapshotConfig",
    "SnapshotResult",
]
