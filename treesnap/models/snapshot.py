"""Snapshot configuration and result models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from treesnap.config import DEFAULT_REF_PREFIX, TreesnapSettings
from treesnap.models.repository import CommitInfo


class SnapshotConfig(BaseModel):
    """Options for a single snapshot call.

    Attributes:
        message: Commit message for the index snapshot (empty = auto-generated)
        include_working_tree: Whether to also capture uncommitted changes
        include_untracked: Whether untracked files are part of the capture
        ref_prefix: Root under which snapshot references are created
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(default="", description="Snapshot message")
    include_working_tree: bool = Field(default=True, description="Capture working tree")
    include_untracked: bool = Field(default=True, description="Capture untracked files")
    ref_prefix: str = Field(default=DEFAULT_REF_PREFIX, description="Reference namespace root")

    @field_validator("ref_prefix")
    @classmethod
    def validate_ref_prefix(cls, v: str) -> str:
        """Normalize the prefix and require it to live under refs/."""
        v = v.strip().rstrip("/")
        if not v.startswith("refs/") or v == "refs" or " " in v:
            raise ValueError(f"Invalid reference prefix: {v!r} (must start with 'refs/')")
        return v

    @property
    def index_base(self) -> str:
        """Namespace for index snapshots."""
        return f"{self.ref_prefix}/index"

    @property
    def wtree_base(self) -> str:
        """Namespace for working-tree snapshots."""
        return f"{self.ref_prefix}/wtree"

    @classmethod
    def from_settings(cls, settings: TreesnapSettings, **overrides: Any) -> "SnapshotConfig":
        """Build a config from settings, letting explicit options win.

        Args:
            settings: Settings providing defaults
            **overrides: Option values that take precedence

        Returns:
            New SnapshotConfig
        """
        values: dict[str, Any] = {
            "include_working_tree": settings.include_working_tree,
            "include_untracked": settings.include_untracked,
            "ref_prefix": settings.ref_prefix,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class SnapshotResult(BaseModel):
    """References created by one snapshot call."""

    model_config = ConfigDict(frozen=True)

    index_ref: str = Field(description="Reference to the index snapshot commit")
    wtree_ref: str | None = Field(default=None, description="Working-tree reference, if taken")
    head: CommitInfo = Field(description="HEAD the snapshot was taken against")
