"""Repository query result models."""

from pydantic import BaseModel, ConfigDict, Field


class CommitInfo(BaseModel):
    """The commit HEAD resolved to at query time.

    Attributes:
        hash: Full object id of the commit
        message: First line of the commit message
        branch: Current branch name, None when HEAD is detached
    """

    model_config = ConfigDict(frozen=True)

    hash: str = Field(description="Full commit object id")
    message: str = Field(default="", description="Commit subject line")
    branch: str | None = Field(default=None, description="Branch name, None if detached")


class ReferenceInfo(BaseModel):
    """A reference as listed by git.

    Attributes:
        name: Fully-qualified reference path
        hash: Object id the reference points to
        is_branch: Whether the reference lives under refs/heads/
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Fully-qualified reference name")
    hash: str = Field(description="Target object id")
    is_branch: bool = Field(default=False, description="True if under refs/heads/")
