"""Custom exceptions for treesnap."""


class TreesnapError(Exception):
    """Base exception for all treesnap errors."""

    pass


class RepositoryError(TreesnapError):
    """Raised when the target is not a repository or has no commits."""

    pass


class CommandError(TreesnapError):
    """Raised when a git invocation that had to succeed did not.

    Attributes:
        command: Formatted command line that failed
        detail: Diagnostic from the failed invocation
    """

    def __init__(self, command: str, detail: str = "command failed"):
        self.command = command
        self.detail = detail
        super().__init__(f"git command '{command}' failed: {detail}")


class GitReferenceError(TreesnapError):
    """Raised when a reference mutation fails."""

    pass


class RestoreError(CommandError):
    """Raised when the working tree could not be restored from the stash.

    The working tree may be left with its changes stashed. The captured
    state is still reachable through ``reference`` when it was written.

    Attributes:
        reference: Durable snapshot reference, or None if it was not written
    """

    def __init__(self, command: str, detail: str, reference: str | None = None):
        self.reference = reference
        super().__init__(command, detail)


class SnapshotLockError(TreesnapError):
    """Raised when the repository snapshot lock cannot be acquired."""

    pass
