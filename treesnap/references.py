"""Snapshot reference management."""

import logging
from datetime import datetime, timezone

from treesnap.exceptions import CommandError, GitReferenceError
from treesnap.executor import CommandExecutor
from treesnap.logging import get_logger
from treesnap.models.repository import ReferenceInfo
from treesnap.state import parse_reference_lines

TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
MAX_NAME_SUFFIX = 99


def utc_timestamp(now: datetime | None = None) -> str:
    """Format a UTC timestamp for reference names.

    Args:
        now: Moment to format (defaults to the current time)

    Returns:
        Timestamp in YYYYMMDD-HHMMSS form
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime(TIMESTAMP_FORMAT)


def is_within(name: str, prefix: str) -> bool:
    """Check whether a reference name lives under a namespace prefix."""
    prefix = prefix.rstrip("/")
    return name.startswith(prefix + "/")


class ReferenceManager:
    """Creates, resolves and deletes named references."""

    def __init__(self, executor: CommandExecutor, logger: logging.Logger | None = None):
        """Initialize the reference manager.

        Args:
            executor: Executor bound to the repository working directory
            logger: Logger receiving reference traces
        """
        self.executor = executor
        self.logger = logger or get_logger(__name__)

    def update_reference(self, name: str, commit_hash: str) -> None:
        """Point a reference at an object, creating it if needed.

        Args:
            name: Fully-qualified reference name
            commit_hash: Object id to point at

        Raises:
            GitReferenceError: If git rejects the update
        """
        self.logger.debug(f"Updating ref: {name} -> {commit_hash}")
        try:
            self.executor.execute(["update-ref", name, commit_hash])
        except CommandError as e:
            raise GitReferenceError(f"Failed to update reference {name}: {e}") from e
        self.logger.debug("Reference updated successfully")

    def delete_reference(self, name: str) -> None:
        """Delete a reference; a missing reference is not an error.

        Args:
            name: Fully-qualified reference name

        Raises:
            GitReferenceError: If an existing reference cannot be deleted
        """
        if not self.reference_exists(name):
            self.logger.debug(f"Reference does not exist, skipping delete: {name}")
            return

        self.logger.debug(f"Deleting ref: {name}")
        try:
            self.executor.execute(["update-ref", "-d", name])
        except CommandError as e:
            raise GitReferenceError(f"Failed to delete reference {name}: {e}") from e

    def reference_exists(self, name: str) -> bool:
        """Check whether a fully-qualified reference exists."""
        return self.executor.try_execute(["show-ref", "--verify", "--quiet", name])

    def resolve_reference(self, name: str) -> str | None:
        """Resolve a reference to the full object id it points to.

        Args:
            name: Reference or revision name

        Returns:
            Object id, or None if it cannot be resolved
        """
        output = self.executor.execute_optional(["rev-parse", "--verify", "--quiet", name])
        if output:
            return output.strip()
        return None

    @staticmethod
    def generate_timestamped_ref(base_path: str, timestamp: str | None = None) -> str:
        """Build "<base_path>/<timestamp>".

        Args:
            base_path: Namespace to create the name under
            timestamp: YYYYMMDD-HHMMSS stamp (defaults to the current UTC time)

        Returns:
            Reference name
        """
        return f"{base_path}/{timestamp or utc_timestamp()}"

    @staticmethod
    def generate_branch_ref(base_path: str, branch_name: str, timestamp: str) -> str:
        """Build "<base_path>/<branch_name>/<timestamp>"."""
        return f"{base_path}/{branch_name}/{timestamp}"

    def unique_ref(self, name: str) -> str:
        """Return ``name``, or ``name-N`` if the name is already taken.

        Args:
            name: Candidate reference name

        Returns:
            A reference name that does not exist yet

        Raises:
            GitReferenceError: If every suffix is taken
        """
        if not self.reference_exists(name):
            return name

        for n in range(1, MAX_NAME_SUFFIX + 1):
            candidate = f"{name}-{n}"
            if not self.reference_exists(candidate):
                self.logger.info(f"Reference {name} exists, using {candidate}")
                return candidate

        raise GitReferenceError(f"No free reference name for {name}")

    def list_snapshot_refs(self, prefix: str) -> list[ReferenceInfo]:
        """List the references under a snapshot namespace.

        Args:
            prefix: Namespace root, e.g. refs/treesnap/snapshot

        Returns:
            References under the prefix, sorted by name
        """
        output = self.executor.execute_optional(
            ["for-each-ref", "--format=%(refname) %(objectname)", prefix.rstrip("/")]
        )
        if output is None:
            return []
        return sorted(parse_reference_lines(output), key=lambda ref: ref.name)

    def delete_snapshot_ref(self, name: str, prefix: str) -> None:
        """Delete a reference, refusing anything outside the snapshot namespace.

        Args:
            name: Fully-qualified reference name
            prefix: Namespace root the reference must live under

        Raises:
            GitReferenceError: If the name is outside the namespace or deletion fails
        """
        if not is_within(name, prefix):
            raise GitReferenceError(f"Refusing to delete {name}: not under {prefix}")
        self.delete_reference(name)
        self.logger.info(f"Deleted snapshot reference {name}")
