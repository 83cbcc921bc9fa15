"""Git command execution."""

import logging
from enum import Enum
from pathlib import Path

from git import Git
from git.exc import GitCommandError, GitCommandNotFound
from pydantic import BaseModel, ConfigDict, Field

from treesnap.exceptions import CommandError
from treesnap.logging import get_logger


class CommandStatus(str, Enum):
    """Outcome of a single git invocation."""

    OK = "ok"
    FAILED = "failed"  # git ran and exited non-zero
    UNAVAILABLE = "unavailable"  # git could not be started


class CommandResult(BaseModel):
    """Tagged result of a git invocation.

    Attributes:
        args: Arguments passed to git
        status: Whether the command succeeded, failed or could not run
        output: Captured standard output (right-stripped)
        detail: Diagnostic for failed or unavailable commands
    """

    model_config = ConfigDict(frozen=True)

    args: tuple[str, ...] = Field(description="Arguments passed to git")
    status: CommandStatus = Field(description="Invocation outcome")
    output: str = Field(default="", description="Captured standard output")
    detail: str = Field(default="", description="Failure diagnostic")

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status is CommandStatus.OK


class CommandExecutor:
    """Runs git subcommands in a working directory.

    Every call spawns one git process and waits for it. There are no retries
    and no timeouts. Git gets no stdin (GitPython passes /dev/null); none of
    the commands used here read it.

    Attributes:
        working_dir: Directory git runs in
        git_executable: Program name or path used as argv[0]
    """

    def __init__(
        self,
        working_dir: Path | str | None = None,
        git_executable: str | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the executor.

        Args:
            working_dir: Directory to run git in (defaults to the current directory)
            git_executable: Git program to run (defaults to GitPython's configured git)
            logger: Logger receiving command traces
        """
        self.working_dir = Path(working_dir) if working_dir is not None else Path.cwd()
        self.git_executable = git_executable or Git.GIT_PYTHON_GIT_EXECUTABLE or "git"
        self.logger = logger or get_logger(__name__)
        self._git = Git(str(self.working_dir))

    def format_command(self, args: list[str] | tuple[str, ...]) -> str:
        """Build the full command line for diagnostics.

        Args:
            args: Git arguments

        Returns:
            Command line such as "git rev-parse HEAD"
        """
        return " ".join(["git", *args])

    def run(self, args: list[str] | tuple[str, ...]) -> CommandResult:
        """Run git and report the outcome without raising.

        Args:
            args: Git arguments

        Returns:
            CommandResult tagged ok, failed or unavailable
        """
        args = tuple(args)
        command = self.format_command(args)
        self.logger.debug(f"Executing: {command}")

        # GitPython would fall back to the process cwd
        if not self.working_dir.is_dir():
            detail = f"working directory does not exist: {self.working_dir}"
            self.logger.debug(f"Cannot run '{command}': {detail}")
            return CommandResult(args=args, status=CommandStatus.UNAVAILABLE, detail=detail)

        try:
            output = self._git.execute([self.git_executable, *args])
        except GitCommandNotFound as e:
            self.logger.debug(f"Could not start git for '{command}': {e}")
            return CommandResult(args=args, status=CommandStatus.UNAVAILABLE, detail=str(e))
        except GitCommandError as e:
            detail = f"exit status {e.status}"
            stderr = (e.stderr or "").strip()
            if stderr:
                detail = f"{detail}, {stderr}"
            self.logger.debug(f"Command failed: {command} ({detail})")
            return CommandResult(args=args, status=CommandStatus.FAILED, detail=detail)

        output = output.rstrip() if isinstance(output, str) else ""
        self.logger.debug(f"Command succeeded, output length: {len(output)}")
        return CommandResult(args=args, status=CommandStatus.OK, output=output)

    def execute(self, args: list[str] | tuple[str, ...]) -> str:
        """Run git and return its output.

        Args:
            args: Git arguments

        Returns:
            Captured standard output

        Raises:
            CommandError: If git cannot be started or exits non-zero
        """
        result = self.run(args)
        if not result.ok:
            raise CommandError(self.format_command(result.args), result.detail or "command failed")
        return result.output

    def try_execute(self, args: list[str] | tuple[str, ...]) -> bool:
        """Run git and report only whether it succeeded.

        Args:
            args: Git arguments

        Returns:
            True on success, False on any failure
        """
        return self.run(args).ok

    def execute_optional(self, args: list[str] | tuple[str, ...]) -> str | None:
        """Run git, treating any failure as "information unavailable".

        Args:
            args: Git arguments

        Returns:
            Captured output, or None if git failed or could not run
        """
        result = self.run(args)
        return result.output if result.ok else None
