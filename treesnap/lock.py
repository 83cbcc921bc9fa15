"""Advisory lock serializing snapshots of one repository.

Taking a working-tree snapshot stashes and re-applies the user's changes in
several git invocations. Two snapshots interleaving in that window would
restore the wrong stash entry, so the whole snapshot holds an exclusive
``fcntl.flock`` on a lock file inside the git directory.
"""

import fcntl
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from treesnap.exceptions import SnapshotLockError
from treesnap.logging import get_logger

LOCK_FILENAME = "treesnap.lock"
_POLL_INTERVAL = 0.05


@contextmanager
def repository_lock(
    git_dir: Path,
    timeout: float = 10.0,
    logger: logging.Logger | None = None,
) -> Iterator[Path]:
    """Hold the snapshot lock for a repository.

    Args:
        git_dir: Repository metadata directory
        timeout: Seconds to wait for the lock; 0 fails immediately if taken
        logger: Logger receiving lock traces

    Yields:
        Path of the lock file

    Raises:
        SnapshotLockError: If the lock is not acquired within ``timeout``
    """
    logger = logger or get_logger(__name__)
    lock_path = Path(git_dir) / LOCK_FILENAME
    deadline = time.monotonic() + max(timeout, 0.0)

    with lock_path.open("a") as lock_f:
        while True:
            try:
                fcntl.flock(lock_f.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise SnapshotLockError(
                        f"Another snapshot is in progress (lock held on {lock_path})"
                    ) from None
                time.sleep(_POLL_INTERVAL)

        logger.debug(f"Acquired snapshot lock: {lock_path}")
        try:
            yield lock_path
        finally:
            fcntl.flock(lock_f.fileno(), fcntl.LOCK_UN)
            logger.debug(f"Released snapshot lock: {lock_path}")
