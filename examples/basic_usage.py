"""Basic usage example for treesnap."""

from pathlib import Path

from treesnap import Repository, SnapshotConfig
from treesnap.exceptions import RestoreError

# Point the facade at a git checkout
repo = Repository(Path.cwd())

print(f"Branch: {repo.current_branch() or '(detached)'}")
print(f"Clean: {repo.is_clean()}")

# Snapshot the index and any uncommitted changes
try:
    result = repo.snapshot("before refactoring")
except RestoreError as e:
    print(f"Working tree not restored! Recover with: git stash apply {e.reference}")
    raise

print(f"Index snapshot: {result.index_ref}")
print(f"Working tree snapshot: {result.wtree_ref or '(nothing uncommitted)'}")

# Or drive the snapshot manager directly with explicit options
config = SnapshotConfig(message="index only", include_working_tree=False)
result = repo.snapshots.create_snapshot(config)
print(f"Index-only snapshot: {result.index_ref}")

# List what has been recorded so far
for ref in repo.list_snapshots():
    print(f"  {ref.name} -> {ref.hash[:8]}")
