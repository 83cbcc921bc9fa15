"""Configuration settings for treesnap."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REF_PREFIX = "refs/treesnap/snapshot"


class TreesnapSettings(BaseSettings):
    """Settings for treesnap.

    These only supply defaults; the snapshot core receives its options as a
    SnapshotConfig value built from them.

    Attributes:
        ref_prefix: Root under which all snapshot references are created
        include_working_tree: Whether snapshots capture uncommitted changes
        include_untracked: Whether untracked files are folded into the capture
        lock_timeout_seconds: How long to wait for the repository snapshot lock
    """

    ref_prefix: str = DEFAULT_REF_PREFIX
    include_working_tree: bool = True
    include_untracked: bool = True
    lock_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="treesnap_",
        case_sensitive=False,
    )


# Global settings instance
_settings: TreesnapSettings | None = None


def get_settings() -> TreesnapSettings:
    """Get global settings instance.

    Returns:
        Global TreesnapSettings instance
    """
    global _settings
    if _settings is None:
        _settings = TreesnapSettings()
    return _settings


def reload_settings() -> TreesnapSettings:
    """Reload settings from environment.

    Returns:
        New TreesnapSettings instance
    """
    global _settings
    _settings = TreesnapSettings()
    return _settings
