"""
Configuration for Log Keeper.

Settings are read from ``LOG_KEEPER_*`` environment variables once and cached.
Malformed values fail fast here rather than halfway through a run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from logkeeper.errors import ConfigurationError
from logkeeper.retention.policy import RetentionPolicy

DEFAULT_LOCAL_DIR = Path("storage") / "logs"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got: {raw!r}")


def _env_days(name: str, default: int | None) -> int | None:
    """Read a non-negative day count from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    try:
        days = int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got: {raw!r}") from e

    if days < 0:
        raise ConfigurationError(f"{name} must be >= 0, got: {days}")
    return days


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return Path(raw.strip()).expanduser()


@dataclass
class LogKeeperConfig:
    """
    Log Keeper settings.

    Attributes:
        enabled: Master switch, nothing runs when False
        enabled_remote: Whether upload and remote cleanup run
        local_retention_days: Days archives stay locally (0 = forever)
        upload_to_remote_after_days: Raw logs older than this get uploaded
        remote_retention_days: Days archives stay remotely after upload (0 = forever)
        remote_retention_days_calculated: Optional override of the derived
            remote horizon, expressed in file age
        local_dir: Directory holding the raw logs
        remote_dir: Directory used as the remote store
        remote_path: Sub-folder inside remote_dir, e.g. "proj1-prod"
        log_actions: Whether to write the dated action log file
        log_dir: Directory for the action log (defaults to local_dir)
    """

    enabled: bool = True
    enabled_remote: bool = True
    local_retention_days: int = 7
    upload_to_remote_after_days: int = 1
    remote_retention_days: int = 30
    remote_retention_days_calculated: int | None = None
    local_dir: Path = field(default_factory=lambda: DEFAULT_LOCAL_DIR)
    remote_dir: Path | None = None
    remote_path: str = ""
    log_actions: bool = True
    log_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate and normalize settings."""
        for name in (
            "local_retention_days",
            "upload_to_remote_after_days",
            "remote_retention_days",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got: {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got: {value}")

        self.local_dir = Path(self.local_dir)
        if self.remote_dir is not None:
            self.remote_dir = Path(self.remote_dir)
        self.remote_path = (self.remote_path or "").strip("/")
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir)

        # Builds the policy once so an invalid calculated horizon fails here
        self.policy()

    @property
    def action_log_dir(self) -> Path:
        """Directory for the dated action log."""
        return self.log_dir if self.log_dir is not None else self.local_dir

    def policy(self) -> RetentionPolicy:
        """Build the retention policy for a run."""
        return RetentionPolicy(
            enabled=self.enabled,
            enabled_remote=self.enabled_remote,
            local_retention_days=self.local_retention_days,
            upload_to_remote_after_days=self.upload_to_remote_after_days,
            remote_retention_days=self.remote_retention_days,
            calculated_override=self.remote_retention_days_calculated,
        )

    @classmethod
    def from_env(cls) -> "LogKeeperConfig":
        """
        Load configuration from LOG_KEEPER_* environment variables.

        Raises:
            ConfigurationError: If any value is malformed or negative
        """
        local_dir = _env_path("LOG_KEEPER_LOCAL_DIR") or DEFAULT_LOCAL_DIR

        return cls(
            enabled=_env_bool("LOG_KEEPER_ENABLED", True),
            enabled_remote=_env_bool("LOG_KEEPER_ENABLED_REMOTE", True),
            local_retention_days=_env_days("LOG_KEEPER_LOCAL_RETENTION_DAYS", 7),
            upload_to_remote_after_days=_env_days("LOG_KEEPER_UPLOAD_TO_REMOTE_DAYS", 1),
            remote_retention_days=_env_days("LOG_KEEPER_REMOTE_RETENTION_DAYS", 30),
            remote_retention_days_calculated=_env_days(
                "LOG_KEEPER_REMOTE_RETENTION_DAYS_CALCULATED", None
            ),
            local_dir=local_dir,
            remote_dir=_env_path("LOG_KEEPER_REMOTE_DIR"),
            remote_path=os.getenv("LOG_KEEPER_REMOTE_PATH", ""),
            log_actions=_env_bool("LOG_KEEPER_LOG", True),
            log_dir=_env_path("LOG_KEEPER_LOG_DIR"),
        )


_config: LogKeeperConfig | None = None


def get_config() -> LogKeeperConfig:
    """Get the cached configuration, loading it from the environment on first use."""
    global _config
    if _config is None:
        _config = LogKeeperConfig.from_env()
        logger.debug(f"Loaded Log Keeper config (local_dir={_config.local_dir})")
    return _config


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config
    _config = None
