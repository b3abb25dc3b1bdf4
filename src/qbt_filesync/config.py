#!/usr/bin/env python3
"""Configuration management for qBittorrent file sync."""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .constants import DEFAULT_STATUS_FILTER, DEFAULT_TIMEOUT, FORBIDDEN_TARGETS
from .errors import ConfigurationError
from .utils import normalize_local_dir, parse_bool, parse_int, parse_optional_str


@dataclass(frozen=True)
class ConnectionConfig:
    """qBittorrent connection configuration."""
    host: str = field(default_factory=lambda: os.environ.get("QB_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: parse_int("QB_PORT", 8080))
    username: str = field(default_factory=lambda: os.environ.get("QB_USERNAME", ""))
    password: str = field(default_factory=lambda: os.environ.get("QB_PASSWORD", ""))
    verify_ssl: bool = field(default_factory=lambda: parse_bool("QB_VERIFY_SSL", False))
    timeout: int = field(default_factory=lambda: parse_int("QB_TIMEOUT", DEFAULT_TIMEOUT, 1))


@dataclass(frozen=True)
class SyncConfig:
    """Target directory and pass behavior configuration."""
    directory: str = field(default_factory=lambda: os.environ.get("FILESYNC_DIRECTORY", "/var/torrents/"))
    # Same directory as seen by qBittorrent, when it runs with a different mount layout
    daemon_directory: Optional[str] = field(
        default_factory=lambda: parse_optional_str("FILESYNC_DAEMON_DIRECTORY")
    )
    status_filter: str = field(
        default_factory=lambda: os.environ.get("FILESYNC_STATUS_FILTER", DEFAULT_STATUS_FILTER)
    )
    dry_run: bool = field(default_factory=lambda: parse_bool("DRY_RUN", False))
    verbose: bool = field(default_factory=lambda: parse_bool("FILESYNC_VERBOSE", False))
    allow_empty: bool = field(default_factory=lambda: parse_bool("FILESYNC_ALLOW_EMPTY", False))
    audit_log: Optional[str] = field(default_factory=lambda: parse_optional_str("FILESYNC_AUDIT_LOG"))

    @property
    def local_directory(self) -> str:
        """Normalized local target directory."""
        return normalize_local_dir(self.directory)

    @property
    def matching_directory(self) -> str:
        """Target directory in qBittorrent's view, used only for matching."""
        return self.daemon_directory or self.local_directory

    @staticmethod
    def _is_root(path: str) -> bool:
        return os.path.dirname(path) == path

    def validate(self) -> None:
        """
        Reject target directories that must never be reconciled.

        Raises:
            ConfigurationError: If a directory is empty, ``.`` or the filesystem root
        """
        if not self.directory or not self.directory.strip():
            raise ConfigurationError("Invalid directory specified: empty path")
        if self.directory.strip() in FORBIDDEN_TARGETS or self._is_root(self.local_directory):
            raise ConfigurationError(f"Invalid directory specified: {self.directory!r}")
        if self.daemon_directory is not None and self.daemon_directory.strip() in FORBIDDEN_TARGETS:
            raise ConfigurationError(f"Invalid daemon directory specified: {self.daemon_directory!r}")
        if not self.status_filter:
            raise ConfigurationError("Status filter must not be empty")


@dataclass(frozen=True)
class Config:
    """Main configuration container."""
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        return cls()

    def with_overrides(self, connection: Optional[Dict[str, Any]] = None,
                       sync: Optional[Dict[str, Any]] = None) -> "Config":
        """
        Return a copy with the given non-None values replaced.

        Args:
            connection: ConnectionConfig field overrides
            sync: SyncConfig field overrides

        Returns:
            New configuration
        """
        conn_changes = {k: v for k, v in (connection or {}).items() if v is not None}
        sync_changes = {k: v for k, v in (sync or {}).items() if v is not None}
        return replace(
            self,
            connection=replace(self.connection, **conn_changes),
            sync=replace(self.sync, **sync_changes),
        )
