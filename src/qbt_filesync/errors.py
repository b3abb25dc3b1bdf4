#!/usr/bin/env python3
"""Exceptions raised during a file sync pass."""


class FileSyncError(Exception):
    """Base class for all file sync errors."""


class ConfigurationError(FileSyncError):
    """The configuration cannot be used for a pass."""


class DaemonUnreachable(FileSyncError):
    """qBittorrent could not be reached or refused the login."""


class DaemonQueryFailed(FileSyncError):
    """qBittorrent was reached but the torrent query failed."""


class DirectoryUnreadable(FileSyncError):
    """The target directory could not be listed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read directory {path}: {reason}")


class UnclassifiableRecord(FileSyncError):
    """A torrent record cannot be mapped to a protected entry."""


class PathTraversalSuspected(FileSyncError):
    """A composed deletion path escapes the target directory."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        super().__init__(f"Suspicious path detected for entry {name!r}: {path}")


class DeletionFailed(FileSyncError):
    """Removing one entry from the target directory failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error deleting {path}: {reason}")
