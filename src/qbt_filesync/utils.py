#!/usr/bin/env python3
"""Utility functions for qBittorrent file sync."""

import logging
import ntpath
import os
import posixpath
import re
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Optional, Type

logger = logging.getLogger(__name__)


_BOOL_TRUE = frozenset(('true', '1', 'yes', 'on'))
_BOOL_FALSE = frozenset(('false', '0', 'no', 'off'))

_WINDOWS_ROOT = re.compile(r'^([A-Za-z]:([\\/]|$)|\\\\)')


def parse_bool(env_var: str, default: bool = False) -> bool:
    """
    Parse boolean environment variable.

    Args:
        env_var: Environment variable name
        default: Default value if not set

    Returns:
        Parsed boolean value
    """
    raw = os.environ.get(env_var)
    if raw is None:
        return default
    lower = raw.strip().lower()
    if lower not in _BOOL_TRUE and lower not in _BOOL_FALSE:
        logger.warning(f"{env_var}='{raw}' is not a recognized boolean, treating as False")
    return lower in _BOOL_TRUE


def parse_int(env_var: str, default: int, min_val: Optional[int] = None) -> int:
    """
    Parse integer environment variable with optional minimum value.

    Args:
        env_var: Environment variable name
        default: Default value if not set
        min_val: Minimum allowed value

    Returns:
        Parsed integer value
    """
    try:
        value = int(os.environ.get(env_var, str(default)))
        if min_val is not None and value < min_val:
            logger.warning(f"{env_var}={value} is below minimum {min_val}, using minimum")
            return min_val
        return value
    except (ValueError, TypeError):
        logger.warning(f"Invalid integer value for {env_var}, using default {default}")
        return default


def parse_optional_str(env_var: str) -> Optional[str]:
    """Read an environment variable, mapping blank values to None."""
    raw = os.environ.get(env_var, "").strip()
    return raw or None


def truncate_name(name: str, max_length: int = 60) -> str:
    """
    Truncate a torrent name for display.

    Args:
        name: Torrent name to truncate
        max_length: Maximum length

    Returns:
        Truncated name with ellipsis if needed
    """
    if len(name) <= max_length:
        return name
    return name[:max_length - 3] + "..."


def normalize_local_dir(path: str) -> str:
    """
    Normalize a local directory path lexically.

    Resolves ``.``/``..`` segments and trailing separators and makes the path
    absolute. Symlinks are not followed.

    Args:
        path: Local directory path

    Returns:
        Normalized absolute path
    """
    return os.path.normpath(os.path.abspath(os.path.expanduser(path)))


def is_windows_path(raw: str) -> bool:
    """Check whether a path starts with a drive letter or a UNC prefix."""
    return bool(_WINDOWS_ROOT.match(raw))


def path_flavour(raw: str) -> Type[PurePath]:
    """Pick the pure path class matching the syntax of a directory path."""
    return PureWindowsPath if is_windows_path(raw) else PurePosixPath


def to_daemon_path(raw: str, flavour: Optional[Type[PurePath]] = None) -> PurePath:
    """
    Parse a path as reported by the daemon into a normalized pure path.

    The daemon may run on another host or in a container, so its paths are
    never touched on the local filesystem. Whitespace is kept as is; it is
    part of valid entry names.

    Args:
        raw: Path string reported by the daemon
        flavour: Path syntax to parse with; detected from ``raw`` when omitted

    Returns:
        Normalized pure path

    Raises:
        ValueError: If the path is empty or blank
    """
    if not raw or not raw.strip():
        raise ValueError("empty path")
    if flavour is None:
        flavour = path_flavour(raw)
    if flavour is PureWindowsPath:
        return PureWindowsPath(ntpath.normpath(raw))
    return PurePosixPath(posixpath.normpath(raw))


def is_prefix(prefix: PurePath, path: PurePath) -> bool:
    """Check whether ``prefix`` is a proper ancestor of ``path``, with the path flavour's case rules."""
    if type(prefix) is not type(path):
        return False
    return prefix in path.parents


def is_direct_child(directory: str, candidate: str) -> bool:
    """
    Check that a composed local path sits directly inside a directory.

    Both paths are compared lexically after normalization.

    Args:
        directory: Normalized directory path
        candidate: Composed path to check

    Returns:
        True if ``candidate`` is an immediate child of ``directory``
    """
    normalized = os.path.normpath(candidate)
    if normalized == directory:
        return False
    return os.path.dirname(normalized) == directory
