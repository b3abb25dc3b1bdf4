#!/usr/bin/env python3
"""Constants and enumerations for qBittorrent file sync."""

from enum import Enum
from typing import Final

# Network constants
DEFAULT_TIMEOUT: Final[int] = 30
MAX_RETRY_ATTEMPTS: Final[int] = 3
RETRY_DELAY: Final[float] = 5.0

# qBittorrent status filter for finished torrents
DEFAULT_STATUS_FILTER: Final[str] = "completed"

# Target directories that are never accepted
FORBIDDEN_TARGETS: Final[frozenset] = frozenset(("", ".", "/"))

# Names that can never be a real directory entry
RESERVED_NAMES: Final[frozenset] = frozenset(("", ".", ".."))


class ClassificationCase(str, Enum):
    """How a torrent record was mapped onto the target directory."""
    SAVE_PATH = "save_path"
    SINGLE_FILE = "single_file"
    MULTI_FILE = "multi_file"
    OUT_OF_SCOPE = "out_of_scope"
    REJECTED = "rejected"

    @property
    def protects(self) -> bool:
        """Whether this case yields a protected entry."""
        return self in (
            ClassificationCase.SAVE_PATH,
            ClassificationCase.SINGLE_FILE,
            ClassificationCase.MULTI_FILE,
        )


class EntryOutcome(str, Enum):
    """What happened to one entry of the target directory."""
    PROTECTED = "protected"
    DELETED = "deleted"
    WOULD_DELETE = "would_delete"
    REJECTED = "rejected"
    FAILED = "failed"
