#!/usr/bin/env python3
"""qBittorrent File Sync - remove download directory entries no torrent owns."""

__version__ = "1.0.0"
__license__ = "MIT"

from .config import Config
from .filesync import QbtFileSync

__all__ = ["QbtFileSync", "Config", "__version__"]
