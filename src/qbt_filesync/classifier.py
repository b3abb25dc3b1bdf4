#!/usr/bin/env python3
"""Map torrent content paths onto entries of the target directory."""

import logging
from pathlib import PurePath
from typing import Optional

from .constants import RESERVED_NAMES, ClassificationCase
from .errors import UnclassifiableRecord
from .models import Classification, TorrentRecord
from .utils import is_prefix, path_flavour, to_daemon_path

logger = logging.getLogger(__name__)


class PathClassifier:
    """
    Decide which direct child of the target directory a torrent owns.

    All comparisons happen in qBittorrent's view of the filesystem and are
    purely lexical; nothing is read from disk.
    """

    def __init__(self, target_dir: str):
        """
        Initialize classifier.

        Args:
            target_dir: Target directory as seen by qBittorrent

        Raises:
            ValueError: If the target directory is empty
        """
        # Content and save paths are read with the target directory's syntax
        self.flavour = path_flavour(target_dir)
        self.target_dir = to_daemon_path(target_dir, self.flavour)

    def classify(self, record: TorrentRecord) -> Classification:
        """
        Classify one torrent record.

        Args:
            record: Torrent record from qBittorrent

        Returns:
            Classification with the protected entry name, if any
        """
        try:
            return self._classify(record)
        except UnclassifiableRecord as e:
            return Classification(record, ClassificationCase.REJECTED, reason=str(e))

    def _classify(self, record: TorrentRecord) -> Classification:
        try:
            content = to_daemon_path(record.content_path, self.flavour)
        except ValueError:
            raise UnclassifiableRecord("empty content path")

        if content == self.target_dir:
            raise UnclassifiableRecord("content path is the target directory itself")

        derived = self._from_save_path(record, content)
        if derived is not None:
            return derived

        parent = content.parent
        if parent == self.target_dir:
            return self._protect(record, ClassificationCase.SINGLE_FILE, content.name)
        if parent != content and parent.parent == self.target_dir:
            return self._protect(record, ClassificationCase.MULTI_FILE, parent.name)

        return Classification(
            record, ClassificationCase.OUT_OF_SCOPE,
            reason=f"saved outside {self.target_dir}"
        )

    def _from_save_path(self, record: TorrentRecord, content: PurePath) -> Optional[Classification]:
        """
        Derive the entry name from the save path, if it is usable.

        Returns None when the save path is absent, malformed or outside the
        target directory, in which case the depth heuristics apply.
        """
        if not record.save_path or not record.save_path.strip():
            return None
        try:
            save = to_daemon_path(record.save_path, self.flavour)
        except ValueError:
            return None

        if not is_prefix(save, content):
            logger.debug(
                f"Save path {record.save_path} does not prefix content path "
                f"{record.content_path}, falling back to directory depth"
            )
            return None

        if save != self.target_dir and not is_prefix(self.target_dir, save):
            return None

        # First segment below the target; equals the segment after save_path when they match
        name = content.parts[len(self.target_dir.parts)]
        return self._protect(record, ClassificationCase.SAVE_PATH, name)

    def _protect(self, record: TorrentRecord, case: ClassificationCase, name: str) -> Classification:
        if name in RESERVED_NAMES:
            raise UnclassifiableRecord(f"derived entry name {name!r} is not a valid entry")
        return Classification(record, case, entry_name=name)
