#!/usr/bin/env python3
"""Reconcile the target directory against the protected set."""

import logging
import os
import shutil
from typing import Iterable, List, Optional

from .constants import RESERVED_NAMES, EntryOutcome
from .errors import DeletionFailed, DirectoryUnreadable, PathTraversalSuspected
from .models import EntryResult, ProtectedSet, ReconcileReport
from .utils import is_direct_child, normalize_local_dir

logger = logging.getLogger(__name__)


class DirectoryReconciler:
    """Deletes direct children of the target directory not owned by a torrent."""

    def __init__(self, directory: str, dry_run: bool = False):
        """
        Initialize reconciler.

        Args:
            directory: Local target directory
            dry_run: If True, report deletions without touching the filesystem
        """
        self.directory = normalize_local_dir(directory)
        self.dry_run = dry_run

    def list_entries(self) -> List[str]:
        """
        List the direct children of the target directory.

        Returns:
            Sorted entry names

        Raises:
            DirectoryUnreadable: If the directory is missing or cannot be read
        """
        if not os.path.isdir(self.directory):
            raise DirectoryUnreadable(self.directory, "not a directory or does not exist")
        try:
            with os.scandir(self.directory) as it:
                return sorted(entry.name for entry in it)
        except OSError as e:
            raise DirectoryUnreadable(self.directory, e.strerror or str(e)) from e

    def compose_path(self, name: str) -> str:
        """
        Join an entry name onto the target directory and guard the result.

        Args:
            name: Entry name from the directory listing

        Returns:
            Absolute path of the entry

        Raises:
            PathTraversalSuspected: If the name is empty or the path leaves the directory
        """
        if name in RESERVED_NAMES:
            raise PathTraversalSuspected(name, self.directory)
        path = os.path.join(self.directory, name)
        if not is_direct_child(self.directory, path) or os.path.basename(path) != name:
            raise PathTraversalSuspected(name, path)
        return path

    def reconcile(self, protected: ProtectedSet,
                  entries: Optional[Iterable[str]] = None) -> ReconcileReport:
        """
        Delete, or report in dry-run mode, every unprotected entry.

        Args:
            protected: Names that must survive
            entries: Directory listing to use instead of reading the directory

        Returns:
            Report of what happened to every entry

        Raises:
            DirectoryUnreadable: If the directory cannot be listed
        """
        listing = list(entries) if entries is not None else self.list_entries()
        report = ReconcileReport(directory=self.directory, dry_run=self.dry_run, listing=listing)

        logger.info(f"Reconciling {len(listing)} entries in {self.directory} ({len(protected)} protected)")

        for name in listing:
            if name and name in protected:
                logger.debug(f"KEEP: {name}")
                report.results.append(EntryResult(name, os.path.join(self.directory, name), EntryOutcome.PROTECTED))
                continue

            try:
                path = self.compose_path(name)
            except PathTraversalSuspected as e:
                logger.error(f"ERROR: {e}")
                report.results.append(EntryResult(name, e.path, EntryOutcome.REJECTED, str(e)))
                continue

            if self.dry_run:
                logger.info(f"[DRY RUN] Would delete unowned entry: {path}")
                report.results.append(EntryResult(name, path, EntryOutcome.WOULD_DELETE))
                continue

            logger.info(f"Deleting unowned entry: {path}")
            try:
                self.remove(path)
            except DeletionFailed as e:
                logger.error(f"ERROR: {e}")
                report.results.append(EntryResult(name, path, EntryOutcome.FAILED, e.reason))
                continue
            report.results.append(EntryResult(name, path, EntryOutcome.DELETED))

        stats = report.get_stats()
        if self.dry_run:
            logger.info(f"[DRY RUN] {stats['would_delete']} entries would be deleted, {stats['rejected']} rejected")
        else:
            logger.info(
                f"Deleted {stats['deleted']} entries, {stats['failed']} failed, {stats['rejected']} rejected"
            )
        return report

    def remove(self, path: str) -> None:
        """
        Recursively remove one entry. Symlinks are removed, never followed.

        Args:
            path: Absolute path of the entry

        Raises:
            DeletionFailed: If the entry cannot be removed
        """
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.unlink(path)
        except OSError as e:
            raise DeletionFailed(path, e.strerror or str(e)) from e
