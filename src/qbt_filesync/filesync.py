#!/usr/bin/env python3
"""Main file sync orchestration logic."""

import logging
from typing import Optional

from .audit import write_audit_log
from .classifier import PathClassifier
from .client import QBittorrentClient, TorrentSource
from .config import Config
from .models import ProtectedSet, ReconcileReport
from .protected import build_protected_set
from .reconciler import DirectoryReconciler

logger = logging.getLogger(__name__)


class QbtFileSync:
    """Runs one reconciliation pass of the target directory against qBittorrent."""

    def __init__(self, config: Config, source: Optional[TorrentSource] = None):
        """
        Initialize file sync orchestrator.

        Args:
            config: Application configuration
            source: Torrent source; a qBittorrent client is created when omitted
        """
        self.config = config
        self._client: Optional[QBittorrentClient] = None
        if source is None:
            self._client = QBittorrentClient(config.connection)
            source = self._client
        self.source: TorrentSource = source
        self.protected: Optional[ProtectedSet] = None

    def run(self) -> ReconcileReport:
        """
        Run one pass.

        Returns:
            Reconciliation report

        Raises:
            ConfigurationError: If the target directory is unusable
            DaemonUnreachable: If qBittorrent cannot be reached
            DaemonQueryFailed: If the torrent query fails
            DirectoryUnreadable: If the target directory cannot be listed
        """
        sync = self.config.sync
        sync.validate()

        local_dir = sync.local_directory
        logger.info(f"Target directory: {local_dir}")
        if sync.daemon_directory:
            logger.info(f"Daemon view of target directory: {sync.matching_directory}")
        if sync.dry_run:
            logger.info("[DRY RUN] No files will be deleted")

        reconciler = DirectoryReconciler(local_dir, dry_run=sync.dry_run)

        try:
            records = self.source.list_torrents(sync.status_filter)
        finally:
            if self._client is not None:
                self._client.disconnect()

        if not records and not sync.allow_empty:
            logger.warning(
                f"qBittorrent reported no {sync.status_filter} torrents, skipping reconciliation "
                f"(set --allow-empty to reconcile against an empty torrent list)"
            )
            return ReconcileReport(directory=local_dir, dry_run=sync.dry_run, skipped=True)

        classifier = PathClassifier(sync.matching_directory)
        self.protected = build_protected_set(records, classifier, verbose=sync.verbose)

        report = reconciler.reconcile(self.protected)

        if sync.audit_log:
            write_audit_log(sync.audit_log, report, self.protected)

        return report
