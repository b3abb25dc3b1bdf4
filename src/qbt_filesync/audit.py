#!/usr/bin/env python3
"""Append-only audit log of reconciliation passes."""

import logging
from datetime import datetime
from pathlib import Path

from .models import ProtectedSet, ReconcileReport

logger = logging.getLogger(__name__)


def write_audit_log(log_file: str, report: ReconcileReport, protected: ProtectedSet) -> bool:
    """
    Append one pass to the audit log.

    Args:
        log_file: Path of the audit log file
        report: Reconciliation report of the pass
        protected: Protected set the pass ran against

    Returns:
        True if the log was written
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    stats = report.get_stats()

    try:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Undecodable entry names arrive surrogate-escaped from os.scandir
        with open(log_path, "a", encoding="utf-8", errors="backslashreplace") as f:
            f.write(f"\n{'='*80}\n")
            f.write(f"File Sync Pass - {timestamp}\n")
            f.write(f"Mode: {'DRY RUN' if report.dry_run else 'LIVE'}\n")
            f.write(f"Directory: {report.directory}\n")
            f.write(
                f"Listed: {stats['listed']}, protected: {stats['protected']} "
                f"(from {len(protected.classifications)} torrents), candidates: {stats['candidates']}\n"
            )
            f.write(f"{'='*80}\n\n")

            if report.deleted:
                f.write(f"Deleted ({len(report.deleted)}):\n")
                for name in report.deleted:
                    f.write(f"  - {name}\n")
                f.write("\n")

            if report.would_delete:
                f.write(f"Would delete ({len(report.would_delete)}):\n")
                for name in report.would_delete:
                    f.write(f"  - {name}\n")
                f.write("\n")

            if report.rejected:
                f.write(f"Rejected ({len(report.rejected)}):\n")
                for result in report.rejected:
                    f.write(f"  - {result.name!r}: {result.error}\n")
                f.write("\n")

            if report.failed:
                f.write(f"Failed ({len(report.failed)}):\n")
                for result in report.failed:
                    f.write(f"  - {result.path}: {result.error}\n")
                f.write("\n")

        logger.info(f"Audit log written to: {log_path}")
        return True

    except OSError as e:
        logger.error(f"Error writing audit log {log_file}: {e}")
        return False
