#!/usr/bin/env python3
"""Main entry point for qBittorrent file sync."""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from . import __version__
from .config import Config
from .errors import FileSyncError
from .filesync import QbtFileSync

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


# Custom log formatter with colors and symbols
class PrettyFormatter(logging.Formatter):
    """Custom formatter with colors and symbols for prettier output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m',     # Reset
        'DIM': '\033[2m',       # Dim
    }

    # Log level symbols
    SYMBOLS = {
        'DEBUG': '·',
        'INFO': '✔',
        'WARNING': '⚠',
        'ERROR': '✗',
        'CRITICAL': '💀',
    }

    def __init__(self, use_colors=True, use_symbols=True):
        """Initialize formatter."""
        self.use_colors = use_colors and sys.stdout.isatty()
        self.use_symbols = use_symbols
        super().__init__()

    def format(self, record):
        """Format log record with colors and symbols."""
        # Get color and symbol for level
        levelname = record.levelname
        color = self.COLORS.get(levelname, '')
        symbol = self.SYMBOLS.get(levelname, '•') if self.use_symbols else ''
        # Format time
        time_str = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')

        # Build the formatted message
        if self.use_colors:
            reset = self.COLORS['RESET']
            dim = self.COLORS['DIM']
            # Warnings and errors keep their level name visible
            if levelname in ('WARNING', 'ERROR', 'CRITICAL'):
                formatted = f"{dim}{time_str}{reset} {color}{symbol} {levelname:8}{reset} {record.getMessage()}"
            else:
                formatted = f"{dim}{time_str}{reset} {color}{symbol}{reset} {record.getMessage()}"
        else:
            # Plain output
            formatted = f"{time_str} {symbol} {levelname:8} {record.getMessage()}"

        # Add exception info if present
        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(verbose=False):
    """Set up logging with pretty formatting."""
    # Remove all existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Create console handler with pretty formatter
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(PrettyFormatter(use_colors=True, use_symbols=True))

    # Set levels
    if verbose:
        root_logger.setLevel(logging.DEBUG)
        console_handler.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(logging.INFO)
        console_handler.setLevel(logging.INFO)
        # Suppress some noisy loggers
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('qbittorrentapi').setLevel(logging.WARNING)

    root_logger.addHandler(console_handler)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser. Unset flags fall back to the environment."""
    parser = argparse.ArgumentParser(
        prog="qbt-filesync",
        description="Delete entries of a download directory that no completed qBittorrent torrent owns.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    conn = parser.add_argument_group("qBittorrent connection")
    conn.add_argument("--host", "--hostname", dest="host",
                      help="IP or FQDN of the qBittorrent Web API server (QB_HOST)")
    conn.add_argument("--port", type=int, help="Port of the qBittorrent Web API (QB_PORT)")
    conn.add_argument("--username", help="qBittorrent username (QB_USERNAME)")
    conn.add_argument("--password", help="qBittorrent password (QB_PASSWORD)")
    conn.add_argument("--verify-ssl", dest="verify_ssl", action="store_true", default=None,
                      help="Verify the Web UI certificate (QB_VERIFY_SSL)")
    conn.add_argument("--timeout", type=int, help="Request timeout in seconds (QB_TIMEOUT)")

    sync = parser.add_argument_group("reconciliation")
    sync.add_argument("--directory", help="Local directory the torrents live in (FILESYNC_DIRECTORY)")
    sync.add_argument("--daemon-directory", dest="daemon_directory",
                      help="The same directory as seen by qBittorrent, if mounted elsewhere "
                           "(FILESYNC_DAEMON_DIRECTORY)")
    sync.add_argument("--status-filter", dest="status_filter",
                      help="qBittorrent status filter of owning torrents (FILESYNC_STATUS_FILTER)")
    sync.add_argument("--dry-run", "--dryrun", dest="dry_run", action="store_true", default=None,
                      help="Don't delete anything, just print what would happen (DRY_RUN)")
    sync.add_argument("-v", "--verbose", action="store_true", default=None,
                      help="Log every torrent and entry decision (FILESYNC_VERBOSE)")
    sync.add_argument("--allow-empty", dest="allow_empty", action="store_true", default=None,
                      help="Reconcile even if qBittorrent reports no torrents (FILESYNC_ALLOW_EMPTY)")
    sync.add_argument("--audit-log", dest="audit_log",
                      help="Append a record of every pass to this file (FILESYNC_AUDIT_LOG)")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Combine environment configuration with command line overrides."""
    return Config.from_environment().with_overrides(
        connection={
            "host": args.host,
            "port": args.port,
            "username": args.username,
            "password": args.password,
            "verify_ssl": args.verify_ssl,
            "timeout": args.timeout,
        },
        sync={
            "directory": args.directory,
            "daemon_directory": args.daemon_directory,
            "status_filter": args.status_filter,
            "dry_run": args.dry_run,
            "verbose": args.verbose,
            "allow_empty": args.allow_empty,
            "audit_log": args.audit_log,
        },
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments, defaults to sys.argv

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    config = load_config(args)
    setup_logging(verbose=config.sync.verbose)

    try:
        report = QbtFileSync(config).run()
    except FileSyncError as e:
        logger.error(f"Aborting, nothing was deleted: {e}")
        return EXIT_FATAL

    if report.has_errors:
        logger.warning(
            f"Finished with {len(report.rejected)} rejected and {len(report.failed)} failed entries"
        )
        return EXIT_PARTIAL

    logger.info("File sync completed successfully")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
