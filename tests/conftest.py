"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path
from typing import List, Optional

import pytest
from qbt_filesync.constants import DEFAULT_STATUS_FILTER
from qbt_filesync.models import TorrentRecord

ENV_VARS = (
    "QB_HOST", "QB_PORT", "QB_USERNAME", "QB_PASSWORD", "QB_VERIFY_SSL", "QB_TIMEOUT",
    "FILESYNC_DIRECTORY", "FILESYNC_DAEMON_DIRECTORY", "FILESYNC_STATUS_FILTER",
    "DRY_RUN", "FILESYNC_VERBOSE", "FILESYNC_ALLOW_EMPTY", "FILESYNC_AUDIT_LOG",
)


class FakeSource:
    """Torrent source returning a fixed list of records."""

    def __init__(self, records: List[TorrentRecord]):
        self.records = records
        self.filters: List[str] = []

    def list_torrents(self, status_filter: str = DEFAULT_STATUS_FILTER) -> List[TorrentRecord]:
        self.filters.append(status_filter)
        return list(self.records)


def record(content_path: str, save_path: Optional[str] = None, name: str = "") -> TorrentRecord:
    """Build a torrent record with a name derived from the content path."""
    return TorrentRecord(
        name=name or content_path.rstrip("/").rsplit("/", 1)[-1],
        content_path=content_path,
        save_path=save_path,
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment from leaking into configuration."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Download directory holding entries A (file), B (directory) and C (file)."""
    target = tmp_path / "torrents"
    target.mkdir()
    (target / "A").write_text("a")
    (target / "B").mkdir()
    (target / "B" / "inner.bin").write_text("b")
    (target / "C").write_text("c")
    return target
