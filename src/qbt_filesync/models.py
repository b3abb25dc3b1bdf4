#!/usr/bin/env python3
"""Data models for qBittorrent file sync."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional

from .constants import ClassificationCase, EntryOutcome


@dataclass(frozen=True)
class TorrentRecord:
    """Torrent as reported by qBittorrent, reduced to what matching needs."""
    name: str
    content_path: str
    save_path: Optional[str] = None
    hash: str = ""


@dataclass(frozen=True)
class Classification:
    """Result of mapping one torrent record onto the target directory."""
    record: TorrentRecord
    case: ClassificationCase
    entry_name: Optional[str] = None
    reason: str = ""

    @property
    def protects(self) -> bool:
        """Whether this record contributes a protected entry."""
        return self.case.protects and bool(self.entry_name)


@dataclass
class ProtectedSet:
    """Entry names inside the target directory owned by known torrents."""
    names: FrozenSet[str] = field(default_factory=frozenset)
    classifications: List[Classification] = field(default_factory=list)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def count_by_case(self) -> Dict[ClassificationCase, int]:
        """Number of classified records per case."""
        counts: Dict[ClassificationCase, int] = {}
        for item in self.classifications:
            counts[item.case] = counts.get(item.case, 0) + 1
        return counts

    @property
    def rejected(self) -> List[Classification]:
        """Records that could not be classified."""
        return [c for c in self.classifications if c.case == ClassificationCase.REJECTED]


@dataclass(frozen=True)
class EntryResult:
    """What happened to one entry of the target directory."""
    name: str
    path: str
    outcome: EntryOutcome
    error: Optional[str] = None


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation pass over the target directory."""
    directory: str
    dry_run: bool
    listing: List[str] = field(default_factory=list)
    results: List[EntryResult] = field(default_factory=list)
    skipped: bool = False

    def _names(self, outcome: EntryOutcome) -> List[str]:
        return [r.name for r in self.results if r.outcome == outcome]

    @property
    def protected(self) -> List[str]:
        return self._names(EntryOutcome.PROTECTED)

    @property
    def deleted(self) -> List[str]:
        return self._names(EntryOutcome.DELETED)

    @property
    def would_delete(self) -> List[str]:
        return self._names(EntryOutcome.WOULD_DELETE)

    @property
    def rejected(self) -> List[EntryResult]:
        return [r for r in self.results if r.outcome == EntryOutcome.REJECTED]

    @property
    def failed(self) -> List[EntryResult]:
        return [r for r in self.results if r.outcome == EntryOutcome.FAILED]

    @property
    def candidates(self) -> List[str]:
        """Every entry selected for deletion, whatever happened to it afterwards."""
        return [r.name for r in self.results if r.outcome != EntryOutcome.PROTECTED]

    @property
    def has_errors(self) -> bool:
        """Whether any entry was rejected or failed to delete."""
        return bool(self.rejected or self.failed)

    def get_stats(self) -> dict:
        """Get pass statistics."""
        return {
            "listed": len(self.listing),
            "protected": len(self.protected),
            "candidates": len(self.candidates),
            "deleted": len(self.deleted),
            "would_delete": len(self.would_delete),
            "rejected": len(self.rejected),
            "failed": len(self.failed),
        }
