#!/usr/bin/env python3
"""Build the set of protected entry names from torrent records."""

import logging
from typing import Iterable, List, Set

from .classifier import PathClassifier
from .constants import ClassificationCase
from .models import Classification, ProtectedSet, TorrentRecord
from .utils import truncate_name

logger = logging.getLogger(__name__)


def build_protected_set(records: Iterable[TorrentRecord], classifier: PathClassifier,
                        verbose: bool = False) -> ProtectedSet:
    """
    Classify every record and collect the names they protect.

    Duplicate names, e.g. several torrents sharing one folder, collapse
    into a single entry.

    Args:
        records: Torrent records from qBittorrent
        classifier: Classifier bound to the target directory
        verbose: Log a trace line for every record

    Returns:
        Protected set with per-record classifications
    """
    names: Set[str] = set()
    classifications: List[Classification] = []

    for record in records:
        result = classifier.classify(record)
        classifications.append(result)
        label = truncate_name(record.name or record.content_path or "<unnamed>")

        if result.case == ClassificationCase.REJECTED:
            logger.warning(f"Skipping torrent '{label}': {result.reason} (content_path={record.content_path!r})")
            continue

        if result.protects:
            names.add(result.entry_name)
            if verbose:
                logger.debug(f"PROTECTED: {result.entry_name} <- '{label}' [{result.case.value}]")
        elif verbose:
            logger.debug(f"IGNORED: '{label}' [{result.case.value}] {result.reason}")

    protected = ProtectedSet(names=frozenset(names), classifications=classifications)

    counts = protected.count_by_case()
    logger.info(
        f"Protected {len(protected)} entries from {len(classifications)} torrents "
        f"(single-file: {counts.get(ClassificationCase.SINGLE_FILE, 0)}, "
        f"multi-file: {counts.get(ClassificationCase.MULTI_FILE, 0)}, "
        f"save-path: {counts.get(ClassificationCase.SAVE_PATH, 0)}, "
        f"out of scope: {counts.get(ClassificationCase.OUT_OF_SCOPE, 0)}, "
        f"rejected: {counts.get(ClassificationCase.REJECTED, 0)})"
    )
    return protected
