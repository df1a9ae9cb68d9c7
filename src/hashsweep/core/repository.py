"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/repository.py
In-memory FingerprintRepository, the reference backend for scans and tests.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from hashsweep.core.models import DuplicateGroup, Fingerprint, SortOrder
from hashsweep.core.sorter import Sorter

logger = logging.getLogger(__name__)


class MemoryFingerprintRepository:
    """
    Fingerprint store keyed by full path. Adding a fingerprint for a path that is
    already stored replaces the old entry in place, so rescanning never turns a
    file into a duplicate of itself.
    Duplicate groups come back in order of first insertion of each digest;
    files inside a group are ordered by `sort_order` (see Sorter).
    """

    def __init__(self, sort_order: SortOrder = SortOrder.SHORTEST_PATH):
        self.sort_order = sort_order
        self._fingerprints: Dict[str, Fingerprint] = {}

    def add(self, fingerprint: Fingerprint) -> None:
        if fingerprint is None:
            raise ValueError("Fingerprint cannot be None")
        path = fingerprint.full_path
        if path in self._fingerprints:
            logger.debug(f"Replacing stored fingerprint for {path}")
        self._fingerprints[path] = fingerprint
        logger.debug(f"Stored fingerprint for {path} with hash {fingerprint.digest}")

    def add_many(self, fingerprints: Iterable[Fingerprint]) -> None:
        items = list(fingerprints)
        for fingerprint in items:
            self.add(fingerprint)
        logger.debug(f"Stored {len(items)} fingerprint(s)")

    def get_all(
        self,
        filter: Optional[Callable[[Fingerprint], bool]] = None,
        order_by: Optional[Callable[[Fingerprint], object]] = None
    ) -> List[Fingerprint]:
        result = [fp for fp in self._fingerprints.values() if filter is None or filter(fp)]
        if order_by is not None:
            result.sort(key=order_by)
        return result

    def get_duplicate_groupings(self) -> List[DuplicateGroup]:
        buckets: Dict[Tuple[str, str], List[Fingerprint]] = {}
        for fingerprint in self._fingerprints.values():
            buckets.setdefault((fingerprint.algorithm, fingerprint.digest), []).append(fingerprint)

        candidates = [DuplicateGroup(digest=digest, files=files) for (_, digest), files in buckets.items()]
        groups = [group for group in candidates if group.is_duplicate()]
        Sorter.sort_files_inside_groups(groups, self.sort_order)
        logger.debug(f"Found {len(groups)} duplicate grouping(s) among {len(self._fingerprints)} fingerprint(s)")
        return groups

    def delete(self, fingerprint: Fingerprint) -> bool:
        if self._fingerprints.get(fingerprint.full_path) != fingerprint:
            return False
        del self._fingerprints[fingerprint.full_path]
        return True

    def clear(self) -> None:
        self._fingerprints.clear()

    def __len__(self) -> int:
        return len(self._fingerprints)
