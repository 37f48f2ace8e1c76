"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filters.py
Predicate-based record admission.

Per-record rules (blacklists, whitelists, size window) stream. The uniqueness rules need
the whole admitted set: pass 1 groups it by size and/or hash, pass 2 keeps only records
that landed in a group of two or more.
"""

import logging
from typing import List, Iterable, Iterator, Set

from pathdedup.core.grouper import group_records
from pathdedup.core.models import Record, FilterParams, FilterPattern, KeyPolicy

logger = logging.getLogger(__name__)


class RecordFilterImpl:
    def __init__(self, params: FilterParams = None):
        self.params = params or FilterParams()

    def is_filtered(self, path: str, size: int) -> bool:
        """True if the path/size pair must be rejected."""
        p = self.params
        if any(pattern.starts_with(path) for pattern in p.blacklist_path_starts):
            return True
        if any(pattern.ends_with(path) for pattern in p.blacklist_path_ends):
            return True
        if any(pattern.contains(path) for pattern in p.blacklist_path_contents):
            return True

        # Each configured whitelist category needs at least one hit
        if not self._whitelisted(p.whitelist_path_starts, FilterPattern.starts_with, path):
            return True
        if not self._whitelisted(p.whitelist_path_ends, FilterPattern.ends_with, path):
            return True
        if not self._whitelisted(p.whitelist_path_contents, FilterPattern.contains, path):
            return True

        if size < p.size_min:
            return True
        if p.size_max is not None and size > p.size_max:
            return True
        return False

    @staticmethod
    def _whitelisted(patterns: List[FilterPattern], matcher, path: str) -> bool:
        if not patterns:
            return True
        return any(matcher(pattern, path) for pattern in patterns)

    def admits(self, record: Record) -> bool:
        return not self.is_filtered(record.path, record.size)

    def shared_paths(self, records: List[Record]) -> Set[str]:
        """
        Pass 1 of the uniqueness filter: paths whose size (or hash) is shared with at
        least one other record. Both keys together give the union of the two sets.
        """
        shared: Set[str] = set()
        if self.params.exclude_unique_sizes:
            for group in group_records(records, KeyPolicy.SIZE):
                shared.update(group.paths)
        if self.params.exclude_unique_hashes:
            for group in group_records(records, self.params.hash_key_policy):
                shared.update(group.paths)
        return shared

    def apply(self, records: Iterable[Record]) -> Iterator[Record]:
        """Yields the admitted records in input order."""
        admitted = (record for record in records if self.admits(record))
        if not self.params.uniqueness_enabled:
            yield from admitted
            return

        kept = list(admitted)
        shared = self.shared_paths(kept)
        logger.debug(f"Uniqueness pass: {len(shared)} of {len(kept)} admitted records are shared")
        for record in kept:
            if record.path in shared:
                yield record
