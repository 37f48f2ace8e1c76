"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups records by an equality key and enforces the collision invariant.

Records are consumed in input order. The first record seen for a key is remembered
together with its size; every later record with the same key must have the same size,
otherwise the run stops with an IntegrityError. Keys seen only once never produce a group.
"""

import logging
from typing import List, Dict, Tuple, Any, Iterable

from pathdedup.core.errors import IntegrityError, MalformedInputError
from pathdedup.core.models import Record, DuplicateGroup, KeyPolicy

logger = logging.getLogger(__name__)


class FileGrouperImpl:
    """
    One grouper instance serves exactly one run: its maps are private and are dropped
    together with the instance.
    """

    def __init__(self, key_policy: KeyPolicy = KeyPolicy.HASH):
        self.key_policy = key_policy
        self._first_seen: Dict[Any, Tuple[str, int]] = {}
        self._duplicates: Dict[Any, List[str]] = {}
        self.records_seen = 0

    def add(self, record: Record) -> None:
        """Registers one record, raising IntegrityError on a same-key/different-size pair."""
        if self.key_policy != KeyPolicy.SIZE and not record.is_hashed:
            raise MalformedInputError(
                f"Record '{record.path}' has no hash; cannot group by {self.key_policy.value}"
            )

        key = self.key_policy.key_for(record)
        self.records_seen += 1

        seen = self._first_seen.get(key)
        if seen is None:
            self._first_seen[key] = (record.path, record.size)
            return

        first_path, first_size = seen
        if first_size != record.size:
            logger.error(f"Collision on key {key!r}: '{record.path}' vs '{first_path}'")
            raise IntegrityError(
                f"Collision detected between: '{record.path}' and '{first_path}'",
                first_path=first_path,
                second_path=record.path,
            )

        dups = self._duplicates.get(key)
        if dups is None:
            self._duplicates[key] = [first_path, record.path]
        else:
            dups.append(record.path)

    def add_all(self, records: Iterable[Record]) -> "FileGrouperImpl":
        for record in records:
            self.add(record)
        return self

    def groups(self) -> List[DuplicateGroup]:
        """Canonically ordered groups: lexical paths inside, groups by first path."""
        result = [
            DuplicateGroup(paths=sorted(paths), size=self._first_seen[key][1], key=key)
            for key, paths in self._duplicates.items()
        ]
        result.sort(key=lambda g: g.paths[0])
        logger.debug(
            f"Grouped {self.records_seen} records by {self.key_policy.value}: "
            f"{len(self._first_seen)} keys, {len(result)} duplicate groups"
        )
        return result


def group_records(records: Iterable[Record], key_policy: KeyPolicy = KeyPolicy.HASH) -> List[DuplicateGroup]:
    """Runs a fresh grouper over the records and returns its groups."""
    return FileGrouperImpl(key_policy).add_all(records).groups()
