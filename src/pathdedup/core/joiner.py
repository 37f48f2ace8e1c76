"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/joiner.py
Removes duplicate-group members from a full record set.

Every group keeps its first path (the representative); all other members go into a
discard set that must be complete before the record stream is read.
"""

from typing import Iterable, Iterator, Set

from pathdedup.core.models import Record, DuplicateGroup


def build_discard_set(groups: Iterable[DuplicateGroup]) -> Set[str]:
    """Collects every non-representative path of every group."""
    discard: Set[str] = set()
    for group in groups:
        discard.update(group.duplicates)
    return discard


def join(records: Iterable[Record], discard: Set[str]) -> Iterator[Record]:
    """Yields the records whose path is not in the discard set, in input order."""
    for record in records:
        if record.path not in discard:
            yield record
