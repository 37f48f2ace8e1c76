"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the record pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` so that
stages can be wired with alternative collaborators in tests.

Key Components:
---------------
- DigestFactory: Creates incremental digest objects (hashlib / xxhash style).
- Hasher: Computes the (possibly truncated) digest of one file.
- FileScanner: Walks a directory and yields records with an empty hash.
- ErrorReporter: Receives per-record failures and counts them.
"""

from typing import Protocol, Iterator, Any
from pathdedup.core.models import Record


class Digest(Protocol):
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class DigestFactory(Protocol):
    """
    Interface for hash algorithms.

    Allows plugging in different hashing functions like SHA-1, MD5 or xxHash
    without affecting the rest of the pipeline.
    """
    def new(self) -> Digest:
        """Returns a fresh incremental digest object."""
        ...


class Hasher(Protocol):
    """Interface for hashing a file given its declared size."""
    def effective_length(self, size: int) -> int: ...
    def compute_hash(self, path: str, size: int) -> str: ...
    def hash_record(self, record: Record) -> Record: ...


class FileScanner(Protocol):
    """
    Interface for walking file systems and collecting (path, size) records.
    """
    def scan(self) -> Iterator[Record]:
        """
        Yields one record per regular file found, hash left empty.
        Per-entry failures go to the reporter; the walk continues.
        """
        ...


class ErrorReporter(Protocol):
    """Interface for the channel that makes non-fatal failures visible."""
    def report_error(self, entry: Any, error: Any) -> None: ...
    def error_count(self) -> int: ...
