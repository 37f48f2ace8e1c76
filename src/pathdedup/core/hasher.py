"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing with pluggable algorithms and adaptive truncation.

HasherImpl decides how many leading bytes of a file to digest (the whole file, a fixed
budget, or nothing at all for very large files) and checks that the bytes it read match
what the file reported. Any OSError is left to the caller, which reports the record and
moves on.
"""

import os
import hashlib
import logging
from typing import Dict

import xxhash

from pathdedup.core.errors import SizeMismatchError
from pathdedup.core.interfaces import Hasher, DigestFactory, Digest
from pathdedup.core.models import Record, HashAlgorithm, DEFAULT_LARGE_FILE_THRESHOLD

logger = logging.getLogger(__name__)


class HashlibAlgorithmImpl(DigestFactory):
    def __init__(self, name: str):
        self.name = name

    def new(self) -> Digest:
        return hashlib.new(self.name)


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(DigestFactory):
    @staticmethod
    def new() -> Digest:
        return xxhash.xxh64()


ALGORITHMS: Dict[HashAlgorithm, DigestFactory] = {
    HashAlgorithm.MD5: HashlibAlgorithmImpl("md5"),
    HashAlgorithm.SHA1: HashlibAlgorithmImpl("sha1"),
    HashAlgorithm.SHA256: HashlibAlgorithmImpl("sha256"),
    HashAlgorithm.SHA512: HashlibAlgorithmImpl("sha512"),
    HashAlgorithm.XXH64: XXHashAlgorithmImpl(),
}


class HasherImpl(Hasher):
    """
    Computes hex digests over a file's leading bytes.

    byte_budget == 0 means "whole file", except for files larger than
    large_file_threshold, which are digested over zero bytes and left to be told
    apart by size.
    """
    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        algorithm: HashAlgorithm = HashAlgorithm.SHA1,
        byte_budget: int = 0,
        large_file_threshold: int = DEFAULT_LARGE_FILE_THRESHOLD
    ):
        if byte_budget < 0:
            raise ValueError("Byte budget cannot be negative")
        self.algorithm = algorithm
        self.factory = ALGORITHMS[algorithm]
        self.byte_budget = byte_budget
        self.large_file_threshold = large_file_threshold

    def effective_length(self, size: int) -> int:
        """Number of leading bytes that go into the digest of a file of this size."""
        if self.byte_budget == 0:
            return 0 if size > self.large_file_threshold else size
        return min(self.byte_budget, size)

    def compute_hash(self, path: str, size: int) -> str:
        length = self.effective_length(size)
        digest = self.factory.new()
        with open(path, 'rb') as f:
            if length == size:
                self._read_full(f, path, size, digest)
            else:
                self._read_prefix(f, path, length, digest)
        return digest.hexdigest()

    def hash_record(self, record: Record) -> Record:
        """Returns the record enriched with its digest."""
        return record.with_hash(self.compute_hash(record.path, record.size))

    def _read_full(self, f, path: str, size: int, digest: Digest) -> None:
        """Streams the whole file, checking the byte count against the reported length."""
        reported = os.fstat(f.fileno()).st_size
        if reported != size:
            raise SizeMismatchError(path, expected=size, actual=reported)

        total = 0
        while True:
            chunk = f.read(self.CHUNK_SIZE)
            if not chunk:
                break
            digest.update(chunk)
            total += len(chunk)

        if total != reported:
            raise SizeMismatchError(path, expected=reported, actual=total)

    @staticmethod
    def _read_prefix(f, path: str, length: int, digest: Digest) -> None:
        """Reads exactly `length` bytes from the start of the file."""
        remaining = length
        while remaining > 0:
            chunk = f.read(min(remaining, HasherImpl.CHUNK_SIZE))
            if not chunk:
                raise SizeMismatchError(path, expected=length, actual=length - remaining)
            digest.update(chunk)
            remaining -= len(chunk)
        if length == 0:
            logger.debug(f"Digest of {path} covers zero bytes (large file, size decides)")
