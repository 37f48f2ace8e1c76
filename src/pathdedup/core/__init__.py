"""
Core pipeline engine — walker, hasher, filter, grouper, joiner and file-to-file stages.

- FileScannerImpl: recursive or single-level walk yielding unhashed records
- HasherImpl: full or truncated digests with read-length verification
- RecordFilterImpl: size window, path patterns and uniqueness passes
- FileGrouperImpl: key-based grouping with the collision invariant
- build_discard_set / join: set-difference join against duplicate groups
- Models: Record, DuplicateGroup and configuration objects

No GUI or console dependencies — suitable for CLI and library usage.
"""

from .errors import DedupError, IntegrityError, SizeMismatchError, MalformedInputError
from .scanner import FileScannerImpl
from .hasher import HasherImpl, HashlibAlgorithmImpl, XXHashAlgorithmImpl
from .filters import RecordFilterImpl
from .grouper import FileGrouperImpl, group_records
from .joiner import build_discard_set, join
from .models import (
    Record, DuplicateGroup, HashAlgorithm, KeyPolicy, FilterPattern, FilterParams,
    PipelineConfig, RunSummary)

__all__ = [
    "DedupError",
    "IntegrityError",
    "SizeMismatchError",
    "MalformedInputError",
    "FileScannerImpl",
    "HasherImpl",
    "HashlibAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "RecordFilterImpl",
    "FileGrouperImpl",
    "group_records",
    "build_discard_set",
    "join",
    "Record",
    "DuplicateGroup",
    "HashAlgorithm",
    "KeyPolicy",
    "FilterPattern",
    "FilterParams",
    "PipelineConfig",
    "RunSummary",
]
