"""
pathdedup — record-oriented duplicate file detection.

Core features:
- Walks a tree into a plain-text inventory of (path, size, hash) records
- Full or truncated content hashing (hashlib digests or xxHash64)
- Size/path filtering with blacklists, whitelists and uniqueness passes
- Duplicate grouping with a fatal same-hash/different-size collision check
- Set-difference join keeping one representative per group
- Safe removal of discarded duplicates to system trash (via send2trash)
"""

# Get version
from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("pathdedup")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from pathdedup.commands import PipelineCommand
from pathdedup.core import (
    Record, DuplicateGroup, HashAlgorithm, KeyPolicy, FilterParams, PipelineConfig, RunSummary,
    DedupError, IntegrityError, SizeMismatchError, MalformedInputError
)
from pathdedup.utils.convert_utils import ConvertUtils
from pathdedup.services.file_service import FileService

__all__ = [
    "PipelineCommand",
    "Record",
    "DuplicateGroup",
    "HashAlgorithm",
    "KeyPolicy",
    "FilterParams",
    "PipelineConfig",
    "RunSummary",
    "DedupError",
    "IntegrityError",
    "SizeMismatchError",
    "MalformedInputError",
    "ConvertUtils",
    "FileService",
    "__version__",
]
