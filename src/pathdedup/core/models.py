"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and configuration for the record pipeline.
"""

from dataclasses import dataclass, field, replace
from typing import List, Dict, Optional, Union, Any, Sequence
from enum import Enum

from pathdedup.core.errors import MalformedInputError
from pathdedup.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class HashAlgorithm(Enum):
    """
    Digest functions available to the hasher.
    """
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"
    XXH64 = "xxh64"

    @property
    def display_name(self) -> str:
        """Human-readable name for help text."""
        mapping = {
            HashAlgorithm.MD5: "MD5",
            HashAlgorithm.SHA1: "SHA-1",
            HashAlgorithm.SHA256: "SHA-256",
            HashAlgorithm.SHA512: "SHA-512",
            HashAlgorithm.XXH64: "xxHash64",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class KeyPolicy(Enum):
    """
    Equality key used to decide that two records belong to the same group.
    """
    HASH = "hash"
    SIZE = "size"
    SIZE_HASH = "size-hash"

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            KeyPolicy.HASH: "Content hash only (same hash + different size is a collision)",
            KeyPolicy.SIZE: "File size only (cheap first pass)",
            KeyPolicy.SIZE_HASH: "Size and hash together (safe with truncated hashes)",
        }
        return mapping.get(self, self.value)

    def key_for(self, record: "Record") -> Any:
        if self == KeyPolicy.SIZE:
            return record.size
        if self == KeyPolicy.SIZE_HASH:
            return record.size, record.hash
        return record.hash

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

RECORD_FIELDS = ("path", "size", "hash")


@dataclass(frozen=True)
class Record:
    """
    One file of the inventory: path, byte length and hex digest.
    The hash is an empty string until the hasher fills it in.
    """
    path: str
    size: int  # in bytes
    hash: str = ""

    @property
    def is_hashed(self) -> bool:
        return bool(self.hash)

    def with_hash(self, digest: str) -> "Record":
        """Return the enriched copy of this record."""
        return replace(self, hash=digest)

    def to_row(self) -> List[str]:
        return [self.path, str(self.size), self.hash]

    @classmethod
    def from_row(cls, row: Sequence[str], source: str = None, line: int = None) -> "Record":
        """Build a record from a (path, size, hash) row, rejecting anything else."""
        if len(row) != len(RECORD_FIELDS):
            raise MalformedInputError(
                f"Expected {len(RECORD_FIELDS)} fields, got {len(row)}", source, line
            )
        path, size_str, digest = row
        if not path:
            raise MalformedInputError("Empty path field", source, line)
        try:
            size = int(size_str)
        except ValueError:
            raise MalformedInputError(f"Non-numeric size field: '{size_str}'", source, line)
        if size < 0:
            raise MalformedInputError(f"Negative size field: '{size_str}'", source, line)
        return cls(path=path, size=size, hash=digest)

    def __repr__(self):
        return f"<Record path={self.path}, size={self.size}, hash={self.hash[:12]}>"


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Two or more paths that share an equality key.
    All paths in the group have the same size. The first path is the representative
    the joiner retains; the grouper emits paths in lexical order.
    """
    paths: tuple
    size: Optional[int] = None  # unknown when loaded from an export
    key: Any = None

    def __post_init__(self):
        if len(self.paths) < 2:
            raise ValueError("A duplicate group needs at least two paths")
        object.__setattr__(self, "paths", tuple(self.paths))

    @property
    def representative(self) -> str:
        return self.paths[0]

    @property
    def duplicates(self) -> tuple:
        """Every path except the representative."""
        return self.paths[1:]

    @property
    def duplicate_count(self) -> int:
        """How many paths are in this group."""
        return len(self.paths)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.paths)}>"


@dataclass
class FilterPattern:
    """
    A path pattern used by blacklists and whitelists.
    Prefixing the pattern with CASE_INSENSITIVE_MARKER makes the match case-insensitive.
    """
    CASE_INSENSITIVE_MARKER = ":case-insensitive:!"

    pattern: str
    case_insensitive: bool = False

    def __post_init__(self):
        if self.case_insensitive:
            self.pattern = self.pattern.lower()

    @classmethod
    def parse(cls, raw: str) -> "FilterPattern":
        if raw.startswith(cls.CASE_INSENSITIVE_MARKER):
            return cls(raw[len(cls.CASE_INSENSITIVE_MARKER):], case_insensitive=True)
        return cls(raw)

    def _candidate(self, path: str) -> str:
        return path.lower() if self.case_insensitive else path

    def starts_with(self, path: str) -> bool:
        return self._candidate(path).startswith(self.pattern)

    def ends_with(self, path: str) -> bool:
        return self._candidate(path).endswith(self.pattern)

    def contains(self, path: str) -> bool:
        return self.pattern in self._candidate(path)


@dataclass
class RunSummary:
    """
    Outcome of one stage run. Rendered by the CLI, never printed by the stage itself.
    """
    stage: str
    duration: float = 0.0
    lines_written: int = 0
    paths_included: Optional[int] = None
    paths_discarded: Optional[int] = None
    total_size: Optional[int] = None
    errors: int = 0
    error_log: Optional[str] = None
    target: Optional[str] = None
    extra: Dict[str, Union[int, float, str]] = field(default_factory=dict)

    def print_summary(self) -> str:
        lines = [
            f"{self.stage.upper()}",
            f"Duration: {self.duration:.3f}s",
        ]
        if self.target is not None:
            lines.append(f"Written {self.lines_written:,} lines '{self.target}'")
        if self.paths_included is not None:
            lines.append(f"Paths included: {self.paths_included:,}")
        if self.paths_discarded is not None:
            lines.append(f"Paths discarded: {self.paths_discarded:,}")
        if self.total_size is not None:
            lines.append(f"Size of all files: {ConvertUtils.bytes_to_human(self.total_size)}")
        for label, value in self.extra.items():
            lines.append(f"{label}: {value}")
        log = f" ({self.error_log})" if self.error_log else ""
        lines.append(f"Errors: {self.errors:,}{log}")
        return "\n".join(lines)


"""
DTOs for pipeline parameters with built-in validation.
Interface-agnostic — used by stages, the chained command and the CLI.
"""

DEFAULT_LARGE_FILE_THRESHOLD = 100_000_000


@dataclass
class FilterParams:
    """Admission rules applied by the filter engine."""
    size_min: int = 0
    size_max: Optional[int] = None
    exclude_unique_sizes: bool = False
    exclude_unique_hashes: bool = False
    hash_key_policy: KeyPolicy = KeyPolicy.SIZE_HASH
    blacklist_path_starts: List[FilterPattern] = field(default_factory=list)
    blacklist_path_ends: List[FilterPattern] = field(default_factory=list)
    blacklist_path_contents: List[FilterPattern] = field(default_factory=list)
    whitelist_path_starts: List[FilterPattern] = field(default_factory=list)
    whitelist_path_ends: List[FilterPattern] = field(default_factory=list)
    whitelist_path_contents: List[FilterPattern] = field(default_factory=list)

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if self.size_min < 0:
            raise ValueError("Minimum size cannot be negative")
        if self.size_max is not None and self.size_max < self.size_min:
            raise ValueError("Maximum size cannot be less than minimum size")
        if self.hash_key_policy == KeyPolicy.SIZE:
            raise ValueError("Hash uniqueness cannot be keyed on size alone")

        # Accept raw strings as well as parsed patterns
        for name in (
            "blacklist_path_starts", "blacklist_path_ends", "blacklist_path_contents",
            "whitelist_path_starts", "whitelist_path_ends", "whitelist_path_contents",
        ):
            setattr(self, name, [
                p if isinstance(p, FilterPattern) else FilterPattern.parse(p)
                for p in getattr(self, name)
            ])

    @property
    def uniqueness_enabled(self) -> bool:
        return self.exclude_unique_sizes or self.exclude_unique_hashes

    @staticmethod
    def from_human_readable(
            size_min_str: str = "0",
            size_max_str: Optional[str] = None,
            **kwargs
    ) -> 'FilterParams':
        """
        Factory method to create params from human-readable sizes.
        Useful for CLI argument parsing.
        """
        size_min = ConvertUtils.human_to_bytes(size_min_str) if size_min_str else 0
        size_max = ConvertUtils.human_to_bytes(size_max_str) if size_max_str else None
        return FilterParams(size_min=size_min, size_max=size_max, **kwargs)


@dataclass
class PipelineConfig:
    """Every toggle of every stage, in one place."""
    recursive: bool = True
    hashing: bool = False
    debug: bool = False
    bytes: int = 0
    algorithm: HashAlgorithm = HashAlgorithm.SHA1
    large_file_threshold: int = DEFAULT_LARGE_FILE_THRESHOLD
    key_policy: KeyPolicy = KeyPolicy.SIZE_HASH
    only_paths: bool = False
    flatten: bool = False
    error_log: Optional[str] = None
    filters: FilterParams = field(default_factory=FilterParams)

    def __post_init__(self):
        if self.bytes < 0:
            raise ValueError("Byte budget cannot be negative")
        if self.large_file_threshold <= 0:
            raise ValueError("Large file threshold must be positive")
