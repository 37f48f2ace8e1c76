"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
File-to-file stages of the record pipeline, one per command-line tool.

CLASS HIERARCHY
---------------
StageBase        : Owns the config, the error reporter and run timing
GatherStage      : Directory walk → records file (optionally hashed inline)
HashStage        : Records file → records file with digests
SingleHashStage  : One file → its digest
FilterStage      : Records file → admitted records file
DetectStage      : Records file → duplicate-group export
UniqueStage      : Records file + group export → deduplicated records (or paths);
                   discarded paths reach the trash only after a full-content check
CopyStage        : Records/paths file → copies inside a target folder

STAGE CONTRACTS
---------------
Each stage implements `process()` that:
  • Streams its input record by record where it can
  • Reports per-record failures (OSError, SizeMismatchError) and skips the record
  • Lets fatal errors (IntegrityError, MalformedInputError) propagate
  • Reports progress via callback (stage name, processed bytes/records, total)
  • Returns a RunSummary; printing is left to the caller
"""

import os
import stat
import sys
import time
import logging
from pathlib import Path
from typing import Dict, List, Optional, Callable, Iterable, Iterator

from pathdedup.core.errors import SizeMismatchError
from pathdedup.core.filters import RecordFilterImpl
from pathdedup.core.grouper import FileGrouperImpl
from pathdedup.core.hasher import HasherImpl
from pathdedup.core.joiner import build_discard_set, join
from pathdedup.core.models import Record, PipelineConfig, RunSummary
from pathdedup.core.scanner import FileScannerImpl
from pathdedup.services.file_service import FileService, TargetPathGenerator
from pathdedup.services.record_store import (
    read_records, read_paths, read_groups, write_groups, RecordWriter
)
from pathdedup.services.reporter import Reporter

logger = logging.getLogger(__name__)

ProgressCallback = Optional[Callable[[str, int, Optional[int]], None]]


#=============================
# Base Class
#=============================
class StageBase:
    """
    Base class for all stages.
    """
    name = "stage"

    def __init__(self, config: Optional[PipelineConfig] = None, reporter: Optional[Reporter] = None):
        self.config = config or PipelineConfig()
        self.reporter = reporter or Reporter(self.config.error_log, debug=self.config.debug)
        self._started = 0.0

    def _start(self) -> None:
        logger.debug(f"{self.name.upper()} | config: {self.config}")
        self._started = time.time()

    def _summary(self, **kwargs) -> RunSummary:
        return RunSummary(
            stage=self.name,
            duration=time.time() - self._started,
            errors=self.reporter.error_count(),
            error_log=self.config.error_log,
            **kwargs
        )

    def _make_hasher(self) -> HasherImpl:
        return HasherImpl(
            algorithm=self.config.algorithm,
            byte_budget=self.config.bytes,
            large_file_threshold=self.config.large_file_threshold,
        )

    def hash_records(self, records: Iterable[Record], hasher: HasherImpl) -> Iterator[Record]:
        """Yields enriched records; unreadable files are reported and skipped."""
        for record in records:
            try:
                yield hasher.hash_record(record)
            except (OSError, SizeMismatchError) as e:
                self.reporter.report_error(record.path, e)


# =============================
# Individual Stages
# =============================
class GatherStage(StageBase):
    name = "gather paths"

    def process(self, root_dir: str, target: str) -> RunSummary:
        self._start()
        scanner = FileScannerImpl(root_dir, recursive=self.config.recursive, reporter=self.reporter)
        records = scanner.scan()
        if self.config.hashing:
            records = self.hash_records(records, self._make_hasher())

        total_size = 0
        with RecordWriter(target) as writer:
            for record in records:
                if self.config.debug:
                    logger.debug(f"path: {record.path}, size: {record.size}, hash: {record.hash}")
                writer.write(record)
                total_size += record.size

        return self._summary(lines_written=writer.lines_written, total_size=total_size, target=target)


class HashStage(StageBase):
    name = "hash paths"

    def process(self, source: str, target: str, progress_callback: ProgressCallback = None) -> RunSummary:
        self._start()
        total_size = None
        if progress_callback:
            # First pass only to know the total for the progress percentage
            total_size = sum(record.size for record in read_records(source))

        hasher = self._make_hasher()
        current_size = 0
        hashed_size = 0
        with RecordWriter(target) as writer:
            for record in read_records(source):
                current_size += record.size
                if progress_callback:
                    progress_callback(self.name, current_size, total_size)
                try:
                    enriched = hasher.hash_record(record)
                except (OSError, SizeMismatchError) as e:
                    self.reporter.report_error(record.path, e)
                    continue
                writer.write(enriched)
                hashed_size += record.size

        return self._summary(lines_written=writer.lines_written, total_size=hashed_size, target=target)


class SingleHashStage(StageBase):
    name = "single hash"

    def __init__(self, config: Optional[PipelineConfig] = None, reporter: Optional[Reporter] = None):
        super().__init__(config, reporter)
        self.digest: Optional[str] = None

    def process(self, source: str) -> RunSummary:
        self._start()
        st = os.stat(source)
        if not stat.S_ISREG(st.st_mode):
            raise ValueError(f"The path '{source}' is not a normal file.")

        self.digest = self._make_hasher().compute_hash(source, st.st_size)
        return self._summary(
            total_size=st.st_size,
            extra={
                "Calculated hash": self.digest,
                "Algorithm": self.config.algorithm.display_name,
            },
        )


class FilterStage(StageBase):
    name = "filter paths"

    def process(self, source: str, target: str) -> RunSummary:
        self._start()
        record_filter = RecordFilterImpl(self.config.filters)
        total_size = 0
        with RecordWriter(target) as writer:
            for record in record_filter.apply(read_records(source)):
                writer.write(record)
                total_size += record.size

        return self._summary(lines_written=writer.lines_written, total_size=total_size, target=target)


class DetectStage(StageBase):
    name = "detect dups"

    def process(self, source: str, target: str) -> RunSummary:
        self._start()
        grouper = FileGrouperImpl(self.config.key_policy)
        groups = grouper.add_all(read_records(source)).groups()
        lines_written, paths_included = write_groups(target, groups)
        return self._summary(
            lines_written=lines_written,
            paths_included=paths_included,
            target=target,
            extra={"Records read": grouper.records_seen},
        )


class UniqueStage(StageBase):
    name = "unique paths"

    def __init__(self, config: Optional[PipelineConfig] = None, reporter: Optional[Reporter] = None):
        super().__init__(config, reporter)
        self.discarded: List[str] = []
        self._representatives: Dict[str, str] = {}

    def process(self, paths_file: str, dups_file: str, target: str) -> RunSummary:
        self._start()
        groups = read_groups(dups_file)
        # The discard set must be complete before the record stream starts
        discard = build_discard_set(groups)
        self.discarded = sorted(discard)
        self._representatives = {
            path: group.representative for group in groups for path in group.duplicates
        }

        total_size = 0
        with RecordWriter(target, only_paths=self.config.only_paths) as writer:
            for record in join(read_records(paths_file), discard):
                writer.write(record)
                total_size += record.size

        return self._summary(
            lines_written=writer.lines_written,
            paths_discarded=len(discard),
            total_size=total_size,
            target=target,
        )

    def verify_discarded(self) -> List[str]:
        """
        Compares the whole content of every discarded path with its group representative.

        Groups may rest on size alone, on a prefix digest or on the empty digest of a
        large file, so a shared key proves nothing about the rest of the bytes. Returns
        the paths whose full digest matches; the others are reported and left in place.
        """
        hasher = HasherImpl(
            algorithm=self.config.algorithm,
            byte_budget=0,
            large_file_threshold=sys.maxsize,
        )
        digests: Dict[str, str] = {}
        verified = []
        for path in self.discarded:
            representative = self._representatives[path]
            try:
                identical = self._full_digest(hasher, path, digests) == \
                    self._full_digest(hasher, representative, digests)
            except (OSError, SizeMismatchError) as e:
                self.reporter.report_error(path, e)
                continue
            if not identical:
                logger.warning(f"'{path}' differs from '{representative}', keeping it")
                self.reporter.report_error(path, ValueError(f"Content differs from '{representative}'"))
                continue
            verified.append(path)
        return verified

    @staticmethod
    def _full_digest(hasher: HasherImpl, path: str, digests: Dict[str, str]) -> str:
        if path not in digests:
            size = os.stat(path).st_size
            # Size is part of the value; equal digests of unequal lengths never match
            digests[path] = f"{size}:{hasher.compute_hash(path, size)}"
        return digests[path]

    def trash_discarded(self, paths: Optional[List[str]] = None) -> RunSummary:
        """
        Moves discarded duplicates of the last run to the system trash.
        Without an explicit list, only paths passing verify_discarded() are moved.
        """
        self._start()
        if paths is None:
            paths = self.verify_discarded()
        failures = FileService.move_multiple_to_trash(paths) if paths else []
        for path, error in failures:
            self.reporter.report_error(path, error)
        moved = len(paths) - len(failures)
        return self._summary(
            paths_discarded=moved,
            extra={
                "Moved to trash": moved,
                "Kept (not identical or unreadable)": len(self.discarded) - len(paths),
            },
        )


class CopyStage(StageBase):
    name = "copy files"

    def process(self, source: str, target_folder: str, progress_callback: ProgressCallback = None) -> RunSummary:
        self._start()
        entries = list(read_paths(source))
        sizes_known = all(size is not None for _, size in entries)
        total_size = sum(size for _, size in entries) if sizes_known else None

        Path(target_folder).mkdir(parents=True, exist_ok=False)
        generator = TargetPathGenerator(target_folder, flatten=self.config.flatten)

        copied = 0
        copied_size = 0
        current_size = 0
        for index, (path, size) in enumerate(entries, 1):
            if progress_callback:
                current_size += size or 0
                progress_callback(self.name, current_size if sizes_known else index,
                                  total_size if sizes_known else len(entries))
            target_path = generator.get_target_path(path)
            logger.debug(f"Copying {path} to {target_path}")
            try:
                copied_size += FileService.copy_file(path, target_path)
            except OSError as e:
                self.reporter.report_error(path, e)
                continue
            copied += 1

        return self._summary(
            lines_written=copied,
            total_size=copied_size,
            target=target_folder,
            extra={"Files copied": copied},
        )
