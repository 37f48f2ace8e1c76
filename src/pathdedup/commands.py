"""
Chained command for the record pipeline.
Runs every stage in memory so a single call goes from a directory to a deduplicated inventory.
"""
import time
import logging
from typing import List, Optional, Callable, Tuple

from pathdedup.core.errors import SizeMismatchError
from pathdedup.core.filters import RecordFilterImpl
from pathdedup.core.grouper import FileGrouperImpl
from pathdedup.core.hasher import HasherImpl
from pathdedup.core.joiner import build_discard_set, join
from pathdedup.core.models import DuplicateGroup, PipelineConfig, Record, RunSummary
from pathdedup.core.scanner import FileScannerImpl
from pathdedup.services.record_store import RecordWriter, write_groups
from pathdedup.services.reporter import Reporter

logger = logging.getLogger(__name__)


class PipelineCommand:
    """
    Orchestrates the whole workflow:
    1. Walk the root directory into records
    2. Hash every record (unreadable files are reported and dropped)
    3. Admit records through the filter engine
    4. Group admitted records and export the groups
    5. Join the hashed inventory against the groups and write the result

    Usage:
        command = PipelineCommand(config)
        groups, summary = command.execute(
            "/data", "dups.json", "unique.csv",
            progress_callback=cli_progress_printer
        )
    """

    def __init__(self, config: Optional[PipelineConfig] = None, reporter: Optional[Reporter] = None):
        self.config = config or PipelineConfig()
        self.reporter = reporter or Reporter(self.config.error_log, debug=self.config.debug)
        self._records: List[Record] = []

    def execute(
            self,
            root_dir: str,
            groups_target: str,
            records_target: str,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[List[DuplicateGroup], RunSummary]:
        """
        Execute the chained run.

        Args:
            root_dir: Directory to walk
            groups_target: Where the duplicate-group export is written
            records_target: Where the deduplicated records (or paths) are written
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (duplicate_groups, summary)

        Raises:
            RuntimeError: If the root directory cannot be walked
            IntegrityError: If two records share a key but not a size
        """
        started = time.time()

        # Step 1: Walk
        scanner = FileScannerImpl(root_dir, recursive=self.config.recursive, reporter=self.reporter)
        scanned = list(scanner.scan())
        total_bytes = sum(record.size for record in scanned)
        logger.debug(f"Walked {len(scanned)} files ({total_bytes} bytes) under {root_dir}")

        # Step 2: Hash
        hasher = HasherImpl(
            algorithm=self.config.algorithm,
            byte_budget=self.config.bytes,
            large_file_threshold=self.config.large_file_threshold,
        )
        self._records = []
        processed = 0
        for record in scanned:
            processed += record.size
            if progress_callback:
                progress_callback("hashing", processed, total_bytes)
            try:
                self._records.append(hasher.hash_record(record))
            except (OSError, SizeMismatchError) as e:
                self.reporter.report_error(record.path, e)

        # Step 3: Filter
        admitted = list(RecordFilterImpl(self.config.filters).apply(self._records))
        if progress_callback:
            progress_callback("filtering", len(admitted), len(self._records))

        # Step 4: Group
        groups = FileGrouperImpl(self.config.key_policy).add_all(admitted).groups()
        _, paths_included = write_groups(groups_target, groups)

        # Step 5: Join
        discard = build_discard_set(groups)
        kept_size = 0
        with RecordWriter(records_target, only_paths=self.config.only_paths) as writer:
            for record in join(self._records, discard):
                writer.write(record)
                kept_size += record.size

        summary = RunSummary(
            stage="run",
            duration=time.time() - started,
            lines_written=writer.lines_written,
            paths_included=paths_included,
            paths_discarded=len(discard),
            total_size=kept_size,
            errors=self.reporter.error_count(),
            error_log=self.config.error_log,
            target=records_target,
            extra={
                "Files walked": len(scanned),
                "Records admitted": len(admitted),
                "Duplicate groups": len(groups),
                "Groups file": groups_target,
            },
        )
        return groups, summary

    def get_records(self) -> List[Record]:
        """Hashed records of the last run."""
        return self._records.copy()
