"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Walks a directory tree and yields one (path, size) record per regular file.
Features:
- Recursive or single-level traversal
- Symlinks are skipped, never followed
- Unreadable entries are handed to the reporter; the walk continues
"""

import os
import stat
import logging
from pathlib import Path
from typing import Iterator, Optional

from pathdedup.core.models import Record
from pathdedup.core.interfaces import FileScanner, ErrorReporter

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Attributes:
        root_dir: Root directory to walk
        recursive: Descend into subdirectories when True
        reporter: Receives (path, error) pairs for entries that cannot be read
    """

    def __init__(self, root_dir: str, recursive: bool = True, reporter: Optional[ErrorReporter] = None):
        self.root_dir = root_dir
        self.recursive = recursive
        self.reporter = reporter
        self.files_found = 0

    def scan(self) -> Iterator[Record]:
        root_path = Path(self.root_dir)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        logger.debug(f"Scanning directory: {self.root_dir} (recursive={self.recursive})")

        for root, dirs, files in os.walk(str(root_path), onerror=self._on_walk_error):
            if self.recursive:
                dirs.sort()
            else:
                dirs[:] = []

            for filename in sorted(files):
                path = os.path.join(root, filename)
                record = self._process_file(path)
                if record is not None:
                    self.files_found += 1
                    yield record

        logger.debug(f"Scan completed. Found {self.files_found} files.")

    def _process_file(self, path: str) -> Optional[Record]:
        """Returns a record for a regular file, None for symlinks and special files."""
        try:
            st = os.stat(path, follow_symlinks=False)
        except OSError as e:
            self._report(path, e)
            return None

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None
        return Record(path=path, size=st.st_size)

    def _on_walk_error(self, error: OSError) -> None:
        self._report(error.filename, error)

    def _report(self, path: str, error: Exception) -> None:
        if self.reporter is not None:
            self.reporter.report_error(path, error)
        else:
            logger.warning(f"Cannot read {path}: {error}")
