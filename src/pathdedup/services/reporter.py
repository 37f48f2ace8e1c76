"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/reporter.py
Collects per-record failures: counts them, appends them to an optional error log and
echoes them to the console when no log is configured or debug mode is on.
"""
import sys
import logging
from pathlib import Path
from typing import Any, Optional, TextIO

from pathdedup.core.interfaces import ErrorReporter

logger = logging.getLogger(__name__)


class Reporter(ErrorReporter):
    def __init__(self, error_log: Optional[str] = None, debug: bool = False, console: TextIO = None):
        self.error_log = error_log
        self.debug = debug
        self.console = console
        self._errors_file = None
        self._errors_reported = 0

    def report_error(self, entry: Any, error: Any) -> None:
        self._errors_reported += 1
        line = f"entry: {entry!r}, error: {error!r}"
        logger.debug(line)

        # Created lazily so a clean run leaves no empty log behind
        if self.error_log and self._errors_file is None:
            self._errors_file = Path(self.error_log).open("w", encoding="utf-8")
        if self._errors_file is not None:
            self._errors_file.write(line + "\n")
            self._errors_file.flush()

        if self.debug or self._errors_file is None:
            print(f"⚠️  {line}", file=self.console or sys.stderr)

    def error_count(self) -> int:
        return self._errors_reported

    def close(self) -> None:
        if self._errors_file is not None:
            self._errors_file.close()
            self._errors_file = None

    def __enter__(self) -> "Reporter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
