"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/record_store.py
Reading and writing the pipeline's text artifacts:
- records files: CSV with a `path,size,hash` header row
- path-only files: one CSV-quoted path per row, no header
- duplicate-group exports: a bracketed list of bracketed, quoted path lists (valid JSON)
"""
import csv
import json
from itertools import chain
from typing import Iterator, Iterable, List, Optional, Tuple

from pathdedup.core.errors import MalformedInputError
from pathdedup.core.models import Record, DuplicateGroup, RECORD_FIELDS


def _open_text(path: str, mode: str = "r", newline: Optional[str] = None):
    # Undecodable bytes in file names (surrogate escapes from os.walk) round-trip unchanged
    return open(path, mode, newline=newline, encoding="utf-8", errors="surrogateescape")


def read_records(source: str) -> Iterator[Record]:
    """Streams the records of a records file. Any malformed row aborts the read."""
    with _open_text(source, newline="") as f:
        reader = csv.reader(f)
        try:
            header = next(reader, None)
            if header is None:
                return
            if tuple(header) != RECORD_FIELDS:
                raise MalformedInputError(f"Unexpected header {header}", source, 1)
            for row in reader:
                if not row:
                    continue
                yield Record.from_row(row, source, reader.line_num)
        except csv.Error as e:
            raise MalformedInputError(f"CSV error: {e}", source, reader.line_num)


def read_paths(source: str) -> Iterator[Tuple[str, Optional[int]]]:
    """
    Streams (path, size) pairs from either a records file or a path-only file.
    Size is None for path-only input.
    """
    with _open_text(source, newline="") as f:
        reader = csv.reader(f)
        try:
            first = next(reader, None)
            if first is None:
                return
            if tuple(first) == RECORD_FIELDS:
                for row in reader:
                    if row:
                        record = Record.from_row(row, source, reader.line_num)
                        yield record.path, record.size
                return

            for row in chain([first], reader):
                if not row:
                    continue
                if len(row) != 1:
                    raise MalformedInputError(
                        f"Expected a single path field, got {len(row)}", source, reader.line_num
                    )
                yield row[0], None
        except csv.Error as e:
            raise MalformedInputError(f"CSV error: {e}", source, reader.line_num)


class RecordWriter:
    """
    Writes records (or bare paths when only_paths is set) to a CSV file.
    Use as a context manager.
    """

    def __init__(self, target: str, only_paths: bool = False):
        self.target = target
        self.only_paths = only_paths
        self.lines_written = 0
        self._file = None
        self._writer = None

    def __enter__(self) -> "RecordWriter":
        self._file = _open_text(self.target, "w", newline="")
        self._writer = csv.writer(self._file, lineterminator="\n")
        if not self.only_paths:
            self._writer.writerow(RECORD_FIELDS)
        return self

    def write(self, record: Record) -> None:
        if self.only_paths:
            self._writer.writerow([record.path])
        else:
            self._writer.writerow(record.to_row())
        self.lines_written += 1

    def write_all(self, records: Iterable[Record]) -> None:
        for record in records:
            self.write(record)

    def __exit__(self, exc_type, exc, tb) -> None:
        self._file.close()


def write_groups(target: str, groups: Iterable[DuplicateGroup]) -> Tuple[int, int]:
    """
    Exports groups one per line. Returns (groups written, paths included).
    """
    lines = []
    paths_included = 0
    for group in groups:
        lines.append("\t[" + ", ".join(json.dumps(p, ensure_ascii=False) for p in group.paths) + "]")
        paths_included += len(group.paths)

    with _open_text(target, "w") as f:
        f.write("[\n")
        f.write(",\n".join(lines))
        f.write("\n]\n")
    return len(lines), paths_included


def read_groups(source: str) -> List[DuplicateGroup]:
    """Loads a group export fully into memory."""
    try:
        with _open_text(source) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid group export: {e.msg}", source, e.lineno)

    if not isinstance(data, list):
        raise MalformedInputError("Group export must be a list of groups", source)

    groups = []
    for index, paths in enumerate(data, 1):
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise MalformedInputError(f"Group #{index} is not a list of paths", source)
        if len(paths) < 2:
            raise MalformedInputError(f"Group #{index} has fewer than two paths", source)
        groups.append(DuplicateGroup(paths=paths))
    return groups
