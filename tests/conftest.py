"""
Shared fixtures for pipeline tests.
Creates isolated temporary directories with controlled test files and records.
"""
import pytest
from pathlib import Path
from typing import Dict

from pathdedup.core.models import Record
from pathdedup.services.record_store import RecordWriter


@pytest.fixture
def test_files(tmp_path) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - 2 identical files (duplicates) plus a third copy in a subdirectory
    - 1 unique file with the same size as the duplicates
    - 1 unique file of another size
    - 1 empty file
    """
    root = tmp_path / "data"
    root.mkdir()
    files = {}

    content_a = b"A" * 1024
    files["dup_a"] = root / "dup_a.txt"
    files["dup_b"] = root / "dup_b.txt"
    files["dup_a"].write_bytes(content_a)
    files["dup_b"].write_bytes(content_a)

    files["same_size"] = root / "same_size.txt"
    files["same_size"].write_bytes(b"B" * 1024)

    files["unique"] = root / "unique.bin"
    files["unique"].write_bytes(b"C" * 2500)

    files["empty"] = root / "empty.txt"
    files["empty"].write_bytes(b"")

    subdir = root / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_c.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


@pytest.fixture
def records_file(tmp_path):
    """Factory writing records to a CSV file with header; returns its path as str."""
    def _write(records, name="records.csv"):
        path = tmp_path / name
        with RecordWriter(str(path)) as writer:
            writer.write_all(records)
        return str(path)
    return _write


@pytest.fixture
def scenario_records():
    """Two duplicates of size 10 and one unrelated file."""
    return [
        Record("a", 10, "h1"),
        Record("b", 10, "h1"),
        Record("c", 20, "h2"),
    ]
