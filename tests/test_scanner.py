"""
Unit tests for FileScannerImpl.
"""
import os
from unittest import mock

import pytest

from pathdedup.core.scanner import FileScannerImpl


class TestFileScanner:
    def test_recursive_scan_finds_all_files(self, test_files):
        root = test_files["dup_a"].parent
        records = list(FileScannerImpl(str(root)).scan())

        paths = {r.path for r in records}
        assert paths == {str(p) for p in test_files.values()}
        assert all(r.hash == "" for r in records)

    def test_sizes_are_reported(self, test_files):
        root = test_files["dup_a"].parent
        sizes = {r.path: r.size for r in FileScannerImpl(str(root)).scan()}
        assert sizes[str(test_files["unique"])] == 2500
        assert sizes[str(test_files["empty"])] == 0

    def test_non_recursive_scan_skips_subdirectories(self, test_files):
        root = test_files["dup_a"].parent
        paths = {r.path for r in FileScannerImpl(str(root), recursive=False).scan()}
        assert str(test_files["sub_dup"]) not in paths
        assert str(test_files["dup_a"]) in paths

    def test_scan_order_is_stable(self, test_files):
        root = str(test_files["dup_a"].parent)
        first = [r.path for r in FileScannerImpl(root).scan()]
        second = [r.path for r in FileScannerImpl(root).scan()]
        assert first == second

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_are_skipped(self, tmp_path):
        root = tmp_path / "root"
        root.mkdir()
        target = root / "real.txt"
        target.write_text("content")
        (root / "link.txt").symlink_to(target)
        (root / "dirlink").symlink_to(root, target_is_directory=True)

        paths = [r.path for r in FileScannerImpl(str(root)).scan()]
        assert paths == [str(target)]

    def test_files_found_counter(self, test_files):
        scanner = FileScannerImpl(str(test_files["dup_a"].parent))
        list(scanner.scan())
        assert scanner.files_found == len(test_files)

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(RuntimeError, match="does not exist"):
            list(FileScannerImpl(str(tmp_path / "nope")).scan())

    def test_file_as_root_raises(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(RuntimeError, match="Not a directory"):
            list(FileScannerImpl(str(path)).scan())

    def test_stat_errors_go_to_reporter(self, test_files):
        reporter = mock.Mock()
        root = test_files["dup_a"].parent
        real_stat = os.stat

        def failing_stat(path, *args, **kwargs):
            if str(path).endswith("unique.bin"):
                raise PermissionError(13, "Permission denied", str(path))
            return real_stat(path, *args, **kwargs)

        with mock.patch("pathdedup.core.scanner.os.stat", side_effect=failing_stat):
            paths = {r.path for r in FileScannerImpl(str(root), reporter=reporter).scan()}

        assert str(test_files["unique"]) not in paths
        reporter.report_error.assert_called_once()
        assert reporter.report_error.call_args.args[0] == str(test_files["unique"])
