"""
Tests for FileService and TargetPathGenerator.
Trash operations are mocked: no file ever reaches the real system trash.
"""
from pathlib import Path
from unittest import mock

import pytest

from pathdedup.services import file_service
from pathdedup.services.file_service import FileService, TargetPathGenerator


class TestTargetPathGenerator:
    """Destination paths for copied files."""

    def test_mirrored_keeps_source_tree(self):
        generator = TargetPathGenerator("/out")
        assert generator.get_target_path("/la/le/li.mp3") == Path("/out/la/le/li.mp3")

    def test_mirrored_relative_source(self):
        generator = TargetPathGenerator("/out")
        assert generator.get_target_path("la/li.mp3") == Path("/out/la/li.mp3")

    def test_flatten_without_clash(self):
        generator = TargetPathGenerator("/out", flatten=True)
        assert generator.get_target_path("/la/le/li.mp3") == Path("/out/li.mp3")

    def test_flatten_first_clash(self):
        generator = TargetPathGenerator("/out", flatten=True)
        generator.taken.add("li.mp3")
        assert generator.get_target_path("/la/le/li.mp3") == Path("/out/li - Copy (1).mp3")

    def test_flatten_second_clash(self):
        generator = TargetPathGenerator("/out", flatten=True)
        generator.taken.update({"li.mp3", "li - Copy (1).mp3"})
        assert generator.get_target_path("/la/le/li.mp3") == Path("/out/li - Copy (2).mp3")

    def test_flatten_bumps_existing_copy_number(self):
        generator = TargetPathGenerator("/out", flatten=True)
        generator.taken.add("li - Copy (9).mp3")
        assert generator.get_target_path("/a/li - Copy (9).mp3") == Path("/out/li - Copy (10).mp3")

    def test_flatten_without_extension(self):
        generator = TargetPathGenerator("/out", flatten=True)
        generator.taken.add("li - Copy (10)")
        assert generator.get_target_path("/a/li - Copy (10)") == Path("/out/li - Copy (11)")

    def test_flatten_non_numeric_copy_marker(self):
        generator = TargetPathGenerator("/out", flatten=True)
        generator.taken.add("li - Copy (x)")
        assert generator.get_target_path("/a/li - Copy (x)") == Path("/out/li - Copy (x) - Copy (1)")

    def test_flatten_remembers_assigned_names(self):
        generator = TargetPathGenerator("/out", flatten=True)
        first = generator.get_target_path("/a/song.mp3")
        second = generator.get_target_path("/b/song.mp3")
        third = generator.get_target_path("/c/song.mp3")
        assert [p.name for p in (first, second, third)] == [
            "song.mp3", "song - Copy (1).mp3", "song - Copy (2).mp3"
        ]

    def test_flatten_rejects_path_without_name(self):
        generator = TargetPathGenerator("/out", flatten=True)
        with pytest.raises(ValueError):
            generator.get_target_path("/")


class TestCopyFile:
    def test_copies_content_and_creates_parents(self, tmp_path):
        source = tmp_path / "src.txt"
        source.write_bytes(b"payload")
        target = tmp_path / "out" / "deep" / "src.txt"

        assert FileService.copy_file(str(source), target) == 7
        assert target.read_bytes() == b"payload"

    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(OSError):
            FileService.copy_file(str(tmp_path / "missing"), tmp_path / "out" / "x")


class TestMoveToTrash:
    def test_moves_file_to_trash(self, tmp_path):
        path = tmp_path / "dup.txt"
        path.write_text("x")
        with mock.patch.object(file_service, "send2trash") as mock_trash:
            FileService.move_to_trash(str(path))
        mock_trash.assert_called_once_with(str(path.resolve()))

    def test_missing_file_raises(self, tmp_path):
        with mock.patch.object(file_service, "send2trash") as mock_trash:
            with pytest.raises(FileNotFoundError):
                FileService.move_to_trash(str(tmp_path / "missing"))
        mock_trash.assert_not_called()

    def test_trash_failure_becomes_runtime_error(self, tmp_path):
        path = tmp_path / "dup.txt"
        path.write_text("x")
        with mock.patch.object(file_service, "send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.move_to_trash(str(path))


class TestMoveMultipleToTrash:
    def test_continues_after_error(self, tmp_path):
        good = tmp_path / "good.txt"
        good.write_text("x")
        missing = tmp_path / "missing.txt"

        with mock.patch.object(file_service, "send2trash") as mock_trash:
            errors = FileService.move_multiple_to_trash([str(missing), str(good)])

        assert [path for path, _ in errors] == [str(missing)]
        mock_trash.assert_called_once_with(str(good.resolve()))

    def test_empty_list_does_nothing(self):
        with mock.patch.object(file_service, "send2trash") as mock_trash:
            assert FileService.move_multiple_to_trash([]) == []
        mock_trash.assert_not_called()
