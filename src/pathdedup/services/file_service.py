"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File operations used by the copy and unique-paths stages: copying into a target folder
and moving discarded duplicates to the system trash.
"""
import re
import shutil
import logging
from pathlib import Path, PurePath
from typing import List, Set

from send2trash import send2trash

logger = logging.getLogger(__name__)

_COPY_SUFFIX = re.compile(r"^(?P<stem>.*) - Copy \((?P<times>\d+)\)$")


class TargetPathGenerator:
    """
    Maps source paths to destinations inside a target folder.

    Mirrored mode keeps the full source path below the target folder.
    Flattened mode keeps only the file name and resolves clashes by appending
    " - Copy (N)" to the stem, bumping N when the stem already carries one.
    """

    def __init__(self, target_folder: str, flatten: bool = False):
        self.target_folder = Path(target_folder)
        self.flatten = flatten
        self.taken: Set[str] = set()

    def get_target_path(self, source_path: str) -> Path:
        source = PurePath(source_path)
        if not self.flatten:
            relative = source.relative_to(source.anchor) if source.anchor else source
            return self.target_folder / relative

        if not source.name:
            raise ValueError(f"Can't get filename from source path: {source_path}")

        file_name = source.name
        while file_name in self.taken:
            file_name = self._next_name(file_name, source.suffix)
        self.taken.add(file_name)
        return self.target_folder / file_name

    @staticmethod
    def _next_name(file_name: str, suffix: str) -> str:
        stem = file_name[:-len(suffix)] if suffix else file_name
        match = _COPY_SUFFIX.match(stem)
        if match:
            stem = f"{match.group('stem')} - Copy ({int(match.group('times')) + 1})"
        else:
            stem = f"{stem} - Copy (1)"
        return stem + suffix


class FileService:
    @staticmethod
    def copy_file(source_path: str, target_path: Path) -> int:
        """Copies content and permission bits; returns the number of bytes copied."""
        target_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy(source_path, target_path)
        return target_path.stat().st_size

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def move_multiple_to_trash(cls, file_paths: List[str]) -> List[tuple]:
        """Moves files to trash one by one; returns (path, error) pairs for failures."""
        errors = []
        for path in file_paths:
            try:
                cls.move_to_trash(path)
            except (OSError, RuntimeError) as e:
                logger.warning(f"Failed to move {path} to trash: {e}")
                errors.append((path, e))
        return errors
