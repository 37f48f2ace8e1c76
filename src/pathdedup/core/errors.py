"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the record pipeline.

Per-file problems (OSError, SizeMismatchError) are recoverable: the stage reports the
record and carries on. IntegrityError and MalformedInputError abort the run.
"""


class DedupError(Exception):
    """Base class for all pipeline errors."""


class IntegrityError(DedupError):
    """Two records share an equality key but disagree in size."""

    def __init__(self, message: str, first_path: str = None, second_path: str = None):
        super().__init__(message)
        self.first_path = first_path
        self.second_path = second_path


class SizeMismatchError(DedupError):
    """Bytes actually read differ from the size the file reported. Recoverable."""

    def __init__(self, path: str, expected: int, actual: int):
        super().__init__(f"Read and length not matching for '{path}' ({actual} != {expected})")
        self.path = path
        self.expected = expected
        self.actual = actual


class MalformedInputError(DedupError):
    """Tabular or group input could not be parsed."""

    def __init__(self, message: str, source: str = None, line: int = None):
        location = ""
        if source is not None:
            location = f" ({source}" + (f", line {line})" if line is not None else ")")
        super().__init__(f"{message}{location}")
        self.source = source
        self.line = line
