"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""
import re

_SIZE_PATTERN = re.compile(r"^\s*([0-9]+(?:\.[0-9]+)?)\s*([A-Z]*)\s*$")


class ConvertUtils:
    UNITS = {
        'B': 1,
        'K': 1024, 'KB': 1024, 'KIB': 1024,
        'M': 1024 ** 2, 'MB': 1024 ** 2, 'MIB': 1024 ** 2,
        'G': 1024 ** 3, 'GB': 1024 ** 3, 'GIB': 1024 ** 3,
        'T': 1024 ** 4, 'TB': 1024 ** 4, 'TIB': 1024 ** 4,
        'P': 1024 ** 5, 'PB': 1024 ** 5, 'PIB': 1024 ** 5,
    }

    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.50KB, 3.20MB).
        """
        if size_bytes < 0:
            return "0B"
        if size_bytes < 1024:
            return f"{size_bytes}B"

        value = float(size_bytes)
        for unit in ["KB", "MB", "GB", "TB", "PB"]:
            value /= 1024
            if value < 1024:
                return f"{value:.2f}{unit}"
        return f"{value / 1024:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '1.5GB', '2048KB', '1000', '1K', '512MiB'.
        Raises ValueError for negative sizes or invalid formats.
        """
        text = str(size_str).strip().upper()
        if text.startswith("-"):
            raise ValueError(f"Negative size not allowed: '{size_str}'")

        match = _SIZE_PATTERN.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )
        number, unit = match.groups()
        unit = unit or 'B'
        if unit not in ConvertUtils.UNITS:
            raise ValueError(f"Unknown size unit '{unit}' in '{size_str}'")

        # Plain byte counts stay exact, even beyond float precision
        if unit == 'B' and "." not in number:
            return int(number)
        return int(float(number) * ConvertUtils.UNITS[unit])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        """
        Check if the input string has a valid size format.
        """
        try:
            ConvertUtils.human_to_bytes(size_str)
            return True
        except ValueError:
            return False
