"""
Tests for human-readable size conversion.
"""
import pytest

from pathdedup.utils.convert_utils import ConvertUtils


class TestHumanToBytes:
    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("1000", 1000),
        ("1K", 1024),
        ("1kb", 1024),
        ("1.5KB", 1536),
        ("2MiB", 2 * 1024 ** 2),
        ("1G", 1024 ** 3),
        (" 10 MB ", 10 * 1024 ** 2),
        ("123456789012345678901", 123456789012345678901),
    ])
    def test_valid_formats(self, text, expected):
        assert ConvertUtils.human_to_bytes(text) == expected

    @pytest.mark.parametrize("text", ["-1", "abc", "1.5.5K", "10XB", ""])
    def test_invalid_formats(self, text):
        with pytest.raises(ValueError):
            ConvertUtils.human_to_bytes(text)
        assert not ConvertUtils.is_valid_size_format(text)


class TestBytesToHuman:
    def test_small_values_in_bytes(self):
        assert ConvertUtils.bytes_to_human(0) == "0B"
        assert ConvertUtils.bytes_to_human(1023) == "1023B"

    def test_units(self):
        assert ConvertUtils.bytes_to_human(1536) == "1.50KB"
        assert ConvertUtils.bytes_to_human(3 * 1024 ** 2) == "3.00MB"
        assert ConvertUtils.bytes_to_human(1024 ** 3) == "1.00GB"
