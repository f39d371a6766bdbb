"""
Unit tests for ConvertUtils size conversions.
"""
import pytest

from dupefindr.utils.convert_utils import ConvertUtils


class TestBytesToHuman:
    @pytest.mark.parametrize("size, expected", [
        (0, "0B"),
        (512, "512B"),
        (1536, "1.50KB"),
        (1024 * 1024, "1.00MB"),
        (int(3.2 * 1024 ** 3), "3.20GB"),
    ])
    def test_formats(self, size, expected):
        assert ConvertUtils.bytes_to_human(size) == expected


class TestHumanToBytes:
    @pytest.mark.parametrize("text, expected", [
        ("1000", 1000),
        ("1K", 1024),
        ("64KB", 64 * 1024),
        ("1.5MB", int(1.5 * 1024 ** 2)),
        ("2g", 2 * 1024 ** 3),
        (" 4 MB ", 4 * 1024 ** 2),
        ("10B", 10),
    ])
    def test_parses(self, text, expected):
        assert ConvertUtils.human_to_bytes(text) == expected

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid size format"):
            ConvertUtils.human_to_bytes("abc")

    def test_negative(self):
        with pytest.raises(ValueError, match="Negative size"):
            ConvertUtils.human_to_bytes("-5MB")
