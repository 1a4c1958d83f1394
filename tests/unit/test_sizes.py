"""
Unit tests for byte size helpers
"""

import pytest

from sizefit.utils.sizes import default_target_size, format_bytes, parse_size


class TestParseSize:
    """Test human size parsing"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("50000", 50000),
            ("200KB", 204800),
            ("200 kb", 204800),
            ("1.5MB", 1572864),
            ("0.5KB", 512),
            ("1GB", 1073741824),
            ("100B", 100),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_size(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "10TB", "-5KB", "0", "0KB"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_size(value)


class TestFormatBytes:
    """Test size rendering"""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 Bytes"),
            (500, "500 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1048576, "1 MB"),
            (1572864, "1.5 MB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_bytes(size) == expected

    def test_no_decimals(self):
        assert format_bytes(1536, decimals=0) == "2 KB"
        assert format_bytes(100, decimals=0) == "100 Bytes"


class TestDefaultTargetSize:
    """Test default target"""

    def test_seventy_percent(self):
        assert default_target_size(100000) == 70000
        assert default_target_size(1000) == 700
