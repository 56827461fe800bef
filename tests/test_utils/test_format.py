"""
Tests for minifold.utils.format module.
"""

import pytest

from minifold.utils.format import format_reduction, format_size, parse_options


@pytest.mark.unit
class TestFormatSize:
    """Tests for format_size function."""

    def test_format_bytes(self):
        """Test formatting bytes."""
        assert format_size(512) == "512.00 B"
        assert format_size(0) == "0.00 B"
        assert format_size(1023) == "1023.00 B"

    def test_format_kilobytes(self):
        """Test formatting kilobytes."""
        assert format_size(1024) == "1.00 KB"
        assert format_size(1536) == "1.50 KB"

    def test_format_megabytes(self):
        """Test formatting megabytes."""
        assert format_size(1024 * 1024) == "1.00 MB"
        assert format_size(1024 * 1024 * 1.5) == "1.50 MB"


@pytest.mark.unit
class TestFormatReduction:
    """Tests for format_reduction function."""

    def test_reduction(self):
        assert format_reduction(1000, 250) == "75.0% reduction"

    def test_no_change(self):
        assert format_reduction(100, 100) == "0.0% reduction"

    def test_increase(self):
        """Minifying can make tiny files larger."""
        assert format_reduction(100, 110) == "10.0% increase"

    def test_empty_original(self):
        assert format_reduction(0, 0) == "0.0% reduction"


@pytest.mark.unit
class TestParseOptions:
    """Tests for parse_options function."""

    def test_parse_object(self):
        assert parse_options('{"compress": true, "ecma": 2020}') == {"compress": True, "ecma": 2020}

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_means_no_options(self, value):
        assert parse_options(value) == {}

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid options JSON"):
            parse_options("{compress: true")

    def test_non_object(self):
        with pytest.raises(ValueError, match="Options must be a JSON object"):
            parse_options("[1, 2]")
