"""
Unit tests for time sources.
"""

import pytest
from pydantic import ValidationError

from textload.core.time_source import FromPath, Predetermined, from_path_pattern, get_time


class TestTimeSource:
    """Tests for time sources"""

    def test_predetermined_ignores_path(self):
        """Test a predetermined time is the same for every path"""
        source = Predetermined(time="20240101")

        assert get_time(source, "/a") == "20240101"
        assert get_time(source, "/b/c") == "20240101"

    def test_from_path_applies_function(self):
        """Test FromPath applies its function to the path"""
        source = FromPath(extract=lambda path: path.rsplit("/", 1)[-1][:8])

        assert get_time(source, "/landing/20240131_customers.txt") == "20240131"

    def test_from_path_errors_propagate(self):
        """Test errors from the path function propagate"""
        source = FromPath(extract=lambda path: {"/known": "x"}[path])

        with pytest.raises(KeyError):
            get_time(source, "/unknown")

    def test_pattern_concatenates_groups(self):
        """Test every capture group is concatenated"""
        source = from_path_pattern(r"year=(\d{4})/month=(\d{2})/day=(\d{2})")

        assert get_time(source, "/data/year=2024/month=01/day=31/part-0") == "20240131"

    def test_pattern_without_match_raises(self):
        """Test a path the pattern does not match raises ValueError"""
        source = from_path_pattern(r"(\d{8})")

        with pytest.raises(ValueError, match="does not match"):
            get_time(source, "/data/latest.txt")

    def test_pattern_requires_group(self):
        """Test a pattern without capture groups is rejected"""
        with pytest.raises(ValueError, match="capture group"):
            from_path_pattern(r"\d{8}")

    def test_time_sources_are_immutable(self):
        """Test time sources cannot be modified"""
        source = Predetermined(time="20240101")

        with pytest.raises(ValidationError):
            source.time = "20250101"

    def test_unknown_source_type_rejected(self):
        """Test an unknown time source raises TypeError"""
        with pytest.raises(TypeError):
            get_time("20240101", "/a")
