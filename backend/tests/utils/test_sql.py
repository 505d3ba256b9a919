# backend/tests/utils/test_sql.py
"""
Tests for LIKE pattern escaping used by asset search.
"""

import pytest

from investment_tracker.utils.sql import contains_pattern, escape_like_pattern


class TestEscapeLikePattern:
    @pytest.mark.parametrize(
        "raw,escaped",
        [
            ("THYAO", "THYAO"),
            ("", ""),
            ("BRK_B", "BRK\\_B"),
            ("50% gold", "50\\% gold"),
            ("%_", "\\%\\_"),
            ("a\\b", "a\\\\b"),
        ],
    )
    def test_escapes_wildcards(self, raw, escaped):
        assert escape_like_pattern(raw) == escaped

    def test_backslash_escaped_before_wildcards(self):
        """An existing backslash must not turn into an escape for the following %."""
        assert escape_like_pattern("\\%") == "\\\\\\%"


class TestContainsPattern:
    def test_wraps_value(self):
        assert contains_pattern("gold") == "%gold%"

    def test_strips_and_escapes(self):
        assert contains_pattern("  50% ") == "%50\\%%"
