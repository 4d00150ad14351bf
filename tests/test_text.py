"""
Tests for input sanitizing and parsing.

Includes property-based checks that sanitized text never carries markup.
"""

from datetime import date

import pytest
from bs4 import BeautifulSoup
from hypothesis import HealthCheck, given, settings, strategies as st

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gopherpods.errors import ValidationError
from gopherpods.utils.text import parse_date, parse_optional_int, sanitize, validate_url


class TestSanitize:
    """Test whitespace trimming and markup neutralization."""

    def test_script_block_removed_and_trimmed(self):
        result = sanitize(" <script>x</script> ")

        assert "<script" not in result.lower()
        assert "<" not in result
        assert result == result.strip()
        assert result == ""

    def test_plain_text_kept(self):
        assert sanitize("  Go Time  ") == "Go Time"

    def test_formatting_tags_stripped_text_kept(self):
        assert sanitize("<b>Generics</b> in <i>Go</i>") == "Generics in Go"

    def test_event_handler_attribute_removed(self):
        result = sanitize('<img src=x onerror="alert(1)">hello')

        assert result == "hello"

    def test_plain_text_is_not_escaped(self):
        assert sanitize("a < b & c") == "a < b & c"

    def test_entity_encoded_markup_removed(self):
        result = sanitize("&lt;script&gt;alert(1)&lt;/script&gt;ok")

        assert result == "ok"

    def test_nested_tag_trick_leaves_no_tag(self):
        result = sanitize("<scr<script></script>ipt>alert(1)</script>")

        assert BeautifulSoup(result, "html.parser").find() is None

    def test_comment_removed(self):
        assert sanitize("a<!-- <script>x</script> -->b") == "ab"

    def test_none_is_empty(self):
        assert sanitize(None) == ""

    @settings(max_examples=200, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(st.text(alphabet=st.sampled_from("<>/!-&;#abist pcrg=\"\x27 \n"), max_size=80) | st.text(max_size=80))
    def test_never_contains_markup(self, text):
        try:
            result = sanitize(text)
        except ValidationError:
            return

        assert BeautifulSoup(result, "html.parser").find() is None
        assert sanitize(result) == result
        assert result == result.strip()


class TestParseDate:
    """Test strict YYYY-MM-DD parsing."""

    def test_valid_date(self):
        assert parse_date("2024-01-02") == date(2024, 1, 2)

    def test_surrounding_whitespace_allowed(self):
        assert parse_date(" 2024-01-02 ") == date(2024, 1, 2)

    @pytest.mark.parametrize("value", ["2024-13-40", "02/01/2024", "2024-1", "tomorrow", "2023-02-29"])
    def test_invalid_dates(self, value):
        with pytest.raises(ValidationError):
            parse_date(value)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_date(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_date(value)

        assert "required" in str(exc_info.value)


class TestParseOptionalInt:

    def test_blank_is_none(self):
        assert parse_optional_int("", "size") is None
        assert parse_optional_int(None, "size") is None

    def test_number(self):
        assert parse_optional_int(" 1234 ", "size") == 1234

    @pytest.mark.parametrize("value", ["12.5", "abc", "-1"])
    def test_rejects_bad_values(self, value):
        with pytest.raises(ValidationError):
            parse_optional_int(value, "size")


class TestValidateUrl:

    def test_https_url(self):
        assert validate_url(" https://example.com/ep1 ") == "https://example.com/ep1"

    @pytest.mark.parametrize("value", [
        "",
        "javascript:alert(1)",
        "ftp://example.com/file",
        "https://",
        "example.com/ep1",
        'https://example.com/"onmouseover=',
    ])
    def test_rejected_urls(self, value):
        with pytest.raises(ValidationError):
            validate_url(value)
