"""
tests/unit/addressing/test_identifiers.py

Tests for CSS identifier escaping.
"""

import pytest

from crawl_hooks.addressing.identifiers import (
    escape_identifier,
    is_css_ident_char,
    is_css_identifier,
    unescape_identifier,
)


class TestIsCssIdentifier:
    """
    Tests for is_css_identifier and is_css_ident_char.
    """

    @pytest.mark.parametrize("value", ["main", "_private", "-webkit-box", "--custom", "a1-b_2"])
    def test_valid_identifiers(self, value: str) -> None:
        """Plain identifiers are recognized."""
        assert is_css_identifier(value) is True

    @pytest.mark.parametrize("value", ["", "1a", "-1", "a b", "a:b", "---x"])
    def test_invalid_identifiers(self, value: str) -> None:
        """Leading digits, whitespace and punctuation are rejected."""
        assert is_css_identifier(value) is False

    def test_ident_chars(self) -> None:
        """ASCII word characters, hyphen and non-ASCII above U+00A0 are ident chars."""
        assert is_css_ident_char("a") is True
        assert is_css_ident_char("-") is True
        assert is_css_ident_char("é") is True
        assert is_css_ident_char("\u00a0") is True
        assert is_css_ident_char("!") is False
        assert is_css_ident_char(" ") is False


class TestEscapeIdentifier:
    """
    Tests for escape_identifier.
    """

    def test_valid_identifier_unchanged(self) -> None:
        """Valid identifiers come back as they are."""
        assert escape_identifier("main-content") == "main-content"

    def test_leading_digit(self) -> None:
        """A leading digit is hex escaped and followed by a space."""
        assert escape_identifier("1a") == "\\31 a"

    def test_leading_hyphen_digit(self) -> None:
        """A hyphen followed by a digit gets its hyphen escaped."""
        assert escape_identifier("-1x") == "\\2d 1x"

    def test_double_hyphen_only(self) -> None:
        """"--" alone is not an identifier, so its first hyphen is escaped."""
        assert escape_identifier("--") == "\\2d -"

    @pytest.mark.parametrize("value, expected", [("-", "\\2d"), ("-!", "\\2d \\21")])
    def test_leading_hyphen_of_non_identifier(self, value: str, expected: str) -> None:
        """Any leading hyphen of a non-identifier is escaped, including a lone one."""
        assert escape_identifier(value) == expected

    def test_inner_whitespace(self) -> None:
        """Characters outside the identifier set are escaped in place."""
        assert escape_identifier("a b") == "a\\20 b"

    def test_last_character_has_no_trailing_space(self) -> None:
        """An escaped final character is not followed by a space."""
        assert escape_identifier("a:") == "a\\3a"

    def test_non_ascii_kept(self) -> None:
        """Non-ASCII letters need no escaping."""
        assert escape_identifier("café 1") == "café\\20 1"


class TestUnescapeIdentifier:
    """
    Tests for unescape_identifier.
    """

    @pytest.mark.parametrize("value", ["1a", "-1x", "a b", "a:", "x.y#z", "--", "-", "café 1"])
    def test_reverses_escape_identifier(self, value: str) -> None:
        """Unescaping an escaped identifier restores the original."""
        assert unescape_identifier(escape_identifier(value)) == value

    def test_literal_escape(self) -> None:
        """A backslash before a non-hex character stands for that character."""
        assert unescape_identifier("a\\.b") == "a.b"

    def test_hex_escape_consumes_one_space(self) -> None:
        """Only one whitespace character after a hex escape is consumed."""
        assert unescape_identifier("\\31  a") == "1 a"

    @pytest.mark.parametrize("text", ["\\0", "\\110000", "\\d800"])
    def test_invalid_code_points(self, text: str) -> None:
        """Zero, out of range and surrogate code points become U+FFFD."""
        assert unescape_identifier(text) == "\ufffd"
