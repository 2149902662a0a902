"""
crawl_hooks/addressing/identifiers.py

CSS identifier escaping.
"""

import re

_CSS_IDENTIFIER_RE = re.compile(r"-{0,2}[A-Za-z_][A-Za-z0-9_-]*")
_CSS_IDENT_CHAR_RE = re.compile(r"[a-zA-Z0-9_-]")
_ESCAPE_FIRST_RE = re.compile(r"[0-9]|-[0-9-]?")
_CSS_ESCAPE_RE = re.compile(r"\\(?:([0-9a-fA-F]{1,6})[ \t\n]?|(.))", re.DOTALL)

_MAX_CODE_POINT = 0x10FFFF


def is_css_ident_char(char: str) -> bool:
    """Whether `char` may appear unescaped inside a CSS identifier."""
    return bool(_CSS_IDENT_CHAR_RE.fullmatch(char)) or ord(char) >= 0xA0


def is_css_identifier(value: str) -> bool:
    """Whether `value` is already a valid CSS identifier."""
    return bool(_CSS_IDENTIFIER_RE.fullmatch(value))


def _escape_char(char: str, is_last: bool) -> str:
    return "\\" + format(ord(char), "02x") + ("" if is_last else " ")


def escape_identifier(raw: str) -> str:
    """
    Escape `raw` so it can be used as a class name or id in a CSS selector.
    Valid identifiers are returned unchanged. Otherwise every character that
    is not allowed in an identifier is replaced by a hex escape, as is the
    first character when the string starts with a digit or a hyphen.
    Args:
        raw: The identifier to escape.
    Returns:
        str: The escaped identifier.
    """
    if is_css_identifier(raw):
        return raw

    escape_first = bool(_ESCAPE_FIRST_RE.match(raw))
    last_index = len(raw) - 1
    return "".join(
        _escape_char(char, index == last_index)
        if (escape_first and index == 0) or not is_css_ident_char(char)
        else char
        for index, char in enumerate(raw)
    )


def unescape_identifier(text: str) -> str:
    """
    Resolve CSS escapes in `text` back to the characters they stand for.
    Hex escapes consume one optional trailing whitespace character; code
    points that are zero or out of range become U+FFFD.
    """
    def _replace(match: re.Match[str]) -> str:
        hex_digits, literal = match.groups()
        if hex_digits is None:
            return literal
        code_point = int(hex_digits, 16)
        if code_point == 0 or code_point > _MAX_CODE_POINT or 0xD800 <= code_point <= 0xDFFF:
            return "\ufffd"
        return chr(code_point)

    return _CSS_ESCAPE_RE.sub(_replace, text)
