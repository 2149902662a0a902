"""
crawl_hooks/addressing/__init__.py

Node addressing: CSS selector paths, XPaths and identifier escaping.
"""

from crawl_hooks.addressing.css_path import css_path
from crawl_hooks.addressing.identifiers import (
    escape_identifier,
    is_css_ident_char,
    is_css_identifier,
    unescape_identifier,
)
from crawl_hooks.addressing.resolver import query_selector, query_selector_all, resolve_xpath
from crawl_hooks.addressing.xpath import x_path

__all__ = [
    "css_path",
    "x_path",
    "escape_identifier",
    "unescape_identifier",
    "is_css_identifier",
    "is_css_ident_char",
    "resolve_xpath",
    "query_selector",
    "query_selector_all",
]
