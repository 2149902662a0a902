"""
crawl_hooks/dom/__init__.py

HTML tree building and element/form collectors.
"""

from crawl_hooks.dom.collectors import (
    describe_element,
    element_attributes,
    get_all_elements,
    get_all_elements_with_event_listeners,
    get_all_forms,
    get_element_from_xpath,
)
from crawl_hooks.dom.html_tree import parse_html, tree_from_soup

__all__ = [
    "parse_html",
    "tree_from_soup",
    "describe_element",
    "element_attributes",
    "get_all_elements",
    "get_all_elements_with_event_listeners",
    "get_all_forms",
    "get_element_from_xpath",
]
