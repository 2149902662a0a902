"""
crawl_hooks/utils/data_utils.py

Utility functions for loading page snapshots.
"""

from pathlib import Path

from crawl_hooks.data_models.dom import TreeNode
from crawl_hooks.dom.html_tree import parse_html
from crawl_hooks.utils.exceptions import UnsupportedFileFormat

HTML_SUFFIXES = (".html", ".htm")


def load_html(file_path: str | Path) -> TreeNode:
    """
    Load an HTML file into a document tree.
    Raises:
        UnsupportedFileFormat: If the file is not an HTML file.
    Args:
        file_path (str | Path): Path to the HTML file.
    Returns:
        TreeNode: The document node.
    """
    file_path_str = str(file_path)
    if file_path_str.lower().endswith(HTML_SUFFIXES):
        with open(file_path_str, mode="r", encoding="utf-8") as html_file:
            return parse_html(html_file.read())

    raise UnsupportedFileFormat(f"No support for provided file type: {file_path_str}.")
