"""
crawl_hooks/dom/html_tree.py

Build TreeNode documents from HTML with BeautifulSoup.
"""

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from crawl_hooks.data_models.dom import NodeKind, TreeNode


def parse_html(markup: str, features: str = "html.parser") -> TreeNode:
    """
    Parse HTML into a TreeNode document.
    Args:
        markup: The HTML source.
        features: The BeautifulSoup tree builder to use.
    Returns:
        TreeNode: The document node. Hold on to it: nodes only keep weak
            references to their parents.
    """
    soup = BeautifulSoup(markup, features)
    return tree_from_soup(soup)


def tree_from_soup(soup: BeautifulSoup) -> TreeNode:
    """
    Convert a parsed BeautifulSoup document into a TreeNode document.
    Each node keeps its originating bs4 object in `source`.
    """
    document = TreeNode(NodeKind.DOCUMENT, source=soup)
    stack: list[tuple[Tag, TreeNode]] = [(soup, document)]
    while stack:
        tag, parent = stack.pop()
        for child in tag.contents:
            node = _convert(child)
            if node is None:
                continue
            parent.append_child(node)
            if isinstance(child, Tag):
                stack.append((child, node))
    return document


def _convert(item: Tag | NavigableString) -> TreeNode | None:
    """Convert one bs4 node without its children; None for skipped kinds."""
    if isinstance(item, Tag):
        return TreeNode(
            NodeKind.ELEMENT,
            local_name=item.name,
            attributes={name: _attribute_text(value) for name, value in item.attrs.items()},
            source=item,
        )
    # bs4 special strings subclass NavigableString, so check them first
    if isinstance(item, (Doctype, Declaration)):
        return None
    if isinstance(item, Comment):
        return TreeNode(NodeKind.COMMENT, text=str(item), source=item)
    if isinstance(item, CData):
        return TreeNode(NodeKind.CDATA, text=str(item), source=item)
    if isinstance(item, ProcessingInstruction):
        return TreeNode(NodeKind.PROCESSING_INSTRUCTION, text=str(item), source=item)
    if isinstance(item, NavigableString):
        return TreeNode(NodeKind.TEXT, text=str(item), source=item)
    return None


def _attribute_text(value: str | list[str]) -> str:
    # multi-valued attributes (class, rel, ...) come back as lists
    if isinstance(value, list):
        return " ".join(value)
    return value
