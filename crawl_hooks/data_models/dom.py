"""
crawl_hooks/data_models/dom.py

Read-only document tree model consumed by the addressing functions.

Contains:
- NodeKind: Kinds of tree nodes
- TreeNode: One node of a host-supplied document tree
- PathStep: One segment of a CSS path or XPath under construction
"""

from __future__ import annotations

import html
import weakref
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterator


class NodeKind(StrEnum):
    """Kinds of nodes a document tree can hold."""
    DOCUMENT = "document"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    TEXT = "text"
    CDATA = "cdata"
    COMMENT = "comment"
    PROCESSING_INSTRUCTION = "processing-instruction"


# elements serialized without a closing tag
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# elements whose text children are serialized verbatim
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


@dataclass(frozen=True)
class PathStep:
    """
    One segment of a node address.
    `optimized` marks a terminal shortcut after which the walk stops.
    """
    value: str
    optimized: bool = False


class TreeNode:
    """
    One node of a document tree.

    The tree is built by the host (see crawl_hooks.dom.html_tree) through
    `append_child`; the addressing code only reads it. Parents are held
    weakly, children strongly, so the document owns the tree.
    """

    def __init__(
        self,
        kind: NodeKind,
        local_name: str = "",
        attributes: dict[str, str] | None = None,
        text: str = "",
        source: Any = None,
    ) -> None:
        """
        Initialize TreeNode.
        Args:
            kind: The node kind.
            local_name: Tag name for elements, attribute name for attributes.
            attributes: Attribute map (elements only).
            text: Character data (text, CDATA, comment, processing instruction)
                or the value of an attribute node.
            source: Optional object the node was built from (e.g. a bs4 Tag).
        """
        self.kind = NodeKind(kind)
        self.local_name = local_name
        self.attributes: dict[str, str] = dict(attributes or {})
        self.text = text
        self.source = source
        self._parent_ref: weakref.ReferenceType[TreeNode] | None = None
        self._children: list[TreeNode] = []

    def __repr__(self) -> str:
        if self.kind is NodeKind.ELEMENT:
            return f"<TreeNode element {self.local_name!r} id={self.id!r}>"
        if self.kind is NodeKind.ATTRIBUTE:
            return f"<TreeNode attribute {self.local_name!r}>"
        return f"<TreeNode {self.kind.value}>"


    # Tree structure __________________________________________________________________________________________

    @property
    def parent(self) -> TreeNode | None:
        """The containing node, or None at the root or once the owner is gone."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> tuple[TreeNode, ...]:
        """Child nodes of every kind, in document order."""
        return tuple(self._children)

    @property
    def element_children(self) -> list[TreeNode]:
        """Element children, in document order."""
        return [child for child in self._children if child.kind is NodeKind.ELEMENT]

    def append_child(self, child: TreeNode) -> TreeNode:
        """
        Append a child node. Host-side tree construction only.
        Raises:
            ValueError: If the child already has a parent or cannot hold one.
        """
        if child.parent is not None:
            raise ValueError(f"{child!r} already belongs to {child.parent!r}")
        if child.kind in (NodeKind.DOCUMENT, NodeKind.ATTRIBUTE):
            raise ValueError(f"{child.kind.value} nodes cannot be appended as children")
        child._parent_ref = weakref.ref(self)
        self._children.append(child)
        return child

    def set_attribute(self, name: str, value: str) -> None:
        """Set an attribute value. Host-side mutation only."""
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        """Remove an attribute if present. Host-side mutation only."""
        self.attributes.pop(name, None)

    def attribute_node(self, name: str) -> TreeNode | None:
        """
        Build an attribute node for `name`, owned by this element.
        Attribute nodes point at their owner but are not part of `children`.
        """
        if self.kind is not NodeKind.ELEMENT or name not in self.attributes:
            return None
        node = TreeNode(NodeKind.ATTRIBUTE, local_name=name, text=self.attributes[name])
        node._parent_ref = weakref.ref(self)
        return node

    def iter_descendants(self) -> Iterator[TreeNode]:
        """Yield every descendant in document (pre-)order."""
        stack = list(reversed(self._children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def iter_elements(self) -> Iterator[TreeNode]:
        """Yield every descendant element in document order."""
        for node in self.iter_descendants():
            if node.kind is NodeKind.ELEMENT:
                yield node


    # Element accessors _______________________________________________________________________________________

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    @property
    def tag_name(self) -> str:
        """Upper-cased local name, like the DOM nodeName of an HTML element."""
        return self.local_name.upper()

    @property
    def id(self) -> str | None:
        """The id attribute; an empty id counts as no id."""
        return self.attributes.get("id") or None

    @property
    def class_list(self) -> list[str]:
        """Class names in attribute order."""
        return self.attributes.get("class", "").split()

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text and CDATA nodes."""
        if self.kind in (NodeKind.DOCUMENT, NodeKind.ELEMENT):
            return "".join(
                node.text
                for node in self.iter_descendants()
                if node.kind in (NodeKind.TEXT, NodeKind.CDATA)
            )
        return self.text


    # Serialization ___________________________________________________________________________________________

    def outer_html(self) -> str:
        """Serialize the node and its subtree to HTML."""
        return "".join(self._serialize(raw_text=False))

    def inner_html(self) -> str:
        """Serialize the node's children to HTML."""
        raw = self.kind is NodeKind.ELEMENT and self.local_name.lower() in RAW_TEXT_ELEMENTS
        return "".join(
            part
            for child in self._children
            for part in child._serialize(raw_text=raw)
        )

    def _serialize(self, raw_text: bool) -> Iterator[str]:
        if self.kind is NodeKind.ELEMENT:
            yield f"<{self.local_name}"
            for name, value in self.attributes.items():
                yield f' {name}="{html.escape(value, quote=True)}"'
            yield ">"
            if self.local_name.lower() in VOID_ELEMENTS and not self._children:
                return
            yield self.inner_html()
            yield f"</{self.local_name}>"
        elif self.kind is NodeKind.DOCUMENT:
            yield self.inner_html()
        elif self.kind is NodeKind.TEXT:
            yield self.text if raw_text else html.escape(self.text, quote=False)
        elif self.kind is NodeKind.CDATA:
            yield f"<![CDATA[{self.text}]]>"
        elif self.kind is NodeKind.COMMENT:
            yield f"<!--{self.text}-->"
        elif self.kind is NodeKind.PROCESSING_INSTRUCTION:
            yield f"<?{self.text}>"
        elif self.kind is NodeKind.ATTRIBUTE:
            yield f'{self.local_name}="{html.escape(self.text, quote=True)}"'
