"""
crawl_hooks/addressing/resolver.py

Resolve addresses built by css_path / x_path back to tree nodes.

Supports the grammar the builders emit:
- XPath: "/", an optional `//*[@id=...]` shortcut, then element, `@attribute`,
  `text()`, `comment()` and `processing-instruction()` steps with an optional
  `[index]`.
- CSS: compounds made of a type (or `*`), `#id`, `.class`, `[attr="value"]`
  and `:nth-child(n)`, joined by `>` and grouped with `,`. Parsed trees are
  matched with soupsieve, hand-built or modified trees by the matcher below.
"""

import re
from dataclasses import dataclass, field

import soupsieve as sv
from bs4.element import Tag

from crawl_hooks.addressing.identifiers import unescape_identifier
from crawl_hooks.data_models.dom import NodeKind, TreeNode
from crawl_hooks.utils.exceptions import PathSyntaxError

## XPath

_XPATH_LITERAL = r"""(?:"[^"]*"|'[^']*')"""
_XPATH_ID_SHORTCUT_RE = re.compile(
    rf"""//\*\[@id=(?P<literal>{_XPATH_LITERAL}|concat\(\s*{_XPATH_LITERAL}(?:\s*,\s*{_XPATH_LITERAL})*\s*\))\]"""
)
_XPATH_LITERAL_PART_RE = re.compile(r""""([^"]*)"|'([^']*)'""")
_XPATH_STEP_RE = re.compile(
    r"(?P<test>@[^\[\]/]+|text\(\)|comment\(\)|processing-instruction\(\)|[^\W\d][\w.:-]*)"
    r"(?:\[(?P<index>[1-9][0-9]*)\])?"
)

_KINDS_BY_NODE_TEST = {
    "text()": (NodeKind.TEXT, NodeKind.CDATA),
    "comment()": (NodeKind.COMMENT,),
    "processing-instruction()": (NodeKind.PROCESSING_INSTRUCTION,),
}


def _parse_xpath_literal(literal: str) -> str:
    return "".join(double or single for double, single in _XPATH_LITERAL_PART_RE.findall(literal))


def resolve_xpath(document: TreeNode, path: str) -> TreeNode | None:
    """
    Find the node an XPath built by x_path refers to.
    The result only weakly references its parent: keep `document` alive
    while using it.
    Args:
        document: The document (or subtree root) the path is evaluated against.
        path: The XPath.
    Returns:
        TreeNode | None: The first node the path selects, or None.
    Raises:
        PathSyntaxError: If the path is outside the supported grammar.
    """
    if path == "/":
        return document

    shortcut = _XPATH_ID_SHORTCUT_RE.match(path)
    if shortcut:
        wanted_id = _parse_xpath_literal(shortcut.group("literal"))
        current = next(
            (node for node in document.iter_elements() if node.attributes.get("id") == wanted_id),
            None,
        )
        rest = path[shortcut.end():]
    elif path.startswith("/"):
        current = document
        rest = path
    else:
        raise PathSyntaxError(f"XPath must be absolute or start with an id shortcut: {path!r}")

    if not rest:
        return current
    if not rest.startswith("/"):
        raise PathSyntaxError(f"Unexpected text after id shortcut in {path!r}")

    for segment in rest[1:].split("/"):
        match = _XPATH_STEP_RE.fullmatch(segment)
        if match is None:
            raise PathSyntaxError(f"Unsupported XPath step {segment!r} in {path!r}")
        if current is None:
            return None
        current = _select_xpath_step(current, match.group("test"), match.group("index"))

    return current


def _select_xpath_step(context: TreeNode, test: str, index: str | None) -> TreeNode | None:
    if test.startswith("@"):
        if index is not None:
            raise PathSyntaxError(f"Attribute steps take no index: {test}[{index}]")
        return context.attribute_node(test[1:])

    kinds = _KINDS_BY_NODE_TEST.get(test)
    if kinds is None:
        candidates = [
            child for child in context.children
            if child.kind is NodeKind.ELEMENT and child.local_name == test
        ]
    else:
        candidates = [child for child in context.children if child.kind in kinds]

    position = int(index) if index is not None else 1
    if position > len(candidates):
        return None
    return candidates[position - 1]


## CSS

_CSS_IDENT = r"(?:[A-Za-z0-9_\-\u00a0-\U0010ffff]|\\[0-9a-fA-F]{1,6}[ \t\n]?|\\[^0-9a-fA-F\n])+"
_CSS_TOKEN_RE = re.compile(
    rf"""
      (?P<group>\s*,\s*)
    | (?P<child>\s*>\s*)
    | \#(?P<id>{_CSS_IDENT})
    | \.(?P<class_name>{_CSS_IDENT})
    | \[(?P<attr_name>[^\s="\]]+)="(?P<attr_value>(?:[^"\\]|\\.)*)"\]
    | :nth-child\(\s*(?P<nth_child>[1-9][0-9]*)\s*\)
    | (?P<type>\*|[A-Za-z][A-Za-z0-9_-]*)
    """,
    re.VERBOSE,
)
_CSS_STRING_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


@dataclass
class _Compound:
    """One compound selector (no combinators)."""
    type_name: str | None = None
    id: str | None = None
    class_names: list[str] = field(default_factory=list)
    attributes: list[tuple[str, str]] = field(default_factory=list)
    nth_child: int | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.type_name is None
            and self.id is None
            and not self.class_names
            and not self.attributes
            and self.nth_child is None
        )

    def matches(self, node: TreeNode) -> bool:
        if node.kind is not NodeKind.ELEMENT:
            return False
        if self.type_name not in (None, "*") and node.local_name.lower() != self.type_name.lower():
            return False
        if self.id is not None and node.attributes.get("id") != self.id:
            return False
        if self.class_names and not set(self.class_names).issubset(node.class_list):
            return False
        for name, value in self.attributes:
            if node.attributes.get(name) != value:
                return False
        if self.nth_child is not None:
            parent = node.parent
            if parent is None:
                return False
            position = next(
                (i + 1 for i, sibling in enumerate(parent.element_children) if sibling is node),
                None,
            )
            if position != self.nth_child:
                return False
        return True


def _parse_selector(selector: str) -> list[list[_Compound]]:
    """Parse a selector into groups of child-combined compounds."""
    text = selector.strip()
    if not text:
        raise PathSyntaxError("Empty selector")

    groups: list[list[_Compound]] = [[_Compound()]]
    position = 0
    while position < len(text):
        match = _CSS_TOKEN_RE.match(text, position)
        if match is None or match.end() == position:
            raise PathSyntaxError(f"Unsupported selector syntax at {position} in {selector!r}")
        compound = groups[-1][-1]

        if match.group("group") is not None or match.group("child") is not None:
            if compound.is_empty:
                raise PathSyntaxError(f"Dangling combinator at {position} in {selector!r}")
            if match.group("group") is not None:
                groups.append([_Compound()])
            else:
                groups[-1].append(_Compound())
        elif match.group("id") is not None:
            compound.id = unescape_identifier(match.group("id"))
        elif match.group("class_name") is not None:
            compound.class_names.append(unescape_identifier(match.group("class_name")))
        elif match.group("attr_name") is not None:
            value = _CSS_STRING_ESCAPE_RE.sub(r"\1", match.group("attr_value"))
            compound.attributes.append((match.group("attr_name"), value))
        elif match.group("nth_child") is not None:
            compound.nth_child = int(match.group("nth_child"))
        else:
            if not compound.is_empty:
                raise PathSyntaxError(f"Type selector must start a compound at {position} in {selector!r}")
            compound.type_name = match.group("type")
        position = match.end()

    if groups[-1][-1].is_empty:
        raise PathSyntaxError(f"Selector ends with a combinator: {selector!r}")
    return groups


def _matches_complex(node: TreeNode, compounds: list[_Compound]) -> bool:
    current: TreeNode | None = node
    for compound in reversed(compounds):
        if current is None or not compound.matches(current):
            return False
        current = current.parent
    return True


def _source_attribute_text(value: str | list[str]) -> str:
    if isinstance(value, list):
        return " ".join(value)
    return value


def _mirrored_elements(root: TreeNode) -> dict[int, TreeNode] | None:
    """
    Map id(bs4 tag) -> element for a tree that still mirrors its soup.
    None when `root` was not parsed by BeautifulSoup, or when the tree was
    built or changed by hand since.
    """
    if not isinstance(root.source, Tag):
        return None
    elements: dict[int, TreeNode] = {}
    for node in root.iter_elements():
        tag = node.source
        parent = node.parent
        if (
            not isinstance(tag, Tag)
            or parent is None
            or tag.parent is not parent.source
            or tag.name != node.local_name
            or {name: _source_attribute_text(value) for name, value in tag.attrs.items()} != node.attributes
        ):
            return None
        elements[id(tag)] = node
    return elements


def query_selector_all(root: TreeNode, selector: str) -> list[TreeNode]:
    """
    Find all descendant elements of `root` matching `selector`.
    Trees parsed by BeautifulSoup are matched with soupsieve; other trees
    are matched directly.

    The results only weakly reference their parents: keep `root` (or its
    document) alive for as long as the results are used, or their paths
    come back truncated.
    Args:
        root: The document or element to search under.
        selector: A selector in the supported grammar.
    Returns:
        list[TreeNode]: Matching elements in document order.
    Raises:
        PathSyntaxError: If the selector is outside the supported grammar.
    """
    groups = _parse_selector(selector)

    elements = _mirrored_elements(root)
    if elements is not None:
        return [
            elements[id(tag)]
            for tag in sv.select(selector, root.source)
            if id(tag) in elements
        ]

    return [
        node for node in root.iter_elements()
        if any(_matches_complex(node, compounds) for compounds in groups)
    ]


def query_selector(root: TreeNode, selector: str) -> TreeNode | None:
    """
    First descendant element of `root` matching `selector`, or None.
    As with query_selector_all, keep `root` alive while using the result.
    """
    matches = query_selector_all(root, selector)
    return matches[0] if matches else None
