"""
crawl_hooks/addressing/xpath.py

XPath addresses for document tree nodes.
"""

from crawl_hooks.data_models.dom import NodeKind, PathStep, TreeNode
from crawl_hooks.utils.logger import get_logger

logger = get_logger(name=__name__)

_NODE_TEST_BY_KIND = {
    NodeKind.TEXT: "text()",
    NodeKind.CDATA: "text()",
    NodeKind.PROCESSING_INSTRUCTION: "processing-instruction()",
    NodeKind.COMMENT: "comment()",
}


def x_path(node: TreeNode, optimized: bool = False) -> str:
    """
    Build an XPath from the document root to `node`.
    Args:
        node: The node to address.
        optimized: Stop at the first element with an id, emitting
            `//*[@id="..."]` for it.
    Returns:
        str: The XPath. "/" for the document itself. If the walk hits an
            inconsistent tree the steps gathered so far are returned.
    """
    if node.kind is NodeKind.DOCUMENT:
        return "/"

    steps: list[PathStep] = []
    context: TreeNode | None = node
    while context is not None:
        step = _xpath_step(context, optimized)
        if step is None:
            break
        steps.append(step)
        if step.optimized:
            break
        context = context.parent

    steps.reverse()
    prefix = "" if steps and steps[0].optimized else "/"
    return prefix + "/".join(step.value for step in steps)


def _xpath_step(node: TreeNode, optimized: bool) -> PathStep | None:
    """Build the XPath step for one node, or None to bail out."""
    own_index = _xpath_index(node)
    if own_index == -1:
        return None

    if node.kind is NodeKind.DOCUMENT:
        return PathStep(value="", optimized=True)

    if node.kind is NodeKind.ELEMENT:
        if optimized and node.id:
            return PathStep(value=f"//*[@id={xpath_string_literal(node.id)}]", optimized=True)
        value = node.local_name
    elif node.kind is NodeKind.ATTRIBUTE:
        value = "@" + node.local_name
    else:
        value = _NODE_TEST_BY_KIND.get(node.kind, "")

    if own_index > 0:
        value += f"[{own_index}]"
    return PathStep(value=value, optimized=False)


def _are_nodes_similar(left: TreeNode, right: TreeNode) -> bool:
    if left is right:
        return True
    if left.kind is NodeKind.ELEMENT and right.kind is NodeKind.ELEMENT:
        return left.local_name == right.local_name
    if left.kind is right.kind:
        return True
    left_kind = NodeKind.TEXT if left.kind is NodeKind.CDATA else left.kind
    right_kind = NodeKind.TEXT if right.kind is NodeKind.CDATA else right.kind
    return left_kind is right_kind


def _xpath_index(node: TreeNode) -> int:
    """
    1-based position of `node` among its similar siblings.
    Returns:
        0 when no other similar sibling exists, -1 when `node` cannot be
        found among its parent's children.
    """
    parent = node.parent
    if parent is None:
        return 0
    siblings = parent.children

    if not any(sibling is not node and _are_nodes_similar(node, sibling) for sibling in siblings):
        return 0

    own_index = 1
    for sibling in siblings:
        if _are_nodes_similar(node, sibling):
            if sibling is node:
                return own_index
            own_index += 1

    logger.debug("Node %r is missing from its parent's children", node)
    return -1


def xpath_string_literal(value: str) -> str:
    """Quote `value` as an XPath string literal."""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"
