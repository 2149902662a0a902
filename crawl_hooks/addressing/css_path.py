"""
crawl_hooks/addressing/css_path.py

CSS selector paths for document tree elements.

The walk goes from the element up to the document root and disambiguates each
step among its siblings, preferring an id, then class names, then
:nth-child().
"""

from crawl_hooks.addressing.identifiers import escape_identifier
from crawl_hooks.data_models.dom import NodeKind, PathStep, TreeNode
from crawl_hooks.utils.logger import get_logger

logger = get_logger(name=__name__)

STEP_SEPARATOR = " > "

# elements addressed by tag name alone in optimized paths
_ROOT_LEVEL_TAGS = frozenset({"body", "head", "html"})


def css_path(node: TreeNode, optimized: bool = False) -> str:
    """
    Build a CSS selector path from the document root to `node`.
    Args:
        node: The element to address.
        optimized: Stop at the first element with an id (emitting `#id`) or
            at body/head/html.
    Returns:
        str: Steps joined by " > ", ancestor first. Empty for non-elements.
            If a step cannot be built the steps gathered so far are returned.
    """
    if node.kind is not NodeKind.ELEMENT:
        return ""

    steps: list[str] = []
    context: TreeNode | None = node
    while context is not None:
        step = _css_path_step(context, optimized, context is node)
        if step is None:
            break
        steps.append(step.value)
        if step.optimized:
            break
        context = context.parent

    steps.reverse()
    return STEP_SEPARATOR.join(steps)


def _css_path_step(node: TreeNode, optimized: bool, is_target_node: bool) -> PathStep | None:
    """Build the selector step for one element, or None to bail out."""
    if node.kind is not NodeKind.ELEMENT:
        return None

    node_id = node.id
    tag_name = node.tag_name
    local_name = node.local_name.lower()

    if optimized:
        if node_id:
            return PathStep(value=f"#{escape_identifier(node_id)}", optimized=True)
        if local_name in _ROOT_LEVEL_TAGS:
            return PathStep(value=tag_name, optimized=True)

    if node_id:
        return PathStep(value=f"{tag_name}#{escape_identifier(node_id)}", optimized=True)

    parent = node.parent
    if parent is None or parent.kind is NodeKind.DOCUMENT:
        return PathStep(value=tag_name, optimized=True)

    siblings = parent.element_children
    own_index = next((i for i, sibling in enumerate(siblings) if sibling is node), -1)
    if own_index == -1:
        logger.debug("Element %r is missing from its parent's children", node)
        return None

    competitors = [
        sibling for sibling in siblings
        if sibling is not node and sibling.local_name.lower() == local_name
    ]
    own_class_names = list(dict.fromkeys(node.class_list))

    needs_nth_child = False
    class_names: list[str] = []
    if competitors:
        chosen = None
        if own_class_names:
            chosen = _distinguishing_class_names(
                own_class_names,
                [set(sibling.class_list) for sibling in competitors],
            )
        if chosen is None:
            needs_nth_child = True
        else:
            class_names = chosen

    value = tag_name
    type_attr = node.attributes.get("type")
    if (
        is_target_node
        and local_name == "input"
        and type_attr
        and not node.attributes.get("id")
        and not node.attributes.get("class")
    ):
        value += f'[type="{_quote_attribute_value(type_attr)}"]'

    if needs_nth_child:
        value += f":nth-child({own_index + 1})"
    else:
        value += "".join("." + escape_identifier(name) for name in class_names)

    return PathStep(value=value, optimized=False)


def _distinguishing_class_names(
    own_class_names: list[str],
    competitor_class_sets: list[set[str]],
) -> list[str] | None:
    """
    Pick class names of the element that no competing sibling carries all of.

    Each round takes the class (in the element's own order) that rules out the
    most competitors still matching, until none is left.
    Returns:
        The chosen class names in the element's own order, or None when some
        competitor carries every class of the element.
    """
    remaining = list(range(len(competitor_class_sets)))
    chosen: list[str] = []
    while remaining:
        best_name: str | None = None
        best_excluded: list[int] = []
        for name in own_class_names:
            if name in chosen:
                continue
            excluded = [i for i in remaining if name not in competitor_class_sets[i]]
            if len(excluded) > len(best_excluded):
                best_name, best_excluded = name, excluded
        if best_name is None:
            return None
        chosen.append(best_name)
        remaining = [i for i in remaining if i not in best_excluded]

    return [name for name in own_class_names if name in chosen]


def _quote_attribute_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
