"""
crawl_hooks/dom/collectors.py

Collect element, listener and form data from a document tree.
Every descriptor carries the element's CSS path and XPath.
"""

from crawl_hooks.addressing.css_path import css_path
from crawl_hooks.addressing.resolver import query_selector_all, resolve_xpath
from crawl_hooks.addressing.xpath import x_path
from crawl_hooks.data_models.dom import NodeKind, TreeNode
from crawl_hooks.data_models.records import (
    ElementDescriptor,
    ElementListeners,
    FormDescriptor,
    InlineListener,
)

FORM_CONTROL_SELECTOR = "input, select, textarea, button"


def element_attributes(node: TreeNode) -> dict[str, str]:
    """Copy of the element's attribute map."""
    return dict(node.attributes)


def control_type(node: TreeNode) -> str | None:
    """The DOM `type` of a form control, None for other elements."""
    local_name = node.local_name.lower()
    type_attr = node.attributes.get("type")
    if local_name == "input":
        return (type_attr or "text").lower()
    if local_name == "button":
        return (type_attr or "submit").lower()
    if local_name == "select":
        return "select-multiple" if "multiple" in node.attributes else "select-one"
    if local_name == "textarea":
        return "textarea"
    return type_attr


def control_value(node: TreeNode) -> str:
    """The value of a form control as a string, "" when it has none."""
    if node.local_name.lower() == "textarea":
        return node.text_content
    return node.attributes.get("value", "")


def describe_element(node: TreeNode, snippet_length: int | None = None) -> ElementDescriptor:
    """
    Snapshot an element into an ElementDescriptor.
    Args:
        node: The element.
        snippet_length: Truncate the serialized outer HTML to this many
            characters. None keeps it whole.
    Returns:
        ElementDescriptor: The snapshot, independent of later tree changes.
    """
    outer_html = node.outer_html()
    if snippet_length is not None:
        outer_html = outer_html[:snippet_length]

    return ElementDescriptor(
        tag_name=node.tag_name,
        id=node.attributes.get("id", ""),
        classes=node.attributes.get("class", ""),
        attributes=element_attributes(node),
        text_content=node.text_content.strip(),
        hidden="hidden" in node.attributes,
        name=node.attributes.get("name"),
        type=control_type(node),
        value=control_value(node),
        outer_html=outer_html,
        css_selector=css_path(node),
        xpath=x_path(node),
    )


def get_all_elements(document: TreeNode, selector: str) -> list[ElementDescriptor]:
    """Describe every element matching `selector`."""
    return [describe_element(node) for node in query_selector_all(document, selector)]


def get_element_from_xpath(document: TreeNode, path: str) -> ElementDescriptor | None:
    """Describe the element an XPath points at, or None if it points at nothing or at a non-element."""
    node = resolve_xpath(document, path)
    if node is None or node.kind is not NodeKind.ELEMENT:
        return None
    return describe_element(node)


def inline_listeners(node: TreeNode) -> list[InlineListener]:
    """Inline `on*` handler attributes of an element."""
    return [
        InlineListener(event_type=name, listener_source=value)
        for name, value in node.attributes.items()
        if name.lower().startswith("on") and value.strip()
    ]


def get_all_elements_with_event_listeners(document: TreeNode) -> list[ElementListeners]:
    """Every element that declares inline event handlers, with those handlers."""
    results: list[ElementListeners] = []
    for node in document.iter_elements():
        listeners = inline_listeners(node)
        if listeners:
            results.append(ElementListeners(element=describe_element(node), listeners=listeners))
    return results


def get_all_forms(document: TreeNode) -> list[FormDescriptor]:
    """
    Describe every form on the page, including `div.form` pseudo-forms.
    Real forms come first, then pseudo-forms, each in document order.
    """
    forms = [node for node in document.iter_elements() if node.local_name.lower() == "form"]
    pseudo_forms = [
        node for node in query_selector_all(document, "div.form")
        if node not in forms
    ]

    descriptors: list[FormDescriptor] = []
    for form in forms + pseudo_forms:
        descriptors.append(FormDescriptor(
            tag_name=form.tag_name,
            id=form.attributes.get("id", ""),
            classes=form.attributes.get("class", ""),
            attributes=element_attributes(form),
            outer_html=form.outer_html(),
            action=form.attributes.get("action", ""),
            method=(form.attributes.get("method") or "get").lower(),
            xpath=x_path(form),
            css_selector=css_path(form),
            elements=[
                describe_element(control)
                for control in query_selector_all(form, FORM_CONTROL_SELECTOR)
            ],
        ))
    return descriptors
