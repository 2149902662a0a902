"""
tests/unit/dom/test_collectors.py

Tests for element, listener and form collectors.
"""

from crawl_hooks.addressing.resolver import query_selector
from crawl_hooks.data_models.dom import TreeNode
from crawl_hooks.dom.collectors import (
    control_type,
    describe_element,
    get_all_elements,
    get_all_elements_with_event_listeners,
    get_all_forms,
    get_element_from_xpath,
)
from crawl_hooks.dom.html_tree import parse_html


class TestDescribeElement:
    """
    Tests for describe_element.
    """

    def test_text_input(self, sample_document: TreeNode) -> None:
        node = query_selector(sample_document, 'input[name="user"]')

        descriptor = describe_element(node)

        assert descriptor.tag_name == "INPUT"
        assert descriptor.type == "text"
        assert descriptor.name == "user"
        assert descriptor.value == "alice"
        assert descriptor.hidden is False
        assert descriptor.css_selector == 'FORM#login > INPUT[type="text"]:nth-child(1)'
        assert descriptor.xpath == "/html/body/form/input[1]"

    def test_link(self, sample_document: TreeNode) -> None:
        node = query_selector(sample_document, "a.active")

        descriptor = describe_element(node)

        assert descriptor.classes == "nav active"
        assert descriptor.text_content == "Shop"
        assert descriptor.attributes == {"href": "/shop", "class": "nav active"}
        assert descriptor.type is None
        assert descriptor.value == ""
        assert descriptor.outer_html == '<a href="/shop" class="nav active">Shop</a>'

    def test_snippet_length(self, sample_document: TreeNode) -> None:
        node = query_selector(sample_document, "form")
        descriptor = describe_element(node, snippet_length=10)
        assert descriptor.outer_html == '<form id="'

    def test_hidden(self) -> None:
        document = parse_html("<html><body><div hidden>x</div></body></html>")
        assert describe_element(query_selector(document, "div")).hidden is True

    def test_wire_names(self, sample_document: TreeNode) -> None:
        wire = describe_element(query_selector(sample_document, "button")).to_wire()
        assert {"tagName", "textContent", "outerHTML", "cssSelector", "xpath"} <= set(wire)

    def test_control_types(self) -> None:
        """Controls without a type attribute get their DOM default."""
        document = parse_html(
            "<html><body><input><button></button><select multiple></select>"
            "<select></select><textarea></textarea><p></p></body></html>"
        )
        types = [control_type(node) for node in document.iter_elements()][2:]
        assert types == ["text", "submit", "select-multiple", "select-one", "textarea", None]


class TestElementCollectors:
    """
    Tests for get_all_elements and get_element_from_xpath.
    """

    def test_get_all_elements(self, sample_document: TreeNode) -> None:
        descriptors = get_all_elements(sample_document, "a.nav")

        assert [d.text_content for d in descriptors] == ["Home", "Shop", "About"]
        assert descriptors[1].css_selector == "DIV#header > A.active"
        assert descriptors[2].xpath == "/html/body/div[1]/a[3]"

    def test_get_element_from_xpath(self, sample_document: TreeNode) -> None:
        descriptor = get_element_from_xpath(sample_document, "/html/body/div[2]/button[1]")

        assert descriptor is not None
        assert descriptor.classes == "primary"

    def test_get_element_from_xpath_non_element(self, sample_document: TreeNode) -> None:
        """Paths to missing nodes or to non-elements give None."""
        assert get_element_from_xpath(sample_document, "/html/body/div[1]/a[1]/@href") is None
        assert get_element_from_xpath(sample_document, "/html/body/table") is None


class TestListenerCollector:
    """
    Tests for get_all_elements_with_event_listeners.
    """

    def test_inline_handlers(self, sample_document: TreeNode) -> None:
        results = get_all_elements_with_event_listeners(sample_document)

        assert len(results) == 1
        assert results[0].element.classes == "primary"
        assert results[0].listeners[0].event_type == "onclick"
        assert results[0].listeners[0].listener_source == "buy()"

    def test_empty_handlers_ignored(self) -> None:
        document = parse_html("<html><body><a onclick=' '>x</a></body></html>")
        assert get_all_elements_with_event_listeners(document) == []


class TestFormCollector:
    """
    Tests for get_all_forms.
    """

    def test_forms_then_pseudo_forms(self, sample_document: TreeNode) -> None:
        forms = get_all_forms(sample_document)

        assert [form.tag_name for form in forms] == ["FORM", "DIV"]

    def test_real_form(self, sample_document: TreeNode) -> None:
        form = get_all_forms(sample_document)[0]

        assert form.id == "login"
        assert form.action == "/login"
        assert form.method == "post"
        assert form.css_selector == "FORM#login"
        assert form.xpath == "/html/body/form"
        assert [element.name for element in form.elements] == ["user", "pass", None]
        assert form.elements[2].type == "submit"

    def test_pseudo_form(self, sample_document: TreeNode) -> None:
        form = get_all_forms(sample_document)[1]

        assert form.classes == "form"
        assert form.action == ""
        assert form.method == "get"
        assert form.css_selector == "HTML > BODY > DIV.form"
        assert form.xpath == "/html/body/div[3]"
        assert [element.type for element in form.elements] == ["text", "select-one"]
