"""
tests/unit/test_package.py

Tests for the package's top-level exports and its usage example.
"""

import re

import crawl_hooks


class TestUsageExample:
    """
    The usage example in the package docstring runs as written.
    """

    def test_imported_names_are_exported(self) -> None:
        """Every name the example imports, and every call it makes, is exported."""
        import_line = re.search(r"from crawl_hooks import (.+)", crawl_hooks.__doc__)
        assert import_line is not None
        imported = {name.strip() for name in import_line.group(1).split(",")}

        called = set(re.findall(r"\b([A-Za-z_]\w*)\(", crawl_hooks.__doc__))
        called = {name for name in called if name in crawl_hooks.__all__}

        assert called <= imported
        assert imported <= set(crawl_hooks.__all__)

    def test_example_values(self) -> None:
        document = crawl_hooks.parse_html("<html><body><div id='main'><a>link</a></div></body></html>")
        link = crawl_hooks.query_selector(document, "a")

        assert crawl_hooks.css_path(link) == "DIV#main > A"
        assert crawl_hooks.x_path(link, optimized=True) == '//*[@id="main"]/a'

        page = crawl_hooks.SimulatedPage(document, url="https://example.com/")
        hub = crawl_hooks.InstrumentationHub()
        hub.install(page.environment)
        page.history.push_state(None, "", "/next")

        assert hub.export_navigated_links() == [{"url": "/next", "source": "history.pushState"}]
