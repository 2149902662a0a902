"""
tests/conftest.py

Configuration for pytest.
"""

from pathlib import Path

import pytest

from crawl_hooks.data_models.dom import TreeNode
from crawl_hooks.dom.html_tree import parse_html


@pytest.fixture(scope="session")
def tests_root() -> Path:
    """
    Root directory for tests.
    Returns:
        Path to the tests directory.
    """
    return Path(__file__).parent.resolve()


@pytest.fixture(scope="session")
def data_dir(tests_root: Path) -> Path:
    """
    Directory containing test data files.
    Returns:
        Path to tests/data.
    """
    d = tests_root / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture(scope="session")
def input_data_dir(data_dir: Path) -> Path:
    """
    Directory containing input test data files.
    Returns:
        Path to tests/data/input.
    """
    d = data_dir / "input"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture(scope="session")
def sample_page_path(input_data_dir: Path) -> Path:
    """
    Saved HTML page used across tests.
    Returns:
        Path to tests/data/input/sample_page.html.
    """
    return input_data_dir / "sample_page.html"


@pytest.fixture
def sample_document(sample_page_path: Path) -> TreeNode:
    """
    Parsed sample page. Keep the fixture value alive while using its nodes:
    nodes only hold weak references to their parents.
    Returns:
        The document node.
    """
    return parse_html(sample_page_path.read_text(encoding="utf-8"))
