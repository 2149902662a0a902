#!/usr/bin/env python3
"""
crawl_hooks/scripts/address_nodes.py

Print the CSS path and XPath of elements in a saved HTML page.

Usage:
    crawl-hooks-address ./page.html --selector "a, button"
    crawl-hooks-address ./page.html --forms --output ./forms.json
"""

import json
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from crawl_hooks.addressing import css_path, query_selector_all, x_path
from crawl_hooks.data_models.dom import TreeNode
from crawl_hooks.dom.collectors import describe_element, get_all_forms
from crawl_hooks.utils.data_utils import load_html
from crawl_hooks.utils.exceptions import CrawlHooksError
from crawl_hooks.utils.logger import get_logger

logger = get_logger(name=__name__)
console = Console()

DEFAULT_SELECTOR = "*"


def parse_arguments(argv: list[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = ArgumentParser(description="Print the CSS path and XPath of elements in a saved HTML page.")
    parser.add_argument("path", type=str, help="Path to an .html/.htm file.")
    parser.add_argument("--selector", type=str, default=DEFAULT_SELECTOR, help="Only address elements matching this selector.")
    parser.add_argument("--optimized", action="store_true", help="Build optimized (id-anchored) paths.")
    parser.add_argument("--forms", action="store_true", help="Describe forms instead of single elements.")
    parser.add_argument("--output", type=str, default=None, help="Write the descriptors to this JSON file.")
    return parser.parse_args(argv)


def address_elements(document: TreeNode, selector: str, optimized: bool) -> list[dict[str, Any]]:
    """Descriptors of every element matching `selector`, with the requested path flavor."""
    results = []
    for node in query_selector_all(document, selector):
        descriptor = describe_element(node).to_wire()
        if optimized:
            descriptor["cssSelector"] = css_path(node, optimized=True)
            descriptor["xpath"] = x_path(node, optimized=True)
        results.append(descriptor)
    return results


def print_elements(results: list[dict[str, Any]]) -> None:
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("#", style="dim", justify="right")
    table.add_column("Tag", style="cyan")
    table.add_column("CSS path", style="white")
    table.add_column("XPath", style="green")
    for i, result in enumerate(results, start=1):
        table.add_row(str(i), result["tagName"], escape(result["cssSelector"]), escape(result["xpath"]))
    console.print(table)


def print_forms(results: list[dict[str, Any]]) -> None:
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("Form", style="cyan")
    table.add_column("Method", style="magenta")
    table.add_column("Action", style="white")
    table.add_column("Controls", style="dim", justify="right")
    table.add_column("CSS path", style="white")
    for result in results:
        table.add_row(
            escape(result["xpath"]),
            result["method"].upper(),
            escape(result["action"]) or "-",
            str(len(result["elements"])),
            escape(result["cssSelector"]),
        )
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)

    try:
        document = load_html(Path(args.path))
        if args.forms:
            results = [form.to_wire() for form in get_all_forms(document)]
            print_forms(results)
        else:
            results = address_elements(document, args.selector, args.optimized)
            print_elements(results)
    except (CrawlHooksError, OSError) as e:
        logger.error("Failed to address %s: %s", args.path, e)
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1

    console.print(f"[dim]{len(results)} {'forms' if args.forms else 'elements'} in {escape(args.path)}[/dim]")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, mode="w", encoding="utf-8") as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        logger.info("Saved %d descriptors to %s", len(results), output_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
