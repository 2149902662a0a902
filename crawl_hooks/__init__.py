"""
crawl-hooks - Page instrumentation and node addressing for web crawlers.

Usage:
    from crawl_hooks import InstrumentationHub, SimulatedPage, parse_html, query_selector, css_path, x_path

    # Address nodes
    document = parse_html("<html><body><div id='main'><a>link</a></div></body></html>")
    link = query_selector(document, "a")
    css_path(link)                  # 'DIV#main > A'
    x_path(link, optimized=True)    # '//*[@id="main"]/a'

    # Instrument a page
    page = SimulatedPage(document, url="https://example.com/")
    hub = InstrumentationHub()
    hub.install(page.environment)
    page.history.push_state(None, "", "/next")
    hub.export_navigated_links()    # [{'url': '/next', 'source': 'history.pushState'}]
"""

__version__ = "0.1.0"

# Addressing
from .addressing import (
    css_path,
    escape_identifier,
    query_selector,
    query_selector_all,
    resolve_xpath,
    unescape_identifier,
    x_path,
)

# Document trees and collectors
from .dom import (
    describe_element,
    get_all_elements,
    get_all_elements_with_event_listeners,
    get_all_forms,
    get_element_from_xpath,
    parse_html,
)

# Data models
from .data_models import (
    ElementDescriptor,
    EventListenerRecord,
    FormDescriptor,
    NavigationEvent,
    NavigationSource,
    NodeKind,
    TreeNode,
)

# Instrumentation
from .instrumentation import (
    ExecutionEnvironment,
    HostObject,
    InstrumentationHub,
    LogFileWriter,
    SimulatedPage,
    VirtualClock,
)

# Exceptions
from .utils.exceptions import (
    CrawlHooksError,
    PathSyntaxError,
    PropertyLockedError,
    UnknownMemberError,
    UnsupportedFileFormat,
)

__all__ = [
    # Addressing
    "css_path",
    "x_path",
    "escape_identifier",
    "unescape_identifier",
    "resolve_xpath",
    "query_selector",
    "query_selector_all",
    # Document trees and collectors
    "parse_html",
    "describe_element",
    "get_all_elements",
    "get_all_elements_with_event_listeners",
    "get_all_forms",
    "get_element_from_xpath",
    # Data models
    "TreeNode",
    "NodeKind",
    "ElementDescriptor",
    "EventListenerRecord",
    "FormDescriptor",
    "NavigationEvent",
    "NavigationSource",
    # Instrumentation
    "ExecutionEnvironment",
    "HostObject",
    "InstrumentationHub",
    "LogFileWriter",
    "SimulatedPage",
    "VirtualClock",
    # Exceptions
    "CrawlHooksError",
    "PathSyntaxError",
    "PropertyLockedError",
    "UnknownMemberError",
    "UnsupportedFileFormat",
]
