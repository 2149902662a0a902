"""
crawl_hooks/data_models/__init__.py

Document tree model and instrumentation record models.
"""

from crawl_hooks.data_models.dom import NodeKind, PathStep, TreeNode
from crawl_hooks.data_models.records import (
    ElementDescriptor,
    ElementListeners,
    EventListenerRecord,
    FormDescriptor,
    InlineListener,
    NavigationEvent,
    NavigationSource,
)

__all__ = [
    "NodeKind",
    "PathStep",
    "TreeNode",
    "ElementDescriptor",
    "ElementListeners",
    "EventListenerRecord",
    "FormDescriptor",
    "InlineListener",
    "NavigationEvent",
    "NavigationSource",
]
