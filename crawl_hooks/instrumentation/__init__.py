"""
crawl_hooks/instrumentation/__init__.py

Page instrumentation: host capability objects, the interception registry,
the instrumentation hub and an in-process simulated page host.
"""

from crawl_hooks.instrumentation.host import ExecutionEnvironment, HostObject, PropertyDescriptor
from crawl_hooks.instrumentation.hub import InstrumentationHub, listener_source
from crawl_hooks.instrumentation.log_writer import (
    LogFileWriter,
    read_event_listeners,
    read_navigation_events,
)
from crawl_hooks.instrumentation.registry import InterceptionRegistry, Interceptor
from crawl_hooks.instrumentation.simulated import (
    SimulatedConnection,
    SimulatedPage,
    SimulatedRequest,
    VirtualClock,
)

__all__ = [
    "ExecutionEnvironment",
    "HostObject",
    "PropertyDescriptor",
    "InterceptionRegistry",
    "Interceptor",
    "InstrumentationHub",
    "listener_source",
    "LogFileWriter",
    "read_navigation_events",
    "read_event_listeners",
    "SimulatedPage",
    "SimulatedConnection",
    "SimulatedRequest",
    "VirtualClock",
]
