"""
crawl_hooks/instrumentation/hub.py

Instrumentation hub: installs the crawler's page hooks into an execution
environment and keeps the navigation and event listener logs.

Hooks installed:
1. element_prototype.add_event_listener records every listener registered on an element
2. history.push_state / history.replace_state record the URL instead of navigating
3. window.open records the URL instead of opening a window
4. window.WebSocket / window.EventSource / window.fetch record the URL and pass through
5. a hashchange listener records the new location
6. form_prototype.reset and window.close become no-ops
7. window.set_timeout / window.set_interval run with shortened delays
"""

from __future__ import annotations

import inspect
import math
import textwrap
import threading
from collections.abc import Sequence
from typing import Any, Callable

from crawl_hooks.config import Config
from crawl_hooks.data_models.dom import NodeKind, TreeNode
from crawl_hooks.data_models.records import EventListenerRecord, NavigationEvent, NavigationSource
from crawl_hooks.dom.collectors import describe_element
from crawl_hooks.instrumentation.host import ExecutionEnvironment
from crawl_hooks.instrumentation.registry import InterceptionRegistry
from crawl_hooks.utils.exceptions import CrawlHooksError
from crawl_hooks.utils.logger import get_logger

logger = get_logger(name=__name__)


def listener_source(listener: Any) -> str:
    """Textual form of a listener, for auditing. The listener is never called."""
    if isinstance(listener, str):
        return listener
    try:
        return textwrap.dedent(inspect.getsource(listener)).strip()
    except (OSError, TypeError):
        return repr(listener)


class PublishedLog(Sequence):
    """
    Read-only live view of one of the hub's logs, as published on the window.
    Page code can read and iterate it but has no way to change the log.
    """

    __slots__ = ("_records", "_lock")

    def __init__(self, records: list[Any], lock: threading.RLock) -> None:
        self._records = records
        self._lock = lock

    def __repr__(self) -> str:
        return f"PublishedLog({list(self)!r})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __getitem__(self, index: int | slice) -> Any:
        with self._lock:
            if isinstance(index, slice):
                return tuple(self._records[index])
            return self._records[index]


class InstrumentationHub:
    """
    Installs page hooks into an ExecutionEnvironment, once.

    Both logs are append-only and ordered by call order. Read-only views of
    them are published on the window as `navigated_links` and
    `event_listeners` so a host collector can read them straight from the
    environment.
    """

    # Class constants
    NAVIGATED_LINKS_MEMBER = "navigated_links"
    EVENT_LISTENERS_MEMBER = "event_listeners"


    # Magic methods ___________________________________________________________________________________________

    def __init__(
        self,
        timer_speedup_factor: float | None = None,
        outer_html_snippet_length: int | None = None,
    ) -> None:
        """
        Initialize InstrumentationHub.
        Args:
            timer_speedup_factor: Multiplier applied to timer delays, 0 < factor < 1.
                Defaults to Config.TIMER_SPEEDUP_FACTOR.
            outer_html_snippet_length: Length of the outer HTML kept in listener
                records. Defaults to Config.OUTER_HTML_SNIPPET_LENGTH.
        Raises:
            ValueError: If the speed-up factor is out of range.
        """
        if timer_speedup_factor is None:
            timer_speedup_factor = Config.TIMER_SPEEDUP_FACTOR
        if not 0 < timer_speedup_factor < 1:
            raise ValueError(f"timer_speedup_factor must be in (0, 1), got {timer_speedup_factor}")
        if outer_html_snippet_length is None:
            outer_html_snippet_length = Config.OUTER_HTML_SNIPPET_LENGTH

        self.timer_speedup_factor = timer_speedup_factor
        self.outer_html_snippet_length = outer_html_snippet_length
        self.registry = InterceptionRegistry()

        self._lock = threading.RLock()
        self._installed = False
        self._navigated_links: list[NavigationEvent] = []
        self._event_listeners: list[EventListenerRecord] = []


    # Properties ______________________________________________________________________________________________

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def navigated_links(self) -> tuple[NavigationEvent, ...]:
        with self._lock:
            return tuple(self._navigated_links)

    @property
    def event_listeners(self) -> tuple[EventListenerRecord, ...]:
        with self._lock:
            return tuple(self._event_listeners)


    # Private methods _________________________________________________________________________________________

    def _record_navigation(self, url: Any, source: NavigationSource) -> None:
        event = NavigationEvent(url=None if url is None else str(url), source=source)
        with self._lock:
            self._navigated_links.append(event)
        logger.debug("[hook] navigation via %s: %s", source.value, event.url)

    def _record_listener(self, target: TreeNode, event_type: Any, listener: Any, options: Any) -> None:
        try:
            record = EventListenerRecord(
                element=describe_element(target, snippet_length=self.outer_html_snippet_length),
                event_type=str(event_type),
                listener_source=listener_source(listener),
                options=options or {},
            )
        except Exception as e:
            logger.warning("[hook] failed to record event listener: %s", e)
            return
        with self._lock:
            self._event_listeners.append(record)
        logger.debug("[hook] got event listener %s on %s", record.event_type, record.element.css_selector)

    def _accelerate(self, delay: Any) -> float:
        """Scale a timer delay; missing, non-numeric or negative delays become 0."""
        try:
            scaled = float(delay) * self.timer_speedup_factor
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(scaled) or scaled < 0:
            return 0.0
        return scaled

    def _history_hook(self, source: NavigationSource) -> Callable[[Any], Callable[..., None]]:
        def factory(original: Any) -> Callable[..., None]:
            def history_state_hook(state: Any = None, title: Any = "", url: Any = None, *args: Any) -> None:
                self._record_navigation(url, source)
            return history_state_hook
        return factory

    def _connection_hook(self, source: NavigationSource) -> Callable[[Any], Callable[..., Any]]:
        def factory(original: Callable[..., Any]) -> Callable[..., Any]:
            def connection_hook(url: Any, *args: Any, **kwargs: Any) -> Any:
                self._record_navigation(url, source)
                return original(url, *args, **kwargs)
            return connection_hook
        return factory

    def _register_navigation_sinks(self) -> None:
        registry = self.registry
        registry.register("history", "push_state", self._history_hook(NavigationSource.HISTORY_PUSH))
        registry.register("history", "replace_state", self._history_hook(NavigationSource.HISTORY_REPLACE))

        def open_factory(original: Any) -> Callable[..., None]:
            def open_hook(url: Any = None, *args: Any, **kwargs: Any) -> None:
                logger.info("[hook] open url request %s", url)
                self._record_navigation(url, NavigationSource.WINDOW_OPEN)
            return open_hook
        registry.register("window", "open", open_factory)

        registry.register("window", "WebSocket", self._connection_hook(NavigationSource.WEBSOCKET))
        registry.register("window", "EventSource", self._connection_hook(NavigationSource.EVENT_SOURCE))

        def fetch_factory(original: Callable[..., Any]) -> Callable[..., Any]:
            def fetch_hook(resource: Any, *args: Any, **kwargs: Any) -> Any:
                # request objects carry their URL in `.url`
                self._record_navigation(getattr(resource, "url", resource), NavigationSource.FETCH)
                return original(resource, *args, **kwargs)
            return fetch_hook
        registry.register("window", "fetch", fetch_factory)

    def _register_miscellaneous_hooks(self) -> None:
        registry = self.registry

        def reset_factory(original: Any) -> Callable[..., None]:
            def reset_hook(form: Any = None, *args: Any) -> None:
                logger.info("[hook] cancel reset form")
            return reset_hook
        registry.register("form_prototype", "reset", reset_factory)

        def close_factory(original: Any) -> Callable[..., None]:
            def close_hook(*args: Any) -> None:
                logger.info("[hook] trying to close page.")
            return close_hook
        registry.register("window", "close", close_factory)

        def timer_factory(original: Callable[..., Any]) -> Callable[..., Any]:
            def timer_hook(callback: Any, delay: Any = 0, *args: Any) -> Any:
                return original(callback, self._accelerate(delay), *args)
            return timer_hook
        registry.register("window", "set_timeout", timer_factory)
        registry.register("window", "set_interval", timer_factory)

    def _register_listener_hook(self) -> None:
        def add_event_listener_factory(original: Callable[..., Any]) -> Callable[..., Any]:
            def add_event_listener_hook(target: Any, event_type: Any, listener: Any, options: Any = None) -> Any:
                if getattr(target, "kind", None) is not NodeKind.ELEMENT or not target.local_name:
                    return original(target, event_type, listener, options)
                if target.local_name.lower() != "body":
                    self._record_listener(target, event_type, listener, options)
                return original(target, event_type, listener, options)
            return add_event_listener_hook
        self.registry.register("element_prototype", "add_event_listener", add_event_listener_factory)

    def _listen_for_hash_changes(self, environment: ExecutionEnvironment) -> None:
        def on_hash_change(*args: Any) -> None:
            self._record_navigation(environment.location.href, NavigationSource.HASH_CHANGE)

        try:
            environment.window.add_event_listener("hashchange", on_hash_change)
        except CrawlHooksError as e:
            logger.warning("Could not listen for hashchange: %s", e)

    def _publish_logs(self, environment: ExecutionEnvironment) -> None:
        for member, log in (
            (self.NAVIGATED_LINKS_MEMBER, self._navigated_links),
            (self.EVENT_LISTENERS_MEMBER, self._event_listeners),
        ):
            try:
                environment.window.define_property(
                    member, PublishedLog(log, self._lock), writable=False, configurable=False,
                )
            except CrawlHooksError as e:
                logger.warning("Could not publish %s on window: %s", member, e)


    # Public methods __________________________________________________________________________________________

    def install(self, environment: ExecutionEnvironment) -> bool:
        """
        Install every hook into `environment` and start both logs.
        Installation happens once: later calls, or an environment another
        hub already instrumented, are ignored.
        Returns:
            bool: True if this call installed the hooks.
        """
        with self._lock:
            if self._installed:
                logger.debug("Instrumentation already installed, ignoring")
                return False
            if environment.window.has_member(self.NAVIGATED_LINKS_MEMBER):
                logger.warning("Environment is already instrumented, ignoring")
                return False

            self._navigated_links = []
            self._event_listeners = []

            self._register_listener_hook()
            self._register_navigation_sinks()
            self._register_miscellaneous_hooks()
            self.registry.apply(environment)
            self._listen_for_hash_changes(environment)
            self._publish_logs(environment)

            self._installed = True
            logger.info("✅ Page instrumentation installed (%d interceptors)", len(self.registry))
            return True

    def export_navigated_links(self) -> list[dict[str, Any]]:
        """The navigation log as plain dicts with wire field names."""
        return [event.to_wire() for event in self.navigated_links]

    def export_event_listeners(self) -> list[dict[str, Any]]:
        """The event listener log as plain dicts with wire field names."""
        return [record.to_wire() for record in self.event_listeners]

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """Both logs as plain data."""
        return {
            self.NAVIGATED_LINKS_MEMBER: self.export_navigated_links(),
            self.EVENT_LISTENERS_MEMBER: self.export_event_listeners(),
        }
