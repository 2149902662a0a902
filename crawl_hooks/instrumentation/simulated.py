"""
crawl_hooks/instrumentation/simulated.py

An in-process page host implementing the ExecutionEnvironment surface.
Used to run the instrumentation hub without a browser: timers run on a
virtual clock, connections are recorded instead of opened.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urldefrag, urljoin

from crawl_hooks.data_models.dom import NodeKind, TreeNode
from crawl_hooks.instrumentation.host import ExecutionEnvironment, HostObject


# repeating timers never fire more often than this (ms)
MIN_INTERVAL_MS = 1.0


@dataclass(order=True)
class _ScheduledTimer:
    due: float
    sequence: int
    timer_id: int = field(compare=False)
    callback: Callable[..., Any] = field(compare=False)
    args: tuple[Any, ...] = field(compare=False, default=())
    interval: float | None = field(compare=False, default=None)


class VirtualClock:
    """
    Controllable clock for timers. Time only moves on `advance`.
    Timers due at the same time fire in scheduling order.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._queue: list[_ScheduledTimer] = []
        self._sequence = itertools.count()
        self._timer_ids = itertools.count(1)
        self._cancelled: set[int] = set()

    def schedule(
        self,
        callback: Callable[..., Any],
        delay: float,
        args: tuple[Any, ...] = (),
        repeat: bool = False,
    ) -> int:
        """
        Schedule `callback(*args)` after `delay` ms.
        Returns:
            int: The timer id.
        """
        delay = max(float(delay), 0.0)
        timer_id = next(self._timer_ids)
        heapq.heappush(self._queue, _ScheduledTimer(
            due=self.now + delay,
            sequence=next(self._sequence),
            timer_id=timer_id,
            callback=callback,
            args=args,
            interval=max(delay, MIN_INTERVAL_MS) if repeat else None,
        ))
        return timer_id

    def cancel(self, timer_id: int) -> None:
        self._cancelled.add(timer_id)

    def pending(self) -> list[tuple[int, float]]:
        """(timer id, due time) of every live timer, soonest first."""
        return [
            (timer.timer_id, timer.due)
            for timer in sorted(self._queue)
            if timer.timer_id not in self._cancelled
        ]

    def advance(self, milliseconds: float) -> int:
        """
        Move time forward, running every timer that falls due.
        Returns:
            int: The number of callbacks run.
        """
        target = self.now + milliseconds
        fired = 0
        while self._queue and self._queue[0].due <= target:
            timer = heapq.heappop(self._queue)
            if timer.timer_id in self._cancelled:
                continue
            self.now = timer.due
            if timer.interval is not None:
                heapq.heappush(self._queue, _ScheduledTimer(
                    due=timer.due + timer.interval,
                    sequence=next(self._sequence),
                    timer_id=timer.timer_id,
                    callback=timer.callback,
                    args=timer.args,
                    interval=timer.interval,
                ))
            timer.callback(*timer.args)
            fired += 1
        self.now = target
        return fired


@dataclass
class SimulatedRequest:
    """Stand-in for a fetch Request object."""
    url: str
    method: str = "GET"


@dataclass
class SimulatedConnection:
    """A WebSocket, EventSource or fetch the page asked for."""
    kind: str
    url: Any
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


class SimulatedPage:
    """
    A page host with real (un-hooked) behavior for every hookable member.

    Page scripts go through `environment` (or the helpers below, which do),
    so once a hub is installed they hit the hooked members.
    """

    def __init__(self, document: TreeNode | None = None, url: str = "about:blank") -> None:
        """
        Initialize SimulatedPage.
        Args:
            document: The page's document tree.
            url: Initial location.
        """
        self.document = document
        self.clock = VirtualClock()

        self.history_entries: list[str] = [url]
        self.opened_windows: list[Any] = []
        self.closed = False
        self.connections: list[SimulatedConnection] = []
        self.field_values: dict[TreeNode, str] = {}
        self.element_listeners: dict[TreeNode, list[tuple[str, Any, Any]]] = {}
        self.window_listeners: dict[str, list[Callable[..., Any]]] = {}

        self.environment = ExecutionEnvironment(
            window=HostObject(
                "window",
                open=self._open,
                close=self._close,
                set_timeout=self._set_timeout,
                set_interval=self._set_interval,
                clear_timeout=self.clock.cancel,
                clear_interval=self.clock.cancel,
                fetch=self._fetch,
                WebSocket=self._websocket,
                EventSource=self._event_source,
                add_event_listener=self._add_window_listener,
            ),
            history=HostObject(
                "history",
                push_state=self._push_state,
                replace_state=self._replace_state,
            ),
            location=HostObject("location", href=url),
            element_prototype=HostObject("element_prototype", add_event_listener=self._add_element_listener),
            form_prototype=HostObject("form_prototype", reset=self._reset_form),
            document=document,
        )


    # Original host behavior __________________________________________________________________________________

    def _open(self, url: Any = None, *args: Any, **kwargs: Any) -> None:
        self.opened_windows.append(url)

    def _close(self, *args: Any) -> None:
        self.closed = True

    def _set_timeout(self, callback: Callable[..., Any], delay: Any = 0, *args: Any) -> int:
        return self.clock.schedule(callback, delay or 0, args)

    def _set_interval(self, callback: Callable[..., Any], delay: Any = 0, *args: Any) -> int:
        return self.clock.schedule(callback, delay or 0, args, repeat=True)

    def _fetch(self, resource: Any, *args: Any, **kwargs: Any) -> SimulatedConnection:
        connection = SimulatedConnection("fetch", getattr(resource, "url", resource), args, kwargs)
        self.connections.append(connection)
        return connection

    def _websocket(self, url: Any, *args: Any, **kwargs: Any) -> SimulatedConnection:
        connection = SimulatedConnection("websocket", url, args, kwargs)
        self.connections.append(connection)
        return connection

    def _event_source(self, url: Any, *args: Any, **kwargs: Any) -> SimulatedConnection:
        connection = SimulatedConnection("eventsource", url, args, kwargs)
        self.connections.append(connection)
        return connection

    def _add_window_listener(self, event_type: str, listener: Callable[..., Any], options: Any = None) -> None:
        self.window_listeners.setdefault(event_type, []).append(listener)

    def _change_location(self, url: Any, push: bool) -> None:
        href = self.environment.location.href
        new_href = urljoin(href, str(url)) if url is not None else href
        if push:
            self.history_entries.append(new_href)
        else:
            self.history_entries[-1] = new_href
        self.environment.location.href = new_href

    def _push_state(self, state: Any = None, title: Any = "", url: Any = None) -> None:
        self._change_location(url, push=True)

    def _replace_state(self, state: Any = None, title: Any = "", url: Any = None) -> None:
        self._change_location(url, push=False)

    def _add_element_listener(self, target: Any, event_type: str, listener: Any, options: Any = None) -> None:
        self.element_listeners.setdefault(target, []).append((event_type, listener, options))

    def _reset_form(self, form: TreeNode, *args: Any) -> None:
        for node in form.iter_descendants():
            self.field_values.pop(node, None)


    # Page script helpers _____________________________________________________________________________________

    @property
    def window(self) -> HostObject:
        return self.environment.window

    @property
    def history(self) -> HostObject:
        return self.environment.history

    @property
    def location(self) -> HostObject:
        return self.environment.location

    def add_event_listener(self, target: Any, event_type: str, listener: Any, options: Any = None) -> Any:
        """Register a listener on an element the way a page script would."""
        return self.environment.element_prototype.add_event_listener(target, event_type, listener, options)

    def reset_form(self, form: TreeNode) -> Any:
        """Reset a form the way a page script would."""
        return self.environment.form_prototype.reset(form)

    def fill(self, node: TreeNode, value: str) -> None:
        """Type a value into a form control."""
        self.field_values[node] = value

    def field_value(self, node: TreeNode) -> str:
        """Current value of a form control: the filled value or its default."""
        if node in self.field_values:
            return self.field_values[node]
        return node.attributes.get("value", "")

    def dispatch(self, target: TreeNode, event_type: str, event: Any = None) -> int:
        """
        Call every listener registered for `event_type` on `target`.
        Returns:
            int: The number of listeners called.
        """
        called = 0
        for registered_type, listener, _ in list(self.element_listeners.get(target, [])):
            if registered_type != event_type:
                continue
            handler = getattr(listener, "handle_event", listener)
            handler(event)
            called += 1
        return called

    def navigate_hash(self, fragment: str) -> None:
        """Change the location's fragment and fire hashchange on the window."""
        base, _ = urldefrag(self.environment.location.href)
        new_href = f"{base}#{fragment.lstrip('#')}"
        if new_href == self.environment.location.href:
            return
        self.environment.location.href = new_href
        for listener in list(self.window_listeners.get("hashchange", [])):
            listener({"type": "hashchange", "newURL": new_href})

    def find_element(self, predicate: Callable[[TreeNode], bool]) -> TreeNode | None:
        """First element of the document satisfying `predicate`."""
        if self.document is None:
            return None
        return next(
            (node for node in self.document.iter_descendants()
             if node.kind is NodeKind.ELEMENT and predicate(node)),
            None,
        )
