"""
crawl_hooks/instrumentation/host.py

Capability objects over a host execution environment's mutable global surface.

Contains:
- PropertyDescriptor: Writable/configurable flags of a host member
- HostObject: A named, mutable object (window, history, a prototype) whose members can be locked
- ExecutionEnvironment: The set of host objects the instrumentation hub hooks into
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from crawl_hooks.data_models.dom import TreeNode
from crawl_hooks.utils.exceptions import PropertyLockedError, UnknownMemberError

_MISSING = object()


@dataclass(frozen=True)
class PropertyDescriptor:
    """Flags of one host member, following Object.defineProperty."""
    writable: bool = True
    configurable: bool = True


class HostObject:
    """
    A host object exposing members as attributes.

    Members behave like JavaScript own properties: assignment fails on a
    non-writable member, deletion and redefinition fail on a non-configurable
    one. Failures raise PropertyLockedError instead of being silently ignored.
    """

    def __init__(self, host_name: str, **members: Any) -> None:
        """
        Initialize HostObject.
        Args:
            host_name: Name used in error messages (e.g. "window").
            **members: Initial members, all writable and configurable.
        """
        object.__setattr__(self, "_host_name", host_name)
        object.__setattr__(self, "_members", dict(members))
        object.__setattr__(self, "_descriptors", {name: PropertyDescriptor() for name in members})

    def __repr__(self) -> str:
        return f"<HostObject {self._host_name} members={sorted(self._members)}>"

    def __getattr__(self, member: str) -> Any:
        if member.startswith("_"):
            raise AttributeError(member)
        try:
            return self._members[member]
        except KeyError:
            raise UnknownMemberError(f"{self._host_name} has no member {member!r}") from None

    def __setattr__(self, member: str, value: Any) -> None:
        descriptor = self._descriptors.get(member)
        if descriptor is not None and not descriptor.writable:
            raise PropertyLockedError(f"Cannot assign to read only property {member!r} of {self._host_name}")
        self._members[member] = value
        if descriptor is None:
            self._descriptors[member] = PropertyDescriptor()

    def __delattr__(self, member: str) -> None:
        descriptor = self._descriptors.get(member)
        if descriptor is None:
            raise UnknownMemberError(f"{self._host_name} has no member {member!r}")
        if not descriptor.configurable:
            raise PropertyLockedError(f"Cannot delete property {member!r} of {self._host_name}")
        del self._members[member]
        del self._descriptors[member]

    @property
    def host_name(self) -> str:
        return self._host_name

    def has_member(self, member: str) -> bool:
        return member in self._members

    def member_names(self) -> list[str]:
        return list(self._members)

    def get_descriptor(self, member: str) -> PropertyDescriptor | None:
        return self._descriptors.get(member)

    def define_property(
        self,
        member: str,
        value: Any = _MISSING,
        *,
        writable: bool = True,
        configurable: bool = True,
    ) -> None:
        """
        Define or redefine a member with the given flags.
        Args:
            member: The member name.
            value: The new value; omitted keeps the current value.
            writable: Whether later assignment is allowed.
            configurable: Whether later deletion or redefinition is allowed.
        Raises:
            PropertyLockedError: If the member is already non-configurable.
            UnknownMemberError: If no value is given for a member that does not exist.
        """
        descriptor = self._descriptors.get(member)
        if descriptor is not None and not descriptor.configurable:
            raise PropertyLockedError(f"Cannot redefine property {member!r} of {self._host_name}")
        if value is _MISSING:
            if member not in self._members:
                raise UnknownMemberError(f"{self._host_name} has no member {member!r}")
        else:
            self._members[member] = value
        self._descriptors[member] = PropertyDescriptor(writable=writable, configurable=configurable)

    def is_locked(self, member: str) -> bool:
        """Whether the member is both non-writable and non-configurable."""
        descriptor = self._descriptors.get(member)
        return descriptor is not None and not descriptor.writable and not descriptor.configurable


@dataclass
class ExecutionEnvironment:
    """
    The host surface the instrumentation hub installs into.

    Expected members:
    - window: open, close, set_timeout, set_interval, fetch, WebSocket,
      EventSource, add_event_listener
    - history: push_state, replace_state
    - location: href
    - element_prototype: add_event_listener(target, type, listener, options)
    - form_prototype: reset(form)
    """
    window: HostObject
    history: HostObject
    location: HostObject
    element_prototype: HostObject
    form_prototype: HostObject
    document: TreeNode | None = None

    CAPABILITIES = ("window", "history", "location", "element_prototype", "form_prototype")

    def capability(self, name: str) -> HostObject:
        """Look up a host object by capability name."""
        if name not in self.CAPABILITIES:
            raise UnknownMemberError(f"Unknown capability {name!r}")
        return getattr(self, name)
