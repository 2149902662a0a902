"""
crawl_hooks/instrumentation/registry.py

Interception registry: which host members get replaced, by what, and whether
the replacement is locked afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from crawl_hooks.instrumentation.host import ExecutionEnvironment
from crawl_hooks.utils.exceptions import CrawlHooksError
from crawl_hooks.utils.logger import get_logger

logger = get_logger(name=__name__)


@dataclass(frozen=True)
class Interceptor:
    """
    A replacement for one host member.
    `factory` receives the original member and returns the replacement, so
    pass-through replacements can close over the original.
    """
    capability: str
    member: str
    factory: Callable[[Any], Any]
    lock: bool = True

    @property
    def key(self) -> tuple[str, str]:
        return (self.capability, self.member)


class InterceptionRegistry:
    """
    Collects interceptors and applies them to an environment exactly once.
    """

    def __init__(self) -> None:
        self._interceptors: dict[tuple[str, str], Interceptor] = {}
        self._originals: dict[tuple[str, str], Any] = {}
        self._installed: set[tuple[str, str]] = set()
        self._applied = False

    def __len__(self) -> int:
        return len(self._interceptors)

    @property
    def applied(self) -> bool:
        return self._applied

    @property
    def interceptors(self) -> list[Interceptor]:
        return list(self._interceptors.values())

    def register(
        self,
        capability: str,
        member: str,
        factory: Callable[[Any], Any],
        lock: bool = True,
    ) -> Interceptor:
        """
        Register a replacement for `capability.member`.
        Raises:
            ValueError: If the registry was already applied or the member is already registered.
        """
        if self._applied:
            raise ValueError("Cannot register interceptors after the registry was applied")
        interceptor = Interceptor(capability=capability, member=member, factory=factory, lock=lock)
        if interceptor.key in self._interceptors:
            raise ValueError(f"An interceptor for {capability}.{member} is already registered")
        self._interceptors[interceptor.key] = interceptor
        return interceptor

    def apply(self, environment: ExecutionEnvironment) -> bool:
        """
        Install every registered interceptor into `environment`.
        Members that are missing or that the page already locked are skipped.
        Returns:
            bool: False if the registry had already been applied.
        """
        if self._applied:
            return False
        self._applied = True

        for interceptor in self._interceptors.values():
            try:
                host = environment.capability(interceptor.capability)
                original = getattr(host, interceptor.member)
                replacement = interceptor.factory(original)
                host.define_property(
                    interceptor.member,
                    replacement,
                    writable=not interceptor.lock,
                    configurable=not interceptor.lock,
                )
            except CrawlHooksError as e:
                logger.warning(
                    "Skipping interceptor for %s.%s: %s",
                    interceptor.capability, interceptor.member, e,
                )
                continue
            self._originals[interceptor.key] = original
            self._installed.add(interceptor.key)

        logger.debug("Installed %d of %d interceptors", len(self._installed), len(self._interceptors))
        return True

    def is_installed(self, capability: str, member: str) -> bool:
        return (capability, member) in self._installed

    def original(self, capability: str, member: str) -> Any:
        """
        The member value that was replaced.
        Raises:
            KeyError: If no interceptor was installed for the member.
        """
        return self._originals[(capability, member)]
