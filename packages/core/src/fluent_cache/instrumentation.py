"""Hooks around cache operations (tracing, metrics, auditing).

Every port read and write runs as ``cache.get.<region>`` /
``cache.set.<region>`` and every bulk lookup as
``cache.bulk.get_all.<base_key>``.  Each carries a ``cache.region``
attribute, so a hook can observe a subset of regions without parsing
operation names.
"""

from __future__ import annotations

import fnmatch
import functools
import logging
from collections.abc import Awaitable, Callable, Iterable
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("fluent_cache.instrumentation")

REGION_ATTRIBUTE = "cache.region"

NextHandler = Callable[[], Awaitable[Any]]


@runtime_checkable
class InstrumentationHook(Protocol):
    """Protocol for hooks wrapping cache operations."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: NextHandler,
    ) -> Any:
        """Wrap an operation such as ``cache.get.<region>``."""
        ...


@dataclass(frozen=True)
class HookRegistration:
    """A hook together with the operations and regions it observes.

    Empty ``operations`` means every operation; ``regions=None`` means every
    region (``None`` inside the set stands for the default region).
    """

    hook: InstrumentationHook
    priority: int = 0
    operations: tuple[str, ...] = ()
    regions: frozenset[str | None] | None = None

    def matches(self, operation: str, attributes: dict[str, Any]) -> bool:
        if (
            self.regions is not None
            and attributes.get(REGION_ATTRIBUTE) not in self.regions
        ):
            return False
        return not self.operations or any(
            fnmatch.fnmatchcase(operation, pattern) for pattern in self.operations
        )


class HookRegistry:
    """Ordered hooks run as a chain around a cache operation.

    Lower priorities wrap higher ones; equal priorities keep registration
    order.
    """

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    @property
    def registrations(self) -> tuple[HookRegistration, ...]:
        return tuple(self._registrations)

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: Iterable[str] = (),
        regions: Iterable[str | None] | None = None,
    ) -> HookRegistration:
        registration = HookRegistration(
            hook=hook,
            priority=priority,
            operations=tuple(operations),
            regions=None if regions is None else frozenset(regions),
        )
        self._registrations.append(registration)
        self._registrations.sort(key=lambda r: r.priority)
        return registration

    def unregister(self, registration: HookRegistration) -> None:
        self._registrations = [
            r for r in self._registrations if r is not registration
        ]

    def clear(self) -> None:
        self._registrations.clear()

    async def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: NextHandler,
    ) -> Any:
        """Run *next_handler* wrapped by every matching hook."""
        matching = [r for r in self._registrations if r.matches(operation, attributes)]
        if matching:
            logger.debug("Running %d hook(s) for %s", len(matching), operation)

        handler = next_handler
        for registration in reversed(matching):
            handler = functools.partial(
                registration.hook, operation, attributes, handler
            )
        return await handler()


_hook_registry_var: ContextVar[HookRegistry | None] = ContextVar(
    "fluent_cache_hook_registry", default=None
)


def get_hook_registry() -> HookRegistry:
    """Registry for the current context, created on first access."""
    registry = _hook_registry_var.get()
    if registry is None:
        registry = HookRegistry()
        _hook_registry_var.set(registry)
    return registry


def set_hook_registry(registry: HookRegistry) -> None:
    _hook_registry_var.set(registry)
