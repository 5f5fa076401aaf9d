"""
Per-pass import state: the loading set used for cycle detection, the cache of
already-loaded resources, and the list of resources consulted.

The active `ImportContext` is published through a `ContextVar`, so every loader
taking part in one load pass shares it while independent passes (other threads
or tasks) stay isolated.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Literal

ResourceKind = Literal["file", "glob", "existence"]


@dataclass(frozen=True)
class TrackedResource:
    """A filesystem resource consulted during a load pass."""

    kind: ResourceKind
    path: str
    pattern: str = ""

    def __str__(self) -> str:
        return f"{self.kind}\t{self.path}{self.pattern}"


def resource_key(resource: Any) -> Hashable:
    """Identity of a resource in the loading set and cache."""
    if isinstance(resource, str):
        return resource
    try:
        hash(resource)
    except TypeError:
        return ("id", id(resource))
    return resource


@dataclass
class ImportContext:
    """State shared by all loaders during one load pass."""

    # Insertion-ordered so the current import chain can be reported.
    loading: dict[Hashable, Any] = field(default_factory=dict)
    loaded: dict[Hashable, Any] = field(default_factory=dict)
    resources: list[TrackedResource] = field(default_factory=list)

    @property
    def chain(self) -> list[Any]:
        """Resources currently being loaded, outermost first."""
        return list(self.loading.values())

    def is_loading(self, resource: Any) -> bool:
        return resource_key(resource) in self.loading

    @contextmanager
    def loading_scope(self, resource: Any) -> Iterator[None]:
        """Mark `resource` as loading for the duration of the block, always releasing it."""
        key = resource_key(resource)
        self.loading[key] = resource
        try:
            yield
        finally:
            self.loading.pop(key, None)

    def track(self, kind: ResourceKind, path: str, pattern: str = "") -> None:
        tracked = TrackedResource(kind, path, pattern)
        if tracked not in self.resources:
            self.resources.append(tracked)


_import_context: ContextVar[ImportContext | None] = ContextVar("import_context", default=None)


def get_import_context() -> ImportContext | None:
    """Return the context of the load pass in progress, or None outside of one."""
    return _import_context.get()


@contextmanager
def import_context(context: ImportContext | None = None) -> Iterator[ImportContext]:
    """
    Enter a load pass. Reuses the active context when one is in progress and no
    explicit `context` is given; otherwise binds `context` (or a fresh one) until
    the block exits.
    """
    active = _import_context.get()
    if context is None and active is not None:
        yield active
        return

    bound = context if context is not None else ImportContext()
    token = _import_context.set(bound)
    try:
        yield bound
    finally:
        _import_context.reset(token)
