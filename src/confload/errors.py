"""
Errors raised while locating, importing, and merging configuration resources.

All errors derive from `ConfloadError`, so callers can catch the whole family
at one boundary (the CLI does this).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any


def describe_resource(resource: Any) -> str:
    """Human-readable form of a resource identifier for error messages."""
    if isinstance(resource, str):
        return resource
    name = getattr(resource, "__qualname__", None) or type(resource).__name__
    return f"<{name}>"


class ConfloadError(Exception):
    """Base class for all confload errors."""


class NotFoundError(ConfloadError):
    """
    Nothing matched a name or pattern. `paths` lists every path that was tried,
    so callers can watch them for later creation.
    """

    def __init__(self, message: str, paths: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.paths: list[str] = list(paths)


class LoaderNotFoundError(ConfloadError):
    """No registered loader supports a resource/type combination."""

    def __init__(self, resource: Any, resource_type: str | None = None) -> None:
        self.resource: Any = resource
        self.resource_type: str | None = resource_type
        message = f'Cannot load resource "{describe_resource(resource)}".'
        if resource_type is not None:
            message += f' Make sure there is a loader supporting the "{resource_type}" type.'
        super().__init__(message)


class CircularImportError(ConfloadError):
    """An import chain revisited a resource that is still being loaded."""

    def __init__(self, chain: Sequence[Any]) -> None:
        self.chain: list[Any] = list(chain)
        names = [describe_resource(r) for r in self.chain]
        first = names[0] if names else ""
        super().__init__(
            f'Circular reference detected in "{first}" ("{" > ".join(names)}" > "{first}").'
        )


class LoadFailedError(ConfloadError):
    """
    A loader failed while loading `resource`. The original error is chained as
    `__cause__` and its message is repeated here along with the import site.
    """

    def __init__(
        self,
        resource: Any,
        source_resource: str | None = None,
        resource_type: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.resource: Any = resource
        self.source_resource: str | None = source_resource
        self.resource_type: str | None = resource_type
        name = describe_resource(resource)
        if cause is not None and str(cause):
            message = f'{str(cause).rstrip(".")} in "{name}"'
            if source_resource:
                message += f' (which is being imported from "{source_resource}")'
            message += "."
        elif source_resource is None:
            message = f'Cannot load resource "{name}".'
        else:
            message = f'Cannot import resource "{name}" from "{source_resource}".'
        super().__init__(message)


class InvalidConfigError(ConfloadError):
    """A configuration document or one of its `imports` entries is malformed."""


class MergeConflictError(ConfloadError):
    """Two configuration values with incompatible types met during a merge."""
