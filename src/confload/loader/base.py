"""Loader interface, ordered loader registry, and the delegating loader."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from confload.errors import LoaderNotFoundError


class Loader(ABC):
    """
    Loads one kind of resource. Loaders registered with a `LoaderResolver` can
    hand resources they don't support to their siblings via `resolve`.
    """

    def __init__(self, env: str | None = None) -> None:
        self.env: str | None = env
        self.resolver: LoaderResolver | None = None

    @abstractmethod
    def load(self, resource: Any, resource_type: str | None = None) -> Any:
        """Load `resource` and return its value."""

    @abstractmethod
    def supports(self, resource: Any, resource_type: str | None = None) -> bool:
        """True if this loader can load `resource` given the optional type hint."""

    def import_resource(self, resource: Any, resource_type: str | None = None) -> Any:
        """Load a resource with whichever loader supports it."""
        return self.resolve(resource, resource_type).load(resource, resource_type)

    def resolve(self, resource: Any, resource_type: str | None = None) -> Loader:
        """
        Return this loader if it supports the resource, else the first registered
        sibling that does. Raises `LoaderNotFoundError` if there is none.
        """
        if self.supports(resource, resource_type):
            return self
        loader = None if self.resolver is None else self.resolver.get_loader(resource, resource_type)
        if loader is None:
            raise LoaderNotFoundError(resource, resource_type)
        return loader


class LoaderResolver:
    """An ordered registry of loaders. The first loader that supports a resource wins."""

    def __init__(self, loaders: Iterable[Loader] = ()) -> None:
        self._loaders: list[Loader] = []
        for loader in loaders:
            self.add_loader(loader)

    @property
    def loaders(self) -> list[Loader]:
        return list(self._loaders)

    def add_loader(self, loader: Loader) -> None:
        self._loaders.append(loader)
        loader.resolver = self

    def get_loader(self, resource: Any, resource_type: str | None = None) -> Loader | None:
        for loader in self._loaders:
            if loader.supports(resource, resource_type):
                return loader
        return None


class DelegatingLoader(Loader):
    """A loader that forwards every resource to the matching loader of `registry`."""

    def __init__(self, registry: LoaderResolver) -> None:
        super().__init__()
        self.registry: LoaderResolver = registry
        self.resolver = registry

    def load(self, resource: Any, resource_type: str | None = None) -> Any:
        loader = self.registry.get_loader(resource, resource_type)
        if loader is None:
            raise LoaderNotFoundError(resource, resource_type)
        return loader.load(resource, resource_type)

    def supports(self, resource: Any, resource_type: str | None = None) -> bool:
        return self.registry.get_loader(resource, resource_type) is not None
