"""Loaders for glob patterns, whole directories, and callables."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Any

from confload.globbing import natural_key
from confload.loader.base import Loader
from confload.loader.file_loader import FileLoader
from confload.merge import deep_merge, merge_results

logger = logging.getLogger(__name__)


class GlobFileLoader(FileLoader):
    """
    Loads every resource matching a pattern given with the `glob` type.

    A resource the importer already located to an existing path is handed
    straight to the loader for that path. The importer holds the path's
    loading-set entry, so importing it again here would look like a cycle.
    """

    def load(self, resource: Any, resource_type: str | None = None) -> Any:
        if isinstance(resource, str) and os.path.exists(resource):
            if os.path.isdir(resource) and not resource.endswith("/"):
                resource += "/"
            return self.resolve(resource).load(resource)
        return self.import_resource(resource)

    def supports(self, resource: Any, resource_type: str | None = None) -> bool:
        return resource_type == "glob"


class DirectoryLoader(FileLoader):
    """
    Loads each non-hidden entry of a directory in natural order and merges the
    results. Subdirectories are loaded recursively; files no registered loader
    supports are skipped.
    """

    def load(self, resource: Any, resource_type: str | None = None) -> dict[str, Any]:
        directory = self.locator.locate(resource, self.current_dir)
        merged: dict[str, Any] = {}
        for name in sorted(os.listdir(directory), key=natural_key):
            if name.startswith("."):
                continue
            if os.path.isdir(os.path.join(directory, name)):
                name += "/"
            if self.resolver is not None and self.resolver.get_loader(name) is None:
                logger.debug("Skipping %s in %s: no loader supports it", name, directory)
                continue
            self.set_current_dir(directory)
            result = self.import_resource(name, None, False, directory)
            merged = deep_merge(merged, merge_results(result))
        return merged

    def supports(self, resource: Any, resource_type: str | None = None) -> bool:
        if resource_type == "directory":
            return True
        return resource_type is None and isinstance(resource, str) and resource.endswith("/")


class CallableLoader(Loader):
    """Loads a callable resource by calling it with the loader's environment name."""

    def load(self, resource: Any, resource_type: str | None = None) -> Any:
        func: Callable[[str | None], Any] = resource
        return func(self.env)

    def supports(self, resource: Any, resource_type: str | None = None) -> bool:
        return callable(resource) and resource_type in (None, "callable")
