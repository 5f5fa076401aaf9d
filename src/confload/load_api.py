"""
Convenience entry points for loading configuration with the standard loaders.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from confload.loader.base import LoaderResolver
from confload.loader.context import ImportContext, import_context
from confload.loader.extra import CallableLoader, DirectoryLoader, GlobFileLoader
from confload.loader.formats import JsonFileLoader, TomlFileLoader, YamlFileLoader
from confload.locator import FileLocator
from confload.merge import merge_results


def build_resolver(locator: FileLocator, env: str | None = None) -> LoaderResolver:
    """Register the standard loaders, in lookup order."""
    return LoaderResolver(
        [
            YamlFileLoader(locator, env),
            JsonFileLoader(locator, env),
            TomlFileLoader(locator, env),
            GlobFileLoader(locator, env),
            DirectoryLoader(locator, env),
            CallableLoader(env),
        ]
    )


def load_config(
    resource: Any,
    *,
    paths: Sequence[str | Path] | None = None,
    env: str | None = None,
    resource_type: str | None = None,
    ignore_errors: bool = False,
    exclude: str | Sequence[str] | None = None,
    context: ImportContext | None = None,
) -> dict[str, Any]:
    """
    Load a resource (file, glob, directory, or callable) and everything it
    imports, returning the merged settings.

    Relative names resolve against `paths` (default: the working directory).
    Pass a `context` to inspect the resources consulted afterwards.
    """
    search_paths = [os.path.abspath(p) for p in paths] if paths else [os.getcwd()]
    locator = FileLocator(search_paths)
    entry = GlobFileLoader(locator, env)
    build_resolver(locator, env).add_loader(entry)
    entry.set_current_dir(search_paths[0])

    with import_context(context):
        result = entry.import_resource(resource, resource_type, ignore_errors, None, exclude)
    return merge_results(result)
