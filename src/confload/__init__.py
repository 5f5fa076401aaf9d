"""
confload: layered configuration loading with imports, glob patterns, exclusions,
and circular-import detection.

Usage::

    from confload import load_config

    settings = load_config("app.yaml", paths=["config"], env="prod")
"""

from confload.errors import (
    CircularImportError,
    ConfloadError,
    InvalidConfigError,
    LoaderNotFoundError,
    LoadFailedError,
    MergeConflictError,
    NotFoundError,
)
from confload.load_api import build_resolver, load_config
from confload.loader import (
    FileLoader,
    ImportContext,
    Loader,
    LoaderResolver,
    import_context,
)
from confload.locator import FileLocator
from confload.merge import deep_merge

__all__ = [
    "CircularImportError",
    "ConfloadError",
    "FileLoader",
    "FileLocator",
    "ImportContext",
    "InvalidConfigError",
    "LoadFailedError",
    "Loader",
    "LoaderNotFoundError",
    "LoaderResolver",
    "MergeConflictError",
    "NotFoundError",
    "build_resolver",
    "deep_merge",
    "import_context",
    "load_config",
]
