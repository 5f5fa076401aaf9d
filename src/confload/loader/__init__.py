"""Loaders and the import resolver."""

from confload.loader.base import DelegatingLoader, Loader, LoaderResolver
from confload.loader.context import (
    ImportContext,
    TrackedResource,
    get_import_context,
    import_context,
)
from confload.loader.extra import CallableLoader, DirectoryLoader, GlobFileLoader
from confload.loader.file_loader import FileLoader
from confload.loader.formats import (
    ConfigFileLoader,
    JsonFileLoader,
    TomlFileLoader,
    YamlFileLoader,
)

__all__ = [
    "CallableLoader",
    "ConfigFileLoader",
    "DelegatingLoader",
    "DirectoryLoader",
    "FileLoader",
    "GlobFileLoader",
    "ImportContext",
    "JsonFileLoader",
    "Loader",
    "LoaderResolver",
    "TomlFileLoader",
    "TrackedResource",
    "YamlFileLoader",
    "get_import_context",
    "import_context",
]
