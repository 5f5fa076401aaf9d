"""
FileLoader: base class for file-based loaders, and the import resolver that
follows one configuration file into the files it imports.

Imports may name a literal file, a glob pattern, or an opaque handle. Glob
patterns are expanded (minus any exclusions) and each match is imported in
natural order. Every import runs inside the current load pass's
`ImportContext`, which detects cycles and loads each resource at most once.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from confload.errors import (
    CircularImportError,
    LoaderNotFoundError,
    LoadFailedError,
    NotFoundError,
    describe_resource,
)
from confload.globbing import (
    GlobResource,
    glob_prefix_length,
    is_glob,
    normalize_path,
    split_pattern,
)
from confload.loader.base import Loader
from confload.loader.context import import_context, resource_key
from confload.locator import FileLocator

logger = logging.getLogger(__name__)


def _as_patterns(exclude: str | Sequence[str] | None) -> list[str]:
    if exclude is None:
        return []
    if isinstance(exclude, str):
        return [exclude]
    return list(exclude)


class FileLoader(Loader):
    """
    Base class for loaders of files found through a `FileLocator`.

    `current_dir` is the directory relative imports resolve against. File loaders
    set it to the importing file's directory before importing its dependencies.
    """

    def __init__(self, locator: FileLocator, env: str | None = None) -> None:
        super().__init__(env)
        self.locator: FileLocator = locator
        self.current_dir: str | None = None

    def set_current_dir(self, directory: str) -> None:
        self.current_dir = directory

    def import_resource(
        self,
        resource: Any,
        resource_type: str | None = None,
        ignore_errors: bool = False,
        source_resource: str | None = None,
        exclude: str | Sequence[str] | None = None,
    ) -> Any:
        """
        Import a resource, expanding glob patterns.

        Returns the loaded value for a literal resource. For a glob, returns `None`
        when nothing loaded, the single value when one match loaded, or the list of
        values in match order, so a glob matching one file behaves like importing
        that file directly.

        A glob whose literal prefix contains a directory (`conf/*.yaml`) must match
        something unless `ignore_errors` is set. A bare glob (`*.yaml`) may
        legitimately match nothing in any search path; it then falls back to a
        literal import with not-found errors suppressed.
        """
        with import_context():
            if is_glob(resource):
                excluded: dict[str, bool] = {}
                for pattern in _as_patterns(exclude):
                    found = self.glob(pattern, recursive=True, ignore_errors=True, for_exclusion=True)
                    for path, _info in found or ():
                        excluded[normalize_path(path)] = True

                i = glob_prefix_length(resource)
                is_subpath = i != 0 and "/" in resource[:i]
                matches = self.glob(
                    resource,
                    recursive=False,
                    ignore_errors=ignore_errors or not is_subpath,
                    excluded=excluded,
                )

                results: list[Any] = []
                matched = False
                for path, _info in matches or ():
                    matched = True
                    result = self._do_import(
                        path,
                        None if resource_type == "glob" else resource_type,
                        ignore_errors,
                        source_resource,
                    )
                    if result is not None:
                        results.append(result)

                if matches is not None and is_subpath and not matched and not matches.skipped:
                    if not ignore_errors:
                        raise NotFoundError(
                            f'No file matches the pattern "{resource}" (in: "{matches.prefix}").',
                            [matches.prefix],
                        )
                    logger.debug("Ignoring unmatched glob %r", resource)

                if is_subpath or matched:
                    if not results:
                        return None
                    return results[0] if len(results) == 1 else results

                logger.debug("Glob %r matched nothing, importing it as a literal name", resource)
                return self._do_import(resource, resource_type, True, source_resource)

            return self._do_import(resource, resource_type, ignore_errors, source_resource)

    def glob(
        self,
        pattern: str,
        recursive: bool,
        ignore_errors: bool = False,
        for_exclusion: bool = False,
        excluded: dict[str, bool] | None = None,
    ) -> GlobResource | None:
        """
        Locate the literal prefix of `pattern` and return a lazy `GlobResource`
        for the rest. If the prefix can't be located, raises `NotFoundError`, or
        returns `None` when `ignore_errors` is set.
        """
        prefix, remainder = split_pattern(pattern)
        with import_context() as context:
            try:
                located = self.locator.locate(prefix, self.current_dir)
            except NotFoundError as e:
                if not ignore_errors:
                    raise
                for path in e.paths:
                    context.track("existence", path)
                logger.debug("Glob prefix %r not found for %r", prefix, pattern)
                return None
            context.track("glob", located, remainder)

        logger.debug("Expanding %r under %s", remainder, located)
        return GlobResource(located, remainder, recursive, for_exclusion, excluded)

    def _do_import(
        self,
        resource: Any,
        resource_type: str | None,
        ignore_errors: bool,
        source_resource: str | None,
    ) -> Any:
        loader = self.resolve(resource, resource_type)

        with import_context() as context:
            try:
                if isinstance(loader, FileLoader) and self.current_dir is not None:
                    resource = loader.locator.locate(resource, self.current_dir, return_all=True)

                candidates = resource if isinstance(resource, list) else [resource]
                for candidate in candidates:
                    if not context.is_loading(candidate):
                        resource = candidate
                        break
                else:
                    raise CircularImportError(context.chain)

                key = resource_key(resource)
                if key in context.loaded:
                    logger.debug("Already loaded %s", describe_resource(resource))
                    return context.loaded[key]

                logger.debug("Importing %s", describe_resource(resource))
                with context.loading_scope(resource):
                    result = loader.load(resource, resource_type)
                context.loaded[key] = result
                return result
            except (CircularImportError, LoaderNotFoundError, LoadFailedError):
                raise
            except (NotFoundError, FileNotFoundError) as e:
                if ignore_errors:
                    logger.debug("Ignoring missing resource %s: %s", describe_resource(resource), e)
                    return None
                raise LoadFailedError(resource, source_resource, resource_type, e) from e
            except Exception as e:
                raise LoadFailedError(resource, source_resource, resource_type, e) from e
