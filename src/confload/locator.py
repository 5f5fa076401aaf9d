"""File location against a list of search paths."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Literal, overload

from confload.errors import NotFoundError

_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def is_absolute_path(name: str) -> bool:
    """True for filesystem-absolute paths and URL-like `scheme://` names."""
    return os.path.isabs(name) or name.startswith("\\") or bool(_URL_SCHEME.match(name))


class FileLocator:
    """
    Locates files by name. Relative names are tried under the caller's current
    directory first, then under each configured search path, in order.
    """

    def __init__(self, paths: str | Path | Sequence[str | Path] = ()) -> None:
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self.paths: list[str] = [str(p) for p in paths]

    @overload
    def locate(
        self, name: str, current_dir: str | None = None, return_all: Literal[False] = False
    ) -> str: ...

    @overload
    def locate(
        self, name: str, current_dir: str | None, return_all: Literal[True]
    ) -> list[str]: ...

    @overload
    def locate(self, name: str, current_dir: str | None, return_all: bool) -> str | list[str]: ...

    def locate(
        self, name: str, current_dir: str | None = None, return_all: bool = False
    ) -> str | list[str]:
        """
        Return the first matching path, or every match when `return_all` is set.
        Raises `NotFoundError` listing the attempted paths when nothing exists.
        """
        if name == "":
            raise ValueError("An empty file name is not valid to be located.")

        if is_absolute_path(name):
            if not os.path.exists(name):
                raise NotFoundError(f'The file "{name}" does not exist.', [name])
            return [name] if return_all else name

        search: list[str] = []
        for path in ([current_dir] if current_dir is not None else []) + self.paths:
            if path not in search:
                search.append(path)

        found: list[str] = []
        not_found: list[str] = []
        for path in search:
            candidate = os.path.normpath(os.path.join(path, name))
            if os.path.exists(candidate):
                if not return_all:
                    return candidate
                found.append(candidate)
            else:
                not_found.append(candidate)

        if not found:
            where = '", "'.join(search)
            raise NotFoundError(f'The file "{name}" does not exist (in: "{where}").', not_found)
        return found
