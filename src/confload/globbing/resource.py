"""
GlobResource: lazy expansion of a glob pattern under a located prefix directory.
"""

from __future__ import annotations

import glob
import os
from collections.abc import Iterator, Mapping
from pathlib import Path

import pathspec

from confload.globbing.patterns import expand_braces, natural_key, normalize_path

# Recursive patterns are matched against relative paths rather than expanded by `glob`.
_RECURSIVE_MARKER = "/**/"


class GlobResource:
    """
    Iterates `(path, Path)` pairs for the files matching `prefix + pattern`.

    - Paths at or beneath a key of `excluded` are skipped (and counted in `skipped`).
    - A matched directory is yielded itself when `for_exclusion` is set, walked for
      files when `recursive` is set, and otherwise ignored.
    - Results are naturally sorted. Iteration is lazy and can stop at any point.
    """

    def __init__(
        self,
        prefix: str,
        pattern: str,
        recursive: bool = False,
        for_exclusion: bool = False,
        excluded: Mapping[str, bool] | None = None,
    ) -> None:
        self.prefix: str = os.path.normpath(prefix)
        self.pattern: str = pattern
        self.recursive: bool = recursive
        self.for_exclusion: bool = for_exclusion
        self.excluded: dict[str, bool] = dict(excluded or {})
        self.skipped: int = 0
        self._normalized_prefix: str = normalize_path(self.prefix)

    def __repr__(self) -> str:
        return f"GlobResource({self.prefix!r}, {self.pattern!r}, recursive={self.recursive})"

    def __iter__(self) -> Iterator[tuple[str, Path]]:
        if not os.path.exists(self.prefix) or (not self.recursive and self.pattern == ""):
            return

        if _RECURSIVE_MARKER in self.pattern:
            yield from self._match_walk()
            return

        if self.pattern == "" and os.path.isfile(self.prefix):
            paths = [self.prefix]
        else:
            escaped = glob.escape(self.prefix)
            found: set[str] = set()
            for pattern in expand_braces(self.pattern):
                found.update(os.path.normpath(p) for p in glob.glob(escaped + pattern))
            paths = sorted(found, key=natural_key)

        for path in paths:
            if self._is_excluded(path):
                self.skipped += 1
                continue
            if os.path.isfile(path):
                yield path, Path(path)
            if not os.path.isdir(path):
                continue
            if self.for_exclusion:
                yield path, Path(path)
                continue
            if not self.recursive:
                continue
            yield from self._walk_files(path)

    def _is_excluded(self, path: str) -> bool:
        """Check `path` and each of its ancestors up to the prefix against `excluded`."""
        if not self.excluded:
            return False
        current = normalize_path(path)
        while True:
            if current in self.excluded:
                return True
            parent = os.path.dirname(current)
            if current == self._normalized_prefix or parent == current:
                return False
            current = parent

    def _walk_files(self, root: str) -> Iterator[tuple[str, Path]]:
        """
        Walk a directory tree, pruning hidden and excluded directories in-place,
        and yield its non-hidden files in natural order.
        """
        files: list[str] = []
        for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
            dirnames[:] = [
                d
                for d in dirnames
                if not d.startswith(".") and not self._is_excluded(os.path.join(dirpath, d))
            ]
            for filename in filenames:
                filepath = os.path.join(dirpath, filename)
                if filename.startswith("."):
                    continue
                if self._is_excluded(filepath):
                    self.skipped += 1
                    continue
                files.append(filepath)

        for filepath in sorted(files, key=natural_key):
            yield filepath, Path(filepath)

    def _match_walk(self) -> Iterator[tuple[str, Path]]:
        """Match files beneath the prefix against a `**` pattern using wildmatch rules."""
        spec = pathspec.PathSpec.from_lines("gitwildmatch", expand_braces(self.pattern))
        matches: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self.prefix, followlinks=True):
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            for filename in filenames:
                filepath = os.path.join(dirpath, filename)
                rel = normalize_path(filepath)[len(self._normalized_prefix) :].lstrip("/")
                if not spec.match_file(rel):
                    continue
                if not self.recursive and self._matched_by_ancestor(spec, rel):
                    continue
                if self._is_excluded(filepath):
                    self.skipped += 1
                    continue
                matches.append(filepath)

        for filepath in sorted(matches, key=natural_key):
            yield filepath, Path(filepath)

    @staticmethod
    def _matched_by_ancestor(spec: pathspec.PathSpec, rel: str) -> bool:
        """A non-recursive glob only accepts files it names directly, not files inside a matched directory."""
        parts = rel.split("/")[:-1]
        return any(spec.match_file("/".join(parts[: i + 1])) for i in range(len(parts)))
