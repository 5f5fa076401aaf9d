"""Glob pattern helpers: metacharacter detection, brace expansion, natural ordering."""

from __future__ import annotations

import os
import re

# Characters that indicate a string is a glob pattern rather than a literal path.
GLOB_CHARS = "*?{["

_DIGITS = re.compile(r"(\d+)")


def glob_prefix_length(pattern: str) -> int:
    """Length of the literal prefix before the first glob metacharacter."""
    for i, c in enumerate(pattern):
        if c in GLOB_CHARS:
            return i
    return len(pattern)


def is_glob(resource: object) -> bool:
    """
    True for strings with glob metacharacters. Multi-line strings are never
    filesystem patterns.
    """
    return (
        isinstance(resource, str)
        and "\n" not in resource
        and glob_prefix_length(resource) != len(resource)
    )


def split_pattern(pattern: str) -> tuple[str, str]:
    """
    Split a glob into `(prefix, remainder)`, where `prefix` is the directory to
    locate and `remainder` is matched beneath it (starting with `/`, or empty
    for a literal path).
    """
    i = glob_prefix_length(pattern)
    if i == len(pattern):
        return pattern, ""
    if i == 0 or "/" not in pattern[:i]:
        return ".", "/" + pattern
    prefix = os.path.dirname(pattern[: i + 1])
    return prefix, pattern[len(prefix) :]


def normalize_path(path: str) -> str:
    """Use forward slashes and drop any trailing slash (except for the root)."""
    normalized = path.replace("\\", "/")
    return normalized.rstrip("/") or normalized[:1]


def expand_braces(pattern: str) -> list[str]:
    """
    Expand `{a,b}` alternatives, including nested groups, into a list of
    patterns. A group without a top-level comma is kept literally.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        end = -1
        commas: list[int] = []
        for i in range(start, len(pattern)):
            c = pattern[i]
            if c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break
            elif c == "," and depth == 1:
                commas.append(i)
        if end == -1:
            break
        if commas:
            head, tail = pattern[:start], pattern[end + 1 :]
            bounds = [start, *commas, end]
            expanded: list[str] = []
            for lo, hi in zip(bounds, bounds[1:]):
                for alternative in expand_braces(head + pattern[lo + 1 : hi] + tail):
                    if alternative not in expanded:
                        expanded.append(alternative)
            return expanded
        start = pattern.find("{", end + 1)
    return [pattern]


def natural_key(text: str) -> list[str | int]:
    """Sort key that orders embedded numbers numerically (`a2` before `a10`)."""
    return [int(part) if part.isdigit() else part for part in _DIGITS.split(text)]
