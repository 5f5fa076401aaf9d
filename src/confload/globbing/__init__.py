"""
Self-contained glob expansion for configuration imports: brace alternatives,
`**` patterns, natural ordering, and exclusion prefixes.

No imports from `confload` outside this package.

Usage::

    from confload.globbing import GlobResource

    for path, info in GlobResource("/etc/app", "/conf.d/*.{yaml,yml}"):
        ...
"""

from confload.globbing.patterns import (
    GLOB_CHARS,
    expand_braces,
    glob_prefix_length,
    is_glob,
    natural_key,
    normalize_path,
    split_pattern,
)
from confload.globbing.resource import GlobResource

__all__ = [
    "GLOB_CHARS",
    "GlobResource",
    "expand_braces",
    "glob_prefix_length",
    "is_glob",
    "natural_key",
    "normalize_path",
    "split_pattern",
]
