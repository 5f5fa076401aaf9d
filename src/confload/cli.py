#!/usr/bin/env python3
"""
confload: Load layered configuration files with imports, globs, and environments

Common usage:
  confload config/app.yaml
  confload 'config/packages/*.yaml' --env prod
  confload app.yaml --path config --path /etc/myapp --format yaml
  confload app.yaml --list-resources

Settings are read from `.confload.toml`, `confload.toml`, or `[tool.confload]` in
`pyproject.toml`, searched upward from the current directory.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from strif import atomic_output_file

from confload.config import find_settings_file, load_settings, merge_cli_with_settings
from confload.errors import ConfloadError
from confload.load_api import load_config
from confload.loader.context import ImportContext, import_context
from confload.merge import deep_merge

_FORMATS = ("json", "yaml")


@dataclass
class Options:
    """Command-line options for the confload tool."""

    resources: list[str]
    paths: list[str]
    resource_type: str | None
    env: str | None
    exclude: list[str]
    ignore_errors: bool
    format: str
    output: str
    list_resources: bool
    verbose: bool
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which settings-backed flags the user explicitly passed (for settings merge
    precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="confload",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "resources",
        nargs="*",
        type=str,
        default=[],
        help="Files, directories (ending in '/'), or glob patterns to load, merged in order",
    )
    # Settings-backed options default to None so explicit use can be detected.
    parser.add_argument(
        "-p",
        "--path",
        action="append",
        dest="paths",
        default=None,
        metavar="DIR",
        help="Directory to search for relative resources. Can be repeated "
        "(default: current directory)",
    )
    parser.add_argument(
        "-t",
        "--type",
        dest="resource_type",
        default=None,
        metavar="TYPE",
        help="Resource type hint: yaml, json, toml, glob, or directory",
    )
    parser.add_argument(
        "-e",
        "--env",
        default=None,
        help="Environment name; `when@ENV` sections of each file are applied",
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Glob pattern of files to skip when loading a glob. Can be repeated",
    )
    parser.add_argument(
        "--ignore-errors",
        action="store_true",
        default=None,
        dest="ignore_errors",
        help="Treat missing resources as empty instead of failing",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=_FORMATS,
        default=None,
        help="Output format (default: json)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout)",
    )
    parser.add_argument(
        "--list-resources",
        action="store_true",
        dest="list_resources",
        help="Print the files and directories consulted instead of the merged settings",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each import to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    explicit_flags = {
        name
        for name in ("paths", "resource_type", "env", "exclude", "ignore_errors", "format")
        if getattr(opts, name) is not None
    }

    return (
        Options(
            resources=opts.resources,
            paths=opts.paths or [],
            resource_type=opts.resource_type,
            env=opts.env,
            exclude=opts.exclude or [],
            ignore_errors=bool(opts.ignore_errors),
            format=opts.format or "json",
            output=opts.output,
            list_resources=opts.list_resources,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _render(data: dict[str, Any], fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"


def _write_output(content: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(content)
        return
    with atomic_output_file(output, make_parents=True) as temp_path:
        Path(temp_path).write_text(content, encoding="utf-8")


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the confload CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("confload")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.resources:
        print(
            "Error: No resource specified. Provide a file, directory, or glob pattern."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    # Load and merge settings file values
    settings_path = find_settings_file(Path.cwd())
    if settings_path:
        settings = load_settings(settings_path)
        merge_cli_with_settings(options, settings, explicit_flags)

    if options.format not in _FORMATS:
        print(f"Error: Unknown output format: {options.format}", file=sys.stderr)
        return 1

    context = ImportContext()
    merged: dict[str, Any] = {}
    try:
        with import_context(context):
            for resource in options.resources:
                result = load_config(
                    resource,
                    paths=options.paths or None,
                    env=options.env,
                    resource_type=options.resource_type,
                    ignore_errors=options.ignore_errors,
                    exclude=options.exclude or None,
                )
                merged = deep_merge(merged, result)

        if options.list_resources:
            content = "".join(f"{r}\n" for r in context.resources)
        else:
            content = _render(merged, options.format)
        _write_output(content, options.output)
    except ConfloadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # Catch other potential file or output errors.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
