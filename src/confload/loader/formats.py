"""
YAML, JSON, and TOML configuration file loaders.

Each document is a mapping. Two top-level keys are handled by the loader:

- `imports`: a list of resources to load first. Entries are strings or mappings
  with `resource` and optional `type`, `ignore_errors`, and `exclude`. Imported
  values are merged in order, then the importing document is merged over them.
- `when@<env>`: a mapping merged over the document when the loader's `env`
  matches. All `when@` keys are removed from the result.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

import yaml

from confload.errors import InvalidConfigError
from confload.loader.context import import_context
from confload.loader.file_loader import FileLoader
from confload.merge import deep_merge, merge_results

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)

_IMPORTS_KEY = "imports"
_WHEN_PREFIX = "when@"
_IMPORT_ENTRY_KEYS = {"resource", "type", "ignore_errors", "exclude"}


class ConfigFileLoader(FileLoader):
    """Base class for loaders that parse one file into a mapping."""

    format_name: str = ""
    extensions: tuple[str, ...] = ()

    @abstractmethod
    def parse(self, path: Path) -> Any:
        """Parse the file at `path`. Empty documents may return `None`."""

    def supports(self, resource: Any, resource_type: str | None = None) -> bool:
        if not isinstance(resource, str):
            return False
        if resource_type is None:
            return Path(resource).suffix.lower() in self.extensions
        return resource_type == self.format_name

    def load(self, resource: Any, resource_type: str | None = None) -> dict[str, Any]:
        path = self.locator.locate(resource, self.current_dir)
        with import_context() as context:
            context.track("file", path)

        data = self.parse(Path(path))
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidConfigError(
                f"Config root must be a mapping, got {type(data).__name__}"
            )

        document = self._apply_environment(cast(Mapping[str, Any], data))
        imports = document.pop(_IMPORTS_KEY, None) or []
        if not isinstance(imports, list):
            raise InvalidConfigError(f'"{_IMPORTS_KEY}" must be a list')

        merged: dict[str, Any] = {}
        base_dir = os.path.dirname(path)
        for entry in cast(list[Any], imports):
            target, entry_type, ignore_errors, exclude = _parse_import_entry(entry)
            self.set_current_dir(base_dir)
            result = self.import_resource(target, entry_type, ignore_errors, path, exclude)
            merged = deep_merge(merged, merge_results(result))

        return deep_merge(merged, document)

    def _apply_environment(self, data: Mapping[str, Any]) -> dict[str, Any]:
        document = {k: v for k, v in data.items() if not k.startswith(_WHEN_PREFIX)}
        if self.env is None:
            return document
        section = data.get(_WHEN_PREFIX + self.env)
        if section is None:
            return document
        if not isinstance(section, Mapping):
            raise InvalidConfigError(f'"{_WHEN_PREFIX}{self.env}" must be a mapping')
        logger.debug("Applying %s%s section", _WHEN_PREFIX, self.env)
        env_section = cast(Mapping[str, Any], section)
        if _IMPORTS_KEY in env_section and _IMPORTS_KEY in document:
            # Environment imports extend the base imports rather than replacing them.
            env_section = dict(env_section)
            env_section[_IMPORTS_KEY] = list(document[_IMPORTS_KEY]) + list(
                env_section[_IMPORTS_KEY]
            )
        return deep_merge(document, env_section)


def _parse_import_entry(entry: Any) -> tuple[str, str | None, bool, Any]:
    """Normalize an `imports` entry into `(resource, type, ignore_errors, exclude)`."""
    if isinstance(entry, str):
        return entry, None, False, None
    if not isinstance(entry, Mapping) or "resource" not in entry:
        raise InvalidConfigError(f"Invalid import entry: {entry!r}")
    fields = cast(Mapping[str, Any], entry)
    unknown = set(fields) - _IMPORT_ENTRY_KEYS
    if unknown:
        raise InvalidConfigError(f"Unknown import entry keys: {', '.join(sorted(unknown))}")
    return (
        str(fields["resource"]),
        fields.get("type"),
        bool(fields.get("ignore_errors", False)),
        fields.get("exclude"),
    )


class YamlFileLoader(ConfigFileLoader):
    format_name = "yaml"
    extensions = (".yaml", ".yml")

    def parse(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)


class JsonFileLoader(ConfigFileLoader):
    format_name = "json"
    extensions = (".json",)

    def parse(self, path: Path) -> Any:
        text = path.read_text(encoding="utf-8")
        return json.loads(text) if text.strip() else None


class TomlFileLoader(ConfigFileLoader):
    format_name = "toml"
    extensions = (".toml",)

    def parse(self, path: Path) -> Any:
        return tomllib.loads(path.read_text(encoding="utf-8"))
