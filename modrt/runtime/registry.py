"""Process-wide registration tables consulted by the resolver."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .core import Definition, as_definition

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """Module definitions plus the metadata the resolver needs.

    Every table is last-writer-wins and nothing is validated on the way in.
    """

    def __init__(self):
        # "/baz$3.0.0/lib/index" -> Factory | Value
        self.definitions: dict[str, Definition] = {}
        # "/foo$1.0.0" -> "lib/index"
        self.mains: dict[str, str] = {}
        # "/foo$1.0.0/util" -> "/foo$1.0.0/util-browser"
        self.remaps: dict[str, Any] = {}
        # "path" -> "/path-browserify$0.0.0/index"
        self.builtins: dict[str, str] = {}
        # ("foo$1.0.0", "bar") -> "3.0.0"
        self.installed: dict[tuple[str, str], str] = {}
        self.search_paths: list[str] = []

    def register_definition(self, path: str, factory_or_value: Any) -> Definition:
        definition = as_definition(factory_or_value)
        if path in self.definitions:
            logger.debug("Replacing definition for %s", path)
        self.definitions[path] = definition
        return definition

    def register_main(self, directory_path: str, relative_main_path: str) -> None:
        self.mains[directory_path] = relative_main_path

    def register_remap(self, from_path: str, to_path: Any) -> None:
        self.remaps[from_path] = to_path

    def register_builtin(self, name: str, canonical_path: str) -> None:
        self.builtins[name] = canonical_path

    def register_installed(
        self, consuming_package_path: str, dependency_name: str, version: str
    ) -> None:
        # Generated code passes "foo$1.0.0"; hand-written callers often use "/foo$1.0.0".
        package_id = consuming_package_path[1:] if consuming_package_path.startswith("/") else consuming_package_path
        self.installed[(package_id, dependency_name)] = version

    def add_search_path(self, prefix: str) -> None:
        self.search_paths.append(prefix)

    def definition(self, path: str) -> Optional[Definition]:
        return self.definitions.get(path)

    def main_for(self, directory_path: str) -> Optional[str]:
        return self.mains.get(directory_path)

    def remap_for(self, path: str) -> Optional[str]:
        target = self.remaps.get(path)
        # remap(path, False) is emitted for modules with no browser counterpart
        return target or None

    def builtin_for(self, name: str) -> Optional[str]:
        return self.builtins.get(name)

    def installed_version(self, package_id: str, dependency_name: str) -> Optional[str]:
        return self.installed.get((package_id, dependency_name))


__all__ = ["ModuleRegistry"]
