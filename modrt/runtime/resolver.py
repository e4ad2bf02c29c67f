"""Specifier resolution against the module registry."""

from __future__ import annotations

import logging
from typing import Optional

from ..constants import DEFAULT_MAIN, VERSION_MARKER
from .core import Resolution
from .paths import (
    dirname,
    join,
    normalize,
    split_package_id,
    split_package_name,
    without_extension,
)
from .registry import ModuleRegistry

logger = logging.getLogger(__name__)


class Resolver:
    """Turn ``(specifier, importer)`` pairs into canonical paths.

    ``from_path`` is always the canonical path of the importing module;
    relative specifiers are joined onto its directory. Failure is reported
    as ``None`` and callers decide how to surface it.
    """

    def __init__(self, registry: ModuleRegistry):
        self.registry = registry

    def resolve(self, specifier: str, from_path: str) -> Optional[Resolution]:
        if specifier.startswith("."):
            resolved_path = join(dirname(from_path), specifier)
        elif specifier.startswith("/"):
            # "/my/file" or paths that already carry a package id
            resolved_path = normalize(specifier.split("/"))
        else:
            for prefix in self.registry.search_paths:
                found = self.resolve(prefix + specifier, from_path)
                if found is not None:
                    return found
            resolved_path = self.resolve_installed(specifier, from_path)

        if not resolved_path:
            return None

        relative_main = self.registry.main_for(resolved_path)
        if relative_main is not None:
            resolved_path = join(resolved_path, relative_main or DEFAULT_MAIN)

        remapped = self.registry.remap_for(resolved_path)
        if remapped:
            logger.debug("Remapped %s -> %s", resolved_path, remapped)
            resolved_path = remapped

        definition = self.registry.definition(resolved_path)
        if definition is None:
            stripped = without_extension(resolved_path)
            if stripped is None:
                return None
            definition = self.registry.definition(stripped)
            if definition is None:
                return None
            resolved_path = stripped

        return Resolution(resolved_path, definition)

    def resolve_installed(self, specifier: str, from_path: str) -> Optional[str]:
        """Resolve a bare specifier through built-ins and installed versions."""

        if specifier.endswith("/"):
            # require("util/") shows up in the wild
            specifier = specifier[:-1]

        builtin_path = self.registry.builtin_for(specifier)
        if builtin_path:
            return builtin_path

        from_package_id, _ = split_package_id(from_path)
        package_name, subpath = split_package_name(specifier)

        version = self.registry.installed_version(from_package_id, package_name)
        if not version:
            return None
        return f"/{package_name}{VERSION_MARKER}{version}{subpath}"


__all__ = ["Resolver"]
