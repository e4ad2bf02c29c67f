"""Module instantiation, the instance cache and scoped import functions."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any, Optional

from ..constants import ROOT_PATH
from .core import Factory, Module, ModuleNotFound, Value
from .paths import dirname
from .resolver import Resolver

if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .bindings import GlobalBindings
    from .context import ModuleRuntime

logger = logging.getLogger(__name__)


class ScopedImport:
    """The ``require`` handed to a module body.

    Bound to the importing module's directory. The local cache keeps the
    ``Module`` rather than its exports because ``module.exports`` may still
    be replaced while a circular import is in flight.
    """

    def __init__(self, instantiator: "Instantiator", filename: str):
        self.instantiator = instantiator
        self.filename = filename
        self.dirname = dirname(filename)
        self.local_cache = instantiator.cache_by_dirname.setdefault(self.dirname, {})

    @property
    def cache(self) -> dict[str, Module]:
        return self.instantiator.instance_cache

    @property
    def runtime(self) -> "ModuleRuntime | None":
        return self.instantiator.runtime

    def __call__(self, specifier: str) -> Any:
        module = self.local_cache.get(specifier)
        if module is None:
            module = self.instantiator.require_module(specifier, self.filename)
            self.local_cache[specifier] = module
        else:
            self.instantiator.record_import(self.filename, module.id)
        return module.exports

    def resolve(self, specifier: str) -> str:
        """Return the canonical path for *specifier* without instantiating it."""

        if not specifier:
            raise ModuleNotFound("")
        resolution = self.instantiator.resolver.resolve(specifier, self.filename)
        if resolution is None:
            raise ModuleNotFound(specifier, self.filename)
        return resolution.path

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<ScopedImport {self.dirname or '/'}>"


class Instantiator:
    """Creates module instances, at most one per canonical path."""

    def __init__(
        self,
        resolver: Resolver,
        bindings: "GlobalBindings | None" = None,
        runtime: "ModuleRuntime | None" = None,
    ):
        self.resolver = resolver
        self.bindings = bindings
        self.runtime = runtime
        self.instance_cache: dict[str, Module] = {}
        self.cache_by_dirname: dict[str, dict[str, Module]] = {}
        # (importer or None, resolved path) -> number of times it was imported
        self.import_edges: Counter[tuple[Optional[str], str]] = Counter()

    def require_module(self, specifier: str, from_path: str = ROOT_PATH) -> Module:
        if not specifier:
            raise ModuleNotFound("")

        resolution = self.resolver.resolve(specifier, from_path)
        if resolution is None:
            raise ModuleNotFound(specifier, from_path)

        path = resolution.path
        self.record_import(from_path, path)

        module = self.instance_cache.get(path)
        if module is not None:
            return module

        if self.bindings is not None:
            bound = self.bindings.lookup(path)
            if bound is not None:
                return bound

        module = Module(path, self.runtime)
        # cached before the body runs so circular imports see the partial exports
        self.instance_cache[path] = module
        logger.debug("Instantiating %s (requested as %r)", path, specifier)
        self._execute(module, resolution.definition)
        return module

    def require(self, specifier: str, from_path: str = ROOT_PATH) -> Any:
        return self.require_module(specifier, from_path).exports

    def record_import(self, from_path: str, path: str) -> None:
        importer = None if from_path == ROOT_PATH else from_path
        self.import_edges[(importer, path)] += 1

    def _execute(self, module: Module, definition) -> None:
        match definition:
            case Factory(fn=fn):
                module.exports = {}
                scoped = ScopedImport(self, module.filename)
                fn(scoped, module.exports, module, module.filename, scoped.dirname)
            case Value(exports=exports):
                module.exports = exports
            case _:
                raise TypeError(f"Unsupported module definition: {definition!r}")
        module.loaded = True


__all__ = ["Instantiator", "ScopedImport"]
