"""The runtime context object that owns every table and cache."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..constants import ROOT_PATH
from .bindings import GlobalBindings
from .core import Definition, Module, ModuleNotFound
from .instantiator import Instantiator
from .paths import join as join_paths
from .registry import ModuleRegistry
from .resolver import Resolver
from .scheduler import PendingJob, ReadinessScheduler

logger = logging.getLogger(__name__)


class ModuleRuntime:
    """Registration, import and run surface for one process.

    Build-time generated code populates the registry through ``define``,
    ``main``, ``remap``, ``builtin``, ``installed`` and ``search_path``;
    entry points are triggered through ``run`` and released by ``ready``
    or by the last ``pending()`` job completing.
    """

    def __init__(self, namespace: Optional[dict[str, Any]] = None):
        self.registry = ModuleRegistry()
        self.resolver = Resolver(self.registry)
        self.bindings = GlobalBindings(namespace)
        self.instantiator = Instantiator(self.resolver, self.bindings, runtime=self)
        self.bindings.instantiator = self.instantiator
        self.scheduler = ReadinessScheduler(self.instantiator.require)
        self.metadata: Any = None

    # -- registration ---------------------------------------------------

    def define(
        self,
        path: str,
        factory_or_value: Any,
        globals: Optional[Iterable[str]] = None,
    ) -> Definition:
        definition = self.registry.register_definition(path, factory_or_value)
        if globals:
            self.bindings.bind(path, globals)
        return definition

    def main(self, directory_path: str, relative_main_path: str) -> None:
        self.registry.register_main(directory_path, relative_main_path)

    def remap(self, from_path: str, to_path: Any) -> None:
        self.registry.register_remap(from_path, to_path)

    def builtin(self, name: str, canonical_path: str) -> None:
        self.registry.register_builtin(name, canonical_path)

    def installed(self, consuming_package_path: str, dependency_name: str, version: str) -> None:
        self.registry.register_installed(consuming_package_path, dependency_name, version)

    def search_path(self, prefix: str) -> None:
        self.registry.add_search_path(prefix)

    def loader_metadata(self, data: Any) -> None:
        """Store build metadata; modules read it as ``module.loader_metadata``."""

        self.metadata = data

    # -- import ---------------------------------------------------------

    def require(self, specifier: str, from_path: str = ROOT_PATH) -> Any:
        return self.instantiator.require(specifier, from_path)

    def require_module(self, specifier: str, from_path: str = ROOT_PATH) -> Module:
        return self.instantiator.require_module(specifier, from_path)

    def resolve(self, specifier: str, from_path: str = ROOT_PATH) -> str:
        """Return the canonical path *specifier* resolves to, without loading it."""

        if not specifier:
            raise ModuleNotFound("")
        resolution = self.resolver.resolve(specifier, from_path)
        if resolution is None:
            raise ModuleNotFound(specifier, from_path)
        return resolution.path

    def join(self, base: str, target: str) -> str:
        return join_paths(base, target)

    # -- scheduling -----------------------------------------------------

    def run(self, path: str, options: Optional[dict[str, Any]] = None) -> bool:
        return self.scheduler.request_run(path, options)

    def ready(self) -> None:
        self.scheduler.mark_ready()

    def pending(self) -> PendingJob:
        return self.scheduler.begin_pending_job()

    @property
    def is_ready(self) -> bool:
        return self.scheduler.ready

    @property
    def globals(self) -> dict[str, Any]:
        return self.bindings.namespace

    @property
    def cache(self) -> dict[str, Module]:
        return self.instantiator.instance_cache


_DEFAULT_RUNTIME: Optional[ModuleRuntime] = None


def default_runtime() -> ModuleRuntime:
    """Return the process-wide runtime, creating it on first use."""

    global _DEFAULT_RUNTIME
    if _DEFAULT_RUNTIME is None:
        _DEFAULT_RUNTIME = ModuleRuntime()
        logger.debug("Created default module runtime")
    return _DEFAULT_RUNTIME


__all__ = ["ModuleRuntime", "default_runtime"]
