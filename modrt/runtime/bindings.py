"""Modules bound to externally visible global names."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from ..constants import ROOT_PATH
from .core import Module

if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .instantiator import Instantiator

logger = logging.getLogger(__name__)


class GlobalBindings:
    """Tracks global-bound modules so every import converges on one instance."""

    def __init__(self, namespace: Optional[dict[str, Any]] = None):
        self.namespace: dict[str, Any] = {} if namespace is None else namespace
        self.bound: dict[str, Module] = {}
        self.instantiator: "Instantiator | None" = None

    def bind(self, path: str, names: Iterable[str]) -> Optional[Module]:
        if self.instantiator is None:
            raise RuntimeError("Global bindings are not attached to an instantiator")

        module = None
        for name in names:
            module = self.instantiator.require_module(path, ROOT_PATH)
            self.bound[module.id] = module
            self.namespace[name] = module.exports
            logger.debug("Bound %s to global %r", module.id, name)
        return module

    def lookup(self, path: str) -> Optional[Module]:
        return self.bound.get(path)

    def __contains__(self, path: str) -> bool:
        return path in self.bound


__all__ = ["GlobalBindings"]
