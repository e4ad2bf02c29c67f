"""Core runtime data structures for modrt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from ..constants import MODULE_NOT_FOUND

if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .context import ModuleRuntime


@dataclass(frozen=True)
class Factory:
    """A module body: ``fn(require, exports, module, filename, dirname)``."""

    fn: Callable[..., Any]


@dataclass(frozen=True)
class Value:
    """A pre-computed module whose exports are ``exports`` itself."""

    exports: Any


Definition = Union[Factory, Value]


def as_definition(factory_or_value: Any) -> Definition:
    """Wrap a raw registration value in its tagged definition."""

    if isinstance(factory_or_value, (Factory, Value)):
        return factory_or_value
    if callable(factory_or_value):
        return Factory(factory_or_value)
    return Value(factory_or_value)


@dataclass(frozen=True)
class Resolution:
    """Successful resolver output."""

    path: str
    definition: Definition


class ModuleNotFound(ImportError):
    """Raised when a specifier cannot be resolved to a registered definition."""

    code = MODULE_NOT_FOUND

    def __init__(self, specifier: str, importer: Optional[str] = None):
        message = f'Cannot find module "{specifier}"'
        if importer:
            message += f' from "{importer}"'
        super().__init__(message, name=specifier or None, path=importer)
        self.specifier = specifier
        self.importer = importer


class Module:
    """A module instance, created at most once per canonical path.

    ``exports`` stays ``None`` until the body starts running and
    ``loaded`` flips only after the factory returns.
    """

    def __init__(self, filename: str, runtime: "ModuleRuntime | None" = None):
        self.id = self.filename = filename
        self.loaded = False
        self.exports: Any = None
        self.runtime = runtime

    @property
    def loader_metadata(self) -> Any:
        if self.runtime is None:
            return None
        return self.runtime.metadata

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        state = "loaded" if self.loaded else "loading"
        return f"<Module {self.id} [{state}]>"


__all__ = [
    "Definition",
    "Factory",
    "Module",
    "ModuleNotFound",
    "Resolution",
    "Value",
    "as_definition",
]
