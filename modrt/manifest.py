"""Registration manifests: batches of registration calls described as data."""

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path

from .runtime.core import Value

logger = logging.getLogger(__name__)


@dataclass
class DefinitionEntry:
    """A module definition described by data rather than code."""

    path: str
    value: object = None
    requires: list | None = None
    globals: list | None = None
    has_value: bool = field(default=False, repr=False)

    def __post_init__(self):
        self.path = (self.path or "").strip()
        if not self.path.startswith("/"):
            raise ValueError(f"Definition path must be absolute: {self.path!r}")
        if self.requires is not None and self.has_value:
            raise ValueError(
                f"Definition {self.path} cannot declare both a value and requires"
            )
        self.requires = [r for r in (self.requires or []) if r]
        self.globals = [g.strip() for g in (self.globals or []) if g.strip()]

    def factory(self):
        """Return what gets registered: the value, or a factory importing ``requires``."""

        if self.has_value or not self.requires:
            return Value(self.value)

        requires = list(self.requires)

        def load_requires(require, exports, module, filename, dirname):
            for specifier in requires:
                exports[specifier] = require(specifier)

        return load_requires

    def to_dict(self):
        data = {"path": self.path}
        if self.has_value:
            data["value"] = self.value
        if self.requires:
            data["requires"] = list(self.requires)
        if self.globals:
            data["globals"] = list(self.globals)
        return data

    @classmethod
    def from_dict(cls, path, data):
        if not isinstance(data, dict):
            return cls(path, value=data, has_value=True)
        return cls(
            path,
            value=data.get("value"),
            requires=data.get("requires") or data.get("deps"),
            globals=data.get("globals"),
            has_value="value" in data,
        )


@dataclass
class Manifest:
    """Normalized registration metadata."""

    definitions: list = field(default_factory=list)
    mains: dict = field(default_factory=dict)
    remaps: dict = field(default_factory=dict)
    builtins: dict = field(default_factory=dict)
    installed: list = field(default_factory=list)
    search_paths: list = field(default_factory=list)
    run: list = field(default_factory=list)
    loader_metadata: object = None

    def merge(self, other):
        self.definitions.extend(other.definitions)
        self.mains.update(other.mains)
        self.remaps.update(other.remaps)
        self.builtins.update(other.builtins)
        self.installed.extend(other.installed)
        self.search_paths.extend(other.search_paths)
        self.run.extend(other.run)
        if other.loader_metadata is not None:
            self.loader_metadata = other.loader_metadata
        return self


def _normalize_installed(spec):
    if isinstance(spec, dict):
        # {"foo$1.0.0": {"bar": "3.0.0"}}
        entries = []
        for package, deps in spec.items():
            if not isinstance(deps, dict):
                raise TypeError(f"Installed dependencies of {package} must be a mapping")
            entries.extend((package, name, version) for name, version in deps.items())
        return entries
    if isinstance(spec, (list, tuple)):
        entries = []
        for item in spec:
            if isinstance(item, dict):
                entries.append((item["package"], item["name"], item["version"]))
            elif isinstance(item, (list, tuple)) and len(item) == 3:
                entries.append(tuple(item))
            else:
                raise ValueError(f"Invalid installed dependency entry: {item!r}")
        return entries
    raise TypeError(f"Unsupported installed spec type: {type(spec)!r}")


def _normalize_definitions(spec):
    if isinstance(spec, dict):
        return [DefinitionEntry.from_dict(path, data) for path, data in spec.items()]
    if isinstance(spec, (list, tuple)):
        entries = []
        for item in spec:
            if isinstance(item, str):
                entries.append(DefinitionEntry(item, value={}, has_value=True))
            elif isinstance(item, dict) and "path" in item:
                body = {k: v for k, v in item.items() if k != "path"}
                entries.append(DefinitionEntry.from_dict(item["path"], body))
            else:
                raise ValueError(f"Invalid definition entry: {item!r}")
        return entries
    raise TypeError(f"Unsupported definitions spec type: {type(spec)!r}")


def _normalize_run(spec):
    if isinstance(spec, str):
        return [(spec, None)]
    entries = []
    for item in spec or []:
        if isinstance(item, str):
            entries.append((item, None))
        elif isinstance(item, dict) and "path" in item:
            options = {k: v for k, v in item.items() if k != "path"}
            entries.append((item["path"], options or None))
        else:
            raise ValueError(f"Invalid run entry: {item!r}")
    return entries


def parse_manifest(spec):
    """Normalize any supported manifest spec into a :class:`Manifest`."""

    if spec is None:
        return Manifest()
    if isinstance(spec, Manifest):
        return spec
    if isinstance(spec, str):
        trimmed = spec.strip()
        if not trimmed:
            return Manifest()
        return parse_manifest(json.loads(trimmed))
    if isinstance(spec, (list, tuple)):
        manifest = Manifest()
        for item in spec:
            manifest.merge(parse_manifest(item))
        return manifest
    if not isinstance(spec, dict):
        raise TypeError(f"Unsupported manifest spec type: {type(spec)!r}")

    return Manifest(
        definitions=_normalize_definitions(spec.get("definitions") or {}),
        mains=dict(spec.get("main") or spec.get("mains") or {}),
        remaps=dict(spec.get("remap") or spec.get("remaps") or {}),
        builtins=dict(spec.get("builtin") or spec.get("builtins") or {}),
        installed=_normalize_installed(spec.get("installed") or []),
        search_paths=list(spec.get("search_paths") or spec.get("searchPath") or []),
        run=_normalize_run(spec.get("run")),
        loader_metadata=spec.get("loader_metadata"),
    )


def apply_manifest(runtime, spec, *, run=True):
    """Replay a manifest against *runtime* as registration calls.

    Metadata is registered before definitions so that definitions bound to
    globals can already resolve their dependencies.
    """

    manifest = parse_manifest(spec)

    for prefix in manifest.search_paths:
        runtime.search_path(prefix)
    for name, path in manifest.builtins.items():
        runtime.builtin(name, path)
    for package, name, version in manifest.installed:
        runtime.installed(package, name, version)
    for directory, relative in manifest.mains.items():
        runtime.main(directory, relative)
    for source, target in manifest.remaps.items():
        runtime.remap(source, target)
    if manifest.loader_metadata is not None:
        runtime.loader_metadata(manifest.loader_metadata)

    deferred_globals = []
    for entry in manifest.definitions:
        runtime.define(entry.path, entry.factory())
        if entry.globals:
            deferred_globals.append(entry)
    for entry in deferred_globals:
        runtime.define(entry.path, entry.factory(), globals=entry.globals)

    if run:
        for path, options in manifest.run:
            runtime.run(path, options)

    logger.debug(
        "Applied manifest: %d definition(s), %d run request(s)",
        len(manifest.definitions),
        len(manifest.run),
    )
    return manifest


def load_manifest(path):
    """Read a JSON manifest from disk."""

    with open(Path(path), "r", encoding="utf-8") as f:
        return parse_manifest(json.load(f))


__all__ = [
    "DefinitionEntry",
    "Manifest",
    "apply_manifest",
    "load_manifest",
    "parse_manifest",
]
