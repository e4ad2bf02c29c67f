"""Command-line interface for inspecting a registration manifest."""
from __future__ import annotations

import argparse
import json
import sys

from ..constants import ROOT_PATH
from ..manifest import apply_manifest, load_manifest
from .analysis import (
    dependency_order,
    explain_import,
    export_graphviz,
    find_import_cycles,
    visualize_graph,
)
from .context import ModuleRuntime
from .core import ModuleNotFound


def parse_args(args):
    argp = argparse.ArgumentParser(
        description="Resolve and load modules described by a registration manifest"
    )
    argp.add_argument("manifest", help="JSON registration manifest")
    argp.add_argument(
        "--resolve",
        metavar="SPEC",
        action="append",
        default=[],
        help="Print the canonical path a specifier resolves to (repeatable)",
    )
    argp.add_argument(
        "--from",
        dest="from_path",
        default=ROOT_PATH,
        metavar="PATH",
        help="Canonical path of the importing module (default: /)",
    )
    argp.add_argument(
        "--load",
        metavar="SPEC",
        action="append",
        default=[],
        help="Instantiate a module and print its exports (repeatable)",
    )
    argp.add_argument(
        "--ready",
        action="store_true",
        help="Mark the runtime ready so queued run entries execute",
    )
    argp.add_argument(
        "--graph", action="store_true", help="Print modules in dependency order"
    )
    argp.add_argument(
        "--cycles", action="store_true", help="Report circular import chains"
    )
    argp.add_argument(
        "--why",
        metavar="PATH",
        help="Explain how a canonical path was reached",
    )
    argp.add_argument(
        "--viz",
        metavar="OUT",
        help="Export the import graph (SVG, or DOT for a .dot suffix)",
    )
    argp.add_argument(
        "--visualize", action="store_true", help="Show the import graph with matplotlib"
    )
    return argp.parse_args(args)


def _print_exports(exports):
    try:
        print("   ", json.dumps(exports, indent=2, sort_keys=True, default=repr))
    except (TypeError, ValueError):
        print("   ", repr(exports))


def main(args):
    params = parse_args(args)

    runtime = ModuleRuntime()
    manifest = load_manifest(params.manifest)
    apply_manifest(runtime, manifest)
    print(
        f"Manifest: {len(manifest.definitions)} definition(s), "
        f"{len(manifest.run)} run request(s)"
    )

    status = 0
    for spec in params.resolve:
        try:
            path = runtime.resolve(spec, params.from_path)
        except ModuleNotFound as exc:
            print(f"  ✗ {exc}")
            status = 1
        else:
            print(f"  {spec} → {path}")

    if params.ready:
        runtime.ready()
        print(f"  ✓ Ready; {len(runtime.scheduler.run_queue)} run(s) still queued")

    for spec in params.load:
        try:
            exports = runtime.require(spec, params.from_path)
        except ModuleNotFound as exc:
            print(f"  ✗ {exc}")
            status = 1
        else:
            print(f"  ✓ Loaded {spec}")
            _print_exports(exports)

    if params.graph:
        print("\nDependency order:")
        for path in dependency_order(runtime):
            print("   ", path)

    if params.cycles:
        cycles = find_import_cycles(runtime)
        print("\nCircular imports:")
        if not cycles:
            print("  ✓ None")
        for cycle in cycles:
            print("   ", " → ".join(cycle + cycle[:1]))

    if params.why:
        info = explain_import(runtime, params.why)
        print(f"\nImport chain for '{params.why}':")
        if not info["found"]:
            print("  ✗ Module was not loaded.")
        else:
            print("   ", " → ".join(info["chain"]) or "(not reachable from a top-level import)")
            if info["importers"]:
                print("    imported by:", ", ".join(info["importers"]))

    if params.viz:
        export_graphviz(runtime, params.viz)
    if params.visualize:
        visualize_graph(runtime)

    return status


__all__ = [
    "main",
    "parse_args",
]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
