"""Import-graph analysis for a module runtime."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import networkx as nx

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import GRAPH_COLORS, GRAPH_ROOT_LABEL, VERSION_MARKER
from .paths import split_package_id

if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .context import ModuleRuntime


def _node_state(runtime, path):
    if path == GRAPH_ROOT_LABEL:
        return "root"
    if path in runtime.bindings:
        return "global"
    module = runtime.cache.get(path)
    if module is not None and module.loaded:
        return "loaded"
    return "loading"


def build_import_graph(runtime: "ModuleRuntime") -> nx.DiGraph:
    """Return a DiGraph with an edge from every importer to what it imported.

    Top-level imports (``run``, ``require`` from the root) hang off a
    synthetic ``<root>`` node.
    """

    graph = nx.DiGraph()
    for path in runtime.cache:
        graph.add_node(path)
    for (importer, target), count in runtime.instantiator.import_edges.items():
        source = importer or GRAPH_ROOT_LABEL
        graph.add_edge(source, target, count=count)
    for node in graph.nodes:
        state = _node_state(runtime, node)
        graph.nodes[node]["state"] = state
        graph.nodes[node]["color"] = GRAPH_COLORS[state]
    return graph


def find_import_cycles(runtime):
    """List every circular import chain, each rotated to start at its smallest path."""

    graph = build_import_graph(runtime)
    cycles = []
    for cycle in nx.simple_cycles(graph):
        start = cycle.index(min(cycle))
        cycles.append(cycle[start:] + cycle[:start])
    return sorted(cycles)


def dependency_order(runtime):
    """Return loaded modules with dependencies before their importers.

    Modules that take part in a cycle are ordered by condensing each
    strongly connected component.
    """

    graph = build_import_graph(runtime)
    if GRAPH_ROOT_LABEL in graph:
        graph.remove_node(GRAPH_ROOT_LABEL)
    condensed = nx.condensation(graph)
    order = []
    for component in reversed(list(nx.topological_sort(condensed))):
        order.extend(sorted(condensed.nodes[component]["members"]))
    return order


def explain_import(runtime, path):
    """Explain how *path* was reached from a top-level import."""

    graph = build_import_graph(runtime)
    if path not in graph:
        return {"found": False, "chain": [], "importers": []}
    importers = sorted(p for p in graph.predecessors(path) if p != GRAPH_ROOT_LABEL)
    chain = []
    if GRAPH_ROOT_LABEL in graph and nx.has_path(graph, GRAPH_ROOT_LABEL, path):
        chain = nx.shortest_path(graph, GRAPH_ROOT_LABEL, path)[1:]
    return {"found": True, "chain": chain, "importers": importers}


def visualize_graph(runtime):  # pragma: no cover
    """Render the import graph with matplotlib."""

    if plt is None:
        raise RuntimeError("Visualization requires matplotlib to be installed")

    graph = build_import_graph(runtime)
    positions = nx.spring_layout(graph, seed=42)
    plt.figure()
    nx.draw(
        graph,
        positions,
        with_labels=True,
        node_color=[graph.nodes[n]["color"] for n in graph.nodes],
        edgecolors="black",
        font_size=8,
    )
    plt.title("Module import graph")
    plt.tight_layout()
    plt.show()


def build_graphviz(runtime):
    """Build a pydot graph of the imports, clustered by package id."""

    if pydot is None:
        raise RuntimeError("Graphviz export requires pydot to be installed")

    graph = build_import_graph(runtime)
    dot = pydot.Dot(
        "modrt_imports",
        graph_type="digraph",
        rankdir="LR",
        fontname="Helvetica",
    )

    clusters = {}
    for index, node in enumerate(sorted(graph.nodes)):
        dot_node = pydot.Node(
            f"n{index}",
            label=f'"{node}"',
            shape="box",
            style="filled",
            fillcolor=graph.nodes[node]["color"],
            fontname="Helvetica",
        )
        graph.nodes[node]["dot_id"] = f"n{index}"
        package_id = "" if node == GRAPH_ROOT_LABEL else split_package_id(node)[0]
        if VERSION_MARKER not in package_id:
            dot.add_node(dot_node)
            continue
        if package_id not in clusters:
            clusters[package_id] = pydot.Cluster(
                f"pkg{len(clusters)}",
                label=f'"{package_id}"',
                color="#7f8c8d",
                style="rounded",
            )
            dot.add_subgraph(clusters[package_id])
        clusters[package_id].add_node(dot_node)

    for source, target, data in graph.edges(data=True):
        dot.add_edge(
            pydot.Edge(
                graph.nodes[source]["dot_id"],
                graph.nodes[target]["dot_id"],
                label=str(data["count"]) if data["count"] > 1 else "",
            )
        )
    return dot


def export_graphviz(runtime, output_path):  # pragma: no cover
    """Write the import graph as SVG (or raw DOT for a ``.dot`` suffix)."""

    dot = build_graphviz(runtime)
    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix == ".dot":
        output_path.write_text(dot.to_string(), encoding="utf-8")
    else:
        dot.write_svg(str(output_path))
    print(f"  ✓ Import graph exported → {output_path}")


__all__ = [
    "build_graphviz",
    "build_import_graph",
    "dependency_order",
    "explain_import",
    "export_graphviz",
    "find_import_cycles",
    "visualize_graph",
]
