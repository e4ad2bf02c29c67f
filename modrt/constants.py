"""Shared constant values for the modrt runtime."""

ROOT_PATH = "/"

DEFAULT_MAIN = "index"

MODULE_NOT_FOUND = "MODULE_NOT_FOUND"

VERSION_MARKER = "$"
SCOPE_MARKER = "@"

GRAPH_COLORS = {
    "loaded": "#8BC34A",
    "loading": "#FFEB3B",
    "global": "#9575CD",
    "root": "#B0BEC5",
}

GRAPH_ROOT_LABEL = "<root>"

__all__ = [
    "ROOT_PATH",
    "DEFAULT_MAIN",
    "MODULE_NOT_FOUND",
    "VERSION_MARKER",
    "SCOPE_MARKER",
    "GRAPH_COLORS",
    "GRAPH_ROOT_LABEL",
]
