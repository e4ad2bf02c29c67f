"""Slash-delimited path algebra used by the resolver."""

from __future__ import annotations

from typing import Iterable, Optional

from ..constants import SCOPE_MARKER


def normalize(parts: Iterable[str]) -> str:
    """Collapse ``.`` and ``..`` segments and join the result with ``/``.

    The first part is expected to be ``""`` so the result is absolute.
    ``..`` is not bounds-checked: climbing above the root drops the
    leading segment and produces an unanchored path (or ``""``).
    """

    parts = list(parts)
    length = 0

    for part in parts:
        if part == ".":
            continue
        if part == "..":
            length -= 1
            continue
        if length >= 0:
            parts[length] = part
        length += 1

    if length == 1:
        # only the leading empty segment survived, e.g. ["", "."]
        return "/"
    if length > 2 and not parts[length - 1]:
        # trailing slash
        length -= 1

    return "/".join(parts[: max(length, 0)])


def join(base: str, target: str) -> str:
    target_parts = target.split("/")
    base_parts = [""] if base == "/" else base.split("/")
    return normalize(base_parts + target_parts)


def without_extension(path: str) -> Optional[str]:
    """Return *path* minus its final ``.suffix``, or ``None`` if it has none."""

    last_dot = path.rfind(".")
    if last_dot == -1:
        return None
    last_slash = path.rfind("/")
    if last_slash > last_dot:
        return None
    return path[:last_dot]


def dirname(path: str) -> str:
    return path[: path.rfind("/")] if "/" in path else ""


def split_package_id(path: str) -> tuple[str, str]:
    """Split a canonical path into its package id and the remaining subpath.

    ``/my-package$1.0.0/foo/bar`` -> ``("my-package$1.0.0", "/foo/bar")``
    ``/@scope/name$1.0.0/sub``    -> ``("@scope/name$1.0.0", "/sub")``
    ``/my-package$1.0.0``         -> ``("my-package$1.0.0", "")``
    """

    path = path[1:]
    slash_pos = path.find("/")
    if path.startswith(SCOPE_MARKER) and slash_pos != -1:
        slash_pos = path.find("/", slash_pos + 1)

    end = len(path) if slash_pos == -1 else slash_pos
    return path[:end], path[end:]


def split_package_name(specifier: str) -> tuple[str, str]:
    """Split a bare specifier into package name and subpath.

    ``foo/lib/x`` -> ``("foo", "/lib/x")``; ``@scope/foo/x`` -> ``("@scope/foo", "/x")``.
    """

    slash_pos = specifier.find("/")
    if slash_pos == -1:
        return specifier, ""
    if specifier.startswith(SCOPE_MARKER):
        slash_pos = specifier.find("/", slash_pos + 1)
        if slash_pos == -1:
            return specifier, ""
    return specifier[:slash_pos], specifier[slash_pos:]


__all__ = [
    "dirname",
    "join",
    "normalize",
    "split_package_id",
    "split_package_name",
    "without_extension",
]
