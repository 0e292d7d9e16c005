"""Lenient lookups into decoded webhook JSON."""

from __future__ import annotations

from typing import Any

_MISSING = object()


def dig(tree: Any, *path: str | int, default: Any = None) -> Any:
    """Follow ``path`` through nested dicts and lists.

    String steps index mappings, integer steps index lists. Any missing key,
    out-of-range index or unexpected node type returns ``default``. A present
    ``None`` leaf is treated as missing.
    """
    node = tree
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return default
            node = node[step]
        else:
            if not isinstance(node, dict):
                return default
            node = node.get(step, _MISSING)
            if node is _MISSING:
                return default
    return default if node is None else node


def dig_str(tree: Any, *path: str | int, default: str = "") -> str:
    """Like :func:`dig` but always returns text; scalars are stringified."""
    value = dig(tree, *path, default=_MISSING)
    if value is _MISSING or isinstance(value, (dict, list)):
        return default
    return value if isinstance(value, str) else str(value)


def dig_dict(tree: Any, *path: str | int) -> dict[str, Any]:
    value = dig(tree, *path)
    return value if isinstance(value, dict) else {}
