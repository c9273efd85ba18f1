"""LocSync – FlatMap Codec.

Converts between nested locale trees and flat mappings keyed by dotted
paths::

    {"site": {"title": "Hi", "menu": {"home": "Home"}}}
    <->
    {"site.title": "Hi", "site.menu.home": "Home"}

Leaves are strings or lists of strings. Nested mappings are walked, never
emitted as entries.
"""

from __future__ import annotations

from typing import Any

import structlog

logger = structlog.get_logger()

SEPARATOR = "."

Leaf = Any  # str | list[str]; YAML scalars of other types pass through
Tree = dict[str, Any]
FlatMap = dict[str, Leaf]


def decode_leaf(value: Leaf) -> Leaf:
    """Return ``value`` with raw byte strings decoded to text."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [decode_leaf(item) for item in value]
    return value


def flatten(tree: Tree, prefix: str = "") -> FlatMap:
    """Flatten ``tree`` into a dotted-key mapping with one entry per leaf."""
    result: FlatMap = {}
    for key, value in tree.items():
        path = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, dict):
            result.update(flatten(value, path))
        else:
            result[path] = decode_leaf(value)
    return result


def expand(flat: FlatMap) -> Tree:
    """Rebuild a nested tree from a dotted-key mapping.

    If a path segment already holds a leaf where a mapping is needed, the
    leaf is replaced by a fresh mapping and the old value is lost. Upstream
    exports contain keys that are both a scalar and a parent of sub-keys,
    so this is not an error; each overwrite is logged as a warning.
    """
    tree: Tree = {}
    for key, value in flat.items():
        segments = key.split(SEPARATOR)
        node = tree
        for depth, segment in enumerate(segments[:-1]):
            child = node.get(segment)
            if not isinstance(child, dict):
                if segment in node:
                    logger.warning(
                        "flatmap.expand.scalar_overwritten",
                        path=SEPARATOR.join(segments[: depth + 1]),
                        key=key,
                    )
                child = {}
                node[segment] = child
            node = child
        last = segments[-1]
        if isinstance(node.get(last), dict):
            logger.warning("flatmap.expand.mapping_overwritten", path=key)
        node[last] = value
    return tree
