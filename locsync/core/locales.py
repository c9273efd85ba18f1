"""LocSync – Language records and locale file naming."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from locsync.core.flatmap import Tree


@dataclass(frozen=True)
class Language:
    """A language offered by the upstream platform."""
    code: str  # lowercase, e.g. "pt-br"
    name: str = ""


def normalize_code(code: str) -> str:
    return code.strip().lower()


def destination_code(code: str) -> str:
    """Map an upstream code to the local file naming: ``pt-br`` -> ``pt-BR``."""
    base, sep, region = code.partition("-")
    if not sep:
        return code
    return f"{base}{sep}{region.upper()}"


def strip_root(tree: Any) -> tuple[str, Tree] | None:
    """Split a single-rooted tree into ``(root_key, body)``.

    Returns None when ``tree`` is not a mapping with exactly one key whose
    value is itself a mapping.
    """
    if not isinstance(tree, dict) or len(tree) != 1:
        return None
    root, body = next(iter(tree.items()))
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return None
    return str(root), body


def wrap_root(code: str, body: Tree) -> Tree:
    return {code: body}
