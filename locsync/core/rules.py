"""LocSync – Merge Rules Engine.

Reconciles three flat maps into the flat map that gets written:

    upstream   freshly exported from the translation platform (merge seed)
    existing   the current local file for the language
    reference  the local file of the source language

The upstream export has known defects: it drops some URL-bearing keys,
collapses plural forms, explodes scalar table entries into arrays and
re-emits untranslated source strings. The rules below counteract them and
are applied in a fixed order:

    1. restore known-missing URL keys from ``existing``
    2. restore keys whose plural sub-forms exist in ``reference``
    3. keep scalar table entries where ``reference`` holds a list
    4. drop every key whose value equals ``reference``
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import structlog
import yaml

from locsync.core.errors import SyncError
from locsync.core.flatmap import SEPARATOR, FlatMap

logger = structlog.get_logger()

DEFAULT_KNOWN_MISSING_KEYS: tuple[str, ...] = (
    "site.links.about_url",
    "site.links.blog_url",
    "site.links.help_url",
    "site.links.privacy_url",
    "site.links.terms_url",
    "site.links.source_code_url",
    "site.footer.contact_url",
    "site.mailer.unsubscribe_url",
)

DEFAULT_PLURAL_SUFFIXES: tuple[str, ...] = ("zero", "one", "two", "few", "many", "other")

DEFAULT_TABLE_ENTRY_PREFIX = "site.key.table.entry"


@dataclass(frozen=True)
class MergeRules:
    """Hand-curated key lists the rules engine works from."""
    known_missing_keys: tuple[str, ...] = DEFAULT_KNOWN_MISSING_KEYS
    plural_suffixes: tuple[str, ...] = DEFAULT_PLURAL_SUFFIXES
    table_entry_prefix: str = DEFAULT_TABLE_ENTRY_PREFIX

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "MergeRules":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SyncError(f"Unknown merge rule settings: {', '.join(unknown)}")
        kwargs: dict[str, Any] = {}
        for name in ("known_missing_keys", "plural_suffixes"):
            if name in data:
                kwargs[name] = tuple(str(v) for v in data[name] or ())
        if "table_entry_prefix" in data:
            kwargs["table_entry_prefix"] = str(data["table_entry_prefix"])
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MergeRules":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("rules.config_load_failed", path=str(path), error=str(e))
            raise SyncError(f"Cannot read merge rules from {path}: {e}") from e
        if not isinstance(data, dict):
            raise SyncError(f"Merge rules file {path} must contain a mapping")
        return cls.from_mapping(data)


def load_rules(rules_file: str = "") -> MergeRules:
    """Return the rules from ``rules_file``, or the built-in defaults."""
    if not rules_file:
        return MergeRules()
    rules = MergeRules.from_yaml(rules_file)
    logger.info("rules.loaded", path=rules_file, known_missing=len(rules.known_missing_keys))
    return rules


def _is_index(segment: str) -> bool:
    return segment.isdigit()


def _in_table(key: str, prefix: str) -> bool:
    return key == prefix or key.startswith(prefix + SEPARATOR)


def merge_flatmaps(
    upstream: FlatMap,
    existing: FlatMap,
    reference: FlatMap,
    rules: MergeRules | None = None,
) -> FlatMap:
    """Merge ``upstream`` into the existing translation.

    ``existing`` and ``reference`` are only read. Returns a new mapping.
    """
    rules = rules or MergeRules()
    merged: FlatMap = dict(upstream)

    # 1. URL keys the export drops; skip untranslated placeholders.
    for key in rules.known_missing_keys:
        if key in existing and key not in merged and existing[key] != reference.get(key):
            merged[key] = existing[key]
            logger.debug("rules.restored_missing_key", key=key)

    # 2. Keys the export collapsed into plural forms only the reference has.
    for key, value in existing.items():
        if key in upstream or key in reference:
            continue
        if any(f"{key}{SEPARATOR}{suffix}" in reference for suffix in rules.plural_suffixes):
            merged[key] = value
            logger.debug("rules.restored_plural_key", key=key)

    # 3. Scalar table entries the export turned into arrays.
    for key, value in existing.items():
        if not _in_table(key, rules.table_entry_prefix):
            continue
        if _is_index(key.rsplit(SEPARATOR, 1)[-1]):
            continue
        if isinstance(reference.get(key), list) and not isinstance(value, list):
            merged[key] = value
            logger.debug("rules.kept_scalar_entry", key=key)

    # 4. Values identical to the reference are untranslated leftovers.
    for key in list(merged):
        if key in reference and reference[key] == merged[key]:
            del merged[key]

    return merged
