"""LocSync – Merge Orchestrator.

Drives one synchronization run:

1. Collect the flattened upstream data of every language (cache or fetch).
2. For each language, sorted by code, decide between import, merge and skip.
3. Write one file per processed language.

Languages are handled one at a time. A failure aborts the run; files
written before the failure stay on disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import structlog

from locsync.core.errors import LocaleFileError, ReferenceMissingError, UpstreamFormatError
from locsync.core.flatmap import FlatMap, Tree, expand, flatten
from locsync.core.locales import Language, destination_code, normalize_code, strip_root, wrap_root
from locsync.core.rules import MergeRules, merge_flatmaps
from locsync.storage.cache import UpstreamCache, UpstreamSnapshot
from locsync.storage.locale_files import LocaleStore

logger = structlog.get_logger()


class SyncMode(str, Enum):
    FULL = "full"          # import new languages, merge existing ones
    ONLY_NEW = "only_new"  # import new languages, leave existing files alone


class Action(str, Enum):
    IMPORT = "import"
    MERGE = "merge"
    SKIP = "skip"


class SourceProvider(Protocol):
    def list_languages(self) -> list[Language]: ...

    def fetch_tree(self, code: str) -> Any: ...


@dataclass
class SyncReport:
    imported: list[str] = field(default_factory=list)
    merged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def record(self, action: Action, code: str) -> None:
        {
            Action.IMPORT: self.imported,
            Action.MERGE: self.merged,
            Action.SKIP: self.skipped,
        }[action].append(code)


def choose_action(has_existing: bool, mode: SyncMode) -> Action:
    if not has_existing:
        return Action.IMPORT
    if mode is SyncMode.FULL:
        return Action.MERGE
    return Action.SKIP


def upstream_flatmap(tree: Any, code: str) -> FlatMap:
    """Strip the single language root of a fetched tree and flatten the rest."""
    split = strip_root(tree)
    if split is None:
        roots = len(tree) if isinstance(tree, dict) else 0
        raise UpstreamFormatError(
            f"Upstream data for '{code}' must have exactly one root key, found {roots}"
        )
    return flatten(split[1])


class MergeOrchestrator:
    """Synchronizes upstream translations into a locale directory."""

    def __init__(
        self,
        source: SourceProvider,
        store: LocaleStore,
        rules: MergeRules | None = None,
        reference_language: str = "en",
        cache: UpstreamCache | None = None,
    ) -> None:
        self._source = source
        self._store = store
        self._rules = rules or MergeRules()
        self._reference_language = normalize_code(reference_language)
        self._cache = cache
        self._reference: FlatMap | None = None

    # ── Inputs ─────────────────────────────────────────────────────────────────

    def collect_upstream(self) -> dict[str, UpstreamSnapshot]:
        """Return flattened upstream data for every non-reference language."""
        if self._cache is not None:
            cached = self._cache.load()
            if cached is not None:
                return {
                    code: snap for code, snap in cached.items()
                    if code != self._reference_language
                }

        snapshots: dict[str, UpstreamSnapshot] = {}
        for language in sorted(self._source.list_languages(), key=lambda l: l.code):
            if language.code == self._reference_language:
                continue
            tree = self._source.fetch_tree(language.code)
            snapshots[language.code] = UpstreamSnapshot(
                code=language.code,
                name=language.name,
                entries=upstream_flatmap(tree, language.code),
            )
            logger.info(
                "orchestrator.upstream.fetched",
                language=language.code,
                keys=len(snapshots[language.code].entries),
            )

        if self._cache is not None:
            self._cache.save(snapshots)
        return snapshots

    def _load_flat(self, path) -> FlatMap:
        split = strip_root(self._store.load(path))
        if split is None:
            raise LocaleFileError(
                f"Locale file {path} must have exactly one language root key"
            )
        return flatten(split[1])

    def reference(self) -> FlatMap:
        """Flattened reference language file, loaded once per run."""
        if self._reference is None:
            path = self._store.find(destination_code(self._reference_language))
            if path is None:
                raise ReferenceMissingError(
                    f"Reference language file for '{self._reference_language}' "
                    f"not found in {self._store.directory}"
                )
            self._reference = self._load_flat(path)
        return self._reference

    # ── Per-language ───────────────────────────────────────────────────────────

    def build_tree(self, code: str, upstream: FlatMap, mode: SyncMode) -> tuple[Action, Tree | None]:
        """Compute the output tree for one language, or None when skipped."""
        dest = destination_code(code)
        existing_path = self._store.find(dest)
        action = choose_action(existing_path is not None, mode)

        if action is Action.SKIP:
            return action, None
        if action is Action.IMPORT:
            return action, wrap_root(dest, expand(upstream))

        existing = self._load_flat(existing_path)
        merged = merge_flatmaps(upstream, existing, self.reference(), self._rules)
        logger.info(
            "orchestrator.language.merge_stats",
            upstream=len(upstream),
            existing=len(existing),
            merged=len(merged),
        )
        return action, wrap_root(dest, expand(merged))

    def run(self, mode: SyncMode = SyncMode.FULL) -> SyncReport:
        report = SyncReport()
        snapshots = self.collect_upstream()
        for code in sorted(snapshots):
            with structlog.contextvars.bound_contextvars(language=code):
                action, tree = self.build_tree(code, snapshots[code].entries, mode)
                if tree is not None:
                    self._store.write(destination_code(code), tree)
                logger.info(f"orchestrator.language.{action.value}")
                report.record(action, code)
        logger.info(
            "orchestrator.run.complete",
            imported=len(report.imported),
            merged=len(report.merged),
            skipped=len(report.skipped),
        )
        return report
