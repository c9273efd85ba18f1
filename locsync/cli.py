"""LocSync – command line interface.

Usage:
    locsync                       # merge every language into ./locales
    locsync -d config/locales     # other destination directory
    locsync --only-new            # import languages without a local file only
    locsync --cache               # reuse/persist fetched upstream data
"""

from __future__ import annotations

import argparse
import sys

import structlog

from config.settings import Settings, get_settings
from locsync.core.errors import SyncError
from locsync.core.instrumentation import setup_logging
from locsync.core.orchestrator import MergeOrchestrator, SyncMode
from locsync.core.rules import load_rules
from locsync.integrations.crowd import UpstreamSource, get_client
from locsync.storage.cache import UpstreamCache
from locsync.storage.locale_files import LocaleStore

logger = structlog.get_logger()


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locsync",
        description="Synchronize crowd-sourced translations into local locale files.",
    )
    parser.add_argument(
        "-d", "--dest",
        default=settings.locales_dir,
        help=f"Destination directory with one file per language (default: {settings.locales_dir}).",
    )
    parser.add_argument(
        "--only-new",
        action="store_true",
        help="Only import languages that have no local file yet; skip all others.",
    )
    parser.add_argument(
        "--cache",
        action="store_true",
        help=f"Reuse fetched upstream data from {settings.cache_path}, or write it there.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Log level (default: {settings.log_level}).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(args.log_level, settings.log_format)

    store = LocaleStore(args.dest, settings.locale_file_extension)
    if not store.exists():
        print(f"Destination directory not found: {args.dest}\n", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 2

    mode = SyncMode.ONLY_NEW if args.only_new else SyncMode.FULL
    try:
        orchestrator = MergeOrchestrator(
            source=UpstreamSource(get_client(settings)),
            store=store,
            rules=load_rules(settings.rules_file),
            reference_language=settings.reference_language,
            cache=UpstreamCache(settings.cache_path) if args.cache else None,
        )
        report = orchestrator.run(mode)
    except SyncError as e:
        logger.error("sync.failed", error=str(e), error_type=type(e).__name__)
        return 1

    logger.info(
        "sync.done",
        mode=mode.value,
        imported=report.imported,
        merged=report.merged,
        skipped=report.skipped,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
