"""
Command line entry point.

Translates every catalog set below BASE_DIR:

    <BASE_DIR>/translations_<set>/**/*.pot  ->  <BASE_DIR>/<TARGET_LANG>/<set>/**/*.pot

Command line flags override the environment / .env configuration.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from potstranslate import language_codes as lc
from potstranslate.config import Settings, load_config, parse_catalog_sets
from potstranslate.core import ErrorLog, JsonFileStore, ReviewSink, ReviewSinks, TranslationCache
from potstranslate.engine import TranslateService, TranslationError, validate_languages
from potstranslate.logger import _clear_log_mode_cache, get_logger
from potstranslate.protection import Dictionaries
from potstranslate.translation import CatalogRewriter, RunStats, TranslationPipeline

logger = get_logger(__name__)


@dataclass
class Components:
    """Everything one run needs, wired together."""
    settings: Settings
    pipeline: TranslationPipeline
    rewriter: CatalogRewriter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pots-translate",
        description="Machine-translate the blank msgstr entries of .pot catalogs.",
    )
    parser.add_argument("--base-dir", type=Path, help="Directory holding translations_<set> folders")
    parser.add_argument("--source", help="Source language code (default from SOURCE_LANG)")
    parser.add_argument("--target", help="Target language code (default from TARGET_LANG)")
    parser.add_argument("--proxy", help="Proxy URL for the translate requests")
    parser.add_argument("--delay", type=int, help="Delay between strings in milliseconds")
    parser.add_argument("--sets", help="Comma separated catalog sets, e.g. pre,re")
    parser.add_argument("--env-file", help="Path of a .env file to load")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    settings = load_config(dotenv_path=args.env_file)
    if args.env_file:
        # Loggers were configured at import, before this file was read
        _clear_log_mode_cache()

    delay_ms = args.delay
    if delay_ms is not None and delay_ms < 0:
        logger.warning(f"Ignoring negative --delay {delay_ms}")
        delay_ms = None

    catalog_sets = parse_catalog_sets(args.sets) if args.sets else ()

    return settings.with_overrides(
        base_dir=args.base_dir,
        source_language=args.source,
        target_language=args.target,
        proxy_url=args.proxy,
        delay_ms=delay_ms,
        catalog_sets=catalog_sets or None,
    )


def build_components(settings: Settings, translator=None) -> Components:
    """Load dictionaries and cache, open the sinks and wire the pipeline."""
    dictionaries = Dictionaries.load(
        JsonFileStore(settings.words_dictionary_file),
        JsonFileStore(settings.phrases_dictionary_file),
    )

    cache = TranslationCache(JsonFileStore(settings.cache_file))
    cache.load()

    review = ReviewSinks(
        unchanged=ReviewSink(JsonFileStore(settings.review_unchanged_file), name="unchanged"),
        needs_review=ReviewSink(JsonFileStore(settings.review_needed_file), name="needs_review"),
    )

    pipeline = TranslationPipeline.from_settings(
        settings,
        translator=translator if translator is not None else TranslateService(settings),
        dictionaries=dictionaries,
        cache=cache,
        review=review,
        error_log=ErrorLog(settings.error_log_file),
    )
    rewriter = CatalogRewriter(
        pipeline,
        delay_seconds=settings.delay_seconds,
        extension=settings.catalog_extension,
    )
    return Components(settings=settings, pipeline=pipeline, rewriter=rewriter)


def run(settings: Settings, translator=None) -> RunStats:
    """Translate every configured catalog set. Errors are logged, never raised."""
    for warning in settings.warnings:
        logger.warning(warning)

    logger.info(
        f"Starting translation of {settings.catalog_extension} catalogs: "
        f"{lc.describe_language(settings.source_language)} -> {lc.describe_language(settings.target_language)}"
    )

    components = build_components(settings, translator=translator)
    stats = RunStats()

    for catalog_set in settings.catalog_sets:
        input_dir = settings.input_dir(catalog_set)
        if not input_dir.is_dir():
            logger.warning(f"Catalog set '{catalog_set}' has no directory at {input_dir}, skipping")
            continue
        stats.merge(components.rewriter.process_directory(input_dir, settings.output_dir(catalog_set)))

    failures = len(components.pipeline.error_log)
    logger.info(f"Translation finished: {stats.summary()}")
    if failures:
        logger.warning(f"{failures} string(s) fell back to the original text, see {settings.error_log_file}")
    return stats


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)

    try:
        validate_languages(settings.source_language, settings.target_language)
    except TranslationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    run(settings)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
