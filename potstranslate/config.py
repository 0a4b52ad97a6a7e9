"""
Runtime configuration.

Settings come from environment variables (optionally loaded from a `.env`
file) layered over DEFAULT_CONFIG. The resulting Settings object is
immutable and is handed to the components that need it.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv

# Public Google Translate endpoint used by the web widget
DEFAULT_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"

DEFAULT_CONFIG = {
    "SOURCE_LANG": "en",
    "TARGET_LANG": "pt",
    "PROXY_URL": "",
    "BASE_DIR": "./Hercules",
    "DELAY": "500",  # milliseconds between strings
    "CATALOG_SETS": "pre,re",
    "CATALOG_EXTENSION": ".pot",
    "DICTIONARY_WORDS_FILE": "dictionary_words.json",
    "DICTIONARY_PHRASES_FILE": "dictionary_phrases.json",
    "CACHE_FILE": "translation_cache.json",
    "REVIEW_UNCHANGED_FILE": "review_unchanged.json",
    "REVIEW_NEEDED_FILE": "review_needed.json",
    "ERROR_LOG_FILE": "translation_errors.log",
    "TRANSLATE_URL": DEFAULT_TRANSLATE_URL,
    "TRANSLATE_TIMEOUT": "120",
    "TRANSLATE_MAX_RETRIES": "1",
    "LOG_MODE": "info",
    "LOG_DIR": "./logs",
}

LOG_MODES = ("off", "info", "debug")


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one run."""
    source_language: str = "en"
    target_language: str = "pt"
    proxy_url: Optional[str] = None
    base_dir: Path = Path("./Hercules")
    delay_ms: int = 500
    catalog_sets: Tuple[str, ...] = ("pre", "re")
    catalog_extension: str = ".pot"
    words_dictionary_file: Path = Path("dictionary_words.json")
    phrases_dictionary_file: Path = Path("dictionary_phrases.json")
    cache_file: Path = Path("translation_cache.json")
    review_unchanged_file: Path = Path("review_unchanged.json")
    review_needed_file: Path = Path("review_needed.json")
    error_log_file: Path = Path("translation_errors.log")
    translate_url: str = DEFAULT_TRANSLATE_URL
    translate_timeout: float = 120.0
    translate_max_retries: int = 1
    log_mode: str = "info"
    log_dir: Path = Path("./logs")
    warnings: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0

    def input_dir(self, catalog_set: str) -> Path:
        """Directory holding the source catalogs of a set, e.g. translations_pre."""
        return self.base_dir / f"translations_{catalog_set}"

    def output_dir(self, catalog_set: str) -> Path:
        """Directory receiving the translated catalogs of a set, e.g. pt/pre."""
        return self.base_dir / self.target_language / catalog_set

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _read_int(raw: str, name: str, default: int, warnings: list) -> int:
    try:
        value = int(str(raw).strip())
        if value < 0:
            raise ValueError(value)
        return value
    except (TypeError, ValueError):
        warnings.append(f"Invalid {name}={raw!r}, using {default}")
        return default


def _read_float(raw: str, name: str, default: float, warnings: list) -> float:
    try:
        value = float(str(raw).strip())
        if value <= 0:
            raise ValueError(value)
        return value
    except (TypeError, ValueError):
        warnings.append(f"Invalid {name}={raw!r}, using {default}")
        return default


def parse_catalog_sets(raw: str) -> Tuple[str, ...]:
    """Split a comma separated list of catalog set names."""
    return tuple(part.strip() for part in str(raw).split(",") if part.strip())


def load_config(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env: Mapping to read instead of os.environ (the .env file is not
            loaded when a mapping is given)
        dotenv_path: Optional explicit path of the .env file

    Returns:
        Settings with defaults filled in for absent or invalid values
    """
    if env is None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
        env = os.environ

    values: Dict[str, str] = {key: env.get(key, default) for key, default in DEFAULT_CONFIG.items()}
    warnings: list = []

    log_mode = (values["LOG_MODE"] or "info").strip().lower()
    if log_mode not in LOG_MODES:
        warnings.append(f"Unknown LOG_MODE={values['LOG_MODE']!r}, using 'info'")
        log_mode = "info"

    catalog_sets = parse_catalog_sets(values["CATALOG_SETS"])
    if not catalog_sets:
        warnings.append("CATALOG_SETS is empty, using 'pre,re'")
        catalog_sets = ("pre", "re")

    extension = values["CATALOG_EXTENSION"].strip() or ".pot"
    if not extension.startswith("."):
        extension = f".{extension}"

    return Settings(
        source_language=values["SOURCE_LANG"].strip() or "en",
        target_language=values["TARGET_LANG"].strip() or "pt",
        proxy_url=values["PROXY_URL"].strip() or None,
        base_dir=Path(values["BASE_DIR"]),
        delay_ms=_read_int(values["DELAY"], "DELAY", 500, warnings),
        catalog_sets=catalog_sets,
        catalog_extension=extension,
        words_dictionary_file=Path(values["DICTIONARY_WORDS_FILE"]),
        phrases_dictionary_file=Path(values["DICTIONARY_PHRASES_FILE"]),
        cache_file=Path(values["CACHE_FILE"]),
        review_unchanged_file=Path(values["REVIEW_UNCHANGED_FILE"]),
        review_needed_file=Path(values["REVIEW_NEEDED_FILE"]),
        error_log_file=Path(values["ERROR_LOG_FILE"]),
        translate_url=values["TRANSLATE_URL"].strip() or DEFAULT_TRANSLATE_URL,
        translate_timeout=_read_float(values["TRANSLATE_TIMEOUT"], "TRANSLATE_TIMEOUT", 120.0, warnings),
        translate_max_retries=max(1, _read_int(values["TRANSLATE_MAX_RETRIES"], "TRANSLATE_MAX_RETRIES", 1, warnings)),
        log_mode=log_mode,
        log_dir=Path(values["LOG_DIR"]),
        warnings=tuple(warnings),
    )
