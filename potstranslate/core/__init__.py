"""
Core module - Persistence for a translation run

This module provides:
- store: JSON-file and in-memory key-value stores
- cache: TranslationCache
- review: review sinks and the append-only error log
"""

from potstranslate.core.store import (
    StoreStatus,
    StoreLoadResult,
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
    open_store,
)

from potstranslate.core.cache import TranslationCache

from potstranslate.core.review import (
    ReviewRecord,
    ReviewSink,
    ReviewSinks,
    ErrorRecord,
    ErrorLog,
)
