"""
Translation Cache

Memoizes final translations by exact source string. Entries are loaded once
at start and every new entry is persisted immediately (the whole store is
re-read, updated and rewritten), so an interrupted run loses nothing that
was already translated.
"""

from typing import Dict, Optional

from potstranslate.core.store import KeyValueStore, MemoryStore, StoreLoadResult
from potstranslate.logger import get_logger

logger = get_logger(__name__)


class TranslationCache:
    """Source string -> translated string, backed by a KeyValueStore."""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store if store is not None else MemoryStore(name="cache")
        self._entries: Dict[str, str] = {}

    def load(self) -> StoreLoadResult:
        """Replace the in-memory entries with the store content."""
        result = self.store.load()
        self._entries = dict(result.data)
        logger.info(f"Translation cache: {len(self._entries)} entries ({result.status.value})")
        return result

    def get(self, text: str) -> Optional[str]:
        return self._entries.get(text)

    def __contains__(self, text: str) -> bool:
        return text in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, text: str, translation: str) -> bool:
        """
        Remember a translation and persist it.

        Returns:
            False when the store could not be written; the entry is still
            kept in memory for the rest of the run.
        """
        self._entries[text] = translation
        try:
            self.store.update(text, translation)
        except OSError as e:
            logger.error(f"Failed to persist cache entry for {text[:50]!r}: {e}")
            return False
        return True

    def flush(self) -> None:
        """Write every in-memory entry to the store."""
        self.store.save(self._entries)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)
