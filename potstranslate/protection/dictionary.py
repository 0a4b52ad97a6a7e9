"""
Manual dictionaries

Two dictionaries override the machine translation:
- phrases: whole-string, case-insensitive; a hit skips translation entirely
- words: case-sensitive; used for an exact whole-string override after
  translation and for word-by-word substitution before it

Dictionaries are loaded once and are read-only for the rest of the run.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from potstranslate.core.store import KeyValueStore
from potstranslate.logger import get_logger

logger = get_logger(__name__)

WORD_BOUNDARY = re.compile(r"\b")


def _freeze(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Dictionaries:
    """Immutable word and phrase dictionaries."""
    words: Mapping[str, str] = field(default_factory=lambda: _freeze({}))
    phrases: Mapping[str, str] = field(default_factory=lambda: _freeze({}))

    @classmethod
    def from_mappings(
        cls,
        words: Optional[Mapping[str, str]] = None,
        phrases: Optional[Mapping[str, str]] = None,
    ) -> "Dictionaries":
        return cls(words=_freeze(words), phrases=_freeze(phrases))

    @classmethod
    def load(cls, words_store: KeyValueStore, phrases_store: KeyValueStore) -> "Dictionaries":
        """Read both dictionaries; a missing or malformed store gives an empty dictionary."""
        words = words_store.load()
        phrases = phrases_store.load()
        logger.info(
            f"Dictionaries loaded: {len(words.data)} words ({words.status.value}), "
            f"{len(phrases.data)} phrases ({phrases.status.value})"
        )
        return cls.from_mappings(words.data, phrases.data)


class DictionaryResolver:
    """Lookup rules over a Dictionaries object."""

    def __init__(self, dictionaries: Optional[Dictionaries] = None):
        self.dictionaries = dictionaries or Dictionaries()
        # First key wins when two phrase keys differ only by case
        self._phrases_folded = {}
        for key, value in self.dictionaries.phrases.items():
            self._phrases_folded.setdefault(key.casefold(), value)
        self._words_trimmed = {}
        for key, value in self.dictionaries.words.items():
            self._words_trimmed.setdefault(key.strip(), value)

    @property
    def words(self) -> Mapping[str, str]:
        return self.dictionaries.words

    def match_phrase(self, text: str) -> Optional[str]:
        """Phrase translation when the whole text equals a key, ignoring case."""
        return self._phrases_folded.get(text.casefold())

    def match_word(self, text: str) -> Optional[str]:
        """Word translation when the whole text equals a key exactly."""
        return self.dictionaries.words.get(text)

    def substitute_words(self, text: str) -> str:
        """
        Apply the word dictionary to text headed for the translator.

        A text equal to a key becomes its value. Otherwise the text is split
        on word boundaries and every piece that is a key is replaced; all
        other pieces, whitespace and punctuation included, stay as they are.

        Example:
            >>> resolver = DictionaryResolver(Dictionaries.from_mappings({"Zeny": "Zenys"}))
            >>> resolver.substitute_words("Pay 10 Zeny.")
            'Pay 10 Zenys.'
        """
        exact = self.match_word(text)
        if exact is not None:
            return exact
        if not self.dictionaries.words:
            return text
        words = self.dictionaries.words
        return "".join(words.get(piece, piece) for piece in WORD_BOUNDARY.split(text))

    def exact_override(self, text: str) -> Optional[str]:
        """Forced translation when the trimmed text equals a trimmed word key."""
        return self._words_trimmed.get(text.strip())
