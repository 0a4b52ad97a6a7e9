"""
Translation Pipeline

Translates one source string through a fixed sequence of gates:

1. bracket exemption          -> returned unchanged
2. phrase dictionary          -> returned as the phrase translation
3. translation cache          -> returned as cached
4. protect, substitute words, call the translator, restore
5. word-dictionary override, cache write, review flags

Any TranslationError from the translator, and any token that cannot be
restored, falls back to the untranslated source and is written to the error
log. Nothing in here aborts a run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from potstranslate.config import Settings
from potstranslate.core.cache import TranslationCache
from potstranslate.core.review import ErrorLog, ErrorRecord, ReviewSinks
from potstranslate.engine.exceptions import TranslationError
from potstranslate.logger import get_logger
from potstranslate.protection.dictionary import Dictionaries, DictionaryResolver
from potstranslate.protection.vault import (
    ProtectedText,
    TokenCollisionError,
    TokenLookupError,
    TokenVault,
    preserve_codes,
    restore_codes,
)
from potstranslate.translation.validator import is_bracket_enclosed, is_unchanged, needs_review, unsafe_characters

logger = get_logger(__name__)


class Outcome(str, Enum):
    EXEMPT = "exempt"
    PHRASE = "phrase"
    CACHED = "cached"
    TRANSLATED = "translated"
    FAILED = "failed"        # translator raised
    CORRUPTED = "corrupted"  # tokens could not be protected or restored


@dataclass(frozen=True)
class PipelineResult:
    original: str
    text: str
    outcome: Outcome
    error: Optional[str] = None
    external_call: bool = False  # the translator was contacted

    @property
    def fell_back(self) -> bool:
        return self.outcome in (Outcome.FAILED, Outcome.CORRUPTED)


class TranslationPipeline:
    """
    Per-string translation with protection, dictionaries, cache and review.

    The translator is any object with
    translate(text, source_language, target_language, proxy=None) returning
    something with a .text attribute and raising TranslationError on failure.
    """

    def __init__(
        self,
        translator,
        resolver: Optional[DictionaryResolver] = None,
        cache: Optional[TranslationCache] = None,
        review: Optional[ReviewSinks] = None,
        error_log: Optional[ErrorLog] = None,
        source_language: str = "en",
        target_language: str = "pt",
        proxy: Optional[str] = None,
        vault: Optional[TokenVault] = None,
    ):
        self.translator = translator
        self.resolver = resolver or DictionaryResolver()
        self.cache = cache if cache is not None else TranslationCache()
        self.review = review or ReviewSinks()
        self.error_log = error_log if error_log is not None else ErrorLog()
        self.source_language = source_language
        self.target_language = target_language
        self.proxy = proxy
        self.vault = vault or TokenVault(words=self.resolver.words)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        translator,
        dictionaries: Dictionaries,
        cache: TranslationCache,
        review: ReviewSinks,
        error_log: ErrorLog,
    ) -> "TranslationPipeline":
        return cls(
            translator=translator,
            resolver=DictionaryResolver(dictionaries),
            cache=cache,
            review=review,
            error_log=error_log,
            source_language=settings.source_language,
            target_language=settings.target_language,
            proxy=settings.proxy_url,
        )

    def translate(self, text: str) -> str:
        """Translated text, or the source itself when translation is not possible."""
        return self.process(text).text

    def process(self, text: str) -> PipelineResult:
        logger.info(f"Translating: {text!r}")

        if is_bracket_enclosed(text):
            logger.info(f"Bracketed text kept untranslated: {text!r}")
            return PipelineResult(text, text, Outcome.EXEMPT)

        phrase = self.resolver.match_phrase(text)
        if phrase is not None:
            logger.info(f"Manual phrase translation found: {phrase!r}")
            return PipelineResult(text, phrase, Outcome.PHRASE)

        cached = self.cache.get(text)
        if cached is not None:
            logger.debug(f"Cache hit: {text!r} -> {cached!r}")
            return PipelineResult(text, cached, Outcome.CACHED)

        try:
            protected = self.vault.protect(text)
        except TokenCollisionError as e:
            return self._fall_back(text, e, Outcome.CORRUPTED, "token_lookup", external_call=False)

        try:
            translated = self._translate_protected(protected)
        except TranslationError as e:
            return self._fall_back(text, e, Outcome.FAILED, "external_service")
        except TokenLookupError as e:
            return self._fall_back(text, e, Outcome.CORRUPTED, "token_lookup")

        override = self.resolver.exact_override(text)
        if override is not None:
            translated = override

        self.cache.put(text, translated)
        self._flag_for_review(text, translated)

        logger.info(f"Translation done: {translated!r}")
        return PipelineResult(text, translated, Outcome.TRANSLATED, external_call=True)

    def _translate_protected(self, protected: ProtectedText) -> str:
        outbound = self.resolver.substitute_words(preserve_codes(protected.text))

        result = self.translator.translate(
            outbound,
            self.source_language,
            self.target_language,
            proxy=self.proxy,
        )

        return self.vault.restore(restore_codes(result.text), protected)

    def _flag_for_review(self, text: str, translated: str) -> None:
        if is_unchanged(text, translated):
            self.review.unchanged.record(text, translated)
        if needs_review(text):
            logger.debug(f"Unusual characters {unsafe_characters(text)} in {text!r}")
            self.review.needs_review.record(text, translated)

    def _fall_back(
        self,
        text: str,
        error: Exception,
        outcome: Outcome,
        kind: str,
        external_call: bool = True,
    ) -> PipelineResult:
        logger.error(f"Failed to translate {text!r}: {error}")
        self.error_log.append(
            ErrorRecord.from_exception(
                kind=kind,
                text=text,
                source_language=self.source_language,
                target_language=self.target_language,
                error=error,
            )
        )
        return PipelineResult(text, text, outcome, error=str(error), external_call=external_call)
