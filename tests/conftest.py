"""Shared fixtures for the test suite."""

import os

# Keep test runs quiet and free of log files; must happen before package imports
os.environ["LOG_MODE"] = "off"

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pytest

from potstranslate.core import ErrorLog, MemoryStore, ReviewSink, ReviewSinks, TranslationCache
from potstranslate.engine import TranslateResult
from potstranslate.protection import Dictionaries, DictionaryResolver
from potstranslate.translation import TranslationPipeline


@dataclass
class TranslateCall:
    text: str
    source_language: str
    target_language: str
    proxy: Optional[str]


class FakeTranslator:
    """Stands in for the translate capability and records every call."""

    def __init__(
        self,
        responses: Optional[Dict[str, str]] = None,
        func: Optional[Callable[[str], str]] = None,
        error: Optional[Exception] = None,
    ):
        self.responses = responses or {}
        self.func = func
        self.error = error
        self.calls: List[TranslateCall] = []

    def translate(self, text, source_language, target_language, proxy=None):
        self.calls.append(TranslateCall(text, source_language, target_language, proxy))
        if self.error is not None:
            raise self.error
        if self.func is not None:
            return TranslateResult(self.func(text))
        return TranslateResult(self.responses.get(text, text))


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def make_pipeline():
    """Build a pipeline over in-memory stores."""

    def factory(translator=None, words=None, phrases=None, cache=None, **kwargs):
        return TranslationPipeline(
            translator=translator if translator is not None else FakeTranslator(),
            resolver=DictionaryResolver(Dictionaries.from_mappings(words, phrases)),
            cache=cache if cache is not None else TranslationCache(MemoryStore(name="cache")),
            review=ReviewSinks(
                unchanged=ReviewSink(MemoryStore(name="unchanged"), name="unchanged"),
                needs_review=ReviewSink(MemoryStore(name="needs_review"), name="needs_review"),
            ),
            error_log=ErrorLog(),
            **kwargs,
        )

    return factory
