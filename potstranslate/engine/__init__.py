"""
Engine Module

The external machine-translation capability and its errors.
"""

from potstranslate.engine.exceptions import TranslationError
from potstranslate.engine.service import TranslateResult, TranslateService, validate_languages

__all__ = ['TranslationError', 'TranslateResult', 'TranslateService', 'validate_languages']
