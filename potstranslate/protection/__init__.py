"""
Protection module - Keeping untranslatable text away from the translator

This module provides:
- vault: TokenVault and its protection strategies
- dictionary: manual word and phrase dictionaries
"""

from potstranslate.protection.vault import (
    CODE_TOKEN,
    ProtectionKind,
    ProtectionToken,
    ProtectedText,
    ProtectionStrategy,
    PatternStrategy,
    WordDictStrategy,
    TokenVault,
    TokenLookupError,
    TokenCollisionError,
    default_strategies,
    preserve_codes,
    restore_codes,
)

from potstranslate.protection.dictionary import (
    Dictionaries,
    DictionaryResolver,
)
