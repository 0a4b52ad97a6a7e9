"""
Token Vault - reversible protection of substrings the translator must not touch

Protection runs an ordered list of strategies over the text. Each strategy
swaps its matches for numbered tokens of the shape ##<KIND><N>## and keeps
what belongs there. Restoration walks the applied strategies in reverse, so
a value restored by a later step can never be picked up again by the
restore pattern of an earlier one.

Default order:
    ESC - backslash escape sequences of the PO string (restored last)
    WD  - word-dictionary keys (the stored value is the dictionary target)
    XML - inline markup such as <b> or <color=red>
    AT  - @commands such as @warp or @item_id
    PH  - printf placeholders such as %s, %d, %2$s, %%

Example:
    >>> vault = TokenVault()
    >>> protected = vault.protect("Hello %s")
    >>> protected.text
    'Hello ##PH0##'
    >>> vault.restore("Olá ##PH0##", protected)
    'Olá %s'
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Tuple

from potstranslate.logger import get_logger

logger = get_logger(__name__)

# Raw carriage returns do not survive the translator
CODE_TOKEN = "__CODE_TOKEN__"

# Anything the translator could hand back as one of our tokens
TOKEN_SHAPE = re.compile(r"##\s*(?:ESC|WD|XML|AT|PH)\s*\d+\s*##", re.IGNORECASE)


class ProtectionKind(str, Enum):
    ESCAPE = "ESC"
    WORD_DICT = "WD"
    XML_TAG = "XML"
    AT_COMMAND = "AT"
    PLACEHOLDER = "PH"

    def token(self, index: int) -> str:
        return f"##{self.value}{index}##"

    @property
    def restore_pattern(self) -> Pattern:
        # Translators like to add spaces or change case inside tokens
        return re.compile(rf"##\s*{self.value}\s*(\d+)\s*##", re.IGNORECASE)


@dataclass(frozen=True)
class ProtectionToken:
    kind: ProtectionKind
    index: int
    original_value: str

    @property
    def token(self) -> str:
        return self.kind.token(self.index)


class TokenLookupError(LookupError):
    """A restore token points outside the recorded protection list."""

    def __init__(self, kind: ProtectionKind, index: int, available: int):
        super().__init__(
            f"Token {kind.token(index)} has no recorded value "
            f"({available} {kind.value} token(s) were protected)"
        )
        self.kind = kind
        self.index = index
        self.available = available


class TokenCollisionError(ValueError):
    """The source text already contains something shaped like a protection token."""

    def __init__(self, literal: str):
        super().__init__(f"Text already contains token-like literal {literal!r}")
        self.literal = literal


@dataclass
class ProtectedText:
    """Result of one protection pass."""
    original: str
    text: str
    tokens: Dict[ProtectionKind, List[ProtectionToken]] = field(default_factory=dict)
    applied: List[ProtectionKind] = field(default_factory=list)

    def all_tokens(self) -> List[ProtectionToken]:
        return [token for kind in self.applied for token in self.tokens.get(kind, [])]

    @property
    def token_count(self) -> int:
        return sum(len(tokens) for tokens in self.tokens.values())


class ProtectionStrategy:
    """Base class: one category of protected substrings."""

    kind: ProtectionKind

    def protect(self, text: str) -> Tuple[str, List[ProtectionToken]]:
        raise NotImplementedError

    def restore(self, text: str, tokens: List[ProtectionToken]) -> str:
        def lookup(match: re.Match) -> str:
            index = int(match.group(1))
            if index >= len(tokens):
                raise TokenLookupError(self.kind, index, len(tokens))
            return tokens[index].original_value

        return self.kind.restore_pattern.sub(lookup, text)


class PatternStrategy(ProtectionStrategy):
    """Protects every match of a regex, storing the matched text verbatim."""

    def __init__(self, kind: ProtectionKind, pattern: Pattern):
        self.kind = kind
        self.pattern = pattern

    def protect(self, text: str) -> Tuple[str, List[ProtectionToken]]:
        tokens: List[ProtectionToken] = []

        def swap(match: re.Match) -> str:
            token = ProtectionToken(self.kind, len(tokens), match.group(0))
            tokens.append(token)
            return token.token

        return self.pattern.sub(swap, text), tokens


class WordDictStrategy(ProtectionStrategy):
    """
    Protects word-dictionary keys, longest key first.

    A key only matches as a whole word and case-sensitively. The stored
    value is the dictionary translation, so restoring the token writes the
    target-language word directly.
    """

    kind = ProtectionKind.WORD_DICT

    def __init__(self, words: Mapping[str, str]):
        self.words = dict(words)
        self.keys = sorted((key for key in self.words if key), key=len, reverse=True)
        # Existing tokens are matched first and left alone so that a key
        # never matches inside an inserted token
        self._patterns = [
            (key, re.compile(rf"(##(?:ESC|WD)\d+##)|(?<!\w){re.escape(key)}(?!\w)"))
            for key in self.keys
        ]

    def protect(self, text: str) -> Tuple[str, List[ProtectionToken]]:
        tokens: List[ProtectionToken] = []

        for key, pattern in self._patterns:
            def swap(match: re.Match, key: str = key) -> str:
                if match.group(1):
                    return match.group(1)
                token = ProtectionToken(self.kind, len(tokens), self.words[key])
                tokens.append(token)
                return token.token

            text = pattern.sub(swap, text)

        return text, tokens


ESCAPE_PATTERN = re.compile(r"\\.")
XML_TAG_PATTERN = re.compile(r"<[^>]+>")
AT_COMMAND_PATTERN = re.compile(r"@[a-zA-Z0-9_]+")
PLACEHOLDER_PATTERN = re.compile(r"%(?:\d+\$)?[sdif%]", re.IGNORECASE)


def default_strategies(words: Optional[Mapping[str, str]] = None) -> List[ProtectionStrategy]:
    """The default strategies in protection order."""
    return [
        PatternStrategy(ProtectionKind.ESCAPE, ESCAPE_PATTERN),
        WordDictStrategy(words or {}),
        PatternStrategy(ProtectionKind.XML_TAG, XML_TAG_PATTERN),
        PatternStrategy(ProtectionKind.AT_COMMAND, AT_COMMAND_PATTERN),
        PatternStrategy(ProtectionKind.PLACEHOLDER, PLACEHOLDER_PATTERN),
    ]


class TokenVault:
    """Runs the protection strategies forward and restores them in reverse."""

    def __init__(
        self,
        words: Optional[Mapping[str, str]] = None,
        strategies: Optional[Iterable[ProtectionStrategy]] = None,
    ):
        self.strategies = list(strategies) if strategies is not None else default_strategies(words)
        kinds = [strategy.kind for strategy in self.strategies]
        if len(set(kinds)) != len(kinds):
            raise ValueError(f"Each protection kind may appear once, got {[k.value for k in kinds]}")
        self._by_kind = {strategy.kind: strategy for strategy in self.strategies}

    @property
    def order(self) -> List[ProtectionKind]:
        return [strategy.kind for strategy in self.strategies]

    def protect(self, text: str) -> ProtectedText:
        """
        Replace every protected substring with a token.

        Raises:
            TokenCollisionError: if the text already contains a token-shaped
                literal, which restoration could not tell apart from ours
        """
        collision = TOKEN_SHAPE.search(text)
        if collision:
            raise TokenCollisionError(collision.group(0))

        protected = ProtectedText(original=text, text=text)
        for strategy in self.strategies:
            protected.text, tokens = strategy.protect(protected.text)
            protected.tokens[strategy.kind] = tokens
            protected.applied.append(strategy.kind)

        if protected.token_count:
            logger.debug(f"Protected {protected.token_count} substring(s): {text[:50]!r} -> {protected.text[:50]!r}")
        return protected

    def restore(self, text: str, protected: ProtectedText) -> str:
        """
        Put the protected values back, last applied strategy first.

        Raises:
            TokenLookupError: if a token index was never recorded
        """
        for kind in reversed(protected.applied):
            text = self._by_kind[kind].restore(text, protected.tokens.get(kind, []))
        return text


def preserve_codes(text: str) -> str:
    return text.replace("\r", CODE_TOKEN)


def restore_codes(text: str) -> str:
    return text.replace(CODE_TOKEN, "\r")
