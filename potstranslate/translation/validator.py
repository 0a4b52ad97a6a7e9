"""
Translation Checks

Structural rules applied around a translation:
- bracket exemption (text fully wrapped in one [...] pair is never translated)
- review flags (source characters outside the safe set, unchanged results)
"""

import re
from typing import List

# Letters, digits and whitespace are always safe (Unicode-aware via \w and \s)
COMMON_PUNCTUATION = ".,;:!?¡¿'\"`()[]{}<>-_/%@#&*+=$…–—«»“”‘’"

UNSAFE_CHARACTER = re.compile(r"[^\w\s" + re.escape(COMMON_PUNCTUATION) + r"]")


def is_bracket_enclosed(text: str) -> bool:
    """
    True when the trimmed text is one [...] pair from first to last character.

    Examples:
        >>> is_bracket_enclosed("  [DO_NOT_TRANSLATE] ")
        True
        >>> is_bracket_enclosed("[a] and [b]")
        False
    """
    trimmed = text.strip()
    if len(trimmed) < 2 or trimmed[0] != "[" or trimmed[-1] != "]":
        return False

    depth = 0
    for position, char in enumerate(trimmed):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            # The opening bracket closed before the end: more than one pair
            if depth == 0 and position != len(trimmed) - 1:
                return False
    return depth == 0


def unsafe_characters(text: str) -> List[str]:
    """Distinct characters outside the safe set, in order of appearance."""
    seen: List[str] = []
    for match in UNSAFE_CHARACTER.finditer(text):
        if match.group(0) not in seen:
            seen.append(match.group(0))
    return seen


def needs_review(text: str) -> bool:
    return UNSAFE_CHARACTER.search(text) is not None


def is_unchanged(original: str, translation: str) -> bool:
    return original == translation
