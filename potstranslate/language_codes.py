"""
Language codes understood by the Google Translate endpoint.

Google accepts plain ISO 639-1 codes for most languages and a few
language-region variants (zh-CN, zh-TW, pt-PT). Source language may also be
'auto'. Codes are only validated to produce warnings; an unknown code is
still sent as-is so that new languages do not need a release.
"""

from typing import Dict, Optional

AUTO_DETECT = 'auto'

GOOGLE_LANGUAGES = {
    'af': 'Afrikaans',
    'ar': 'Arabic',
    'bg': 'Bulgarian',
    'bn': 'Bengali',
    'ca': 'Catalan',
    'cs': 'Czech',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'et': 'Estonian',
    'fa': 'Persian',
    'fi': 'Finnish',
    'fil': 'Filipino',
    'fr': 'French',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'id': 'Indonesian',
    'it': 'Italian',
    'ja': 'Japanese',
    'ko': 'Korean',
    'lt': 'Lithuanian',
    'lv': 'Latvian',
    'ms': 'Malay',
    'nl': 'Dutch',
    'no': 'Norwegian',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'pt-PT': 'Portuguese (Portugal)',
    'ro': 'Romanian',
    'ru': 'Russian',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'sr': 'Serbian',
    'sv': 'Swedish',
    'th': 'Thai',
    'tr': 'Turkish',
    'uk': 'Ukrainian',
    'vi': 'Vietnamese',
    'zh-CN': 'Chinese (Simplified)',
    'zh-TW': 'Chinese (Traditional)',
}

# Codes people commonly configure that Google spells differently
ALIASES = {
    'pt-br': 'pt',
    'zh': 'zh-CN',
    'zh-hans': 'zh-CN',
    'zh-hant': 'zh-TW',
    'iw': 'he',
    'tl': 'fil',
    'nb': 'no',
}

_BY_LOWER = {code.lower(): code for code in GOOGLE_LANGUAGES}


def normalize_language_code(code: str) -> str:
    """
    Map a configured code onto Google's spelling.

    Examples:
        >>> normalize_language_code('pt_BR')
        'pt'
        >>> normalize_language_code('ZH-cn')
        'zh-CN'
        >>> normalize_language_code('xx')
        'xx'
    """
    cleaned = (code or '').strip().replace('_', '-')
    lowered = cleaned.lower()
    if lowered == AUTO_DETECT:
        return AUTO_DETECT
    if lowered in ALIASES:
        return ALIASES[lowered]
    return _BY_LOWER.get(lowered, cleaned)


def is_valid_language_code(code: str, allow_auto: bool = False) -> bool:
    """Check whether Google knows the (normalized) code."""
    normalized = normalize_language_code(code)
    if normalized == AUTO_DETECT:
        return allow_auto
    return normalized in GOOGLE_LANGUAGES


def get_language_name(code: str) -> Optional[str]:
    return GOOGLE_LANGUAGES.get(normalize_language_code(code))


def describe_language(code: str) -> str:
    """Human label for log lines, e.g. 'Portuguese (pt)'."""
    name = get_language_name(code)
    return f"{name} ({code})" if name else code


def get_all_language_codes() -> Dict[str, str]:
    return GOOGLE_LANGUAGES.copy()
