"""
Translate Service Module

The external translate capability used by the pipeline:

    translate(text, source_language, target_language, proxy=None) -> TranslateResult

Failures surface as TranslationError. Retries are bounded by
TRANSLATE_MAX_RETRIES (attempts, default 1) and spaced by error category.

For the HTTP details, see engine/providers.py
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

from potstranslate.config import Settings, load_config
from potstranslate.logger import get_logger
from potstranslate import language_codes as lc
from potstranslate.engine.exceptions import TranslationError
from potstranslate.engine.providers import call_google_translate, get_httpx_timeout

logger = get_logger(__name__)


@dataclass(frozen=True)
class TranslateResult:
    text: str
    detected_language: Optional[str] = None


def validate_languages(source_language: str, target_language: str) -> None:
    """
    Check the language pair before a run.

    Raises:
        TranslationError: if source and target are the same language
    """
    source = lc.normalize_language_code(source_language)
    target = lc.normalize_language_code(target_language)

    if not lc.is_valid_language_code(source, allow_auto=True):
        logger.warning(f"Source language '{source_language}' is not a known Google language code")
    if not lc.is_valid_language_code(target):
        logger.warning(f"Target language '{target_language}' is not a known Google language code")

    if source == target:
        raise TranslationError(
            f"Source and target language are both '{source}'",
            code="same_language",
            details={"source_language": source_language, "target_language": target_language},
        )


class TranslateService:
    """Google Translate client with retry handling."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or load_config()
        self.transport = transport
        self.sleep = sleep
        self.request_count = 0
        logger.info(f"Initialized translate service: {self.settings.translate_url}")

    def _client_options(self, proxy: Optional[str]) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "timeout": get_httpx_timeout(self.settings.translate_timeout),
            "follow_redirects": True,
        }
        if proxy:
            options["proxy"] = proxy
        if self.transport is not None:
            options["transport"] = self.transport
        return options

    def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
        proxy: Optional[str] = None,
    ) -> TranslateResult:
        """
        Translate one string.

        Args:
            text: Text to translate (already protected)
            source_language: Source language code
            target_language: Target language code
            proxy: Optional proxy URL for the HTTP transport

        Returns:
            TranslateResult with the translated text

        Raises:
            TranslationError: when every attempt failed
        """
        source = lc.normalize_language_code(source_language)
        target = lc.normalize_language_code(target_language)
        # At least one attempt, whatever the settings say
        max_retries = max(1, self.settings.translate_max_retries)
        last_error: Optional[TranslationError] = None

        for attempt in range(max_retries):
            try:
                if attempt > 0:
                    logger.info(f"  Retry attempt {attempt + 1}/{max_retries}")

                self.request_count += 1
                with httpx.Client(**self._client_options(proxy)) as client:
                    translated, detected = call_google_translate(
                        client, self.settings.translate_url, text, source, target
                    )
                return TranslateResult(text=translated, detected_language=detected)

            except TranslationError as e:
                last_error = e
                should_retry, wait_time = self._categorize_error(e, attempt)

                if should_retry and attempt < max_retries - 1:
                    logger.warning(f"  Attempt {attempt + 1} failed: {e}. Waiting {wait_time}s before retry...")
                    self.sleep(wait_time)
                elif not should_retry:
                    logger.error(f"  Non-recoverable error: {e}")
                    break

        last_error.details.setdefault("attempts", attempt + 1)
        raise last_error

    def __call__(self, text: str, source_language: str, target_language: str, proxy: Optional[str] = None) -> TranslateResult:
        return self.translate(text, source_language, target_language, proxy=proxy)

    def _categorize_error(self, error: TranslationError, attempt: int) -> Tuple[bool, float]:
        """
        Categorize an error and determine retry strategy.

        Returns:
            Tuple of (should_retry, wait_time_seconds)
        """
        status = error.status_code

        # Rate limiting (429) - long backoff
        if status == 429:
            wait_time = 30 * (2 ** attempt)  # 30s, 60s, 120s
            return True, min(wait_time, 300)  # Max 5 minutes

        # Authentication, forbidden and bad requests - don't retry
        if status in (400, 401, 403, 404):
            return False, 0

        # Server errors (5xx) - standard backoff
        if status is not None and status >= 500:
            return True, 2 ** attempt

        # Timeout - retry with backoff
        if error.code == "timeout":
            return True, 5 * (2 ** attempt)  # 5s, 10s, 20s

        # Parse errors - retry once
        if error.code == "bad_response":
            return attempt < 1, 1.0

        # Unknown errors - standard backoff
        return True, 2 ** attempt
