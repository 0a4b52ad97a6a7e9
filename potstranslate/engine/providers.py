"""
Google Translate API Implementation

Talks to the keyless translate_a/single endpoint used by the Google
Translate web widget. The endpoint answers with nested JSON arrays:

    [[["Olá ##PH0##", "Hello ##PH0##", null, null, 10]], null, "en", ...]

The first element lists translated segments; their first fields joined
together form the translation. The third element is the detected source
language.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from potstranslate.logger import get_logger
from potstranslate.engine.exceptions import TranslationError

logger = get_logger(__name__)


def get_httpx_timeout(read_timeout: float) -> httpx.Timeout:
    """Short connect/pool limits; the read limit is the configured request timeout."""
    return httpx.Timeout(10.0, read=float(read_timeout or 120.0))


def handle_http_error(e: httpx.HTTPStatusError, provider: str):
    """Raise a TranslationError carrying the status code and a slice of the body."""
    status_code = e.response.status_code
    try:
        error_text = e.response.text[:500]
    except Exception:
        error_text = "No details"

    raise TranslationError(
        f"{provider} API error ({status_code}): {error_text}",
        code=f"http_{status_code}",
        details={"status_code": status_code, "url": str(e.request.url)},
    )


def build_request_params(text: str, source_language: str, target_language: str) -> Dict[str, str]:
    return {
        "client": "gtx",
        "sl": source_language,
        "tl": target_language,
        "dt": "t",
        "q": text,
    }


def parse_google_response(payload: Any) -> Tuple[str, Optional[str]]:
    """
    Extract (translated_text, detected_source_language) from a response body.

    Raises:
        TranslationError: if the body does not have the expected shape
    """
    if not isinstance(payload, list) or not payload:
        raise TranslationError(
            "Unexpected Google Translate response format",
            code="bad_response",
            details={"payload": str(payload)[:500]},
        )

    segments = payload[0]
    if segments is None:
        # Empty input comes back without segments
        segments = []
    if not isinstance(segments, list):
        raise TranslationError(
            "Unexpected Google Translate segment list",
            code="bad_response",
            details={"payload": str(payload)[:500]},
        )

    parts = []
    for segment in segments:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            parts.append(segment[0])

    detected = payload[2] if len(payload) > 2 and isinstance(payload[2], str) else None
    return "".join(parts), detected


def call_google_translate(
    client: httpx.Client,
    url: str,
    text: str,
    source_language: str,
    target_language: str,
) -> Tuple[str, Optional[str]]:
    """Send one string to Google Translate and return (translation, detected_language)."""
    params = build_request_params(text, source_language, target_language)
    logger.debug(f"Calling Google Translate ({source_language} -> {target_language}): {text[:60]!r}")

    try:
        response = client.get(url, params=params)
        response.raise_for_status()
        return parse_google_response(response.json())

    except TranslationError:
        raise
    except httpx.HTTPStatusError as e:
        handle_http_error(e, "Google Translate")
    except httpx.TimeoutException as e:
        raise TranslationError(
            "Google Translate request timeout",
            code="timeout",
            details={"url": url, "error": str(e)},
        )
    except httpx.HTTPError as e:
        raise TranslationError(
            f"Google Translate request failed: {e}",
            code="network",
            details={"url": url, "error_type": type(e).__name__},
        )
    except ValueError as e:
        # response.json() on a non-JSON body
        raise TranslationError(
            f"Google Translate returned invalid JSON: {e}",
            code="bad_response",
            details={"url": url},
        )
